"""Studio Assembly CLI"""

import click
from dotenv import load_dotenv
from .assemble import assemble_cmd
from .common import configure_logging
from .narrate import chunk_text_cmd, narrate_cmd
from .secrets import secrets_cli
from .status import status_cmd
from .subtitles import resegment_cmd
from .timeline import render_cmd, render_status_cmd, timeline_cmd

# Load .env file at CLI startup
load_dotenv()


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Studio Assembly - subtitles, narration assembly and timeline rendering

    \b
    Quick Start:
      studio-assembly resegment transcript.srt -o short.srt
      studio-assembly narrate script.txt --mock
      studio-assembly render -i img.png -a narration.mp3 -d 120 --mock

    \b
    Commands:
      resegment      Split subtitle cues into short lines
      chunk-text     Split narration text into speech-sized chunks
      narrate        Generate, assemble and upload narration
      assemble       Join remote audio chunks with ffmpeg
      timeline       Compose a render timeline
      render         Compose and submit a render
      render-status  Check a submitted render
      status         Show system status
      secrets        Manage API keys
    """
    configure_logging(verbose)


# Media commands
main.add_command(resegment_cmd, name="resegment")
main.add_command(chunk_text_cmd, name="chunk-text")
main.add_command(narrate_cmd, name="narrate")
main.add_command(assemble_cmd, name="assemble")
main.add_command(timeline_cmd, name="timeline")
main.add_command(render_cmd, name="render")
main.add_command(render_status_cmd, name="render-status")

# Status and configuration
main.add_command(status_cmd, name="status")
main.add_command(secrets_cli, name="secrets")


if __name__ == "__main__":
    main()
