"""Resegment command - split long subtitle cues into short lines"""

import click

from core.subtitles import format_srt, parse_srt, resegment
from .common import err_console, load_settings


@click.command()
@click.argument("srt_file", type=click.File("r", encoding="utf-8-sig"), default="-")
@click.option("--output", "-o", type=click.File("w", encoding="utf-8"), default="-",
              help="Where to write the result (default: stdout)")
@click.option("--max-words", "-w", type=click.IntRange(min=1), default=None,
              help="Maximum words per cue (default: STUDIO_MAX_WORDS_PER_LINE or 4)")
def resegment_cmd(srt_file, output, max_words):
    """Resegment an SRT transcript into short cues.

    \b
    Examples:
      studio-assembly resegment transcript.srt -o short.srt
      cat transcript.srt | studio-assembly resegment -w 3
    """
    settings = load_settings(max_words_per_line=max_words)

    transcript = parse_srt(srt_file.read())
    cues = resegment(transcript.cues, settings.max_words_per_line)
    output.write(format_srt(cues))

    # Summary goes to stderr so stdout stays valid SRT
    err_console.print(
        f"[green]Resegmented[/green] {len(transcript.cues)} cue(s) into {len(cues)}"
    )
    if transcript.skipped:
        err_console.print(f"[yellow]Skipped {len(transcript.skipped)} malformed block(s)[/yellow]")
