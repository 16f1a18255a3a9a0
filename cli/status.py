"""System status command"""

import asyncio
import json

import click
from rich.table import Table
from rich.panel import Panel
from rich import box

from core.media_tool import MediaTool
from core.secrets import KNOWN_KEYS, list_api_keys
from .common import console, load_settings


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def status_cmd(as_json: bool):
    """Show media tool, key and configuration status"""
    status = get_status_dict()

    if as_json:
        click.echo(json.dumps(status, indent=2))
        return

    console.print(Panel.fit(
        "[bold blue]Studio Assembly[/bold blue]\n"
        "Subtitles, narration assembly and timeline rendering",
        border_style="blue"
    ))

    ffmpeg = status["ffmpeg"]
    if ffmpeg["installed"]:
        console.print(f"[green]FFmpeg:[/green] {ffmpeg.get('version') or ffmpeg['path']}")
    else:
        console.print(f"[red]FFmpeg not available:[/red] {ffmpeg.get('error', ffmpeg['path'])}")

    key_table = Table(title="API Keys", box=box.ROUNDED)
    key_table.add_column("Key", style="cyan")
    key_table.add_column("Description", style="dim")
    key_table.add_column("Status")
    for key, state in status["keys"].items():
        display = {
            "keychain": "[green]Keychain[/green]",
            "env": "[yellow]Env var[/yellow]",
        }.get(state, "[red]Not set[/red]")
        key_table.add_row(key, KNOWN_KEYS[key], display)
    console.print(key_table)

    config_table = Table(title="Configuration", box=box.ROUNDED)
    config_table.add_column("Setting", style="cyan")
    config_table.add_column("Value")
    for key, value in status["settings"].items():
        config_table.add_row(key, str(value))
    console.print(config_table)


def get_status_dict() -> dict:
    """Get status as dictionary for JSON output"""
    settings = load_settings()
    tool = MediaTool(settings.ffmpeg_path, settings.ffprobe_path)
    return {
        "ffmpeg": asyncio.run(tool.check_installed()),
        "keys": list_api_keys(),
        "settings": settings.model_dump(),
    }
