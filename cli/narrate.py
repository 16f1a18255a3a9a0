"""Narration commands - chunk text and turn it into one uploaded audio track"""

import json

import click
from rich.table import Table
from rich import box

from core.providers.requests import REQUEST_TYPES, build_request
from core.text_chunking import chunk_text
from .common import console, load_settings, make_service, run


@click.command()
@click.argument("text_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--max-chars", type=click.IntRange(min=1), default=None,
              help="Maximum characters per chunk (default: STUDIO_CHUNK_MAX_CHARS or 2800)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def chunk_text_cmd(text_file, max_chars, as_json):
    """Split narration text into speech-sized chunks."""
    settings = load_settings(chunk_max_chars=max_chars)
    chunks = chunk_text(text_file.read(), settings.chunk_max_chars)

    if as_json:
        click.echo(json.dumps([{"index": c.index, "text": c.text} for c in chunks], indent=2))
        return

    table = Table(title=f"{len(chunks)} chunk(s)", box=box.ROUNDED)
    table.add_column("#", style="cyan", justify="right")
    table.add_column("Chars", justify="right")
    table.add_column("Starts with", style="dim")
    for c in chunks:
        table.add_row(str(c.index), str(c.char_count), c.text[:60])
    console.print(table)


@click.command()
@click.argument("text_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--provider", "-p", type=click.Choice(sorted(REQUEST_TYPES)), default="openai",
              show_default=True, help="Speech provider")
@click.option("--voice", "-V", default="", help="Voice id / name for the provider")
@click.option("--mock", is_flag=True, help="Use mock speech and render providers")
@click.option("--allow-partial", is_flag=True, help="Assemble even if some chunks failed")
@click.option("--batch-size", type=click.IntRange(min=1), default=None, help="Chunks per batch")
@click.option("--delay", type=click.FloatRange(min=0), default=None,
              help="Seconds between batches")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def narrate_cmd(text_file, provider, voice, mock, allow_partial, batch_size, delay, as_json):
    """Generate narration for a text and upload the assembled track.

    \b
    Examples:
      studio-assembly narrate script.txt -p openai -V nova
      studio-assembly narrate script.txt --mock --delay 0
    """
    settings = load_settings(batch_size=batch_size, inter_batch_delay=delay)
    try:
        request = build_request(provider, voice=voice)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--voice")

    text = text_file.read()
    if not text.strip():
        raise click.UsageError("Narration text is empty")

    service = make_service(settings, mock=mock)
    result = run(service.narrate(text, request, allow_partial=allow_partial))

    if as_json:
        click.echo(json.dumps({
            "url": result.track.url,
            "duration_seconds": result.track.duration_seconds,
            "size_bytes": result.track.size_bytes,
            "chunks_processed": result.track.chunks_processed,
            "failed_chunks": result.failed_chunks,
            "total_chunks": result.total_chunks,
        }, indent=2))
        return

    console.print(f"[green]Narration ready:[/green] {result.track.url}")
    console.print(f"  Duration: {result.track.duration_seconds:.2f}s")
    console.print(f"  Size: {result.track.size_mb} MB")
    console.print(f"  Chunks: {result.track.chunks_processed}/{result.total_chunks}")
    if result.failed_chunks:
        console.print(f"  [yellow]Missing chunks:[/yellow] {result.failed_chunks}")
