"""Assemble command - join remote audio chunks into one compressed track"""

import json

import click

from core.audio_assembly import AudioChunkAssembler
from core.media_tool import MediaTool
from .common import console, load_settings, make_service, run


@click.command()
@click.argument("chunk_urls", nargs=-1)
@click.option("--from-file", "url_file", type=click.File("r", encoding="utf-8"),
              help="Read chunk URLs (one per line) from a file")
@click.option("--output", "-o", type=click.Path(dir_okay=False), default="assembled.mp3",
              show_default=True, help="Local output path")
@click.option("--upload", "destination", default=None,
              help="Upload to this storage key instead of keeping a local file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def assemble_cmd(chunk_urls, url_file, output, destination, as_json):
    """Download audio chunks in order and join them with ffmpeg.

    \b
    Examples:
      studio-assembly assemble https://.../0.mp3 https://.../1.mp3 -o narration.mp3
      studio-assembly assemble --from-file chunks.txt --upload user_1/audio/final.mp3
    """
    urls = list(chunk_urls)
    if url_file:
        urls.extend(line.strip() for line in url_file if line.strip())
    if not urls:
        raise click.UsageError("Provide at least one chunk URL")

    settings = load_settings()

    if destination:
        service = make_service(settings)
        result = run(service.assembler.assemble_and_upload(urls, destination))
        data = {
            "url": result.url,
            "duration_seconds": result.duration_seconds,
            "size_bytes": result.size_bytes,
            "chunks_processed": result.chunks_processed,
        }
    else:
        assembler = AudioChunkAssembler(
            media_tool=MediaTool(settings.ffmpeg_path, settings.ffprobe_path),
            scratch_root=settings.scratch_root,
        )
        track = run(assembler.assemble(urls, output))
        data = {
            "path": str(track.local_path),
            "duration_seconds": track.duration_seconds,
            "size_bytes": track.size_bytes,
            "chunks_processed": len(urls),
        }

    if as_json:
        click.echo(json.dumps(data, indent=2))
        return

    location = data.get("url") or data.get("path")
    console.print(f"[green]Assembled {len(urls)} chunk(s):[/green] {location}")
    console.print(f"  Duration: {data['duration_seconds']:.2f}s")
    console.print(f"  Size: {data['size_bytes'] / (1024 * 1024):.2f} MB")
