"""Timeline and render commands - lay out clips and submit them to the renderer"""

import json

import click
from rich.table import Table
from rich import box

from core.models.render import RenderStatus
from .common import console, load_settings, make_service, run


def _timeline_options(f):
    f = click.option("--image", "-i", "images", multiple=True,
                     help="Image URL (repeat in display order)")(f)
    f = click.option("--duration", "-d", type=click.FloatRange(min=0, min_open=True), required=True,
                     help="Narration duration in seconds")(f)
    f = click.option("--audio-url", "-a", required=True, help="Narration track URL")(f)
    f = click.option("--captions-url", "-c", default=None, help="SRT captions URL")(f)
    f = click.option("--no-zoom", is_flag=True, help="Disable zoom effects on the outro")(f)
    f = click.option("--mock", is_flag=True, help="Use the mock renderer")(f)
    return f


@click.command()
@_timeline_options
@click.option("--json", "as_json", is_flag=True, help="Print the render payload as JSON")
def timeline_cmd(images, duration, audio_url, captions_url, no_zoom, mock, as_json):
    """Compose a render timeline without submitting it."""
    settings = load_settings(enable_zoom=False if no_zoom else None)
    service = make_service(settings, mock=mock)
    timeline = run(service.compose_timeline(list(images), duration, audio_url, captions_url))

    if as_json:
        from core.models.render import RenderOutput
        from core.timeline import build_render_payload

        payload = build_render_payload(
            timeline, RenderOutput.from_quality(settings.quality), settings.callback_url
        )
        click.echo(json.dumps(payload, indent=2))
        return

    table = Table(title=f"Timeline ({duration:.1f}s)", box=box.ROUNDED)
    table.add_column("Track", style="cyan")
    table.add_column("Clips", justify="right")
    table.add_column("Ends at", justify="right")
    for track in timeline.tracks:
        table.add_row(track.name, str(len(track.clips)), f"{track.end:.1f}s")
    console.print(table)


@click.command()
@_timeline_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def render_cmd(images, duration, audio_url, captions_url, no_zoom, mock, as_json):
    """Compose a timeline and submit it for rendering.

    \b
    Examples:
      studio-assembly render -i https://.../1.png -i https://.../2.png \\
          -a https://.../narration.mp3 -d 312.4
    """
    settings = load_settings(enable_zoom=False if no_zoom else None)
    service = make_service(settings, mock=mock)
    job = run(service.create_video(list(images), audio_url, duration, captions_url))

    if as_json:
        click.echo(json.dumps({"job_id": job.job_id, "status": job.status.value}, indent=2))
        return
    console.print(f"[green]Render submitted:[/green] {job.job_id} ({job.status.value})")


@click.command()
@click.argument("job_id")
@click.option("--mock", is_flag=True, help="Use the mock renderer")
def render_status_cmd(job_id, mock):
    """Check the status of a submitted render."""
    settings = load_settings()
    service = make_service(settings, mock=mock)
    job = run(service.render_status(job_id))

    style = {
        RenderStatus.DONE: "green",
        RenderStatus.FAILED: "red",
    }.get(job.status, "yellow")
    console.print(f"Render {job.job_id}: [{style}]{job.status.value}[/{style}]")
    if job.url:
        console.print(f"  URL: {job.url}")
    if job.error_message:
        console.print(f"  Error: {job.error_message}")
