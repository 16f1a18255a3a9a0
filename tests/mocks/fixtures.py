"""Test data factories for consistent test setup"""

from pathlib import Path
from typing import Iterable, List, Tuple
from unittest.mock import AsyncMock, MagicMock

from core.errors import ExternalProcessFailure
from core.models.subtitles import Cue
from core.subtitles import format_timestamp_ms


def make_cue(
    index: int = 1,
    start_ms: int = 0,
    end_ms: int = 2000,
    text: str = "Hello world",
    **kwargs
) -> Cue:
    """Factory for Cue objects; `text` may contain newlines for multi-line cues"""
    return Cue(
        index=index,
        start_ms=start_ms,
        end_ms=end_ms,
        text_lines=tuple(text.split("\n")),
        **kwargs
    )


def make_srt(blocks: Iterable[Tuple[int, int, int, str]], newline: str = "\n") -> str:
    """Render (index, start_ms, end_ms, text) tuples as SRT text"""
    rendered = []
    for index, start, end, text in blocks:
        rendered.append(newline.join([
            str(index),
            f"{format_timestamp_ms(start)} --> {format_timestamp_ms(end)}",
            text,
        ]))
    return (newline * 2).join(rendered) + newline


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that records each delay"""

    def __init__(self):
        self.calls: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total(self) -> float:
        return sum(self.calls)


def make_flaky(failures: int, value="ok", error: Exception = None):
    """Async operation that raises `failures` times, then returns `value`"""
    state = {"calls": 0}

    async def operation():
        state["calls"] += 1
        if state["calls"] <= failures:
            raise error or RuntimeError(f"transient failure {state['calls']}")
        return value

    operation.state = state
    return operation


def make_process(returncode: int = 0, stdout: bytes = b"", stderr: bytes = b""):
    """Mock asyncio subprocess with captured output"""
    proc = AsyncMock()
    proc.communicate = AsyncMock(return_value=(stdout, stderr))
    proc.returncode = returncode
    proc.pid = 4242
    proc.kill = MagicMock()
    proc.wait = AsyncMock(return_value=returncode)
    return proc


def write_fake_mp3(path: Path, size: int = 1024) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"\xff\xfb" + b"\x00" * (size - 2))
    return path


def make_response(status: int = 200, body: bytes = b"", json_data=None, text: str = ""):
    """aiohttp response usable as `async with session.get(...) as response`"""
    response = MagicMock()
    response.status = status
    response.read = AsyncMock(return_value=body)
    response.json = AsyncMock(return_value=json_data or {})
    response.text = AsyncMock(return_value=text)

    context = MagicMock()
    context.__aenter__.return_value = response
    return context


def make_client_session(**methods):
    """
    Patch target for aiohttp.ClientSession.

    Each keyword maps an HTTP method name to a response context (or a list of
    them, consumed in order, or an exception to raise).
    """
    session = MagicMock()
    for method, responses in methods.items():
        if isinstance(responses, list):
            getattr(session, method).side_effect = responses
        elif isinstance(responses, BaseException):
            getattr(session, method).side_effect = responses
        else:
            getattr(session, method).return_value = responses

    session_cls = MagicMock()
    session_cls.return_value.__aenter__.return_value = session
    return session_cls, session


def make_media_tool(duration: float = 42.5, fail: bool = False, output_size: int = 2048):
    """MediaTool stand-in whose ffmpeg calls write (or fail to write) the output"""
    tool = MagicMock()

    async def produce(source, output_path):
        if fail:
            raise ExternalProcessFailure("ffmpeg", 1, "Invalid data found when processing input")
        write_fake_mp3(Path(output_path), size=output_size)

    tool.compress = AsyncMock(side_effect=produce)
    tool.concat = AsyncMock(side_effect=produce)
    tool.probe_duration = AsyncMock(return_value=duration)
    return tool


async def fake_download_chunks(job, urls):
    """Replacement for AudioChunkAssembler.download_chunks that writes local chunks"""
    for i, _ in enumerate(urls):
        job.chunk_paths.append(write_fake_mp3(job.chunk_path(i)))
    return job.chunk_paths
