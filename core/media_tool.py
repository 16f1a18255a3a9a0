"""
FFmpeg / FFprobe process wrapper.

All external media-tool invocations go through MediaTool: output is always
captured, exit status is always awaited, and a cancelled caller never leaves
an orphaned process behind.
"""

import asyncio
import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Union

from core.errors import ExternalProcessFailure, MediaToolNotFound

logger = logging.getLogger(__name__)

DIAGNOSTIC_TAIL_LINES = 20

# Fixed settings for speech narration: mono 22.05 kHz MP3 at 24 kbps
COMPRESSION_ARGS = [
    "-c:a", "libmp3lame",
    "-b:a", "24k",
    "-ar", "22050",
    "-ac", "1",
    "-q:a", "9",
    "-compression_level", "9",
    "-joint_stereo", "1",
    "-reservoir", "0",
    "-abr", "1",
    "-map_metadata", "-1",
    "-fflags", "+bitexact",
    "-avoid_negative_ts", "make_zero",
    "-y",
]

PathLike = Union[str, Path]


@dataclass
class ProcessResult:
    """Captured outcome of one media-tool run"""
    returncode: int
    output: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    def tail(self, lines: int = DIAGNOSTIC_TAIL_LINES) -> str:
        """Last `lines` lines of output; ffmpeg prints its banner first"""
        return "\n".join(self.output.splitlines()[-lines:])


def find_tool(name: str, configured: Optional[str] = None) -> str:
    """
    Locate an executable.

    Preference: explicitly configured path, then PATH lookup, then the bare
    name (spawning will fail with MediaToolNotFound if it is absent).
    """
    if configured:
        return configured
    found = shutil.which(name)
    if found:
        return found
    return name


class MediaTool:
    """
    Runs ffmpeg and ffprobe.

    Usage:
        tool = MediaTool()
        await tool.compress(Path("chunk.mp3"), Path("out.mp3"))
        seconds = await tool.probe_duration(Path("out.mp3"))
    """

    def __init__(self, ffmpeg_path: Optional[str] = None, ffprobe_path: Optional[str] = None):
        self.ffmpeg_path = find_tool("ffmpeg", ffmpeg_path)
        if ffprobe_path:
            self.ffprobe_path = ffprobe_path
        else:
            self.ffprobe_path = shutil.which("ffprobe") or self._sibling_ffprobe()

    def _sibling_ffprobe(self) -> str:
        """Look for ffprobe next to the resolved ffmpeg binary"""
        ffmpeg_dir = os.path.dirname(self.ffmpeg_path)
        if ffmpeg_dir:
            for candidate in ("ffprobe", "ffprobe.exe"):
                path = os.path.join(ffmpeg_dir, candidate)
                if os.path.exists(path):
                    return path
        return "ffprobe"

    async def run(self, executable: str, args: Sequence[str]) -> ProcessResult:
        """
        Spawn `executable` with `args`, capture combined output, await exit.

        Raises:
            MediaToolNotFound: If the executable cannot be started
        """
        cmd = [executable, *args]
        logger.debug("Running: %s", " ".join(cmd))

        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise MediaToolNotFound(
                f"{executable} not found. Install FFmpeg and make sure it is on PATH."
            )

        try:
            stdout, stderr = await process.communicate()
        except asyncio.CancelledError:
            await self._kill(process, executable)
            raise

        output = (stdout or b"").decode(errors="replace") + (stderr or b"").decode(errors="replace")
        return ProcessResult(returncode=process.returncode, output=output)

    async def _kill(self, process, executable: str) -> None:
        if process.returncode is None:
            logger.warning("Killing %s (pid %s) after cancellation", executable, process.pid)
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()

    async def ffmpeg(self, args: List[str]) -> ProcessResult:
        """Run ffmpeg, raising ExternalProcessFailure on a non-zero exit"""
        result = await self.run(self.ffmpeg_path, args)
        if not result.ok:
            raise ExternalProcessFailure("ffmpeg", result.returncode, result.tail())
        return result

    async def compress(self, input_path: PathLike, output_path: PathLike) -> ProcessResult:
        """Re-encode a single file with the narration compression settings"""
        return await self.ffmpeg(["-i", str(input_path), *COMPRESSION_ARGS, str(output_path)])

    async def concat(self, list_file: PathLike, output_path: PathLike) -> ProcessResult:
        """Concatenate the files named in a concat list, compressing in the same pass"""
        return await self.ffmpeg([
            "-f", "concat",
            "-safe", "0",
            "-i", str(list_file),
            *COMPRESSION_ARGS,
            str(output_path),
        ])

    async def probe_duration(self, path: PathLike) -> float:
        """Duration in seconds, or 0.0 if the file cannot be probed"""
        if not os.path.exists(path):
            return 0.0

        try:
            result = await self.run(self.ffprobe_path, [
                "-v", "quiet",
                "-show_entries", "format=duration",
                "-of", "csv=p=0",
                str(path),
            ])
        except MediaToolNotFound:
            logger.warning("ffprobe unavailable; reporting duration 0.0 for %s", path)
            return 0.0

        if not result.ok:
            logger.warning("ffprobe exited %s for %s", result.returncode, path)
            return 0.0

        try:
            return float(result.output.strip())
        except ValueError:
            logger.warning("Unparseable ffprobe duration for %s: %r", path, result.output.strip())
            return 0.0

    async def check_installed(self) -> dict:
        """Report whether ffmpeg can be started and which version it is"""
        try:
            result = await self.run(self.ffmpeg_path, ["-version"])
        except MediaToolNotFound as e:
            return {"installed": False, "path": self.ffmpeg_path, "error": str(e)}
        first_line = result.output.splitlines()[0] if result.output else ""
        return {"installed": result.ok, "path": self.ffmpeg_path, "version": first_line}
