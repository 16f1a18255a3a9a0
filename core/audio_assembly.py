"""
Audio chunk assembly.

Narration arrives as several remote speech chunks. An assembly job downloads
them into a private scratch directory, joins and re-encodes them with ffmpeg
in a single pass, probes the result's duration and (optionally) uploads the
final track. Chunks and the concat list never outlive the job.

Usage:
    assembler = AudioChunkAssembler(MediaTool(), storage=storage)
    result = await assembler.assemble_and_upload(urls, "user_42/audio/abc.mp3")
"""

import asyncio
import logging
import shutil
import uuid
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List, Optional, Sequence, Union

import aiohttp

from core.errors import AssemblyError, ChunkDownloadError, ExternalProcessFailure, UploadFailure
from core.media_tool import MediaTool
from core.models.audio import AssembledTrack, AssemblyResult
from core.providers.base import StorageProvider

logger = logging.getLogger(__name__)

DEFAULT_SCRATCH_ROOT = "temp-audio-processing"
AUDIO_CONTENT_TYPE = "audio/mpeg"


class AssemblyJob:
    """
    Scratch space owned by exactly one assembly.

    Created by AudioChunkAssembler.job(); the directory is removed when the
    job's context exits.
    """

    def __init__(self, root: Path):
        self.job_id = uuid.uuid4().hex
        self.path = (root / f"concat-{self.job_id}").resolve()
        self.chunk_paths: List[Path] = []

    @property
    def list_file(self) -> Path:
        return self.path / "concat-list.txt"

    def chunk_path(self, index: int) -> Path:
        return self.path / f"chunk-{index:04d}.mp3"

    def output_path(self, name: str) -> Path:
        return self.path / name

    def write_list_file(self) -> Path:
        """Write the concat demuxer list with absolute forward-slash paths"""
        lines = []
        for chunk in self.chunk_paths:
            abs_path = str(chunk.resolve()).replace("\\", "/")
            lines.append(f"file '{abs_path}'")
        self.list_file.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return self.list_file

    def discard_inputs(self) -> None:
        """Delete the list file and downloaded chunks"""
        self.list_file.unlink(missing_ok=True)
        for chunk in self.chunk_paths:
            chunk.unlink(missing_ok=True)


class AudioChunkAssembler:
    """Joins remote speech chunks into one compressed track"""

    def __init__(
        self,
        media_tool: Optional[MediaTool] = None,
        storage: Optional[StorageProvider] = None,
        scratch_root: Union[str, Path] = DEFAULT_SCRATCH_ROOT,
        download_timeout: float = 120.0,
    ):
        self.media_tool = media_tool or MediaTool()
        self.storage = storage
        self.scratch_root = Path(scratch_root)
        self.download_timeout = download_timeout

    @asynccontextmanager
    async def job(self) -> AsyncIterator[AssemblyJob]:
        """Acquire a job-unique scratch directory, removed on exit"""
        job = AssemblyJob(self.scratch_root)
        job.path.mkdir(parents=True, exist_ok=False)
        logger.debug("Created scratch directory %s", job.path)
        try:
            yield job
        finally:
            await asyncio.to_thread(shutil.rmtree, job.path, True)
            logger.debug("Removed scratch directory %s", job.path)

    async def download_chunks(self, job: AssemblyJob, chunk_urls: Sequence[str]) -> List[Path]:
        """
        Download chunks one after another into the job directory.

        Raises:
            ChunkDownloadError: On the first failed download
        """
        timeout = aiohttp.ClientTimeout(total=self.download_timeout)
        async with aiohttp.ClientSession(timeout=timeout) as session:
            for i, url in enumerate(chunk_urls):
                target = job.chunk_path(i)
                try:
                    async with session.get(url) as response:
                        if response.status != 200:
                            raise ChunkDownloadError(url, f"HTTP {response.status}")
                        data = await response.read()
                except aiohttp.ClientError as e:
                    raise ChunkDownloadError(url, str(e))
                except asyncio.TimeoutError:
                    raise ChunkDownloadError(url, f"timed out after {self.download_timeout}s")

                await asyncio.to_thread(target.write_bytes, data)
                job.chunk_paths.append(target)
                logger.debug("Downloaded chunk %d/%d (%d bytes)", i + 1, len(chunk_urls), len(data))

        return job.chunk_paths

    async def assemble_in(
        self,
        job: AssemblyJob,
        chunk_urls: Sequence[str],
        output_path: Union[str, Path],
    ) -> AssembledTrack:
        """
        Assemble inside an already acquired job.

        Raises:
            AssemblyError: If no chunk URLs are given
            ChunkDownloadError: If any chunk cannot be downloaded
            ExternalProcessFailure: If ffmpeg exits non-zero
        """
        if not chunk_urls:
            raise AssemblyError("No audio chunks to assemble")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            await self.download_chunks(job, chunk_urls)

            if len(job.chunk_paths) == 1:
                logger.info("Single chunk: compressing %s", job.chunk_paths[0].name)
                await self.media_tool.compress(job.chunk_paths[0], output_path)
            else:
                list_file = job.write_list_file()
                logger.info("Concatenating %d chunks with compression", len(job.chunk_paths))
                await self.media_tool.concat(list_file, output_path)
        except ExternalProcessFailure as e:
            output_path.unlink(missing_ok=True)
            logger.error("Audio assembly failed (exit %s):\n%s", e.returncode, e.diagnostics)
            raise
        finally:
            job.discard_inputs()

        if not output_path.exists():
            raise AssemblyError(f"ffmpeg exited cleanly but wrote no output to {output_path}")

        duration = await self.media_tool.probe_duration(output_path)
        size = output_path.stat().st_size
        logger.info(
            "Assembled %s: %.2fs, %.2f MB", output_path.name, duration, size / (1024 * 1024)
        )
        return AssembledTrack(local_path=output_path, duration_seconds=duration, size_bytes=size)

    async def assemble(
        self,
        chunk_urls: Sequence[str],
        output_path: Union[str, Path],
    ) -> AssembledTrack:
        """Assemble chunks into `output_path` using a private scratch job"""
        async with self.job() as job:
            return await self.assemble_in(job, chunk_urls, output_path)

    async def assemble_and_upload(
        self,
        chunk_urls: Sequence[str],
        destination: str,
        output_name: Optional[str] = None,
    ) -> AssemblyResult:
        """
        Assemble chunks and upload the track to durable storage.

        The local artifact lives in the job directory and is removed together
        with it once the upload has settled.

        Raises:
            UploadFailure: If the storage provider does not confirm the upload
        """
        if self.storage is None:
            raise AssemblyError("No storage provider configured for upload")

        async with self.job() as job:
            output = job.output_path(output_name or f"{job.job_id}-final.mp3")
            track = await self.assemble_in(job, chunk_urls, output)

            result = await self.storage.upload_file(
                str(track.local_path), destination, content_type=AUDIO_CONTENT_TYPE
            )
            if not result.success or not result.file_url:
                logger.error("Upload of %s failed: %s", destination, result.error_message)
                raise UploadFailure(destination, result.error_message)

            logger.info("Uploaded assembled track to %s", result.file_url)
            return AssemblyResult(
                url=result.file_url,
                duration_seconds=track.duration_seconds,
                size_bytes=track.size_bytes,
                chunks_processed=len(chunk_urls),
                destination=destination,
            )
