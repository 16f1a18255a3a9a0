"""
Media assembly service layer.

Wires the components into the narration-to-render flow:

    text -> chunks -> BatchScheduler (speech + chunk upload) -> AudioChunkAssembler
         -> duration -> TimelineComposer -> render submission

Clients are built once from Settings and passed in; nothing here keeps
module-level state.
"""

import logging
import re
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from core.audio_assembly import AudioChunkAssembler
from core.batch import BatchScheduler
from core.config import Settings
from core.errors import InvalidTimelineError
from core.media_tool import MediaTool
from core.models.audio import AudioChunkSet, NarrationResult, TextChunk
from core.models.batch import BatchReport, BatchTask
from core.models.render import RenderJob, RenderOutput, Timeline
from core.providers.base import (
    AudioProvider,
    AudioProviderConfig,
    RenderProvider,
    RenderProviderConfig,
    StorageProvider,
    StorageProviderConfig,
)
from core.providers.requests import REQUEST_TYPES, ProviderClients, ProviderRequest
from core.secrets import get_api_key
from core.subtitles import reformat_srt
from core.text_chunking import chunk_text
from core.timeline import TimelineComposer, build_render_payload

logger = logging.getLogger(__name__)


@dataclass
class ServiceClients:
    """External collaborators shared by every operation of one service instance"""
    speech: ProviderClients
    storage: StorageProvider
    render: RenderProvider
    media_tool: MediaTool


def _speech_clients(settings: Settings, mock: bool) -> Dict[str, AudioProvider]:
    if mock:
        from core.providers.mock import MockAudioProvider
        provider = MockAudioProvider()
        return {name: provider for name in REQUEST_TYPES}

    clients: Dict[str, AudioProvider] = {}

    openai_key = get_api_key("OPENAI_API_KEY")
    if openai_key:
        from core.providers.audio.openai_tts import OpenAITTSProvider
        clients["openai"] = OpenAITTSProvider(AudioProviderConfig(api_key=openai_key))

    minimax_key = get_api_key("MINIMAX_API_KEY")
    if minimax_key and settings.minimax_group_id:
        from core.providers.audio.minimax import MiniMaxProvider
        clients["minimax"] = MiniMaxProvider(
            AudioProviderConfig(api_key=minimax_key), group_id=settings.minimax_group_id
        )

    elevenlabs_key = get_api_key("ELEVENLABS_API_KEY")
    if elevenlabs_key:
        from core.providers.audio.elevenlabs import ElevenLabsProvider
        clients["elevenlabs"] = ElevenLabsProvider(api_key=elevenlabs_key)

    google_key = get_api_key("GOOGLE_CLOUD_API_KEY")
    if google_key:
        from core.providers.audio.google_tts import GoogleTTSProvider
        clients["google-tts"] = GoogleTTSProvider(AudioProviderConfig(api_key=google_key))

    return clients


def _storage_client(settings: Settings) -> StorageProvider:
    if settings.storage_backend == "supabase":
        from core.providers.storage.supabase import SupabaseStorageProvider
        return SupabaseStorageProvider(StorageProviderConfig(
            bucket=settings.supabase_bucket,
            base_url=settings.supabase_url,
            api_key=get_api_key("SUPABASE_SERVICE_ROLE_KEY"),
        ))

    from core.providers.storage.local import LocalStorageProvider
    return LocalStorageProvider(StorageProviderConfig(base_path=settings.storage_dir))


def _render_client(settings: Settings, mock: bool) -> RenderProvider:
    if mock or settings.render_backend == "mock":
        from core.providers.mock import MockRenderProvider
        return MockRenderProvider()

    from core.providers.render.shotstack import ShotstackRenderProvider
    return ShotstackRenderProvider(RenderProviderConfig(
        api_key=get_api_key("SHOTSTACK_API_KEY"),
        stage=settings.shotstack_stage,
    ))


def build_clients(settings: Settings, mock: bool = False) -> ServiceClients:
    """
    Construct every external client once.

    Args:
        settings: Loaded settings
        mock: Register mock speech and render providers instead of live ones
    """
    return ServiceClients(
        speech=ProviderClients(_speech_clients(settings, mock)),
        storage=_storage_client(settings),
        render=_render_client(settings, mock),
        media_tool=MediaTool(settings.ffmpeg_path, settings.ffprobe_path),
    )


def _safe_name(value: str) -> str:
    return re.sub(r"[^a-zA-Z0-9]", "_", value) or "unknown_voice"


class MediaAssemblyService:
    """
    Explicit service boundary over the assembly core.

    Usage:
        settings = Settings()
        service = MediaAssemblyService(settings, build_clients(settings))
        narration = await service.narrate(text, OpenAIRequest(text="", voice="nova"))
        job = await service.create_video(images, narration.track.url, narration.track.duration_seconds)
    """

    def __init__(
        self,
        settings: Settings,
        clients: ServiceClients,
        scheduler: Optional[BatchScheduler] = None,
    ):
        self.settings = settings
        self.clients = clients
        self.scheduler = scheduler or BatchScheduler(
            batch_size=settings.batch_size,
            inter_batch_delay=settings.inter_batch_delay,
            retry=settings.retry_policy,
        )
        self.assembler = AudioChunkAssembler(
            media_tool=clients.media_tool,
            storage=clients.storage,
            scratch_root=settings.scratch_root,
        )
        self.composer = TimelineComposer(
            overlay_url=settings.overlay_url,
            fallback_image=settings.fallback_image_url,
            enable_zoom=settings.enable_zoom,
        )

    # ------------------------------------------------------------
    # Subtitles and text
    # ------------------------------------------------------------

    def resegment_srt(self, srt_text: str, max_words_per_line: Optional[int] = None) -> str:
        return reformat_srt(srt_text, max_words_per_line or self.settings.max_words_per_line)

    def chunk_narration(self, text: str) -> List[TextChunk]:
        return chunk_text(text, self.settings.chunk_max_chars)

    # ------------------------------------------------------------
    # Narration
    # ------------------------------------------------------------

    def _audio_prefix(self) -> str:
        return f"user_{self.settings.user_id}/audio"

    async def generate_chunks(
        self,
        text: str,
        request: ProviderRequest,
    ) -> Tuple[List[TextChunk], BatchReport]:
        """
        Synthesize every chunk of `text` and upload each one.

        Successful report values are chunk URLs in text order.
        """
        chunks = self.chunk_narration(text)
        if not chunks:
            raise ValueError("Narration text is empty")

        run_id = uuid.uuid4().hex
        voice = _safe_name(request.voice_label)
        storage = self.clients.storage

        def make_operation(chunk: TextChunk):
            synthesize = self.clients.speech.speech_operation(request.with_text(chunk.text))
            remote_path = (
                f"{self._audio_prefix()}/chunks/"
                f"{request.provider}-{voice}-{run_id}-chunk-{chunk.index:04d}.mp3"
            )

            async def operation() -> str:
                audio = await synthesize()
                result = await storage.upload_bytes(audio, remote_path, content_type="audio/mpeg")
                if not result.success or not result.file_url:
                    raise RuntimeError(f"Chunk upload failed: {result.error_message}")
                return result.file_url

            return operation

        tasks = [
            BatchTask(index=c.index, operation=make_operation(c), label=c.text[:40])
            for c in chunks
        ]
        logger.info(
            "Generating %d speech chunk(s) with %s (%d batch(es))",
            len(tasks), request.provider, self.scheduler.batch_count(len(tasks)),
        )
        report = await self.scheduler.run_report(tasks, deadline=self.settings.batch_deadline)
        return chunks, report

    async def narrate(
        self,
        text: str,
        request: ProviderRequest,
        allow_partial: bool = False,
    ) -> NarrationResult:
        """
        Text to one uploaded, compressed narration track.

        Raises:
            PartialBatchFailure: If any chunk failed and allow_partial is False
            AssemblyError: If assembly or upload fails
        """
        chunks, report = await self.generate_chunks(text, request)
        failed = [r.index for r in report.failed]
        if failed and not allow_partial:
            report.raise_for_failures()
        if failed:
            logger.warning("Assembling without %d failed chunk(s): %s", len(failed), failed)

        chunk_set = AudioChunkSet(report.values, request.provider, request.voice_label)
        track_id = uuid.uuid4().hex
        voice = _safe_name(request.voice_label)
        track = await self.assembler.assemble_and_upload(
            chunk_set.urls,
            destination=f"{self._audio_prefix()}/{track_id}.mp3",
            output_name=f"{request.provider}-{voice}-{track_id}-final.mp3",
        )
        return NarrationResult(
            track=track,
            chunks=chunk_set,
            failed_chunks=failed,
            total_chunks=len(chunks),
        )

    # ------------------------------------------------------------
    # Timeline and rendering
    # ------------------------------------------------------------

    async def overlay_available(self) -> bool:
        """Probe the overlay asset; disabled or unset overlays are never live"""
        url = self.settings.overlay_url
        if not (self.settings.enable_overlay and url):
            return False
        live = await self.clients.render.probe_asset(url)
        if not live:
            logger.warning("Overlay asset %s is unreachable; rendering without it", url)
        return live

    async def compose_timeline(
        self,
        images: Sequence[str],
        total_duration: float,
        audio_url: str,
        captions_url: Optional[str] = None,
    ) -> Timeline:
        """
        Lay out the narration, including the overlay only when its asset is live.

        Raises:
            InvalidTimelineError: If the narration duration is not positive
        """
        if total_duration <= 0:
            raise InvalidTimelineError(
                f"Narration duration must be positive, got {total_duration}s; "
                "the audio track may not have been probed"
            )
        has_overlay = await self.overlay_available()
        return self.composer.compose(
            images,
            total_duration,
            audio_url,
            captions_url=captions_url,
            has_overlay=has_overlay,
        )

    async def submit_render(self, timeline: Timeline) -> RenderJob:
        payload = build_render_payload(
            timeline,
            RenderOutput.from_quality(self.settings.quality),
            self.settings.callback_url,
        )
        job = await self.clients.render.submit(payload)
        logger.info("Render job %s submitted", job.job_id)
        return job

    async def create_video(
        self,
        images: Sequence[str],
        audio_url: str,
        total_duration: float,
        captions_url: Optional[str] = None,
    ) -> RenderJob:
        """Compose a timeline for the narration and submit it"""
        timeline = await self.compose_timeline(images, total_duration, audio_url, captions_url)
        return await self.submit_render(timeline)

    async def render_status(self, job_id: str) -> RenderJob:
        return await self.clients.render.check_status(job_id)
