"""Unit tests for MediaAssemblyService wiring"""

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from core.errors import InvalidTimelineError, PartialBatchFailure, ProviderNotConfigured
from core.models.render import RenderStatus
from core.providers.base import AudioGenerationResult
from core.providers.mock import MockAudioProvider, MockRenderProvider
from core.providers.requests import ElevenLabsRequest, OpenAIRequest, ProviderClients
from core.providers.storage import LocalStorageProvider
from core.service import MediaAssemblyService, build_clients
from core.timeline import AUDIO_TRACK, IMAGES_TRACK, OVERLAY_TRACK
from tests.mocks.fixtures import fake_download_chunks, make_media_tool

NARRATION = (
    "The first sentence is here. The second one follows it. "
    "A third sentence closes the paragraph."
)


@pytest.fixture
def service(settings):
    settings = settings.model_copy(update={"chunk_max_chars": 40})
    service = MediaAssemblyService(settings, build_clients(settings, mock=True))
    service.assembler.media_tool = make_media_tool(duration=12.0)
    service.assembler.download_chunks = fake_download_chunks
    return service


class TestBuildClients:

    def test_mock_registers_every_variant(self, settings):
        clients = build_clients(settings, mock=True)

        assert clients.speech.configured() == ["elevenlabs", "google-tts", "minimax", "openai"]
        assert isinstance(clients.render, MockRenderProvider)
        assert isinstance(clients.storage, LocalStorageProvider)

    def test_live_clients_need_keys(self, settings):
        with patch("core.service.get_api_key", return_value=None):
            clients = build_clients(settings)

        assert clients.speech.configured() == []
        with pytest.raises(ProviderNotConfigured):
            clients.speech.client_for(OpenAIRequest(text="x"))

    def test_openai_client_from_key(self, settings):
        def fake_key(name):
            return "sk-test-key-1234" if name == "OPENAI_API_KEY" else None

        with patch("core.service.get_api_key", side_effect=fake_key):
            clients = build_clients(settings)

        assert clients.speech.configured() == ["openai"]


class TestTextOperations:

    def test_resegment_uses_configured_width(self, service):
        srt = "1\n00:00:00,000 --> 00:00:02,000\none two three four five six\n"
        output = service.resegment_srt(srt)
        assert output.count("-->") == 2

    def test_chunk_narration(self, service):
        chunks = service.chunk_narration(NARRATION)
        assert [c.text for c in chunks] == [
            "The first sentence is here.",
            "The second one follows it.",
            "A third sentence closes the paragraph.",
        ]


class TestNarrate:
    """Tests for the text -> chunks -> assembled track flow"""

    @pytest.mark.asyncio
    async def test_generate_chunks_uploads_each(self, service, settings):
        chunks, report = await service.generate_chunks(NARRATION, OpenAIRequest(text="", voice="nova"))

        assert len(chunks) == 3
        assert len(report.values) == 3
        for url in report.values:
            assert url.startswith("file://")
            assert "/user_42/audio/chunks/openai-nova-" in url

        names = sorted(p.name for p in Path(settings.storage_dir).rglob("*.mp3"))
        assert [n.rsplit("-", 1)[-1] for n in names] == ["0000.mp3", "0001.mp3", "0002.mp3"]

    @pytest.mark.asyncio
    async def test_narrate(self, service):
        request = ElevenLabsRequest(text="", voice_id="voice/with spaces")

        result = await service.narrate(NARRATION, request)

        assert result.complete
        assert result.total_chunks == 3
        assert len(result.chunk_urls) == 3
        assert result.chunks.provider == "elevenlabs"
        assert list(result.chunks) == result.chunk_urls
        assert result.track.duration_seconds == 12.0
        assert result.track.chunks_processed == 3
        assert result.track.destination.startswith("user_42/audio/")
        assert result.track.url.endswith(".mp3")

        output_name = Path(service.assembler.media_tool.concat.call_args.args[1]).name
        assert output_name.startswith("elevenlabs-voice_with_spaces-")
        assert output_name.endswith("-final.mp3")

    @pytest.mark.asyncio
    async def test_retries_transient_speech_errors(self, service):
        flaky = MockAudioProvider(fail_first=2)
        service.clients.speech = ProviderClients({"openai": flaky})

        result = await service.narrate(NARRATION, OpenAIRequest(text=""))

        assert result.complete
        assert len(flaky.calls) == 5

    @pytest.mark.asyncio
    async def test_partial_failure(self, service):
        async def speak(text, **kwargs):
            if text.startswith("The second"):
                return AudioGenerationResult(success=False, error_message="content filtered")
            return AudioGenerationResult(success=True, audio_data=b"\xff\xfb audio")

        client = MagicMock()
        client.name = "openai"
        client.generate_speech = AsyncMock(side_effect=speak)
        service.clients.speech = ProviderClients({"openai": client})

        with pytest.raises(PartialBatchFailure) as exc_info:
            await service.narrate(NARRATION, OpenAIRequest(text=""))
        assert exc_info.value.failed_indices == [1]

        result = await service.narrate(NARRATION, OpenAIRequest(text=""), allow_partial=True)
        assert result.failed_chunks == [1]
        assert not result.complete
        assert len(result.chunk_urls) == 2

    @pytest.mark.asyncio
    async def test_empty_text(self, service):
        with pytest.raises(ValueError):
            await service.narrate("   ", OpenAIRequest(text=""))


class TestRendering:

    @pytest.mark.asyncio
    async def test_create_video(self, service):
        job = await service.create_video(
            ["https://cdn.example.com/a.png"], "https://cdn.example.com/n.mp3", 90.0
        )

        assert job.status == RenderStatus.QUEUED
        payload = service.clients.render.submissions[0]
        assert payload["output"]["resolution"] == "hd"
        assert "callback" not in payload

        status = await service.render_status(job.job_id)
        assert status.status == RenderStatus.DONE

    @pytest.mark.asyncio
    async def test_zero_duration_not_submitted(self, service):
        with pytest.raises(InvalidTimelineError):
            await service.create_video(
                ["https://cdn.example.com/a.png"], "https://cdn.example.com/n.mp3", 0.0
            )

        assert service.clients.render.submissions == []

    @pytest.mark.asyncio
    async def test_overlay_probed(self, settings):
        settings = settings.model_copy(update={"overlay_url": "https://cdn.example.com/o.mp4"})
        clients = build_clients(settings, mock=True)
        service = MediaAssemblyService(settings, clients)

        timeline = await service.compose_timeline(["https://cdn.example.com/a.png"], 60, "a.mp3")
        assert timeline.track_names[0] == OVERLAY_TRACK

        clients.render.reachable = []
        timeline = await service.compose_timeline(["https://cdn.example.com/a.png"], 60, "a.mp3")
        assert timeline.track_names == [IMAGES_TRACK, AUDIO_TRACK]

    @pytest.mark.asyncio
    async def test_overlay_disabled(self, settings):
        settings = settings.model_copy(update={
            "overlay_url": "https://cdn.example.com/o.mp4",
            "enable_overlay": False,
        })
        service = MediaAssemblyService(settings, build_clients(settings, mock=True))

        assert await service.overlay_available() is False
