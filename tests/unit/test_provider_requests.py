"""Unit tests for speech request variants and client resolution"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from core.errors import ProviderNotConfigured, SpeechGenerationError
from core.providers.base import AudioGenerationResult
from core.providers.requests import (
    REQUEST_TYPES,
    ElevenLabsRequest,
    GoogleTtsRequest,
    MiniMaxRequest,
    OpenAIRequest,
    ProviderClients,
    build_request,
)


class TestBuildRequest:

    def test_openai_default_voice(self):
        request = build_request("openai", text="hi")
        assert request == OpenAIRequest(text="hi", voice="alloy", model="tts-1")

    @pytest.mark.parametrize("provider, cls", [
        ("minimax", MiniMaxRequest),
        ("elevenlabs", ElevenLabsRequest),
        ("google-tts", GoogleTtsRequest),
    ])
    def test_variant_per_provider(self, provider, cls):
        request = build_request(provider, voice="v1")

        assert isinstance(request, cls)
        assert request.provider == provider
        assert request.voice_label == "v1"

    def test_options_forwarded(self):
        request = build_request("elevenlabs", voice="lily", model_id="eleven_turbo_v2")
        assert request.speech_kwargs() == {"voice_id": "lily", "model": "eleven_turbo_v2"}

    def test_voice_required(self):
        with pytest.raises(ValueError, match="voice is required"):
            build_request("minimax")

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown speech provider"):
            build_request("espeak", voice="x")

    def test_registry(self):
        assert set(REQUEST_TYPES) == {"openai", "minimax", "elevenlabs", "google-tts"}

    def test_with_text_keeps_voice(self):
        request = GoogleTtsRequest(text="", voice_name="en-US-Neural2-F", language_code="en-GB")
        updated = request.with_text("chunk text")

        assert updated.text == "chunk text"
        assert updated.voice_name == "en-US-Neural2-F"
        assert updated.speech_kwargs() == {"voice_id": "en-US-Neural2-F", "language_code": "en-GB"}
        assert request.text == ""


class TestProviderClients:

    def test_client_for_unconfigured(self, mock_audio_provider):
        clients = ProviderClients({"openai": mock_audio_provider})

        with pytest.raises(ProviderNotConfigured, match="minimax"):
            clients.client_for(MiniMaxRequest(text="x", voice_id="v"))

    @pytest.mark.asyncio
    async def test_speech_operation_passes_arguments(self, mock_audio_provider):
        clients = ProviderClients({"minimax": mock_audio_provider})
        operation = clients.speech_operation(MiniMaxRequest(text="two words", voice_id="Calm_Woman"))

        audio = await operation()

        assert audio.startswith(b"\xff\xfb")
        assert mock_audio_provider.calls == [
            {"text": "two words", "voice_id": "Calm_Woman", "model": "speech-02-hd"}
        ]

    @pytest.mark.asyncio
    async def test_unsuccessful_result_raises(self):
        client = MagicMock()
        client.name = "openai"
        client.generate_speech = AsyncMock(
            return_value=AudioGenerationResult(success=False, error_message="quota exceeded")
        )
        clients = ProviderClients({"openai": client})

        operation = clients.speech_operation(OpenAIRequest(text="hello"))

        with pytest.raises(SpeechGenerationError, match="quota exceeded"):
            await operation()

    def test_configured_sorted(self, mock_audio_provider):
        clients = ProviderClients({"openai": mock_audio_provider, "elevenlabs": mock_audio_provider})
        assert clients.configured() == ["elevenlabs", "openai"]
