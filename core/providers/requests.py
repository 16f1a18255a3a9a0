"""
Speech request variants.

Each narration request names exactly one provider and carries only the
arguments that provider understands. ProviderClients resolves the variant to
a configured client once, at the call site, and hands back a zero-argument
operation suitable for a BatchTask.

Usage:
    clients = ProviderClients({"openai": OpenAITTSProvider(config)})
    request = OpenAIRequest(text="", voice="nova")
    op = clients.speech_operation(request.with_text(chunk.text))
    audio_bytes = await op()
"""

from dataclasses import dataclass, replace
from typing import Awaitable, Callable, Dict, Union

from core.errors import ProviderNotConfigured, SpeechGenerationError
from core.providers.base import AudioProvider


@dataclass(frozen=True)
class OpenAIRequest:
    text: str
    voice: str = "alloy"
    model: str = "tts-1"

    provider = "openai"

    @property
    def voice_label(self) -> str:
        return self.voice

    def speech_kwargs(self) -> Dict[str, object]:
        return {"voice_id": self.voice, "model": self.model}

    def with_text(self, text: str) -> "OpenAIRequest":
        return replace(self, text=text)


@dataclass(frozen=True)
class MiniMaxRequest:
    text: str
    voice_id: str
    model: str = "speech-02-hd"

    provider = "minimax"

    @property
    def voice_label(self) -> str:
        return self.voice_id

    def speech_kwargs(self) -> Dict[str, object]:
        return {"voice_id": self.voice_id, "model": self.model}

    def with_text(self, text: str) -> "MiniMaxRequest":
        return replace(self, text=text)


@dataclass(frozen=True)
class ElevenLabsRequest:
    text: str
    voice_id: str
    model_id: str = "eleven_multilingual_v2"

    provider = "elevenlabs"

    @property
    def voice_label(self) -> str:
        return self.voice_id

    def speech_kwargs(self) -> Dict[str, object]:
        return {"voice_id": self.voice_id, "model": self.model_id}

    def with_text(self, text: str) -> "ElevenLabsRequest":
        return replace(self, text=text)


@dataclass(frozen=True)
class GoogleTtsRequest:
    text: str
    voice_name: str
    language_code: str = "en-US"

    provider = "google-tts"

    @property
    def voice_label(self) -> str:
        return self.voice_name

    def speech_kwargs(self) -> Dict[str, object]:
        return {"voice_id": self.voice_name, "language_code": self.language_code}

    def with_text(self, text: str) -> "GoogleTtsRequest":
        return replace(self, text=text)


ProviderRequest = Union[OpenAIRequest, MiniMaxRequest, ElevenLabsRequest, GoogleTtsRequest]

REQUEST_TYPES = {
    cls.provider: cls
    for cls in (OpenAIRequest, MiniMaxRequest, ElevenLabsRequest, GoogleTtsRequest)
}


def build_request(provider: str, text: str = "", voice: str = "", **options) -> ProviderRequest:
    """
    Build the request variant for a provider name.

    Raises:
        ValueError: For an unknown provider or a missing voice
    """
    if provider not in REQUEST_TYPES:
        raise ValueError(
            f"Unknown speech provider '{provider}'. Choose from: {', '.join(sorted(REQUEST_TYPES))}"
        )
    if provider == "openai":
        return OpenAIRequest(text=text, voice=voice or "alloy", **options)
    if not voice:
        raise ValueError(f"A voice is required for provider '{provider}'")
    if provider == "minimax":
        return MiniMaxRequest(text=text, voice_id=voice, **options)
    if provider == "elevenlabs":
        return ElevenLabsRequest(text=text, voice_id=voice, **options)
    return GoogleTtsRequest(text=text, voice_name=voice, **options)


class ProviderClients:
    """Configured speech clients keyed by request variant"""

    def __init__(self, speech: Dict[str, AudioProvider]):
        self.speech = dict(speech)

    def configured(self) -> list:
        return sorted(self.speech)

    def client_for(self, request: ProviderRequest) -> AudioProvider:
        client = self.speech.get(request.provider)
        if client is None:
            raise ProviderNotConfigured(
                f"No speech client configured for '{request.provider}'. "
                f"Configured: {', '.join(self.configured()) or 'none'}"
            )
        return client

    def speech_operation(self, request: ProviderRequest) -> Callable[[], Awaitable[bytes]]:
        """
        Resolve the request to a zero-argument coroutine function returning audio bytes.

        Raises:
            ProviderNotConfigured: If no client is registered for the variant
        """
        client = self.client_for(request)
        kwargs = request.speech_kwargs()

        async def operation() -> bytes:
            result = await client.generate_speech(request.text, **kwargs)
            if not result.success or not result.audio_data:
                raise SpeechGenerationError(client.name, result.error_message)
            return result.audio_data

        return operation
