"""
OpenAI Text-to-Speech Provider

Pricing (as of 2025):
- TTS-1: $0.015 per 1K characters (standard quality)
- TTS-1-HD: $0.030 per 1K characters (high definition)

API Docs: https://platform.openai.com/docs/guides/text-to-speech
"""

import asyncio
import aiohttp
from typing import List, Dict, Any, Optional
from ..base import AudioProvider, AudioProviderConfig, AudioGenerationResult


class OpenAITTSProvider(AudioProvider):
    """OpenAI text-to-speech provider"""

    VOICES = [
        "alloy", "ash", "ballad", "coral", "echo", "fable",
        "nova", "onyx", "sage", "shimmer",
    ]

    API_URL = "https://api.openai.com/v1/audio/speech"

    def __init__(self, config: AudioProviderConfig, model: str = "tts-1"):
        """
        Args:
            config: Provider configuration
            model: "tts-1" (standard) or "tts-1-hd" (high quality)
        """
        super().__init__(config)
        self.model = model
        self._cost_per_1k = 0.015 if model == "tts-1" else 0.030

        if not self.config.api_key:
            raise ValueError("OpenAI API key required")

    @property
    def name(self) -> str:
        return "openai"

    async def generate_speech(
        self,
        text: str,
        voice_id: Optional[str] = None,
        speed: float = 1.0,
        **kwargs
    ) -> AudioGenerationResult:
        """
        Generate speech from text using the OpenAI TTS API.

        Args:
            text: Text to convert to speech
            voice_id: One of VOICES (default: alloy)
            speed: Speech speed (0.25 to 4.0)
            **kwargs:
                - model: Override the model for this request
                - response_format: mp3, opus, aac, flac, wav, pcm (default: mp3)

        Returns:
            AudioGenerationResult with the audio bytes
        """
        voice = voice_id or "alloy"
        if voice not in self.VOICES:
            return AudioGenerationResult(
                success=False,
                error_message=f"Invalid voice '{voice}'. Must be one of: {', '.join(self.VOICES)}"
            )

        if not 0.25 <= speed <= 4.0:
            return AudioGenerationResult(
                success=False,
                error_message=f"Speed must be between 0.25 and 4.0, got {speed}"
            )

        model = kwargs.get("model") or self.model
        response_format = kwargs.get("response_format", "mp3")
        cost = self.estimate_cost(text)

        try:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self.config.base_url or self.API_URL,
                    headers={
                        "Authorization": f"Bearer {self.config.api_key}",
                        "Content-Type": "application/json"
                    },
                    json={
                        "model": model,
                        "input": text,
                        "voice": voice,
                        "speed": speed,
                        "response_format": response_format
                    }
                ) as response:
                    if response.status != 200:
                        error_text = await response.text()
                        return AudioGenerationResult(
                            success=False,
                            error_message=f"OpenAI TTS API error ({response.status}): {error_text}",
                            cost=cost
                        )
                    audio_bytes = await response.read()

            return AudioGenerationResult(
                success=True,
                audio_data=audio_bytes,
                format=response_format,
                cost=cost,
                provider_metadata={
                    "model": model,
                    "voice": voice,
                    "speed": speed,
                    "text_length": len(text),
                }
            )

        except aiohttp.ClientError as e:
            return AudioGenerationResult(
                success=False,
                error_message=f"OpenAI TTS request failed: {str(e)}",
                cost=cost
            )
        except asyncio.TimeoutError:
            return AudioGenerationResult(
                success=False,
                error_message=f"OpenAI TTS request timed out after {self.config.timeout}s",
                cost=cost
            )

    async def list_voices(self) -> List[Dict[str, Any]]:
        return [
            {"id": voice, "name": voice.title(), "language": "en"}
            for voice in self.VOICES
        ]

    def estimate_cost(self, text: str, **kwargs) -> float:
        return (len(text) / 1000) * self._cost_per_1k
