"""
ElevenLabs Text-to-Speech Provider Implementation

API Documentation: https://api.elevenlabs.io/docs
"""

from typing import Optional, Dict, Any, List
import aiohttp
from ..base import AudioProvider, AudioProviderConfig, AudioGenerationResult
from core.secrets import get_api_key


class ElevenLabsProvider(AudioProvider):
    """
    ElevenLabs text-to-speech provider.

    Unlike the OpenAI provider this one raises on API errors, which the
    batch scheduler turns into a retry.
    """

    BASE_URL = "https://api.elevenlabs.io"
    DEFAULT_MODEL = "eleven_multilingual_v2"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        voice_id: Optional[str] = None,
        timeout: int = 60,
    ):
        """
        Args:
            api_key: ElevenLabs API key. Falls back to keyring / ELEVENLABS_API_KEY
            model: Default model ID
            voice_id: Default voice ID
        """
        config = AudioProviderConfig(
            api_key=api_key or get_api_key("ELEVENLABS_API_KEY"),
            base_url=self.BASE_URL,
            timeout=timeout,
        )
        super().__init__(config)
        self.model = model
        self.default_voice_id = voice_id

    @property
    def name(self) -> str:
        return "elevenlabs"

    def _get_headers(self) -> Dict[str, str]:
        return {
            "xi-api-key": self.config.api_key,
            "Content-Type": "application/json"
        }

    async def generate_speech(
        self,
        text: str,
        voice_id: Optional[str] = None,
        speed: float = 1.0,
        model: Optional[str] = None,
        output_format: str = "mp3_44100_128",
        **kwargs
    ) -> AudioGenerationResult:
        """
        Generate speech audio from text.

        Raises:
            ValueError: If the API key, text or voice is missing
            RuntimeError: If the API request fails
        """
        if not self.config.api_key:
            raise ValueError("ElevenLabs API key is required. Set ELEVENLABS_API_KEY environment variable.")
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        effective_voice_id = voice_id or self.default_voice_id
        if not effective_voice_id:
            raise ValueError("ElevenLabs voice_id is required")

        effective_model = model or self.model
        url = (
            f"{self.config.base_url}/v1/text-to-speech/{effective_voice_id}"
            f"?output_format={output_format}"
        )

        async with aiohttp.ClientSession() as session:
            async with session.post(
                url,
                json={"text": text, "model_id": effective_model},
                headers=self._get_headers(),
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RuntimeError(
                        f"ElevenLabs API error (status {response.status}): {error_text}"
                    )
                audio_data = await response.read()

        return AudioGenerationResult(
            success=True,
            audio_data=audio_data,
            format="mp3",
            cost=self.estimate_cost(text),
            provider_metadata={
                "provider": self.name,
                "voice_id": effective_voice_id,
                "model": effective_model,
                "character_count": len(text),
                "output_format": output_format
            }
        )

    async def list_voices(self) -> List[Dict[str, Any]]:
        """
        Raises:
            RuntimeError: If the API request fails
        """
        async with aiohttp.ClientSession() as session:
            async with session.get(
                f"{self.config.base_url}/v1/voices",
                headers=self._get_headers(),
                timeout=aiohttp.ClientTimeout(total=30)
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RuntimeError(
                        f"ElevenLabs API error (status {response.status}): {error_text}"
                    )
                data = await response.json()

        return [
            {
                "voice_id": voice.get("voice_id"),
                "name": voice.get("name"),
                "category": voice.get("category"),
            }
            for voice in data.get("voices", [])
        ]

    def estimate_cost(self, text: str, **kwargs) -> float:
        # ~$0.30 per 1K characters on the creator tier
        return (len(text) / 1000) * 0.30
