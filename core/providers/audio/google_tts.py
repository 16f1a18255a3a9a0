"""
Google Cloud Text-to-Speech Provider

REST API: https://cloud.google.com/text-to-speech/docs/reference/rest
"""

import base64
from typing import Optional, Dict, Any, List
import aiohttp
from ..base import AudioProvider, AudioProviderConfig, AudioGenerationResult


class GoogleTTSProvider(AudioProvider):
    """Google Cloud Text-to-Speech provider (synchronous synthesis)"""

    API_URL = "https://texttospeech.googleapis.com/v1"
    MAX_INPUT_BYTES = 5000

    def __init__(self, config: AudioProviderConfig):
        if not config.api_key:
            raise ValueError(
                "Google Cloud API key required. Set GOOGLE_CLOUD_API_KEY environment variable."
            )
        super().__init__(config)
        self.default_voice_name = "en-US-Neural2-A"
        self.default_language_code = "en-US"

    @property
    def name(self) -> str:
        return "google_tts"

    def _get_headers(self) -> Dict[str, str]:
        return {
            "X-Goog-Api-Key": self.config.api_key,
            "Content-Type": "application/json"
        }

    async def generate_speech(
        self,
        text: str,
        voice_id: Optional[str] = None,
        speed: float = 1.0,
        language_code: Optional[str] = None,
        **kwargs
    ) -> AudioGenerationResult:
        """
        Synthesize `text` with the named voice (e.g. en-US-Wavenet-D).

        Raises:
            ValueError: If text is empty or exceeds the synchronous input limit
            RuntimeError: If the API request fails or returns no audio
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        text_bytes = len(text.encode("utf-8"))
        if text_bytes > self.MAX_INPUT_BYTES:
            raise ValueError(
                f"Text too long ({text_bytes} bytes). "
                f"Maximum {self.MAX_INPUT_BYTES} bytes for synchronous synthesis."
            )

        voice = {
            "languageCode": language_code or self.default_language_code,
            "name": voice_id or self.default_voice_name,
        }
        request_body = {
            "input": {"text": text},
            "voice": voice,
            "audioConfig": {"audioEncoding": "MP3", "speakingRate": speed},
        }

        async with aiohttp.ClientSession() as session:
            async with session.post(
                f"{self.API_URL}/text:synthesize",
                json=request_body,
                headers=self._get_headers(),
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RuntimeError(
                        f"Google Cloud TTS API error (status {response.status}): {error_text}"
                    )
                response_data = await response.json()

        audio_content_b64 = response_data.get("audioContent")
        if not audio_content_b64:
            raise RuntimeError("No audio content received from Google TTS")

        return AudioGenerationResult(
            success=True,
            audio_data=base64.b64decode(audio_content_b64),
            format="mp3",
            cost=self.estimate_cost(text, voice_name=voice["name"]),
            provider_metadata={
                "provider": self.name,
                "voice": voice,
                "character_count": len(text),
            }
        )

    async def list_voices(self, language_code: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"languageCode": language_code} if language_code else None
        async with aiohttp.ClientSession() as session:
            async with session.get(
                f"{self.API_URL}/voices",
                params=params,
                headers=self._get_headers(),
                timeout=aiohttp.ClientTimeout(total=30)
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RuntimeError(
                        f"Google Cloud TTS API error (status {response.status}): {error_text}"
                    )
                data = await response.json()

        return [
            {
                "name": v.get("name", "Unknown Name"),
                "language_codes": v.get("languageCodes", []),
                "ssml_gender": v.get("ssmlGender", "SSML_VOICE_GENDER_UNSPECIFIED"),
                "natural_sample_rate_hertz": v.get("naturalSampleRateHertz", 0),
            }
            for v in data.get("voices", [])
        ]

    def estimate_cost(self, text: str, voice_name: str = "", **kwargs) -> float:
        # Standard voices $4 / 1M chars, WaveNet and Neural2 $16 / 1M chars
        per_million = 4.0 if "Standard" in voice_name else 16.0
        return len(text) / 1_000_000 * per_million
