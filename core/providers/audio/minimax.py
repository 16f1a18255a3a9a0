"""
MiniMax Text-to-Speech Provider

Uses the t2a_v2 endpoint, which returns the audio hex-encoded inside JSON.
"""

from typing import Optional, Dict, Any, List
import aiohttp
from ..base import AudioProvider, AudioProviderConfig, AudioGenerationResult


class MiniMaxProvider(AudioProvider):
    """MiniMax speech provider"""

    API_URL = "https://api.minimaxi.chat/v1/t2a_v2"
    DEFAULT_MODEL = "speech-02-hd"

    def __init__(self, config: AudioProviderConfig, group_id: Optional[str] = None):
        """
        Args:
            config: Provider configuration (api_key required)
            group_id: MiniMax GroupId; may also be set in config.extra_params["group_id"]
        """
        if not config.api_key:
            raise ValueError("MiniMax API key required. Set MINIMAX_API_KEY environment variable.")
        super().__init__(config)
        self.group_id = group_id or config.extra_params.get("group_id")
        if not self.group_id:
            raise ValueError("MiniMax group id required. Set STUDIO_MINIMAX_GROUP_ID.")

    @property
    def name(self) -> str:
        return "minimax"

    async def generate_speech(
        self,
        text: str,
        voice_id: Optional[str] = None,
        speed: float = 1.0,
        model: Optional[str] = None,
        **kwargs
    ) -> AudioGenerationResult:
        """
        Raises:
            ValueError: If no voice is given
            RuntimeError: If the API fails or returns no audio
        """
        if not voice_id:
            raise ValueError("MiniMax voice_id is required")

        request_body = {
            "model": model or self.DEFAULT_MODEL,
            "text": text,
            "stream": False,
            "subtitle_enable": False,
            "voice_setting": {"voice_id": voice_id, "speed": speed, "vol": 1, "pitch": 0},
            "audio_setting": {"sample_rate": 32000, "bitrate": 128000, "format": "mp3", "channel": 1},
        }

        async with aiohttp.ClientSession() as session:
            async with session.post(
                self.config.base_url or self.API_URL,
                params={"GroupId": self.group_id},
                json=request_body,
                headers={
                    "Authorization": f"Bearer {self.config.api_key}",
                    "Content-Type": "application/json"
                },
                timeout=aiohttp.ClientTimeout(total=self.config.timeout)
            ) as response:
                if response.status != 200:
                    error_text = await response.text()
                    raise RuntimeError(f"MiniMax API error (status {response.status}): {error_text}")
                data = await response.json()

        hex_audio = (data.get("data") or {}).get("audio")
        if not hex_audio:
            raise RuntimeError(f"No audio data from MiniMax. Response: {data}")

        return AudioGenerationResult(
            success=True,
            audio_data=bytes.fromhex(hex_audio),
            format="mp3",
            provider_metadata={
                "provider": self.name,
                "voice_id": voice_id,
                "model": request_body["model"],
                "character_count": len(text),
            }
        )

    async def list_voices(self) -> List[Dict[str, Any]]:
        # MiniMax has no voice listing endpoint on this API tier
        return []

    def estimate_cost(self, text: str, **kwargs) -> float:
        return 0.0
