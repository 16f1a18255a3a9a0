"""Audio provider implementations"""

from .elevenlabs import ElevenLabsProvider
from .google_tts import GoogleTTSProvider
from .minimax import MiniMaxProvider
from .openai_tts import OpenAITTSProvider

__all__ = [
    "ElevenLabsProvider",
    "GoogleTTSProvider",
    "MiniMaxProvider",
    "OpenAITTSProvider",
]
