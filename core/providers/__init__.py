"""Provider interfaces for external services (speech, storage, rendering)"""

from .base import (
    AudioProvider,
    AudioProviderConfig,
    AudioGenerationResult,
    StorageProvider,
    StorageProviderConfig,
    StorageResult,
    RenderProvider,
    RenderProviderConfig,
)
from .mock import MockAudioProvider, MockRenderProvider
from .requests import (
    OpenAIRequest,
    MiniMaxRequest,
    ElevenLabsRequest,
    GoogleTtsRequest,
    ProviderRequest,
    ProviderClients,
    build_request,
)

# Audio providers
from .audio import (
    ElevenLabsProvider,
    GoogleTTSProvider,
    MiniMaxProvider,
    OpenAITTSProvider,
)

# Storage providers
from .storage import (
    LocalStorageProvider,
    SupabaseStorageProvider,
)

# Render providers
from .render import ShotstackRenderProvider

__all__ = [
    # Base interfaces
    "AudioProvider",
    "AudioProviderConfig",
    "AudioGenerationResult",
    "StorageProvider",
    "StorageProviderConfig",
    "StorageResult",
    "RenderProvider",
    "RenderProviderConfig",
    # Mocks
    "MockAudioProvider",
    "MockRenderProvider",
    # Requests
    "OpenAIRequest",
    "MiniMaxRequest",
    "ElevenLabsRequest",
    "GoogleTtsRequest",
    "ProviderRequest",
    "ProviderClients",
    "build_request",
    # Audio providers
    "ElevenLabsProvider",
    "GoogleTTSProvider",
    "MiniMaxProvider",
    "OpenAITTSProvider",
    # Storage providers
    "LocalStorageProvider",
    "SupabaseStorageProvider",
    # Render providers
    "ShotstackRenderProvider",
]
