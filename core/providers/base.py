"""Abstract base classes for provider interfaces"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Dict, Any

from core.models.render import RenderJob


def _mask_secret(value: Optional[str]) -> str:
    """Mask a secret value for safe display in logs/repr."""
    if value is None:
        return "None"
    if len(value) <= 8:
        return "'***'"
    return f"'{value[:4]}...{value[-4:]}'"


# ============================================================
# Audio (speech)
# ============================================================

@dataclass
class AudioProviderConfig:
    """Configuration for audio provider"""
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    timeout: int = 60  # seconds
    extra_params: Dict[str, Any] = None

    def __post_init__(self):
        if self.extra_params is None:
            self.extra_params = {}

    def __repr__(self) -> str:
        """Safe repr that masks API key to prevent accidental exposure in logs."""
        return (
            f"AudioProviderConfig(api_key={_mask_secret(self.api_key)}, "
            f"base_url={self.base_url!r}, timeout={self.timeout})"
        )


@dataclass
class AudioGenerationResult:
    """Result from audio generation"""
    success: bool
    audio_data: Optional[bytes] = None
    audio_url: Optional[str] = None
    format: str = "mp3"
    duration: Optional[float] = None
    cost: Optional[float] = None
    error_message: Optional[str] = None
    provider_metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.provider_metadata is None:
            self.provider_metadata = {}


class AudioProvider(ABC):
    """
    Abstract base class for speech providers.

    Narration chunks are generated through this interface; the batch
    scheduler retries a chunk when `generate_speech` raises.
    """

    def __init__(self, config: AudioProviderConfig):
        self.config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier"""
        pass

    @abstractmethod
    async def generate_speech(
        self,
        text: str,
        voice_id: Optional[str] = None,
        speed: float = 1.0,
        **kwargs
    ) -> AudioGenerationResult:
        """
        Generate speech from text.

        Args:
            text: Text to convert to speech
            voice_id: Voice identifier (provider-specific)
            speed: Speech speed multiplier (1.0 = normal)
            **kwargs: Provider-specific parameters

        Returns:
            AudioGenerationResult with audio bytes and metadata
        """
        pass

    @abstractmethod
    async def list_voices(self) -> list:
        """List available voices as dicts"""
        pass

    @abstractmethod
    def estimate_cost(self, text: str, **kwargs) -> float:
        """Estimated cost in USD for speaking `text`"""
        pass


# ============================================================
# Storage
# ============================================================

@dataclass
class StorageProviderConfig:
    """Configuration for storage provider"""
    bucket: Optional[str] = None
    base_path: str = "./artifacts"
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    timeout: int = 120  # seconds
    extra_params: Dict[str, Any] = None

    def __post_init__(self):
        if self.extra_params is None:
            self.extra_params = {}

    def __repr__(self) -> str:
        return (
            f"StorageProviderConfig(bucket={self.bucket!r}, base_path={self.base_path!r}, "
            f"base_url={self.base_url!r}, api_key={_mask_secret(self.api_key)})"
        )


@dataclass
class StorageResult:
    """Result from storage operation"""
    success: bool
    file_url: Optional[str] = None
    file_path: Optional[str] = None
    size_bytes: Optional[int] = None
    content_type: Optional[str] = None
    error_message: Optional[str] = None
    provider_metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.provider_metadata is None:
            self.provider_metadata = {}


class StorageProvider(ABC):
    """
    Abstract base class for durable storage.

    Upload overwrites an existing object at the same remote path.
    """

    def __init__(self, config: StorageProviderConfig):
        self.config = config

    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name identifier"""
        pass

    @abstractmethod
    async def upload_file(
        self,
        local_path: str,
        remote_path: str,
        content_type: Optional[str] = None,
        **kwargs
    ) -> StorageResult:
        """
        Upload file to storage.

        Args:
            local_path: Path to local file
            remote_path: Destination path in storage
            content_type: MIME type sent with the object

        Returns:
            StorageResult with public file URL and metadata
        """
        pass

    @abstractmethod
    async def upload_bytes(
        self,
        data: bytes,
        remote_path: str,
        content_type: Optional[str] = None,
        **kwargs
    ) -> StorageResult:
        """Upload an in-memory payload (e.g. a generated speech chunk)"""
        pass

    @abstractmethod
    async def get_url(self, remote_path: str, **kwargs) -> str:
        """Public URL for a stored object"""
        pass

    @abstractmethod
    async def delete_file(self, remote_path: str, **kwargs) -> bool:
        """Delete an object. Returns True if it was removed."""
        pass


# ============================================================
# Rendering
# ============================================================

@dataclass
class RenderProviderConfig:
    """Configuration for a remote rendering service"""
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    stage: str = "stage"
    timeout: int = 30  # seconds
    extra_params: Dict[str, Any] = None

    def __post_init__(self):
        if self.extra_params is None:
            self.extra_params = {}

    def __repr__(self) -> str:
        return (
            f"RenderProviderConfig(api_key={_mask_secret(self.api_key)}, "
            f"base_url={self.base_url!r}, stage={self.stage!r}, timeout={self.timeout})"
        )


class RenderProvider(ABC):
    """
    Abstract base class for remote timeline renderers.

    A submission is fire-and-forget: completion arrives through the callback
    URL in the payload or by polling `check_status`.
    """

    def __init__(self, config: RenderProviderConfig):
        self.config = config

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def submit(self, payload: Dict[str, Any]) -> RenderJob:
        """
        Submit a render document.

        Raises:
            RenderSubmissionError: If the service rejects the payload
        """
        pass

    @abstractmethod
    async def check_status(self, job_id: str) -> RenderJob:
        """Current state of a submitted render"""
        pass

    @abstractmethod
    async def probe_asset(self, url: str) -> bool:
        """True if the asset at `url` is reachable"""
        pass
