"""Runtime configuration using pydantic-settings"""

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings

from core.models.batch import RetryPolicy


class Settings(BaseSettings):
    """
    Settings loaded from STUDIO_* environment variables and `.env`.

    API keys are not settings; they are resolved through core.secrets.
    """

    # Batch scheduling
    batch_size: int = Field(5, ge=1)
    inter_batch_delay: float = Field(5.0, ge=0)
    retry_attempts: int = Field(6, ge=1)
    retry_base_delay: float = Field(1.0, ge=0)
    batch_deadline: Optional[float] = Field(None, gt=0)

    # Subtitles and narration text
    max_words_per_line: int = Field(4, ge=1)
    chunk_max_chars: int = Field(2800, ge=1)

    # Media tool and scratch space
    ffmpeg_path: Optional[str] = None
    ffprobe_path: Optional[str] = None
    scratch_root: str = "temp-audio-processing"

    # Storage
    storage_backend: Literal["local", "supabase"] = "local"
    storage_dir: str = "./artifacts/storage"
    supabase_url: str = ""
    supabase_bucket: str = "audio"

    # Speech
    minimax_group_id: Optional[str] = None

    # Rendering
    render_backend: Literal["mock", "shotstack"] = "mock"
    shotstack_stage: Literal["stage", "v1"] = "stage"
    callback_url: Optional[str] = None
    overlay_url: Optional[str] = None
    fallback_image_url: Optional[str] = None
    quality: Literal["low", "high"] = "high"
    enable_zoom: bool = True
    enable_overlay: bool = True

    # Namespacing for uploaded artifacts
    user_id: str = "local"

    class Config:
        env_prefix = "STUDIO_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"

    @property
    def retry_policy(self) -> RetryPolicy:
        return RetryPolicy(max_attempts=self.retry_attempts, base_delay=self.retry_base_delay)
