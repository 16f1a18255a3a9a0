"""Core components - subtitle timing, batch orchestration, audio assembly and timeline layout"""

from .errors import (
    StudioAssemblyError,
    MalformedInput,
    MalformedCueError,
    TaskFailure,
    DeadlineExceeded,
    PartialBatchFailure,
    AssemblyError,
    ChunkDownloadError,
    MediaToolNotFound,
    ExternalProcessFailure,
    UploadFailure,
    ProviderNotConfigured,
    RenderServiceError,
    RenderSubmissionError,
    InvalidTimelineError,
    SpeechGenerationError,
)

# Note: MediaAssemblyService is NOT imported here to keep provider imports lazy
# Import it directly: from core.service import MediaAssemblyService

__all__ = [
    "StudioAssemblyError",
    "MalformedInput",
    "MalformedCueError",
    "TaskFailure",
    "DeadlineExceeded",
    "PartialBatchFailure",
    "AssemblyError",
    "ChunkDownloadError",
    "MediaToolNotFound",
    "ExternalProcessFailure",
    "UploadFailure",
    "ProviderNotConfigured",
    "RenderServiceError",
    "RenderSubmissionError",
    "InvalidTimelineError",
    "SpeechGenerationError",
]
