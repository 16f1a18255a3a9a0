"""Data models for the media assembly core"""

from .subtitles import Cue, Segment, ParsedTranscript
from .batch import (
    RetryPolicy,
    BatchTask,
    Success,
    Failure,
    BatchResult,
    BatchReport,
)
from .audio import (
    TextChunk,
    AudioChunkSet,
    AssembledTrack,
    AssemblyResult,
    NarrationResult,
)
from .render import (
    AssetType,
    Effect,
    RenderStatus,
    Asset,
    Clip,
    Track,
    Timeline,
    RenderOutput,
    RenderJob,
)

__all__ = [
    # Subtitles
    "Cue",
    "Segment",
    "ParsedTranscript",
    # Batch
    "RetryPolicy",
    "BatchTask",
    "Success",
    "Failure",
    "BatchResult",
    "BatchReport",
    # Audio
    "TextChunk",
    "AudioChunkSet",
    "AssembledTrack",
    "AssemblyResult",
    "NarrationResult",
    # Render
    "AssetType",
    "Effect",
    "RenderStatus",
    "Asset",
    "Clip",
    "Track",
    "Timeline",
    "RenderOutput",
    "RenderJob",
]
