"""
Audio Assembly Models

Defines the data structures that flow through the narration pipeline:
- Text chunks handed to speech providers
- Remote chunk sets in playback order
- The locally assembled track and the uploaded result
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional


@dataclass
class TextChunk:
    """A slice of narration text small enough for a single TTS request"""
    index: int
    text: str

    @property
    def char_count(self) -> int:
        return len(self.text)


@dataclass
class AudioChunkSet:
    """
    Remote audio chunks forming one logical track.

    Order of `urls` is playback order.
    """
    urls: List[str] = field(default_factory=list)
    provider: Optional[str] = None
    voice: Optional[str] = None

    def __len__(self) -> int:
        return len(self.urls)

    def __iter__(self) -> Iterator[str]:
        return iter(self.urls)


@dataclass
class AssembledTrack:
    """Output of one assembly job before upload"""
    local_path: Path
    duration_seconds: float
    size_bytes: int

    @property
    def size_mb(self) -> float:
        return self.size_bytes / (1024 * 1024)


@dataclass
class AssemblyResult:
    """What callers receive once the assembled track is stored durably"""
    url: str
    duration_seconds: float
    size_bytes: int
    chunks_processed: int
    destination: str = ""

    @property
    def size_mb(self) -> float:
        return round(self.size_bytes / (1024 * 1024), 2)


@dataclass
class NarrationResult:
    """Full narration run: chunk generation statistics plus the assembled track"""
    track: AssemblyResult
    chunks: AudioChunkSet = field(default_factory=AudioChunkSet)
    failed_chunks: List[int] = field(default_factory=list)
    total_chunks: int = 0

    @property
    def chunk_urls(self) -> List[str]:
        return self.chunks.urls

    @property
    def complete(self) -> bool:
        return not self.failed_chunks
