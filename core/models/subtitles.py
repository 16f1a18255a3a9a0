"""
Subtitle models

Cues are produced by parsing a transcription collaborator's SRT output and are
replaced, never edited, by the resegmenter.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from core.errors import MalformedCueError


@dataclass(frozen=True)
class Cue:
    """
    One timed subtitle unit.

    Attributes:
        index: 1-based position within the transcript
        start_ms: Start time in milliseconds
        end_ms: End time in milliseconds
        text_lines: Text lines as they appear in the SRT block
    """
    index: int
    start_ms: int
    end_ms: int
    text_lines: Tuple[str, ...] = ()

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms

    @property
    def text(self) -> str:
        return " ".join(line.strip() for line in self.text_lines if line.strip())

    @property
    def words(self) -> List[str]:
        return self.text.split()


@dataclass
class Segment:
    """A word-bounded fragment derived from a cue during resegmentation"""
    words: List[str] = field(default_factory=list)

    @property
    def text(self) -> str:
        return " ".join(self.words)

    def __len__(self) -> int:
        return len(self.words)


@dataclass
class ParsedTranscript:
    """Result of parsing SRT text: the usable cues plus the blocks that were skipped"""
    cues: List[Cue] = field(default_factory=list)
    skipped: List[MalformedCueError] = field(default_factory=list)
