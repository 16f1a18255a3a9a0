"""
Narration text chunking.

Speech providers cap request size, so long narration is split into chunks of
at most `max_length` characters. Splits prefer the last sentence boundary in
the window, then the last space, and only cut mid-word when neither exists.
"""

import re
from typing import List

from core.models.audio import TextChunk

DEFAULT_MAX_CHUNK_LENGTH = 2800

# A sentence end followed by whitespace, or a run of line breaks
_SENTENCE_BOUNDARY = re.compile(r"[.?!]\s+|[\n\r]+")


def _split_point(window: str) -> int:
    """Return the index one past the chosen split in `window`, or 0 if none"""
    last_end = 0
    for match in _SENTENCE_BOUNDARY.finditer(window):
        # Keep the punctuation with the preceding sentence
        last_end = match.start() + 1
    if last_end > 0:
        return last_end

    space = window.rfind(" ")
    if space > 0:
        return space
    return 0


def chunk_text(text: str, max_length: int = DEFAULT_MAX_CHUNK_LENGTH) -> List[TextChunk]:
    """
    Split text into chunks no longer than `max_length` characters.

    Chunks are trimmed; empty chunks are dropped. Indices follow text order.
    """
    if max_length < 1:
        raise ValueError("max_length must be at least 1")

    pieces: List[str] = []
    remaining = text or ""

    while remaining:
        if len(remaining) <= max_length:
            pieces.append(remaining)
            break

        window = remaining[:max_length]
        split_at = _split_point(window)
        if split_at <= 0:
            split_at = max_length

        pieces.append(remaining[:split_at])
        remaining = remaining[split_at:]

    chunks = []
    for piece in pieces:
        piece = piece.strip()
        if piece:
            chunks.append(TextChunk(index=len(chunks), text=piece))
    return chunks
