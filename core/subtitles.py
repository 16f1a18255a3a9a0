"""
Subtitle resegmentation.

Transcription engines emit long cues that are hard to read on short-form
video. This module splits every cue into word-bounded segments of at most
`max_words_per_line` words and distributes the cue's time span across them.

Usage:
    from core.subtitles import reformat_srt

    srt_text = reformat_srt(raw_srt, max_words_per_line=4)
"""

import logging
import re
from typing import List, Sequence

from core.errors import MalformedCueError
from core.models.subtitles import Cue, ParsedTranscript, Segment

logger = logging.getLogger(__name__)

MAX_WORDS_PER_LINE = 4
MIN_SEGMENT_DURATION_MS = 100
TIMESTAMP_SEPARATOR = "-->"

_BLOCK_SPLIT = re.compile(r"\r?\n\s*\r?\n")


# ============================================================
# Timestamps
# ============================================================

def parse_timestamp_ms(value: str) -> int:
    """
    Convert an SRT timestamp (HH:MM:SS,mmm) to milliseconds.

    Raises:
        MalformedCueError: If the separator is missing or a part is not numeric
    """
    value = value.strip()
    time_part, sep, ms_part = value.partition(",")
    if not sep:
        raise MalformedCueError(f"Malformed timestamp (no comma): {value!r}")

    parts = time_part.split(":")
    if len(parts) != 3:
        raise MalformedCueError(f"Malformed timestamp (expected HH:MM:SS): {value!r}")

    try:
        hours, minutes, seconds = (int(p) for p in parts)
        millis = int(ms_part)
    except ValueError:
        raise MalformedCueError(f"Malformed timestamp (non-numeric part): {value!r}")

    return hours * 3_600_000 + minutes * 60_000 + seconds * 1000 + millis


def format_timestamp_ms(total_ms: float) -> str:
    """Convert milliseconds to an SRT timestamp. Negative values clamp to zero."""
    total_ms = max(0, int(round(total_ms)))
    millis = total_ms % 1000
    total_seconds = total_ms // 1000
    seconds = total_seconds % 60
    total_minutes = total_seconds // 60
    minutes = total_minutes % 60
    hours = total_minutes // 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d},{millis:03d}"


# ============================================================
# SRT grammar
# ============================================================

def parse_block(block: str) -> Cue:
    """
    Parse one SRT block into a Cue.

    Raises:
        MalformedCueError: For a bad index, timestamp line or negative duration
    """
    lines = [line.rstrip("\r") for line in block.split("\n")]
    if len(lines) < 2:
        raise MalformedCueError("Not enough lines in block", block)

    index_line, timestamp_line = lines[0].strip(), lines[1]
    if not index_line.isdigit():
        raise MalformedCueError(f"Non-numeric index: {index_line!r}", block)
    if TIMESTAMP_SEPARATOR not in timestamp_line:
        raise MalformedCueError(f"Timestamp line has no '-->': {timestamp_line!r}", block)

    start_str, _, end_str = timestamp_line.partition(TIMESTAMP_SEPARATOR)
    try:
        start_ms = parse_timestamp_ms(start_str)
        end_ms = parse_timestamp_ms(end_str)
    except MalformedCueError as e:
        raise MalformedCueError(e.reason, block)

    if end_ms < start_ms:
        raise MalformedCueError(
            f"Negative duration for cue starting {format_timestamp_ms(start_ms)}", block
        )

    return Cue(
        index=int(index_line),
        start_ms=start_ms,
        end_ms=end_ms,
        text_lines=tuple(lines[2:]),
    )


def parse_srt(text: str) -> ParsedTranscript:
    """
    Parse SRT text into cues. Malformed blocks are skipped and reported,
    never aborting the rest of the transcript.
    """
    transcript = ParsedTranscript()
    if not text:
        return transcript

    text = text.lstrip("\ufeff").strip()
    for block in _BLOCK_SPLIT.split(text):
        if not block.strip():
            continue
        try:
            transcript.cues.append(parse_block(block.strip("\r\n")))
        except MalformedCueError as e:
            logger.warning(
                "Skipping malformed SRT block: %s (%s)",
                e.reason,
                block.replace("\n", "<NL>"),
            )
            transcript.skipped.append(e)

    return transcript


def format_srt(cues: Sequence[Cue]) -> str:
    """Render cues in SRT grammar. Non-empty output always ends with a newline."""
    blocks = []
    for cue in cues:
        timestamp = (
            f"{format_timestamp_ms(cue.start_ms)} {TIMESTAMP_SEPARATOR} "
            f"{format_timestamp_ms(cue.end_ms)}"
        )
        blocks.append("\n".join([str(cue.index), timestamp, *cue.text_lines]))

    output = "\n\n".join(blocks)
    if output and not output.endswith("\n"):
        output += "\n"
    return output


# ============================================================
# Resegmentation
# ============================================================

def split_words(words: Sequence[str], max_words_per_line: int) -> List[Segment]:
    """Partition words into consecutive groups of `max_words_per_line`"""
    return [
        Segment(words=list(words[i:i + max_words_per_line]))
        for i in range(0, len(words), max_words_per_line)
    ]


def _place_segments(cue: Cue, segments: List[Segment]) -> List[Cue]:
    """
    Distribute the cue's time span over its segments.

    Returned cues carry index 0; numbering happens once all cues are placed.
    """
    count = len(segments)
    nominal = cue.duration_ms / count
    placed: List[Cue] = []
    cursor = cue.start_ms

    for i, segment in enumerate(segments):
        is_last = i == count - 1
        start = cursor

        if is_last:
            end = cue.end_ms
        else:
            end = int(round(start + nominal))
            if end - start < MIN_SEGMENT_DURATION_MS:
                end = start + MIN_SEGMENT_DURATION_MS
            end = min(end, cue.end_ms)

        if end <= start:
            logger.warning(
                "Ran out of time for cue %d at segment %d/%d; dropping %d segment(s)",
                cue.index, i + 1, count, count - i,
            )
            break

        placed.append(Cue(index=0, start_ms=start, end_ms=end, text_lines=(segment.text,)))
        cursor = end

        if cursor >= cue.end_ms and not is_last:
            logger.warning(
                "Ran out of time for cue %d after segment %d/%d; dropping %d segment(s)",
                cue.index, i + 1, count, count - i - 1,
            )
            break

    return placed


def resegment(cues: Sequence[Cue], max_words_per_line: int = MAX_WORDS_PER_LINE) -> List[Cue]:
    """
    Split cues into segments of at most `max_words_per_line` words.

    Each segment receives an equal share of the original cue's duration; the
    last segment always ends exactly at the original end time. Output cues are
    renumbered from 1 and keep input order.

    Args:
        cues: Cues in playback order
        max_words_per_line: Maximum words per emitted cue

    Returns:
        Derived cues
    """
    if max_words_per_line < 1:
        raise ValueError("max_words_per_line must be at least 1")

    output: List[Cue] = []
    for cue in cues:
        if cue.duration_ms < 0:
            logger.warning("Skipping cue %d with negative duration", cue.index)
            continue

        words = cue.words
        if not words:
            continue

        for placed in _place_segments(cue, split_words(words, max_words_per_line)):
            output.append(Cue(
                index=len(output) + 1,
                start_ms=placed.start_ms,
                end_ms=placed.end_ms,
                text_lines=placed.text_lines,
            ))

    return output


def reformat_srt(text: str, max_words_per_line: int = MAX_WORDS_PER_LINE) -> str:
    """Parse, resegment and re-emit an SRT document"""
    transcript = parse_srt(text)
    if transcript.skipped:
        logger.info("Skipped %d malformed block(s)", len(transcript.skipped))
    return format_srt(resegment(transcript.cues, max_words_per_line))
