"""Unit tests for narration text chunking"""

import pytest

from core.text_chunking import DEFAULT_MAX_CHUNK_LENGTH, chunk_text


class TestChunkText:

    def test_short_text_single_chunk(self):
        chunks = chunk_text("  Just one sentence.  ")

        assert len(chunks) == 1
        assert chunks[0].index == 0
        assert chunks[0].text == "Just one sentence."

    def test_prefers_sentence_boundary(self):
        chunks = chunk_text("Hello world. This is a test.", max_length=15)
        assert [c.text for c in chunks] == ["Hello world.", "This is a", "test."]

    def test_line_break_is_a_boundary(self):
        chunks = chunk_text("line one\nline two", max_length=12)
        assert [c.text for c in chunks] == ["line one", "line two"]

    def test_question_and_exclamation_boundaries(self):
        chunks = chunk_text("Why not? Because! Then more words", max_length=20)
        assert chunks[0].text == "Why not? Because!"

    def test_hard_cut_without_spaces(self):
        chunks = chunk_text("abcdefghij", max_length=4)
        assert [c.text for c in chunks] == ["abcd", "efgh", "ij"]

    def test_chunks_never_exceed_limit(self):
        text = " ".join(f"Sentence number {i} has some words." for i in range(200))
        chunks = chunk_text(text, max_length=120)

        assert all(c.char_count <= 120 for c in chunks)
        assert [c.index for c in chunks] == list(range(len(chunks)))
        assert " ".join(c.text for c in chunks).split() == text.split()

    def test_empty_and_whitespace(self):
        assert chunk_text("") == []
        assert chunk_text("   \n  ") == []

    def test_default_limit(self):
        text = "word " * 1000
        chunks = chunk_text(text)

        assert DEFAULT_MAX_CHUNK_LENGTH == 2800
        assert len(chunks) == 2
        assert chunks[0].char_count <= 2800

    def test_rejects_non_positive_limit(self):
        with pytest.raises(ValueError):
            chunk_text("anything", max_length=0)
