"""CLI command tests using Click's CliRunner

Tests argument parsing, help text, JSON output, and basic execution paths
for all CLI commands (no real API calls and no ffmpeg).
"""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from click.testing import CliRunner

from cli import main
from core.audio_assembly import AudioChunkAssembler
from tests.mocks.fixtures import fake_download_chunks, make_media_tool, make_srt


async def _download(self, job, urls):
    return await fake_download_chunks(job, urls)


# ============================================================
# Fixtures
# ============================================================

@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def isolated_runner():
    """Click CliRunner with isolated filesystem for file operations"""
    runner = CliRunner()
    with runner.isolated_filesystem():
        yield runner


@pytest.fixture
def no_ffmpeg():
    """Replace ffmpeg and chunk downloads for every assembler the CLI builds"""
    tool = make_media_tool(duration=3.5)
    with patch("core.service.MediaTool", return_value=tool), \
            patch("cli.assemble.MediaTool", return_value=tool), \
            patch.object(AudioChunkAssembler, "download_chunks", _download):
        yield tool


# ============================================================
# Main CLI Group
# ============================================================

class TestMainGroup:
    """Tests for the top-level CLI group."""

    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Studio Assembly" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(main, ["nonexistent"])
        assert result.exit_code != 0

    def test_all_commands_registered(self, runner):
        result = runner.invoke(main, ["--help"])
        expected_commands = [
            "resegment", "chunk-text", "narrate", "assemble",
            "timeline", "render", "render-status", "status", "secrets",
        ]
        for cmd in expected_commands:
            assert cmd in result.output, f"Command '{cmd}' not found in help output"


# ============================================================
# Resegment / chunk-text
# ============================================================

class TestResegmentCommand:

    def test_resegment_file(self, isolated_runner):
        Path("in.srt").write_text(
            make_srt([(1, 0, 2000, "one two three four five six seven")]), encoding="utf-8"
        )

        result = isolated_runner.invoke(main, ["resegment", "in.srt", "-o", "out.srt"])

        assert result.exit_code == 0
        output = Path("out.srt").read_text(encoding="utf-8")
        assert output == (
            "1\n00:00:00,000 --> 00:00:01,000\none two three four\n\n"
            "2\n00:00:01,000 --> 00:00:02,000\nfive six seven\n"
        )

    def test_max_words_option(self, isolated_runner):
        Path("in.srt").write_text(make_srt([(1, 0, 3000, "a b c d e f")]), encoding="utf-8")

        result = isolated_runner.invoke(main, ["resegment", "in.srt", "-w", "2", "-o", "out.srt"])

        assert result.exit_code == 0
        assert Path("out.srt").read_text(encoding="utf-8").count("-->") == 3

    def test_rejects_zero_words(self, isolated_runner):
        Path("in.srt").write_text(make_srt([(1, 0, 1000, "a")]), encoding="utf-8")
        result = isolated_runner.invoke(main, ["resegment", "in.srt", "-w", "0"])
        assert result.exit_code == 2


class TestChunkTextCommand:

    def test_json(self, isolated_runner):
        Path("script.txt").write_text("First sentence here. Second sentence here.", encoding="utf-8")

        result = isolated_runner.invoke(main, ["chunk-text", "script.txt", "--max-chars", "25", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data == [
            {"index": 0, "text": "First sentence here."},
            {"index": 1, "text": "Second sentence here."},
        ]

    def test_table(self, isolated_runner):
        result = isolated_runner.invoke(main, ["chunk-text", "-"], input="Some narration.")
        assert result.exit_code == 0
        assert "1 chunk(s)" in result.output


# ============================================================
# Narrate / assemble
# ============================================================

class TestNarrateCommand:

    def test_help(self, runner):
        result = runner.invoke(main, ["narrate", "--help"])
        assert result.exit_code == 0
        assert "--provider" in result.output
        assert "--allow-partial" in result.output

    def test_mock_narration(self, isolated_runner, no_ffmpeg):
        Path("script.txt").write_text("A short narration. With two sentences.", encoding="utf-8")

        result = isolated_runner.invoke(main, ["narrate", "script.txt", "--mock", "--delay", "0"])

        assert result.exit_code == 0, result.output
        assert "Narration ready" in result.output
        assert list(Path("artifacts/storage/user_local/audio").glob("*.mp3"))
        no_ffmpeg.compress.assert_awaited_once()

    def test_empty_text(self, isolated_runner):
        result = isolated_runner.invoke(main, ["narrate", "-", "--mock"], input="   ")
        assert result.exit_code == 2
        assert "empty" in result.output

    def test_voice_required_for_minimax(self, isolated_runner):
        result = isolated_runner.invoke(main, ["narrate", "-", "-p", "minimax"], input="Hello.")
        assert result.exit_code == 2
        assert "voice" in result.output

    def test_unknown_provider(self, runner):
        result = runner.invoke(main, ["narrate", "-", "-p", "espeak"], input="Hello.")
        assert result.exit_code == 2


class TestAssembleCommand:

    def test_requires_urls(self, isolated_runner):
        result = isolated_runner.invoke(main, ["assemble"])
        assert result.exit_code == 2

    def test_local_output(self, isolated_runner, no_ffmpeg):
        Path("chunks.txt").write_text(
            "https://cdn.example.com/0.mp3\n\nhttps://cdn.example.com/1.mp3\n", encoding="utf-8"
        )

        result = isolated_runner.invoke(main, ["assemble", "--from-file", "chunks.txt", "-o", "out.mp3"])

        assert result.exit_code == 0, result.output
        assert "Assembled 2 chunk(s)" in result.output
        assert Path("out.mp3").exists()
        no_ffmpeg.concat.assert_awaited_once()

    def test_ffmpeg_failure_exit_code(self, isolated_runner):
        failing = make_media_tool(fail=True)
        with patch("cli.assemble.MediaTool", return_value=failing), \
                patch.object(AudioChunkAssembler, "download_chunks", _download):
            result = isolated_runner.invoke(main, ["assemble", "https://cdn.example.com/0.mp3"])

        assert result.exit_code == 1
        assert "ffmpeg exited with code 1" in result.output
        assert "Invalid data" in result.output


# ============================================================
# Timeline / render
# ============================================================

class TestTimelineCommands:

    def test_timeline_json(self, isolated_runner):
        result = isolated_runner.invoke(main, [
            "timeline", "--mock", "--json",
            "-i", "https://cdn.example.com/1.png",
            "-i", "https://cdn.example.com/2.png",
            "-a", "https://cdn.example.com/n.mp3",
            "-d", "120",
        ])

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        tracks = payload["timeline"]["tracks"]
        assert len(tracks) == 2
        assert tracks[1]["clips"][0]["asset"]["type"] == "audio"
        assert payload["output"]["format"] == "mp4"

    def test_timeline_requires_duration(self, runner):
        result = runner.invoke(main, ["timeline", "-a", "x.mp3"])
        assert result.exit_code == 2

    def test_render_mock(self, isolated_runner):
        result = isolated_runner.invoke(main, [
            "render", "--mock", "--json",
            "-i", "https://cdn.example.com/1.png",
            "-a", "https://cdn.example.com/n.mp3",
            "-d", "30",
        ])

        assert result.exit_code == 0, result.output
        # submission is logged to stderr, which the runner may mix into output
        assert '"job_id": "mock_render_1"' in result.output
        assert '"status": "queued"' in result.output

    def test_render_rejects_zero_duration(self, runner):
        result = runner.invoke(main, ["render", "--mock", "-a", "x.mp3", "-d", "0"])
        assert result.exit_code == 2

    def test_render_status_unknown_job(self, isolated_runner):
        result = isolated_runner.invoke(main, ["render-status", "missing", "--mock"])

        assert result.exit_code == 0
        assert "failed" in result.output


# ============================================================
# Status / secrets
# ============================================================

class TestStatusCommand:

    def test_json(self, isolated_runner):
        tool = MagicMock()
        tool.check_installed = AsyncMock(return_value={"installed": True, "path": "ffmpeg", "version": "6.1"})

        with patch("cli.status.MediaTool", return_value=tool), \
                patch("cli.status.list_api_keys", return_value={"SHOTSTACK_API_KEY": "env"}):
            result = isolated_runner.invoke(main, ["status", "--json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["ffmpeg"]["installed"] is True
        assert data["keys"] == {"SHOTSTACK_API_KEY": "env"}
        assert data["settings"]["batch_size"] == 5


class TestSecretsCommand:

    def test_list(self, runner):
        with patch("cli.secrets.list_api_keys", return_value={"OPENAI_API_KEY": "keychain"}):
            result = runner.invoke(main, ["secrets", "list"])

        assert result.exit_code == 0
        assert "OPENAI_API_KEY" in result.output

    def test_set_normalizes_name(self, runner):
        with patch("cli.secrets.set_api_key", return_value=True) as set_key:
            result = runner.invoke(main, ["secrets", "set", "shotstack", "--value", "abc"])

        assert result.exit_code == 0
        set_key.assert_called_once_with("SHOTSTACK_API_KEY", "abc")
