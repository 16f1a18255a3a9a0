"""Unit tests for settings and API key lookup"""

from unittest.mock import patch

import pytest
from keyring.errors import KeyringError, PasswordDeleteError
from pydantic import ValidationError

from core import secrets
from core.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        settings = Settings(_env_file=None)

        assert settings.batch_size == 5
        assert settings.inter_batch_delay == 5.0
        assert settings.max_words_per_line == 4
        assert settings.chunk_max_chars == 2800
        assert settings.scratch_root == "temp-audio-processing"
        assert settings.render_backend == "mock"

    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("STUDIO_BATCH_SIZE", "3")
        monkeypatch.setenv("STUDIO_ENABLE_ZOOM", "false")

        settings = Settings(_env_file=None)

        assert settings.batch_size == 3
        assert settings.enable_zoom is False

    def test_env_file(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text("STUDIO_QUALITY=low\nSTUDIO_USER_ID=99\n", encoding="utf-8")

        settings = Settings(_env_file=str(env_file))

        assert settings.quality == "low"
        assert settings.user_id == "99"

    @pytest.mark.parametrize("field, value", [
        ("batch_size", 0),
        ("inter_batch_delay", -1),
        ("quality", "ultra"),
        ("storage_backend", "ftp"),
    ])
    def test_validation(self, field, value):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})

    def test_retry_policy(self):
        policy = Settings(_env_file=None, retry_attempts=3, retry_base_delay=0.5).retry_policy
        assert (policy.max_attempts, policy.base_delay) == (3, 0.5)


class TestSecrets:

    def test_keychain_first(self, monkeypatch):
        monkeypatch.setenv("SHOTSTACK_API_KEY", "from-env")
        with patch("keyring.get_password", return_value="from-keychain"):
            assert secrets.get_api_key("SHOTSTACK_API_KEY") == "from-keychain"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("SHOTSTACK_API_KEY", "from-env")
        with patch("keyring.get_password", side_effect=KeyringError("locked")):
            assert secrets.get_api_key("SHOTSTACK_API_KEY") == "from-env"
            assert secrets.get_api_key("SHOTSTACK_API_KEY", fallback_to_env=False) is None

    def test_set_failure(self):
        with patch("keyring.set_password", side_effect=KeyringError("no backend")):
            assert secrets.set_api_key("OPENAI_API_KEY", "x") is False

    def test_delete_missing(self):
        with patch("keyring.delete_password", side_effect=PasswordDeleteError()):
            assert secrets.delete_api_key("OPENAI_API_KEY") is False

    def test_list_statuses(self, monkeypatch):
        for key in secrets.KNOWN_KEYS:
            monkeypatch.delenv(key, raising=False)
        monkeypatch.setenv("MINIMAX_API_KEY", "m")

        def fake_get(service, key):
            return "k" if key == "OPENAI_API_KEY" else None

        with patch("keyring.get_password", side_effect=fake_get):
            status = secrets.list_api_keys()

        assert status["OPENAI_API_KEY"] == "keychain"
        assert status["MINIMAX_API_KEY"] == "env"
        assert status["SHOTSTACK_API_KEY"] == "not_set"

    def test_import_known_keys_only(self, tmp_path):
        env_file = tmp_path / ".env"
        env_file.write_text(
            "SHOTSTACK_API_KEY=abc\nUNRELATED=1\nOPENAI_API_KEY=\n", encoding="utf-8"
        )

        with patch.object(secrets, "set_api_key", return_value=True) as set_key:
            results = secrets.import_from_env_file(str(env_file))

        assert results == {"SHOTSTACK_API_KEY": True}
        set_key.assert_called_once_with("SHOTSTACK_API_KEY", "abc")

    def test_import_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            secrets.import_from_env_file(str(tmp_path / "nope.env"))
