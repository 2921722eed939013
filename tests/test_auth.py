"""Tests for minimax_lm.auth.ApiKeyStore."""

from __future__ import annotations

import json
import os
import stat

import pytest

from minimax_lm.auth import ApiKeyStore

ENV = "MINIMAX_LM_TEST_KEY"


@pytest.fixture
def path(tmp_path):
    return tmp_path / "nested" / "credentials.json"


class TestStorage:
    """Keys round-trip through the credentials file."""

    def test_empty_store(self, path):
        assert ApiKeyStore(path).get_api_key() is None

    def test_store_and_read_back(self, path):
        store = ApiKeyStore(path)
        store.store_api_key("  sk-123  ")
        assert store.get_api_key() == "sk-123"
        assert json.loads(path.read_text()) == {"apiKey": "sk-123"}

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_file_is_owner_only(self, path):
        ApiKeyStore(path).store_api_key("sk")
        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_delete(self, path):
        store = ApiKeyStore(path)
        store.store_api_key("sk")
        store.delete_api_key()
        assert store.get_api_key() is None
        store.delete_api_key()

    def test_unreadable_file(self, path, caplog):
        path.parent.mkdir(parents=True)
        path.write_text("{broken")
        with caplog.at_level("WARNING"):
            assert ApiKeyStore(path).get_api_key() is None
        assert "unreadable" in caplog.text

    def test_blank_stored_value(self, path):
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"apiKey": "   "}))
        assert ApiKeyStore(path).get_api_key() is None


class TestEnvironment:
    """A non-blank environment key wins over the file."""

    def test_env_takes_precedence(self, path, monkeypatch):
        store = ApiKeyStore(path, env_var=ENV)
        store.store_api_key("sk-file")
        monkeypatch.setenv(ENV, " sk-env ")
        assert store.get_api_key() == "sk-env"

    def test_blank_env_falls_back(self, path, monkeypatch):
        store = ApiKeyStore(path, env_var=ENV)
        store.store_api_key("sk-file")
        monkeypatch.setenv(ENV, "  ")
        assert store.get_api_key() == "sk-file"


class TestPrompt:
    """Prompted keys are stored; blank answers are not."""

    def test_prompt_stores_answer(self, path):
        store = ApiKeyStore(path, prompt=lambda: " sk-typed ")
        assert store.get_or_prompt_api_key() == "sk-typed"
        assert store.get_api_key() == "sk-typed"

    @pytest.mark.parametrize("answer", [None, "", "   "])
    def test_blank_answer_stores_nothing(self, path, answer):
        store = ApiKeyStore(path, prompt=lambda: answer)
        assert store.get_or_prompt_api_key() is None
        assert not path.exists()

    def test_stored_key_skips_prompt(self, path):
        def boom():
            raise AssertionError("prompted")

        store = ApiKeyStore(path, prompt=boom)
        store.store_api_key("sk")
        assert store.get_or_prompt_api_key() == "sk"
