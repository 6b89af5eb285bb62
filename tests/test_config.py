"""Tests for config.json loading and creation."""

from __future__ import annotations

import json

from airhid.config import (
    CONFIG_ENV_VAR,
    DEFAULT_HOST,
    DEFAULT_PORT,
    Config,
    default_config_path,
    generate_token,
    load_or_init,
    save,
)


class TestGenerateToken:
    def test_is_32_hex_chars(self):
        token = generate_token()
        assert len(token) == 32
        int(token, 16)

    def test_tokens_differ(self):
        assert generate_token() != generate_token()


class TestLoadOrInit:
    def test_creates_missing_file(self, tmp_path):
        path = tmp_path / "config.json"
        config = load_or_init(path)
        assert config.host == DEFAULT_HOST
        assert config.port == DEFAULT_PORT
        assert config.ws_port == 0
        assert json.loads(path.read_text())["token"] == config.token

    def test_reuses_existing_token(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"token": "abc", "host": "127.0.0.1", "port": 8080}))
        config = load_or_init(path)
        assert config == Config(token="abc", host="127.0.0.1", port=8080)

    def test_same_token_across_loads(self, tmp_path):
        path = tmp_path / "config.json"
        assert load_or_init(path).token == load_or_init(path).token

    def test_missing_fields_use_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"token": "abc"}))
        config = load_or_init(path)
        assert config.host == DEFAULT_HOST
        assert config.port == DEFAULT_PORT

    def test_empty_token_regenerated(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"token": "", "port": 9000}))
        config = load_or_init(path)
        assert len(config.token) == 32

    def test_corrupt_file_replaced(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        config = load_or_init(path)
        assert json.loads(path.read_text())["token"] == config.token

    def test_unwritable_location_still_returns_config(self, tmp_path):
        path = tmp_path / "missing-dir" / "config.json"
        config = load_or_init(path)
        assert len(config.token) == 32
        assert not path.exists()


class TestSave:
    def test_round_trip(self, tmp_path):
        path = tmp_path / "config.json"
        assert save(Config(token="t", ws_port=5001), path) is True
        assert load_or_init(path).ws_port == 5001


class TestDefaultPath:
    def test_env_override(self, monkeypatch, tmp_path):
        target = tmp_path / "elsewhere.json"
        monkeypatch.setenv(CONFIG_ENV_VAR, str(target))
        assert default_config_path() == target

    def test_cwd_fallback(self, monkeypatch, tmp_path):
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        assert default_config_path() == tmp_path / "config.json"
