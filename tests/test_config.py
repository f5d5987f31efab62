"""Tests for sdapi.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from sdapi import SDClient
from sdapi.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, Settings, load_config, load_settings, save_config


class TestLoadSettings:
    def test_defaults(self):
        s = load_settings()
        assert s == Settings(url=DEFAULT_BASE_URL, username="", password="", timeout=DEFAULT_TIMEOUT)

    def test_from_file(self, isolated_config: Path):
        save_config({"server": {"url": "http://gpu:7860", "username": "me", "password": "pw", "timeout": 60}})
        s = load_settings()
        assert s.url == "http://gpu:7860"
        assert s.username == "me"
        assert s.password == "pw"
        assert s.timeout == 60.0
        assert isolated_config.exists()

    def test_env_overrides_file(self, monkeypatch: pytest.MonkeyPatch):
        save_config({"server": {"url": "http://file:7860", "username": "file-user"}})
        monkeypatch.setenv("SDAPI_URL", "http://env:7860")
        monkeypatch.setenv("SDAPI_TIMEOUT", "5")
        s = load_settings()
        assert s.url == "http://env:7860"
        assert s.username == "file-user"
        assert s.timeout == 5.0

    def test_explicit_path(self, tmp_path: Path):
        path = tmp_path / "other.toml"
        path.write_text('[server]\nurl = "http://explicit:1"\n')
        assert load_settings(path).url == "http://explicit:1"

    def test_invalid_timeout(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SDAPI_TIMEOUT", "soon")
        with pytest.raises(ValueError, match="invalid timeout"):
            load_settings()


class TestSaveConfig:
    def test_round_trip(self, tmp_path: Path):
        path = tmp_path / "nested" / "config.toml"
        config = {"server": {"url": "http://x", "password": 'p"w\\d', "timeout": 12.5, "verify": True}}
        save_config(config, path)
        assert load_config(path) == config

    def test_missing_file(self, tmp_path: Path):
        assert load_config(tmp_path / "nope.toml") == {}


class TestFromConfig:
    def test_client_uses_settings(self):
        c = SDClient.from_config(Settings(url="http://gpu:7860/", username="u", password="p", timeout=3))
        assert c.base_url == "http://gpu:7860"
        c.close()

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SDAPI_URL", "http://env-host:1234")
        c = SDClient.from_config()
        assert c.base_url == "http://env-host:1234"
        c.close()
