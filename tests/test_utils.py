from __future__ import annotations

import os

import pytest

from rhsys.core.utils.config import ConfigError
from rhsys.core.utils.env import load_env_file_if_present, require_env


class TestLoadEnvFileIfPresent:
    def test_load_existing_env_file(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text(
            """
# This is a comment
RH_USERNAME=alice
export RH_PASSWORD="s3cret"

RH_DEVICE_TOKEN='3f2a6c1e-8b4d-4e5f-9a7b-1c2d3e4f5a6b'
not a pair
"""
        )
        for key in ["RH_USERNAME", "RH_PASSWORD", "RH_DEVICE_TOKEN"]:
            monkeypatch.setenv(key, "")
            monkeypatch.delenv(key)

        result = load_env_file_if_present(env_file)

        assert result == {
            "RH_USERNAME": "alice",
            "RH_PASSWORD": "s3cret",
            "RH_DEVICE_TOKEN": "3f2a6c1e-8b4d-4e5f-9a7b-1c2d3e4f5a6b",
        }
        assert os.environ["RH_PASSWORD"] == "s3cret"

    def test_nonexistent_file_returns_empty_dict(self, tmp_path):
        assert load_env_file_if_present(tmp_path / "missing.env") == {}

    def test_existing_environment_wins(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("RH_USERNAME=from_file")
        monkeypatch.setenv("RH_USERNAME", "from_env")

        load_env_file_if_present(env_file)

        assert os.environ["RH_USERNAME"] == "from_env"

    def test_override(self, tmp_path, monkeypatch):
        env_file = tmp_path / ".env"
        env_file.write_text("RH_USERNAME=from_file")
        monkeypatch.setenv("RH_USERNAME", "from_env")

        load_env_file_if_present(env_file, override=True)

        assert os.environ["RH_USERNAME"] == "from_file"


class TestRequireEnv:
    def test_returns_value(self, monkeypatch):
        monkeypatch.setenv("RH_ACCESS_TOKEN", "tok")
        assert require_env("RH_ACCESS_TOKEN", dotenv=False) == "tok"

    def test_missing_value(self, clean_env):
        with pytest.raises(ConfigError, match="Missing RH_REFRESH_TOKEN"):
            require_env("RH_REFRESH_TOKEN", dotenv=False)

    def test_reads_dotenv_from_cwd(self, clean_env, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("RH_ACCESS_TOKEN=from_dotenv")
        monkeypatch.chdir(tmp_path)

        assert require_env("RH_ACCESS_TOKEN") == "from_dotenv"
