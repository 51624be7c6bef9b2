"""Tests for YAML configuration loading and env overrides."""

import os
from datetime import datetime

import pytest
from pydantic import ValidationError

from direct_api.config import AppConfig, QueryConfig, load_config, resolve_env_vars


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    """Run from an empty directory with no user config or overrides."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    for key in list(os.environ):
        if key.startswith("DIRECT_API_"):
            monkeypatch.delenv(key)


class TestLoadConfig:
    def test_defaults_without_file(self):
        config = load_config()

        assert config == AppConfig()
        assert config.query.default_limit == 50
        assert config.auth.allowed_levels == ["ADMIN", "MEMBER"]

    def test_missing_explicit_path(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_yaml_file_in_working_directory(self, tmp_path):
        (tmp_path / "direct-api.yaml").write_text(
            "server:\n  port: 9001\nquery:\n  default_limit: 25\n"
        )

        config = load_config()

        assert config.server.port == 9001
        assert config.query.default_limit == 25
        assert config.query.order_by_fields["id"] == "challenge_id"

    def test_env_var_references_resolve(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CHALLENGE_DB", "sqlite:///challenges.db")
        path = tmp_path / "custom.yaml"
        path.write_text("database:\n  url: ${CHALLENGE_DB}\n")

        config = load_config(str(path))

        assert config.database.url == "sqlite:///challenges.db"

    def test_env_overrides_win(self, tmp_path, monkeypatch):
        (tmp_path / "direct-api.yaml").write_text("logging:\n  level: INFO\n")
        monkeypatch.setenv("DIRECT_API_LOGGING_LEVEL", "DEBUG")
        monkeypatch.setenv("DIRECT_API_SERVER_PORT", "8123")
        monkeypatch.setenv("DIRECT_API_DATABASE_ECHO", "true")

        config = load_config()

        assert config.logging.level == "DEBUG"
        assert config.server.port == 8123
        assert config.database.echo is True


def test_unset_env_var_resolves_to_empty():
    assert resolve_env_vars("key=${DIRECT_API_TEST_UNSET}") == "key="


class TestQueryConfig:
    def test_date_bounds(self):
        config = QueryConfig()

        assert config.min_date == datetime(1970, 1, 1)
        assert config.max_date == datetime(9999, 12, 31, 23, 59, 59)

    def test_is_immutable(self):
        config = QueryConfig()

        with pytest.raises(ValidationError):
            config.default_limit = 10
