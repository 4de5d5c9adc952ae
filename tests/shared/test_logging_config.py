"""Tests for environment-driven logging setup."""

import pytest
import structlog
from shared.logging_config import get_log_level, resolve_environment, select_renderer


@pytest.fixture()
def clean_env(monkeypatch):
    for variable in ("ENV", "ENVIRONMENT", "PROTEAN_ENV", "LOG_LEVEL"):
        monkeypatch.delenv(variable, raising=False)
    return monkeypatch


class TestResolveEnvironment:
    def test_defaults_to_development(self, clean_env):
        assert resolve_environment() == "development"

    def test_protean_env_is_honoured(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "Production")
        assert resolve_environment() == "production"

    def test_env_takes_precedence(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "test")
        clean_env.setenv("ENV", "staging")
        assert resolve_environment() == "staging"


class TestLevelAndRendererAgree:
    def test_production_via_protean_env(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "production")
        assert get_log_level() == "INFO"
        assert isinstance(select_renderer(), structlog.processors.JSONRenderer)

    def test_development_uses_console(self, clean_env):
        assert get_log_level() == "DEBUG"
        assert isinstance(select_renderer(), structlog.dev.ConsoleRenderer)

    def test_test_environment(self, clean_env):
        clean_env.setenv("ENVIRONMENT", "test")
        assert get_log_level() == "WARNING"
        assert isinstance(select_renderer(), structlog.dev.ConsoleRenderer)

    def test_log_level_overrides_level_only(self, clean_env):
        clean_env.setenv("PROTEAN_ENV", "staging")
        clean_env.setenv("LOG_LEVEL", "ERROR")
        assert get_log_level() == "ERROR"
        assert isinstance(select_renderer(), structlog.processors.JSONRenderer)

    def test_unknown_environment(self, clean_env):
        clean_env.setenv("ENV", "qa")
        assert get_log_level() == "INFO"
        assert isinstance(select_renderer(), structlog.dev.ConsoleRenderer)
