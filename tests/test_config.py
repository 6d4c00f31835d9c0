"""Settings -- environment parsing and fallbacks."""

from pathlib import Path

import pytest

from evalboard.config import DEFAULT_CORS_ORIGINS, Settings

ENV_VARS = (
    "LLM_PROVIDER",
    "EVAL_MODEL",
    "LLM_TIMEOUT",
    "EVALBOARD_DB_PATH",
    "BATCH_DELAY_SECONDS",
    "CORS_ORIGINS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSettingsFromEnv:
    def test_defaults(self):
        settings = Settings.from_env(load_env_file=False)
        assert settings.provider is None
        assert settings.model is None
        assert settings.llm_timeout == 120
        assert settings.db_path == Path("data/evalboard.db")
        assert settings.batch_delay_seconds == 1.0
        assert settings.cors_origins == DEFAULT_CORS_ORIGINS
        assert settings.log_level == "INFO"

    def test_values_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LLM_PROVIDER", "Anthropic")
        monkeypatch.setenv("EVAL_MODEL", "claude-test")
        monkeypatch.setenv("LLM_TIMEOUT", "30")
        monkeypatch.setenv("EVALBOARD_DB_PATH", str(tmp_path / "x.db"))
        monkeypatch.setenv("BATCH_DELAY_SECONDS", "0")
        monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
        monkeypatch.setenv("LOG_LEVEL", "debug")

        settings = Settings.from_env(load_env_file=False)

        assert settings.provider == "anthropic"
        assert settings.model == "claude-test"
        assert settings.llm_timeout == 30.0
        assert settings.db_path == tmp_path / "x.db"
        assert settings.batch_delay_seconds == 0.0
        assert settings.cors_origins == ["https://a.example", "https://b.example"]
        assert settings.log_level == "DEBUG"

    def test_unknown_provider_falls_back_to_detection(self, monkeypatch):
        monkeypatch.setenv("LLM_PROVIDER", "cohere")
        assert Settings.from_env(load_env_file=False).provider is None

    @pytest.mark.parametrize("raw", ["soon", "-2"])
    def test_bad_delay_uses_default(self, monkeypatch, raw):
        monkeypatch.setenv("BATCH_DELAY_SECONDS", raw)
        assert Settings.from_env(load_env_file=False).batch_delay_seconds == 1.0
