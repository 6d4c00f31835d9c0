"""
Settings -- environment-driven configuration.

Values come from the process environment, with a .env file in the working
directory loaded first (existing variables win). See .env.example.

Configuration via environment:
  LLM_PROVIDER=google            (default: auto-detect from API keys)
  EVAL_MODEL=gemini-2.0-flash-exp (default: provider's default model)
  LLM_TIMEOUT=120
  EVALBOARD_DB_PATH=data/evalboard.db
  BATCH_DELAY_SECONDS=1.0
  CORS_ORIGINS=http://localhost:3000,http://localhost:8000
  LOG_LEVEL=INFO
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .evaluation.orchestrator import DEFAULT_BATCH_DELAY_SECONDS
from .llm.client import DEFAULT_MODELS, DEFAULT_TIMEOUT
from .storage.schema import DEFAULT_DB_PATH

logger = logging.getLogger(__name__)

DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8000",
    "http://localhost:8080",
]


def _get_float(name: str, default: float) -> float:
    """Load a non-negative float from environment, falling back on bad values."""
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning(f"[Config] {name}={raw!r} is not a number, using {default}")
        return default
    if value < 0:
        logger.warning(f"[Config] {name}={raw!r} is negative, using {default}")
        return default
    return value


def _get_cors_origins() -> list[str]:
    """Load CORS origins from environment or use safe defaults."""
    origins_env = os.environ.get("CORS_ORIGINS", "")
    if origins_env.strip():
        return [o.strip() for o in origins_env.split(",") if o.strip()]
    return list(DEFAULT_CORS_ORIGINS)


@dataclass
class Settings:
    """Resolved configuration for the app, the CLI and the orchestrator."""

    provider: str | None = None
    model: str | None = None
    llm_timeout: float = DEFAULT_TIMEOUT
    db_path: Path = DEFAULT_DB_PATH
    batch_delay_seconds: float = DEFAULT_BATCH_DELAY_SECONDS
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "Settings":
        if load_env_file:
            load_dotenv(override=False)

        provider = os.environ.get("LLM_PROVIDER", "").strip().lower() or None
        if provider is not None and provider not in DEFAULT_MODELS:
            logger.warning(f"[Config] Unknown LLM_PROVIDER={provider!r}, auto-detecting")
            provider = None

        return cls(
            provider=provider,
            model=os.environ.get("EVAL_MODEL", "").strip() or None,
            llm_timeout=_get_float("LLM_TIMEOUT", DEFAULT_TIMEOUT),
            db_path=Path(os.environ.get("EVALBOARD_DB_PATH", "").strip() or DEFAULT_DB_PATH),
            batch_delay_seconds=_get_float("BATCH_DELAY_SECONDS", DEFAULT_BATCH_DELAY_SECONDS),
            cors_origins=_get_cors_origins(),
            log_level=os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO",
        )
