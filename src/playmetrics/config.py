"""Centralized settings for playmetrics."""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from playmetrics.runtime_paths import default_queue_path, runtime_root

logger = logging.getLogger(__name__)

_QUEUE_BACKENDS = ("sqlite", "memory")
_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


def load_env_file(env_file: Path | None = None) -> bool:
    """Load a `.env` file into the process environment if one exists.

    Values already present in the environment win over the file.
    """
    path = Path(env_file) if env_file else runtime_root() / ".env"
    if not path.is_file():
        return False
    # utf-8-sig tolerates the BOM some Windows editors write.
    load_dotenv(path, override=False, encoding="utf-8-sig")
    logger.debug("[config] loaded env file %s", path)
    return True


class PlaymetricsSettings(BaseSettings):
    """Collector settings loaded from `PLAYMETRICS_*` environment variables."""

    queue_backend: str = Field(
        default="sqlite",
        description="Durable fallback queue backend: sqlite|memory",
    )
    queue_sqlite_path: Path = Field(
        default_factory=default_queue_path,
        description="SQLite file holding the durable fallback queue (queue_backend=sqlite).",
    )
    queue_key: str = Field(
        default="analytics_queue",
        description="Key under which undelivered reports are persisted.",
    )
    parent_target_origin: str = Field(
        default="*",
        description="Target origin passed along with reports posted to the parent frame.",
    )
    log_level: str = Field(default="INFO")

    model_config = SettingsConfigDict(env_prefix="PLAYMETRICS_")

    @field_validator("queue_backend", mode="before")
    @classmethod
    def _normalize_backend(cls, v):
        value = str(v or "").strip().lower()
        if not value:
            return "sqlite"
        if value not in _QUEUE_BACKENDS:
            # Be permissive; an unknown backend still has to keep reports somewhere.
            logger.warning("[config] unknown queue_backend=%s; using memory", value)
            return "memory"
        return value

    @field_validator("queue_sqlite_path", mode="before")
    @classmethod
    def _coerce_queue_path(cls, v):
        # Treat empty env vars as "unset" so we keep the intended default.
        if v is None:
            return default_queue_path()
        if isinstance(v, str) and not v.strip():
            return default_queue_path()
        return v

    @field_validator("queue_key", mode="after")
    @classmethod
    def _validate_queue_key(cls, v):
        value = str(v).strip()
        if not value:
            raise ValueError("queue_key must not be empty")
        return value

    @field_validator("parent_target_origin", mode="before")
    @classmethod
    def _coerce_origin(cls, v):
        if v is None:
            return "*"
        if isinstance(v, str) and not v.strip():
            return "*"
        return v

    @field_validator("log_level", mode="after")
    @classmethod
    def _validate_log_level(cls, v):
        value = str(v).strip().upper()
        if value not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return value


def load_settings(env_file: Path | None = None) -> PlaymetricsSettings:
    """Read `.env` (when present) and build settings from the environment."""
    load_env_file(env_file)
    return PlaymetricsSettings()
