"""Environment-driven settings for sqlschema.

Every value the CLI needs can come from the environment (``SQLSCHEMA_*``) or
a ``.env`` file, so deploy steps can run ``sqlschema apply`` with no flags.

Examples:
    >>> from sqlschema.core.settings import SchemaSettings
    >>> s = SchemaSettings(database_url="postgresql://app@db/app")
    >>> s.updates_dir
    PosixPath('sql')

Tags:
    settings, configuration, pydantic, environment, sqlschema
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class SchemaSettings(BaseSettings):
    """Settings shared by the CLI and embedding applications.

    Fields
    ──────
    database_url : Database URL or SQLite path handed to ``create_database``
    updates_dir  : Directory holding ``N.sql`` update files
    log_level    : Structlog log level
    log_json     : Force JSON (True) / console (False) logs; None = auto
    """

    model_config = SettingsConfigDict(
        env_prefix="SQLSCHEMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Database ─────────────────────────────────────────────────
    database_url: str = "schema.db"
    updates_dir: Path = Field(
        default=Path("sql"),
        description="Directory containing numbered .sql update files",
    )

    # ── Observability ────────────────────────────────────────────
    log_level: str = "INFO"
    log_json: bool | None = None

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level
