# declarative_find/core/config.py
"""
Central configuration for declarative-find.

Environment variables override defaults (prefix-free, ``.env`` supported).
"""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven settings with sensible defaults."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(default="dev")
    log_level: str = Field(default="INFO")
    log_json: bool = Field(
        default=True,
        description="Emit JSON log lines (python-json-logger) instead of plain text",
    )

    database_url: str = Field(
        default="sqlite+aiosqlite:///./declarative_find.db",
        description="Async SQLAlchemy database URL",
    )
    database_schema: str | None = Field(
        default=None,
        description="SQLAlchemy database schema (None for the default schema)",
    )
    database_pool_size: int = Field(default=10)
    database_max_overflow: int = Field(default=20)

    templates_dir: str = Field(
        default="templates",
        description="Directory searched by Controller.render",
    )

    # Conventions used by find()
    finder_method_prefix: str = Field(
        default="find_",
        description="Prefix of the conventional controller finder method",
    )
    id_param: str = Field(
        default="id",
        description="Request parameter preferred over the binding's own param key",
    )


settings = Settings()
