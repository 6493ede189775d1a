"""
Application settings for RadioCore.

This module defines all configuration settings for RadioCore using Pydantic BaseSettings.
"""

from __future__ import annotations

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Main application settings using Pydantic BaseSettings."""

    # Entity repository
    database_url: str = Field(default="sqlite:///radiocore.db", alias="DATABASE_URL")
    echo_sql: bool = Field(default=False, alias="ECHO_SQL")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    env: str = Field(default="dev", alias="ENV")  # dev|prod|test

    # Deployment topology
    inside_docker: bool = Field(default=False, alias="APP_INSIDE_DOCKER")
    internal_api_url: str = Field(default="http://web", alias="INTERNAL_API_URL")
    control_host: str | None = Field(default=None, alias="CONTROL_HOST")

    # Audio engine
    engine_binary: str = Field(default="/usr/local/bin/liquidsoap", alias="ENGINE_BINARY")
    error_track_path: str = Field(
        default="/usr/local/share/icecast/web/error.mp3", alias="ERROR_TRACK_PATH"
    )

    model_config: SettingsConfigDict = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    @property
    def resolved_control_host(self) -> str:
        """Host the engine's control port listens on."""
        if self.control_host:
            return self.control_host
        return "stations" if self.inside_docker else "localhost"

    @property
    def control_bind_addr(self) -> str:
        """Address the engine binds its control port to."""
        return "0.0.0.0" if self.inside_docker else "127.0.0.1"


def _resolve_env_file() -> str | None:
    # 1) Explicit override
    explicit = os.getenv("RADIOCORE_ENV_FILE")
    if explicit and Path(explicit).is_file():
        return explicit

    # 2) CWD .env
    cwd_env = Path.cwd() / ".env"
    if cwd_env.is_file():
        return str(cwd_env)

    # 3) Walk up from this file to find nearest .env
    here = Path(__file__).resolve()
    for parent in here.parents:
        candidate = parent / ".env"
        if candidate.is_file():
            return str(candidate)
    return None


# Global settings instance (load from best-effort .env discovery)
_env_file = _resolve_env_file()
settings = Settings(_env_file=_env_file) if _env_file else Settings()  # type: ignore[call-arg]
