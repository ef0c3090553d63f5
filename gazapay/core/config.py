"""Application settings and configuration helpers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import List, Literal

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEV_ORIGINS = ("http://localhost:3000", "http://127.0.0.1:3000")


class Settings(BaseSettings):
    """Strongly-typed configuration sourced from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    app_name: str = Field(default="GazaPay Voice Assistant", description="Human-readable service name.")
    environment: str = Field(default="local", description="Deployment environment identifier.")
    log_level: str = Field(default="INFO", description="Application log level.")

    mock_balance: int = Field(
        default=5000,
        ge=0,
        description="Balance reported for balance enquiries until a core-banking backend exists.",
    )
    templates_path: Path | None = Field(
        default=None,
        description="Optional YAML file overriding response templates by key.",
    )

    session_backend: Literal["memory", "sqlite"] = Field(
        default="memory",
        description="Where conversation states are kept between requests.",
    )
    session_capacity: int = Field(
        default=100,
        ge=1,
        description="Maximum number of sessions kept before the oldest is evicted.",
    )
    sqlite_path: Path = Field(
        default=Path("../db/sessions.db"),
        description="Session DB path when session_backend is 'sqlite'.",
    )

    frontend_origin: AnyHttpUrl | None = Field(
        default=None,
        description="Allowed frontend origin (CORS). If omitted, defaults to localhost dev server.",
    )
    additional_origins: List[AnyHttpUrl] = Field(
        default_factory=list,
        description="Additional allowed CORS origins for multi-client deployments.",
    )

    @property
    def cors_origins(self) -> list[str]:
        """Return the full, de-duplicated list of allowed CORS origins."""

        origins: list[str] = []
        if self.frontend_origin:
            origins.append(str(self.frontend_origin).rstrip("/"))
        else:
            origins.extend(DEV_ORIGINS)

        for origin in self.additional_origins:
            origins.append(str(origin).rstrip("/"))

        # localhost and 127.0.0.1 are used interchangeably during development.
        normalized: list[str] = []
        for origin in origins:
            normalized.append(origin)
            if origin in DEV_ORIGINS:
                normalized.extend(DEV_ORIGINS)

        seen: set[str] = set()
        unique: list[str] = []
        for origin in normalized:
            if origin not in seen:
                seen.add(origin)
                unique.append(origin)
        return unique


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()
