"""Environment-driven settings for fx_rates."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fx_rates.db import DEFAULT_SQLITE_DB_PATH


class FxRatesSettings(BaseSettings):
    """Runtime configuration read from ``FX_RATES_*`` variables or a ``.env`` file."""

    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("FX_RATES_DATABASE_URL", "MONGODB_URI"),
        description="Database URL/DSN; the local SQLite file is used when unset.",
    )
    sqlite_path: Path = Field(
        default=DEFAULT_SQLITE_DB_PATH,
        description="SQLite file used when no database URL is configured.",
    )
    log_level: str = Field(default="INFO", description="Level applied to fx_rates loggers.")

    model_config = SettingsConfigDict(
        env_prefix="FX_RATES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    def dict_for_logging(self) -> dict[str, Any]:
        """Return settings with credentials masked out of the database URL."""

        payload = self.model_dump()
        url = payload.get("database_url")
        if url and "@" in url:
            scheme, _, rest = url.partition("://")
            payload["database_url"] = f"{scheme}://***@{rest.rsplit('@', 1)[1]}"
        return payload


@lru_cache(maxsize=1)
def get_settings() -> FxRatesSettings:
    """Return cached settings."""

    return FxRatesSettings()


__all__ = ["FxRatesSettings", "get_settings"]
