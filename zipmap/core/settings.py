from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "ZipMap"
    APP_ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    DATA_DIR: Path = Field(default_factory=lambda: Path(__file__).resolve().parent.parent / "data")
    DB_URL: str = Field(default="", validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    HOST: str = "0.0.0.0"
    PORT: int = 8089

    # Third-party lookup providers. A missing key does not block startup; the
    # lookup that needs it fails when it is called.
    OPENWEATHERMAP_API_KEY: str = ""
    OPENWEATHERMAP_URL: str = "https://api.openweathermap.org/data/2.5/weather"
    GEOAPIFY_API_KEY: str = ""
    GEOAPIFY_PLACES_URL: str = "https://api.geoapify.com/v2/places"

    HTTP_TIMEOUT_SECONDS: float = 5.0
    GEO_CACHE_TTL_SECONDS: float = 15 * 60
    PLACES_CACHE_TTL_SECONDS: float = 5 * 60
    LOOKUP_CACHE_MAXSIZE: int = 4096

    @field_validator("OPENWEATHERMAP_API_KEY", "GEOAPIFY_API_KEY", mode="before")
    @classmethod
    def strip_keys(cls, value: object) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @property
    def database_url(self) -> str:
        return self.DB_URL or f"sqlite:///{self.DATA_DIR / 'zipmap.db'}"


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
