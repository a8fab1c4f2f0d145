"""Configuration loading.

Sources, highest priority first:
  1. Constructor arguments (tests)
  2. Environment variables  (DOCSFETCHER__CRAWLER__MAX_PAGES=10)
  3. docsfetcher.yaml       (working directory, then the platform config dir)
  4. Field defaults below

No source is required. A bare ``Settings()`` runs a stdio server that crawls
five pages per request and keeps pages for a day.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

APP_NAME = "docsfetcher"
CONFIG_FILENAME = f"{APP_NAME}.yaml"

_DEFAULT_DATA_DIR = platformdirs.user_data_dir(APP_NAME)
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "cache.db")


def _config_candidates() -> list[Path]:
    return [
        Path(CONFIG_FILENAME),
        Path(platformdirs.user_config_dir(APP_NAME)) / CONFIG_FILENAME,
    ]


def _find_config_file() -> str | None:
    return next((str(path) for path in _config_candidates() if path.is_file()), None)


class ServerSettings(BaseModel):
    transport: Literal["stdio", "http"] = "stdio"
    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=1, le=65535)


class CrawlerSettings(BaseModel):
    # Used when a fetch_library_docs call does not pass max_pages
    max_pages: int = Field(default=5, ge=1, le=50)


class FetcherSettings(BaseModel):
    timeout_seconds: float = Field(default=30.0, gt=0)
    max_redirects: int = Field(default=5, ge=0)
    user_agent: str = f"{APP_NAME}/1.0"


class CacheSettings(BaseModel):
    db_path: str = _DEFAULT_DB_PATH
    ttl_hours: int = Field(default=24, ge=0)
    cleanup_interval_hours: int = Field(default=6, ge=0)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DOCSFETCHER__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    crawler: CrawlerSettings = CrawlerSettings()
    fetcher: FetcherSettings = FetcherSettings()
    cache: CacheSettings = CacheSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # No .env or secrets-dir support
        return (init_settings, env_settings, YamlConfigSettingsSource(settings_cls))
