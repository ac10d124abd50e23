"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (GOVIPSUM__CACHE__TIMEOUT_SECONDS=600)
  2. govipsum.yaml          (searched in cwd, then platform config dir)
  3. Hardcoded defaults

The config file is optional. Every field has a documented default.
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

from govipsum import __version__

GOV_UK_ANNOUNCEMENTS_URL = "https://www.gov.uk/government/announcements.atom"


def _find_config_file() -> str | None:
    """Return the path of the first govipsum.yaml found, or None."""
    candidates = [
        Path("govipsum.yaml"),
        Path(platformdirs.user_config_dir("govipsum")) / "govipsum.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080


class FeedSettings(BaseModel):
    url: str = GOV_UK_ANNOUNCEMENTS_URL
    # None means the snapshot bundled in govipsum/data
    fallback_path: str | None = None
    fetch_timeout_seconds: float = Field(default=5.0, gt=0)
    entry_scan_limit: int = Field(default=20, ge=1, le=100)
    user_agent: str = f"govipsum/{__version__}"


class CacheSettings(BaseModel):
    timeout_seconds: float = Field(default=3600, ge=0)
    retry_after_seconds: float = Field(default=300, ge=0)


class QuerySettings(BaseModel):
    default_paragraphs: int = Field(default=5, ge=1)
    max_paragraphs: int = Field(default=50, ge=1)
    default_min_words: int = Field(default=20, ge=1)


class LoggingSettings(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: GOVIPSUM__SERVER__PORT=9090
        env_prefix="GOVIPSUM__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    feed: FeedSettings = FeedSettings()
    cache: CacheSettings = CacheSettings()
    query: QuerySettings = QuerySettings()
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
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
