"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Constructor arguments (Settings(cache={"ttl_seconds": 5}))
  2. Environment variables  (MDSITE__CACHE__TTL_SECONDS=5)
  3. mdsite.yaml            (searched in cwd, then ~/.config/mdsite/)
  4. Hardcoded defaults

The config file is optional; every field has a default.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)


def _find_config_file() -> str | None:
    """Return the path of the first mdsite.yaml found, or None."""
    candidates = [
        Path("mdsite.yaml"),
        Path.home() / ".config" / "mdsite" / "mdsite.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class ServerSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    host: str = "127.0.0.1"
    port: int = 8080


class GitHubSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    owner: str = "qwed81"
    repo: str = "blog-md"
    # GitHub rejects API requests without a User-Agent
    user_agent: str = "qwed81"
    api_url: str = "https://api.github.com"
    timeout_seconds: float = Field(default=10.0, gt=0)


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    ttl_seconds: float = Field(default=60.0, gt=0)


class SiteSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    article_template: str = "template.html"
    index_template: str = "index.html"
    static_dir: str = "public"
    default_title: str = "qwed81.dev"
    title_tag: str = "h1"


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: MDSITE__SERVER__PORT=9090
        env_prefix="MDSITE__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    server: ServerSettings = ServerSettings()
    github: GitHubSettings = GitHubSettings()
    cache: CacheSettings = CacheSettings()
    site: SiteSettings = SiteSettings()
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
