"""Configuration management using Pydantic settings with optional file persistence."""

import json
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

# --- Paths ---

APP_NAME = "mcp-server-parallel-search"


def get_config_dir() -> Path:
    """Get the configuration directory (e.g. ~/.config/mcp-server-parallel-search)."""
    if os.name == "nt":
        base = Path(os.environ.get("APPDATA", Path.home() / ".config")).expanduser()
    else:
        base = Path("~/.config").expanduser()
    return base / APP_NAME


CONFIG_FILE = get_config_dir() / "config.json"


def load_config_file(path: Path | None = None) -> dict[str, Any]:
    """Load settings from the JSON config file if it exists."""
    path = path or CONFIG_FILE
    if not path.exists():
        return {}

    try:
        text = path.read_text(encoding="utf-8")
        if not text.strip():
            return {}
        data = json.loads(text)
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config_file(config_data: dict[str, Any], path: Path | None = None) -> Path:
    """Save settings to the JSON config file."""
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config_data, indent=2), encoding="utf-8")
    return path


# Environment variable the search key was historically read from
STANDARD_API_KEY_ENV_VAR = "BRAVE_SEARCH_API_KEY"

DEFAULT_SEARCH_ENDPOINT = "https://api.search.brave.com/res/v1/web/search"


class _GroupSettings(BaseSettings):
    """Settings group where environment variables win over values from the config file.

    Values loaded from the config file are passed as init kwargs, so init is moved
    below the environment and .env sources.
    """

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return env_settings, dotenv_settings, init_settings, file_secret_settings


class SearchSettings(_GroupSettings):
    """Search provider configuration."""

    model_config = SettingsConfigDict(env_prefix="MCP_SEARCH_", env_file=".env", extra="ignore", populate_by_name=True)

    api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("MCP_SEARCH_API_KEY", STANDARD_API_KEY_ENV_VAR),
        description="Brave Search subscription token",
    )
    endpoint: str = Field(default=DEFAULT_SEARCH_ENDPOINT, description="Web search endpoint URL")
    timeout: float = Field(default=10.0, description="Timeout for the search request in seconds")

    def get_api_key(self) -> Optional[str]:
        """Extract the API key value from SecretStr."""
        return self.api_key.get_secret_value() if self.api_key else None


class FetchSettings(_GroupSettings):
    """Page fetch pipeline configuration."""

    model_config = SettingsConfigDict(env_prefix="MCP_FETCH_", env_file=".env", extra="ignore")

    batch_size: int = Field(default=5, ge=1, description="Maximum number of pages fetched concurrently")
    timeout: float = Field(default=10.0, gt=0, description="Timeout per page request in seconds")
    max_redirects: int = Field(default=3, ge=0, description="Maximum redirect hops per page request")
    max_content_chars: int = Field(default=10_000, ge=1, description="Cap on normalized page length")


TransportType = Literal["stdio", "streamable-http", "sse"]


class ServerSettings(_GroupSettings):
    """Server configuration."""

    model_config = SettingsConfigDict(env_prefix="MCP_SERVER_", env_file=".env", extra="ignore")

    logging_level: str = Field(default="INFO")
    transport: TransportType = Field(default="stdio", description="MCP transport: stdio, streamable-http, or sse")
    host: str = Field(default="127.0.0.1", description="Host for HTTP transports")
    port: int = Field(default=8383, description="Port for HTTP transports")


class AppSettings(BaseSettings):
    """Root application settings.

    Priority: Environment Variables > Config File > Defaults
    """

    model_config = SettingsConfigDict(env_prefix="MCP_", extra="ignore")

    search: SearchSettings = Field(default_factory=SearchSettings)
    fetch: FetchSettings = Field(default_factory=FetchSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    def save(self, path: Path | None = None) -> Path:
        """Save current configuration to file (excluding secrets)."""
        data = self.model_dump(mode="json", exclude_none=True)
        data.get("search", {}).pop("api_key", None)
        return save_config_file(data, path)


def _group(file_data: dict[str, Any], name: str) -> dict[str, Any]:
    """Return the config file section for a settings group, ignoring non-object values."""
    value = file_data.get(name)
    return value if isinstance(value, dict) else {}


def load_settings(path: Path | None = None) -> AppSettings:
    """Load settings with file config as base, env vars overlay."""
    file_data = load_config_file(path)
    return AppSettings(
        search=SearchSettings(**_group(file_data, "search")),
        fetch=FetchSettings(**_group(file_data, "fetch")),
        server=ServerSettings(**_group(file_data, "server")),
    )


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Process-wide settings, loaded once at startup."""
    return load_settings()
