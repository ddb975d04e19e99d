"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP, almacenamiento de sesión) lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "swapi-browser"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "swapi-browser"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "swapi-browser"
    return Path.home() / ".config" / "swapi-browser"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def get_default_session_path() -> Path:
    return get_user_config_dir() / "storage.json"


class AppSettings(BaseSettings):
    """Settings centrales de la aplicación.

    Por qué pydantic-settings:
    - Tipado y validado en el borde (env vars) sin filtrarse al core.
    - Un único contrato de configuración para la CLI y los adaptadores.
    """

    model_config = SettingsConfigDict(
        env_prefix="SWAPI_BROWSER_",
        extra="ignore",
        case_sensitive=False,
        # Project first (dev), then the per-user file.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_base_url: str = Field(
        default="https://swapi.dev/api",
        min_length=8,
        description="Base URL of the catalog REST API.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )
    user_agent: str = Field(
        default="swapi-browser/0.1 (+https://local)",
        min_length=1,
        description="User-Agent sent to the catalog API.",
    )

    page_size: int = Field(
        default=10,
        ge=1,
        description="Results per upstream page (fixed by the API, used for page math).",
    )
    search_debounce_seconds: float = Field(
        default=0.5,
        ge=0,
        description="Delay before a search input triggers a fetch.",
    )

    mock_username: str = Field(default="luke", min_length=1)
    mock_password: str = Field(default="skywalker", min_length=1)

    token_ttl_seconds: int = Field(
        default=3600,
        gt=0,
        description="Validity of an issued mock token.",
    )
    token_refresh_threshold_seconds: int = Field(
        default=300,
        ge=0,
        description="Re-issue the token once remaining validity drops below this.",
    )
    token_refresh_interval_seconds: float = Field(
        default=60.0,
        gt=0,
        description="How often the background refresher checks the token.",
    )

    session_path: Path = Field(
        default_factory=get_default_session_path,
        description="JSON file used as durable key/value storage.",
    )
    session_key: str = Field(
        default="starwars_user",
        min_length=1,
        description="Storage key holding the serialized session.",
    )

    log_level: str = Field(
        default="WARNING",
        description="Root log level for the CLI (DEBUG, INFO, WARNING...).",
    )
