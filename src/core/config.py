"""Configuración del Core.

Por qué aquí:
- Centraliza variables de entorno (pydantic-settings) sin contaminar la CLI.
- Permite que adaptadores (HTTP/filesystem) y el cliente lean config de forma consistente.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.domain.resolution import DependencyResolution

DEFAULT_REPOSITORY_LOCATION = "https://devicemodels.azure.com"
DEFAULT_API_VERSION = "2021-02-11"
DEFAULT_USER_AGENT = "dtmi-resolver/0.1 (+https://github.com/Azure/iot-plugandplay-models)"


def get_user_config_dir() -> Path:
    """Directorio de configuración por usuario (cross-platform, sin dependencias)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "dtmi-resolver"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "dtmi-resolver"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "dtmi-resolver"
    return Path.home() / ".config" / "dtmi-resolver"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


class AppSettings(BaseSettings):
    """Configuración central del resolver.

    Por qué pydantic-settings:
    - Tipado + validación en el borde (env vars) sin ensuciar el Core con lógica.
    - Un único contrato de configuración para CLI/adapters/cliente.
    """

    model_config = SettingsConfigDict(
        env_prefix="DTMI_RESOLVER_",
        extra="ignore",
        case_sensitive=False,
        # Orden: proyecto primero (dev), luego config global de usuario.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    repository_location: str | None = Field(
        default=None,
        description="Ruta local, URI file:// o URL http(s) del repositorio de modelos.",
    )
    dependency_resolution: DependencyResolution | None = Field(
        default=None,
        description="Modo por defecto (disabled/enabled/tryFromExpanded). Vacío = según ubicación.",
    )
    http_timeout_seconds: float = Field(
        default=20.0,
        gt=0,
        description="Timeout por request (segundos).",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        min_length=1,
        description="User-Agent para peticiones al repositorio.",
    )
    max_concurrency: int = Field(
        default=16,
        ge=1,
        le=256,
        description="Máximo de peticiones HTTP simultáneas por cliente.",
    )
    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        min_length=1,
        description="Versión de API del servicio (informativa por ahora).",
    )
