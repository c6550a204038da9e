"""Selección de fetcher según la ubicación del repositorio.

Reglas (en orden):
- `http://` / `https://`  -> `HttpFetcher`
- `file://`               -> `FilesystemFetcher`
- ruta local (absoluta, relativa existente, unidad Windows o UNC) -> `FilesystemFetcher`
- host sin esquema (`devicemodels.azure.com`, `models.contoso.com:8443`) -> `HttpFetcher` con `https://`
- cualquier otra cosa -> `InvalidRepositoryLocationError`
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from urllib.parse import urlparse

import httpx

from adapters.filesystem_fetcher import FilesystemFetcher
from adapters.http_fetcher import HttpFetcher
from core.config import AppSettings
from core.exceptions import InvalidRepositoryLocationError
from core.interfaces.fetcher import Fetcher

logger = logging.getLogger(__name__)

_WINDOWS_PATH_RE = re.compile(r"^(?:[A-Za-z]:[\\/]|\\\\[^\\]+\\)")
_HOST_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,63}(?::\d+)?(?:/.*)?$")


def is_local_path(location: str) -> bool:
    if _WINDOWS_PATH_RE.match(location):
        return True
    if location.startswith(("/", "./", "../", "~")) or location in (".", ".."):
        return True
    return Path(location).expanduser().exists()


def normalize_location(location: str) -> str:
    """Quita espacios y separadores finales (conserva la raíz `/`)."""

    cleaned = location.strip()
    stripped = cleaned.rstrip("/\\")
    return stripped or cleaned


def create_fetcher(
    location: str,
    settings: AppSettings | None = None,
    *,
    client: httpx.AsyncClient | None = None,
) -> Fetcher:
    """Construye el fetcher adecuado para `location`."""

    settings = settings or AppSettings()
    location = normalize_location(location)
    if not location:
        raise InvalidRepositoryLocationError(location)

    scheme = urlparse(location).scheme.lower()

    if scheme in ("http", "https"):
        logger.info("Repository location identified as HTTP(S) endpoint - using HttpFetcher")
        return HttpFetcher(location, settings, client=client)

    if scheme == "file":
        logger.info("Repository location identified as filesystem URI - using FilesystemFetcher")
        return FilesystemFetcher(location)

    if is_local_path(location):
        logger.info("Repository location identified as filesystem path - using FilesystemFetcher")
        return FilesystemFetcher(Path(location).expanduser())

    if _HOST_RE.match(location):
        logger.info("Repository location identified as remote endpoint without scheme - using HttpFetcher (https)")
        return HttpFetcher(f"https://{location}", settings, client=client)

    raise InvalidRepositoryLocationError(location)
