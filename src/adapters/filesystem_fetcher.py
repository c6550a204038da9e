"""Fetcher de filesystem.

La lectura va a un hilo (`asyncio.to_thread`) para que muchos fetch
concurrentes no se serialicen en el event loop.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from urllib.parse import unquote, urlparse
from urllib.request import url2pathname

from core.exceptions import ModelNotFoundError, TransportError
from core.interfaces.fetcher import Fetcher

logger = logging.getLogger(__name__)


def path_from_location(location: str | Path) -> Path:
    """Convierte una ruta o una URI `file://` en `Path`."""

    if isinstance(location, Path):
        return location
    parsed = urlparse(location)
    if parsed.scheme == "file":
        # file://server/share -> UNC; file:///tmp/repo -> /tmp/repo
        raw = f"//{parsed.netloc}{parsed.path}" if parsed.netloc else parsed.path
        return Path(url2pathname(unquote(raw)))
    return Path(location)


class FilesystemFetcher(Fetcher):
    """Lee documentos de un repositorio local."""

    def __init__(self, root: str | Path) -> None:
        self._root = path_from_location(root)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, path: str) -> Path:
        # Rutas del repositorio siempre con "/"; pathlib pone el separador nativo.
        return self._root.joinpath(*[part for part in path.split("/") if part])

    async def fetch(self, path: str) -> bytes:
        target = self.path_for(path)
        logger.debug("Reading %s", target)
        try:
            return await asyncio.to_thread(target.read_bytes)
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as exc:
            raise ModelNotFoundError(path) from exc
        except OSError as exc:
            raise TransportError(f"Could not read {target}: {exc}", path=path) from exc

    async def aclose(self) -> None:
        return None
