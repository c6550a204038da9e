"""Fetcher HTTP(S).

Implementación:
- GET a `<base_url>/<ruta relativa>` con un `httpx.AsyncClient` compartido.
- 404 -> `ModelNotFoundError`; otro status no-2xx o error de red -> `TransportError`.
- Un semáforo limita las peticiones en vuelo a `max_concurrency`.

Nota:
- Sin reintentos: son responsabilidad del transporte, no del resolver.
"""

from __future__ import annotations

import asyncio
import logging

import httpx

from adapters.http_client import build_async_client
from core.config import AppSettings
from core.exceptions import ModelNotFoundError, TransportError
from core.interfaces.fetcher import Fetcher

logger = logging.getLogger(__name__)


class HttpFetcher(Fetcher):
    """Lee documentos de un repositorio remoto."""

    def __init__(
        self,
        base_url: str,
        settings: AppSettings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._settings = settings or AppSettings()
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or build_async_client(self._settings)
        self._sem = asyncio.Semaphore(max(1, self._settings.max_concurrency))

    @property
    def base_url(self) -> str:
        return self._base_url

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def fetch(self, path: str) -> bytes:
        url = self.url_for(path)
        logger.debug("GET %s", url)

        async with self._sem:
            try:
                response = await self._client.get(url)
            except httpx.HTTPError as exc:
                raise TransportError(f"Request to {url} failed: {exc}", path=path) from exc

        if response.status_code == 404:
            raise ModelNotFoundError(path)
        if not response.is_success:
            raise TransportError(
                f"Unexpected HTTP {response.status_code} fetching {url}",
                path=path,
                status_code=response.status_code,
            )
        return response.content

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
