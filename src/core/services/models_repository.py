"""Models repository client.

Single entry point (`get_models`) over the resolver and the expander. The
dependency resolution mode decides which of them run:

- disabled:         resolve the requested models only
- enabled:          resolve, then expand the dependency closure
- tryFromExpanded:  resolve the `.expanded.json` documents; when they are not
                    available, fall back to the enabled path
"""

from __future__ import annotations

import logging
from typing import Sequence

from adapters.location import create_fetcher
from core.config import DEFAULT_REPOSITORY_LOCATION, AppSettings
from core.domain.models import ModelMap
from core.domain.resolution import DependencyResolution, OutcomeKind
from core.interfaces.fetcher import Fetcher
from core.services.expander import ModelExpander
from core.services.resolver import DtmiResolver

logger = logging.getLogger(__name__)


class ModelsRepositoryClient:
    """Client for a DTDL models repository (local or remote).

    Usage:

        async with ModelsRepositoryClient("https://devicemodels.azure.com") as client:
            models = await client.get_models("dtmi:com:example:Thermostat;1")
    """

    def __init__(
        self,
        repository_location: str | None = None,
        dependency_resolution: DependencyResolution | str | None = None,
        *,
        settings: AppSettings | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        self._settings = settings or AppSettings()

        custom_location = repository_location or self._settings.repository_location
        self._repository_location = custom_location or DEFAULT_REPOSITORY_LOCATION
        logger.info("Client configured for repository location %s", self._repository_location)

        mode = dependency_resolution or self._settings.dependency_resolution
        if mode is None:
            self._dependency_resolution = DependencyResolution.default(custom_repository=bool(custom_location))
        else:
            self._dependency_resolution = DependencyResolution.parse(mode)
        logger.info("Client configured for dependency mode: %s", self._dependency_resolution.value)

        self._fetcher = fetcher or create_fetcher(self._repository_location, self._settings)
        self._resolver = DtmiResolver(self._fetcher)
        self._expander = ModelExpander(self._resolver)

    @property
    def repository_location(self) -> str:
        return self._repository_location

    @property
    def dependency_resolution(self) -> DependencyResolution:
        return self._dependency_resolution

    @property
    def api_version(self) -> str:
        """Service API version. Informational; not sent on requests yet."""

        return self._settings.api_version

    async def get_models(
        self,
        dtmis: str | Sequence[str],
        *,
        dependency_resolution: DependencyResolution | str | None = None,
    ) -> ModelMap:
        """Retrieve one or more models, keyed by normalized DTMI.

        Raises `ModelsRepositoryError` subclasses; a failed call never returns
        a partial map.
        """

        requested = [dtmis] if isinstance(dtmis, str) else list(dtmis)
        mode = (
            DependencyResolution.parse(dependency_resolution)
            if dependency_resolution is not None
            else self._dependency_resolution
        )
        logger.info("Getting models w/ dependency resolution mode: %s", mode.value)

        if mode is DependencyResolution.DISABLED:
            return await self._resolver.resolve(requested)

        if mode is DependencyResolution.ENABLED:
            return await self._resolve_and_expand(requested, prefer_expanded=False)

        outcome = await self._resolver.attempt_expanded(requested)
        if outcome.kind is OutcomeKind.DIRECT:
            return outcome.models
        if outcome.kind is OutcomeKind.FALLBACK_REQUIRED:
            logger.info("Could not retrieve expanded model(s), falling back to dependency expansion")
            return await self._resolve_and_expand(requested, prefer_expanded=True)
        outcome.raise_error()

    async def _resolve_and_expand(self, dtmis: list[str], *, prefer_expanded: bool) -> ModelMap:
        base = await self._resolver.resolve(dtmis)
        logger.info("Retrieving model dependencies for %s", ", ".join(map(str, dtmis)))
        return await self._expander.expand(base.values(), prefer_expanded=prefer_expanded)

    async def aclose(self) -> None:
        await self._fetcher.aclose()

    async def __aenter__(self) -> "ModelsRepositoryClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
