"""DTMI resolution: identifiers in, parsed model documents out.

The resolver maps every requested DTMI to a repository path, fetches all of
them concurrently, parses and checks identity. It knows nothing about
dependencies; expanding a closure is the expander's job.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

from core.domain.dtmi import Dtmi, to_expanded_path, to_path
from core.domain.models import ModelDocument, ModelMap, parse_expanded, parse_model
from core.domain.resolution import ResolutionOutcome
from core.exceptions import (
    ExpandedNotAvailableError,
    IdentityMismatchError,
    ModelNotFoundError,
    ModelsRepositoryError,
)
from core.interfaces.fetcher import Fetcher

logger = logging.getLogger(__name__)


def _unique(dtmis: Iterable[Dtmi | str]) -> list[Dtmi]:
    """Parse and de-duplicate (case-insensitively), keeping request order."""

    seen: dict[Dtmi, None] = {}
    for value in dtmis:
        seen.setdefault(Dtmi.parse(value), None)
    return list(seen)


class DtmiResolver:
    """Fetches model documents for a batch of DTMIs."""

    def __init__(self, fetcher: Fetcher) -> None:
        self._fetcher = fetcher

    @property
    def fetcher(self) -> Fetcher:
        return self._fetcher

    async def resolve(self, dtmis: Iterable[Dtmi | str], prefer_expanded: bool = False) -> ModelMap:
        """Resolve `dtmis` into a model map keyed by normalized DTMI.

        All fetches run concurrently and are joined before any error is raised,
        so one failure never leaves siblings half-cancelled. Raises the first
        non not-found failure; otherwise `ExpandedNotAvailableError` when
        expanded documents are missing, or `ModelNotFoundError`.
        """

        targets = _unique(dtmis)
        if not targets:
            return {}

        kind = "expanded " if prefer_expanded else ""
        logger.info("Resolving %d %smodel(s): %s", len(targets), kind, ", ".join(map(str, targets)))

        results = await asyncio.gather(
            *(self._fetch_one(dtmi, prefer_expanded) for dtmi in targets),
            return_exceptions=True,
        )

        not_found: list[ModelNotFoundError] = []
        for result in results:
            if isinstance(result, ModelNotFoundError):
                not_found.append(result)
            elif isinstance(result, BaseException):
                raise result

        if not_found:
            if prefer_expanded:
                missing = [str(err.dtmi) for err in not_found]
                logger.info("Expanded document(s) not available: %s", ", ".join(missing))
                raise ExpandedNotAvailableError(missing) from not_found[0]
            raise not_found[0]

        model_map: ModelMap = {}
        for documents in results:
            for document in documents:
                model_map.setdefault(document.key, document)
        return model_map

    async def attempt_expanded(self, dtmis: Iterable[Dtmi | str]) -> ResolutionOutcome:
        """Try the expanded documents and report what the caller should do next.

        Cancellation is not an outcome and propagates unchanged.
        """

        try:
            models = await self.resolve(dtmis, prefer_expanded=True)
        except ExpandedNotAvailableError as exc:
            return ResolutionOutcome.fallback_required(exc)
        except ModelsRepositoryError as exc:
            return ResolutionOutcome.fatal(exc)
        return ResolutionOutcome.direct(models)

    async def _fetch_one(self, dtmi: Dtmi, expanded: bool) -> list[ModelDocument]:
        path = to_expanded_path(dtmi) if expanded else to_path(dtmi)
        try:
            payload = await self._fetcher.fetch(path)
        except ModelNotFoundError as exc:
            raise ModelNotFoundError(path, dtmi=str(dtmi)) from exc

        if expanded:
            documents = parse_expanded(payload, dtmi=str(dtmi))
            ids = [document.key for document in documents]
            if dtmi.normalized not in ids:
                raise IdentityMismatchError(str(dtmi), [document.id for document in documents])
            return documents

        document = parse_model(payload, dtmi=str(dtmi))
        if document.key != dtmi.normalized:
            raise IdentityMismatchError(str(dtmi), document.id)
        return [document]
