"""Dependency closure expansion.

Starting from already fetched models, walk `extends` and `Component.schema`
edges level by level. Each level resolves the union of its outstanding
dependencies as one concurrent batch, so diamonds are fetched once and the
batch join acts as the barrier before the next level. "Key already in the
map" is the only stop condition, which also terminates cycles.
"""

from __future__ import annotations

import logging
from typing import Iterable

from core.domain.dtmi import normalize_dtmi
from core.domain.models import ModelDocument, ModelMap
from core.domain.resolution import OutcomeKind
from core.services.resolver import DtmiResolver

logger = logging.getLogger(__name__)


class ModelExpander:
    def __init__(self, resolver: DtmiResolver) -> None:
        self._resolver = resolver

    async def expand(self, models: Iterable[ModelDocument], prefer_expanded: bool = False) -> ModelMap:
        """Return `models` plus every model they transitively depend on.

        With `prefer_expanded`, each batch tries the expanded documents first
        and retries the same batch without them when they are not available.
        Any other failure aborts the whole expansion; the in-progress map is
        never returned.
        """

        model_map: ModelMap = {}
        for model in models:
            model_map.setdefault(model.key, model)

        frontier = list(model_map.values())
        level = 0
        while frontier:
            outstanding: dict[str, str] = {}
            for model in frontier:
                logger.debug("Expanding model: %s", model.id)
                for dependency in model.dependencies():
                    key = normalize_dtmi(dependency)
                    if key not in model_map:
                        outstanding.setdefault(key, dependency)

            if not outstanding:
                break

            level += 1
            logger.info(
                "Outstanding dependencies (level %d): %s",
                level,
                ", ".join(sorted(outstanding.values())),
            )
            resolved = await self._resolve_batch(list(outstanding.values()), prefer_expanded)

            frontier = []
            for key, document in resolved.items():
                if key in model_map:
                    continue
                model_map[key] = document
                frontier.append(document)

        return model_map

    async def _resolve_batch(self, dtmis: list[str], prefer_expanded: bool) -> ModelMap:
        if not prefer_expanded:
            return await self._resolver.resolve(dtmis)

        outcome = await self._resolver.attempt_expanded(dtmis)
        if outcome.kind is OutcomeKind.DIRECT:
            return outcome.models
        if outcome.kind is OutcomeKind.FALLBACK_REQUIRED:
            logger.info("Expanded dependencies unavailable, retrying batch without expansion")
            return await self._resolver.resolve(dtmis)
        outcome.raise_error()
