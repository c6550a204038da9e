"""Shared fixtures: in-memory model repositories and a counting fetcher."""

from __future__ import annotations

import asyncio
import json
from collections import Counter
from pathlib import Path
from typing import Any, Callable

import pytest

from core.domain.dtmi import to_expanded_path, to_path
from core.exceptions import ModelNotFoundError, TransportError


def build_model(
    dtmi: str,
    *,
    extends: Any = None,
    components: tuple[str, ...] | list[str] = (),
    **extra: Any,
) -> dict[str, Any]:
    """Minimal DTDL interface document."""

    document: dict[str, Any] = {
        "@context": "dtmi:dtdl:context;2",
        "@id": dtmi,
        "@type": "Interface",
    }
    if extends is not None:
        document["extends"] = extends
    contents: list[dict[str, Any]] = [
        {"@type": "Property", "name": "serialNumber", "schema": "string"},
    ]
    for index, schema in enumerate(components):
        contents.append({"@type": "Component", "name": f"component{index}", "schema": schema})
    document["contents"] = contents
    document.update(extra)
    return document


class MemoryFetcher:
    """Fetcher over a dict of path -> payload that records every request."""

    def __init__(self, documents: dict[str, Any], failures: dict[str, Exception] | None = None) -> None:
        self.documents = documents
        self.failures = failures or {}
        self.calls: list[str] = []
        self.closed = False

    @property
    def counts(self) -> Counter[str]:
        return Counter(self.calls)

    async def fetch(self, path: str) -> bytes:
        self.calls.append(path)
        await asyncio.sleep(0)
        if path in self.failures:
            raise self.failures[path]
        if path not in self.documents:
            raise ModelNotFoundError(path)
        payload = self.documents[path]
        if isinstance(payload, bytes):
            return payload
        return json.dumps(payload).encode("utf-8")

    async def aclose(self) -> None:
        self.closed = True


class ModelRepo:
    """Builds a repository layout keyed by the addressing convention."""

    def __init__(self) -> None:
        self.documents: dict[str, Any] = {}
        self.failures: dict[str, Exception] = {}

    def add(self, document: dict[str, Any], *, path: str | None = None) -> dict[str, Any]:
        self.documents[path or to_path(document["@id"])] = document
        return document

    def add_expanded(self, dtmi: str, documents: list[dict[str, Any]]) -> None:
        self.documents[to_expanded_path(dtmi)] = documents

    def fail(self, dtmi: str, error: Exception | None = None, *, expanded: bool = False) -> None:
        path = to_expanded_path(dtmi) if expanded else to_path(dtmi)
        self.failures[path] = error or TransportError("boom", path=path)

    def fetcher(self) -> MemoryFetcher:
        return MemoryFetcher(self.documents, self.failures)

    def write_to(self, root: Path) -> Path:
        for relative, payload in self.documents.items():
            target = root.joinpath(*relative.split("/"))
            target.parent.mkdir(parents=True, exist_ok=True)
            data = payload if isinstance(payload, bytes) else json.dumps(payload).encode("utf-8")
            target.write_bytes(data)
        return root


@pytest.fixture
def make_model() -> Callable[..., dict[str, Any]]:
    return build_model


@pytest.fixture
def repo() -> ModelRepo:
    return ModelRepo()


@pytest.fixture
def thermostat_repo(repo: ModelRepo) -> ModelRepo:
    """Thermostat extends Device; Device has no dependencies."""

    repo.add(build_model("dtmi:com:example:Thermostat;1", extends="dtmi:com:example:Device;1"))
    repo.add(build_model("dtmi:com:example:Device;1"))
    return repo
