"""Modelos del dominio (Pydantic v2).

Por qué Pydantic en el dominio:
- El documento DTDL es JSON dinámico; validamos la forma al parsear en vez de
  acceder a campos "a ciegas".
- Solo tipamos lo que el resolver necesita (`@id`, `extends`, `contents`); el
  resto de campos se conserva tal cual (`extra="allow"`).

Nota:
- No es un validador DTDL. Solo extrae las dos relaciones que forman el grafo
  de dependencias: `extends` y `Component.schema`.
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Union

from pydantic import BaseModel, Field, ValidationError
from pydantic.config import ConfigDict

from core.domain.dtmi import normalize_dtmi
from core.exceptions import MalformedModelError

ExtendsValue = Union[str, dict[str, Any], list[Union[str, dict[str, Any]]]]


class ModelDocument(BaseModel):
    """Documento de modelo DTDL (interface) tal como está en el repositorio."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(
        ...,
        alias="@id",
        min_length=1,
        description="DTMI del propio modelo.",
    )
    extends: ExtendsValue | None = Field(
        default=None,
        description="Interfaces base: un DTMI, un objeto inline o una lista de ambos.",
    )
    contents: list[dict[str, Any]] | None = Field(
        default=None,
        description="Elementos (Property, Telemetry, Component, ...).",
    )

    @property
    def key(self) -> str:
        """Clave normalizada en el model map."""

        return normalize_dtmi(self.id)

    def dependencies(self) -> set[str]:
        """DTMIs referenciados directamente (sin duplicados, ignorando mayúsculas)."""

        found: dict[str, str] = {}
        _collect_dependencies(self.as_dict(), found)
        return set(found.values())

    def as_dict(self) -> dict[str, Any]:
        """JSON original (con alias `@id`)."""

        return self.model_dump(by_alias=True, exclude_unset=True)


ModelMap = dict[str, ModelDocument]


def _is_component(type_value: object) -> bool:
    if isinstance(type_value, str):
        return type_value == "Component"
    if isinstance(type_value, list):
        return "Component" in type_value
    return False


def _collect_dependencies(node: Mapping[str, Any], found: dict[str, str]) -> None:
    contents = node.get("contents")
    if isinstance(contents, list):
        for element in contents:
            if not isinstance(element, Mapping) or not _is_component(element.get("@type")):
                continue
            schema = element.get("schema")
            if isinstance(schema, str):
                found.setdefault(normalize_dtmi(schema), schema)

    extends = node.get("extends")
    items = extends if isinstance(extends, list) else [extends]
    for item in items:
        if isinstance(item, str):
            found.setdefault(normalize_dtmi(item), item)
        elif isinstance(item, Mapping):
            # Inline interface: sus dependencias cuentan, el objeto no es arista.
            _collect_dependencies(item, found)


def _load_json(payload: bytes | str, dtmi: str | None) -> Any:
    try:
        return json.loads(payload)
    except ValueError as exc:
        raise MalformedModelError(f"Model payload is not valid JSON: {exc}", dtmi=dtmi) from exc


def _validate(data: Any, dtmi: str | None) -> ModelDocument:
    if not isinstance(data, dict):
        raise MalformedModelError(
            f"Model payload must be a JSON object, got {type(data).__name__}",
            dtmi=dtmi,
        )
    try:
        return ModelDocument.model_validate(data)
    except ValidationError as exc:
        raise MalformedModelError(f"Invalid model document: {exc}", dtmi=dtmi) from exc


def parse_model(payload: bytes | str, *, dtmi: str | None = None) -> ModelDocument:
    """Parsea un documento `.json` (un único objeto)."""

    return _validate(_load_json(payload, dtmi), dtmi)


def parse_expanded(payload: bytes | str, *, dtmi: str | None = None) -> list[ModelDocument]:
    """Parsea un documento `.expanded.json`.

    Formato del repositorio: array con el modelo raíz y toda su clausura.
    Se acepta también un objeto suelto.
    """

    data = _load_json(payload, dtmi)
    if isinstance(data, list):
        if not data:
            raise MalformedModelError("Expanded model document is empty", dtmi=dtmi)
        return [_validate(item, dtmi) for item in data]
    return [_validate(data, dtmi)]
