"""Exportación JSON del model map.

Por qué JSON:
- Interoperabilidad con parsers DTDL y pipelines que esperan los documentos tal cual.
- Formato estable (claves ordenadas) para poder versionar o comparar resultados.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.domain.models import ModelMap


def models_payload(models: ModelMap) -> dict[str, Any]:
    """Model map -> dict JSON-serializable (DTMI normalizado -> documento original)."""

    return {key: models[key].as_dict() for key in sorted(models)}


def export_models_json(*, models: ModelMap, output_path: Path) -> Path:
    """Exporta el model map a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(
        json.dumps(models_payload(models), ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
