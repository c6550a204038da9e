"""Componentes de UI para CLI (Rich).

Por qué separar componentes:
- Evita mezclar lógica de comandos con detalles visuales.
- Permite reutilizar tablas en múltiples comandos.
"""

from __future__ import annotations

from typing import Iterable

from rich.table import Table

from core.domain.models import ModelMap


def _display_name(value: object) -> str:
    # displayName puede ser string o mapa por idioma.
    if isinstance(value, str):
        return value
    if isinstance(value, dict) and value:
        return str(value.get("en") or next(iter(value.values())))
    return ""


def build_models_table(models: ModelMap) -> Table:
    """Tabla con los modelos resueltos (uno por fila, orden por DTMI)."""

    table = Table(title=f"Resolved models ({len(models)})")
    table.add_column("DTMI", style="cyan", no_wrap=True)
    table.add_column("Display name", style="white")
    table.add_column("Dependencies", style="magenta")

    for key in sorted(models):
        document = models[key]
        raw = document.as_dict()
        dependencies = ", ".join(sorted(document.dependencies())) or "-"
        table.add_row(document.id, _display_name(raw.get("displayName")), dependencies)
    return table


def build_validation_table(results: Iterable[tuple[str, bool]]) -> Table:
    table = Table(title="DTMI validation")
    table.add_column("DTMI", style="cyan", no_wrap=True)
    table.add_column("Valid", style="white")
    for value, valid in results:
        table.add_row(value, "[green]yes[/green]" if valid else "[red]no[/red]")
    return table
