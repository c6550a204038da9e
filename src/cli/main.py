"""CLI (Typer) del resolver de modelos.

Comandos:
- `get`:      resuelve uno o más DTMIs (y sus dependencias según el modo).
- `path`:     muestra la ruta/URI de un DTMI en el repositorio.
- `validate`: comprueba el formato de uno o más DTMIs.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console

from adapters.json_exporter import export_models_json, models_payload
from cli.ui_components import build_models_table, build_validation_table
from core.config import AppSettings
from core.domain.dtmi import get_model_uri, is_valid_dtmi, to_expanded_path, to_path
from core.domain.models import ModelMap
from core.domain.resolution import DependencyResolution
from core.exceptions import ModelsRepositoryError
from core.logging_config import setup_logging
from core.services.models_repository import ModelsRepositoryClient

app = typer.Typer(
    no_args_is_help=True,
    help="Resolve DTDL models and their dependencies from a models repository.",
)

_console = Console()
_err_console = Console(stderr=True)


def _fail(exc: ModelsRepositoryError) -> typer.Exit:
    _err_console.print(f"[red]{exc.code}[/red]: {exc}")
    return typer.Exit(code=1)


@app.callback()
def main(
    log_level: str = typer.Option("WARNING", "--log-level", help="DEBUG, INFO, WARNING, ERROR."),
    log_json: bool = typer.Option(False, "--log-json", help="Structured JSON logs on stderr."),
) -> None:
    setup_logging(log_level, json_output=log_json)


async def _get_models(
    dtmis: list[str],
    *,
    repository: str | None,
    resolution: DependencyResolution | None,
    settings: AppSettings,
) -> ModelMap:
    async with ModelsRepositoryClient(repository, resolution, settings=settings) as client:
        return await client.get_models(dtmis)


@app.command()
def get(
    dtmis: List[str] = typer.Argument(..., help="One or more DTMIs."),
    repository: Optional[str] = typer.Option(
        None, "--repository", "-r", help="Local path, file:// URI or http(s) URL of the repository."
    ),
    resolution: Optional[DependencyResolution] = typer.Option(
        None, "--resolution", "-d", case_sensitive=False, help="Dependency resolution mode."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the model map as JSON."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Also write the model map to a JSON file."),
) -> None:
    """Retrieve models (and their dependencies) by DTMI."""

    settings = AppSettings()
    try:
        models = asyncio.run(_get_models(dtmis, repository=repository, resolution=resolution, settings=settings))
    except ModelsRepositoryError as exc:
        raise _fail(exc) from exc

    if output is not None:
        export_models_json(models=models, output_path=output)
        _err_console.print(f"[green]Saved {len(models)} model(s) to:[/green] {output}")

    if as_json:
        typer.echo(json.dumps(models_payload(models), ensure_ascii=False, indent=2))
    else:
        _console.print(build_models_table(models))


@app.command()
def path(
    dtmi: str = typer.Argument(..., help="DTMI to locate."),
    expanded: bool = typer.Option(False, "--expanded", help="Path of the expanded document."),
    repository: Optional[str] = typer.Option(None, "--repository", "-r", help="Prefix with this repository root."),
) -> None:
    """Show where a DTMI lives in the repository."""

    try:
        if repository:
            typer.echo(get_model_uri(dtmi, repository, expanded=expanded))
        else:
            typer.echo(to_expanded_path(dtmi) if expanded else to_path(dtmi))
    except ModelsRepositoryError as exc:
        raise _fail(exc) from exc


@app.command()
def validate(dtmis: List[str] = typer.Argument(..., help="One or more DTMIs.")) -> None:
    """Check DTMI format; exit code 1 if any is invalid."""

    results = [(value, is_valid_dtmi(value)) for value in dtmis]
    _console.print(build_validation_table(results))
    if not all(valid for _, valid in results):
        raise typer.Exit(code=1)


def run() -> None:
    app()
