"""Entry point de desarrollo de `dtmi-resolver` sin instalar el paquete.

Ejemplos desde la raíz del repo:
- `python main.py get dtmi:com:example:Thermostat;1 -r ./models --json`
- `python main.py path dtmi:com:example:Thermostat;1 --expanded`

Añade `src/` al `sys.path` para que `cli`, `core` y `adapters` sean importables
sin editable install.
"""

from __future__ import annotations

import sys
from pathlib import Path


def main() -> None:
    project_root = Path(__file__).resolve().parent
    src = project_root / "src"
    if str(src) not in sys.path:
        sys.path.insert(0, str(src))

    from cli.main import run  # noqa: PLC0415

    run()


if __name__ == "__main__":
    main()
