"""Ejecuta la CLI `dtmi-resolver` (`get`, `path`, `validate`) desde `src/`.

Uso: `python -m main validate dtmi:com:example:Thermostat;1`. Instalado el
paquete, el script `dtmi-resolver` apunta al mismo `cli.main:run`.
"""

from __future__ import annotations

import sys

# Workaround for UnicodeEncodeError on Windows terminals/CI (cp1252 vs utf-8).
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
