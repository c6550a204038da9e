"""Contrato de los fetchers de repositorio.

Por qué Protocol:
- El resolver solo necesita "ruta relativa -> bytes"; no le importa si el
  repositorio es una carpeta local o un endpoint HTTP.
- Permite inyectar fetchers en memoria en tests sin herencia rígida.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Fetcher(Protocol):
    """Contrato mínimo para leer documentos del repositorio.

    Reglas de diseño:
    - `fetch` es asíncrono: el resolver lanza muchos en paralelo.
    - Ausencia -> `ModelNotFoundError`; cualquier otro fallo de I/O ->
      `TransportError`.
    - Sin caché: el repositorio es la fuente de verdad en cada llamada.
    """

    async def fetch(self, path: str) -> bytes:
        """Devuelve el contenido de `path` (relativo a la raíz del repositorio)."""

        ...

    async def aclose(self) -> None:
        """Libera recursos de transporte (si los hay)."""

        ...
