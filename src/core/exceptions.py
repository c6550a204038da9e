"""Errores del resolver de modelos.

Por qué una jerarquía propia:
- La CLI y los llamadores pueden capturar `ModelsRepositoryError` sin conocer
  cada fallo concreto.
- Cada error lleva un `code` estable, útil para logs y salidas JSON.
"""

from __future__ import annotations


class ModelsRepositoryError(Exception):
    """Base de todos los errores del resolver."""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class InvalidDtmiFormatError(ModelsRepositoryError, ValueError):
    """El identificador no cumple `dtmi:<segmentos>;<versión>`."""

    code = "INVALID_DTMI"

    def __init__(self, dtmi: str) -> None:
        super().__init__(f"Invalid DTMI format: {dtmi!r}")
        self.dtmi = dtmi


class ModelNotFoundError(ModelsRepositoryError):
    """El documento no existe en el repositorio."""

    code = "NOT_FOUND"

    def __init__(self, path: str, dtmi: str | None = None) -> None:
        target = f"{dtmi} ({path})" if dtmi else path
        super().__init__(f"Model not found in repository: {target}")
        self.path = path
        self.dtmi = dtmi


class TransportError(ModelsRepositoryError):
    """Fallo de red o de disco distinto de "no encontrado"."""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, *, path: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message)
        self.path = path
        self.status_code = status_code


class MalformedModelError(ModelsRepositoryError):
    """El payload no es un documento de modelo válido."""

    code = "MALFORMED_MODEL"

    def __init__(self, message: str, *, dtmi: str | None = None) -> None:
        super().__init__(message)
        self.dtmi = dtmi


class IdentityMismatchError(ModelsRepositoryError):
    """El `@id` del documento no coincide con el DTMI pedido."""

    code = "IDENTITY_MISMATCH"

    def __init__(self, requested: str, found: str | list[str]) -> None:
        super().__init__(f"Fetched model id {found!r} does not match requested DTMI {requested!r}")
        self.requested = requested
        self.found = found


class ExpandedNotAvailableError(ModelsRepositoryError):
    """Señal interna: falta algún documento `.expanded.json`.

    Solo el cliente la consume para caer al modo sin expandir; nunca llega al
    llamador de `get_models`.
    """

    code = "EXPANDED_NOT_AVAILABLE"

    def __init__(self, dtmis: list[str]) -> None:
        super().__init__(f"Expanded model document not available for: {', '.join(dtmis)}")
        self.dtmis = dtmis


class InvalidRepositoryLocationError(ModelsRepositoryError):
    """La ubicación del repositorio no es ni ruta local ni URL soportada."""

    code = "INVALID_LOCATION"

    def __init__(self, location: str) -> None:
        super().__init__(f"Unable to identify repository location: {location!r}")
        self.location = location


class InvalidResolutionModeError(ModelsRepositoryError, ValueError):
    """Modo de resolución de dependencias desconocido."""

    code = "INVALID_RESOLUTION_MODE"

    def __init__(self, mode: object) -> None:
        super().__init__(f"Invalid dependency resolution mode: {mode!r}")
        self.mode = mode
