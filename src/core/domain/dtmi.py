"""Digital Twin Model Identifiers and the repository addressing convention.

A DTMI looks like `dtmi:com:example:Thermostat;1`. Models live in a repository
at a path derived from the identifier alone:

    dtmi:com:example:Thermostat;1 -> dtmi/com/example/thermostat-1.json

plus an `.expanded.json` variant holding the model together with its full
dependency closure. Everything here is pure: no I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from core.exceptions import InvalidDtmiFormatError

_SEGMENT = r"[A-Za-z](?:[A-Za-z0-9_]*[A-Za-z0-9])?"
_DTMI_RE = re.compile(rf"^dtmi:{_SEGMENT}(?::{_SEGMENT})*;[1-9][0-9]{{0,8}}$")

JSON_SUFFIX = ".json"
EXPANDED_SUFFIX = ".expanded.json"


def is_valid_dtmi(value: str) -> bool:
    return isinstance(value, str) and _DTMI_RE.match(value) is not None


def normalize_dtmi(value: str) -> str:
    """Case-folded form used as model map key."""

    return value.strip().lower()


@dataclass(frozen=True, eq=False)
class Dtmi:
    """Parsed, immutable DTMI. Equality ignores case."""

    value: str

    def __post_init__(self) -> None:
        if not is_valid_dtmi(self.value):
            raise InvalidDtmiFormatError(self.value)

    @classmethod
    def parse(cls, value: "Dtmi | str") -> "Dtmi":
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidDtmiFormatError(repr(value))
        return cls(value.strip())

    @property
    def normalized(self) -> str:
        return self.value.lower()

    @property
    def segments(self) -> list[str]:
        """Path segments, `dtmi` scheme included."""

        return self.value.split(";", 1)[0].split(":")

    @property
    def version(self) -> int:
        return int(self.value.rsplit(";", 1)[1])

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Dtmi):
            return self.normalized == other.normalized
        if isinstance(other, str):
            return self.normalized == normalize_dtmi(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.normalized)

    def __str__(self) -> str:
        return self.value


def _base_path(dtmi: Dtmi | str) -> str:
    parsed = Dtmi.parse(dtmi)
    segments = [segment.lower() for segment in parsed.segments]
    return f"{'/'.join(segments)}-{parsed.version}"


def to_path(dtmi: Dtmi | str) -> str:
    """Repository-relative path of a model document."""

    return _base_path(dtmi) + JSON_SUFFIX


def to_expanded_path(dtmi: Dtmi | str) -> str:
    """Repository-relative path of the expanded (closure) document."""

    return _base_path(dtmi) + EXPANDED_SUFFIX


def get_model_uri(dtmi: Dtmi | str, repository_uri: str, expanded: bool = False) -> str:
    """Full location of a model: repository root joined with its path."""

    relative = to_expanded_path(dtmi) if expanded else to_path(dtmi)
    return f"{repository_uri.rstrip('/')}/{relative}"
