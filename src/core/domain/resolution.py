"""Dependency resolution modes and resolution outcomes.

The mode governs how the client deals with model dependencies. The outcome is
the explicit result of trying the expanded documents first, so the client can
branch on a tag instead of catching errors.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, NoReturn

from core.exceptions import InvalidResolutionModeError, ModelsRepositoryError

if TYPE_CHECKING:
    from core.domain.models import ModelDocument


class DependencyResolution(str, Enum):
    """How the client resolves model dependencies."""

    DISABLED = "disabled"
    ENABLED = "enabled"
    TRY_FROM_EXPANDED = "tryFromExpanded"

    @classmethod
    def default(cls, custom_repository: bool) -> "DependencyResolution":
        """Custom location -> enabled; default public repository -> tryFromExpanded."""

        return cls.ENABLED if custom_repository else cls.TRY_FROM_EXPANDED

    @classmethod
    def parse(cls, value: "DependencyResolution | str") -> "DependencyResolution":
        if isinstance(value, cls):
            return value
        for member in cls:
            if isinstance(value, str) and value.strip().lower() == member.value.lower():
                return member
        raise InvalidResolutionModeError(value)


class OutcomeKind(str, Enum):
    DIRECT = "direct"
    FALLBACK_REQUIRED = "fallback_required"
    FATAL = "fatal"


@dataclass
class ResolutionOutcome:
    """Tagged result of an expanded-first resolution attempt."""

    kind: OutcomeKind
    models: dict[str, ModelDocument] = field(default_factory=dict)
    error: ModelsRepositoryError | None = None

    @classmethod
    def direct(cls, models: dict[str, ModelDocument]) -> "ResolutionOutcome":
        return cls(kind=OutcomeKind.DIRECT, models=models)

    @classmethod
    def fallback_required(cls, error: ModelsRepositoryError) -> "ResolutionOutcome":
        return cls(kind=OutcomeKind.FALLBACK_REQUIRED, error=error)

    @classmethod
    def fatal(cls, error: ModelsRepositoryError) -> "ResolutionOutcome":
        return cls(kind=OutcomeKind.FATAL, error=error)

    def raise_error(self) -> NoReturn:
        """Raise the error carried by a fallback or fatal outcome."""

        if self.error is None:
            raise RuntimeError(f"{self.kind.value} outcome carries no error")
        raise self.error
