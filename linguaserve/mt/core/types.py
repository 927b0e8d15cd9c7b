"""MT core types and error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from linguaserve.languages import Language


@dataclass(frozen=True)
class LanguagePair:
    """Directional (source, target) pair. ``(en, zh)`` and ``(zh, en)`` differ."""

    source: Language
    target: Language

    @classmethod
    def from_model_name(cls, name: str) -> "LanguagePair":
        """Split a ``<src2><tgt2>`` model directory name, e.g. ``enzh``.

        Raises:
            ValueError: if the name is not four characters or either half is
                not a known two-letter code
        """
        if len(name) != 4:
            raise ValueError(f"Model name must be 4 characters (<src><tgt>), got: {name!r}")
        return cls(Language.from_639_1(name[:2]), Language.from_639_1(name[2:]))

    @property
    def model_name(self) -> str:
        return f"{self.source.code}{self.target.code}"

    def reversed(self) -> "LanguagePair":
        return LanguagePair(self.target, self.source)

    def __str__(self) -> str:
        return f"{self.source.code}->{self.target.code}"


class ErrorKind(str, Enum):
    """Stable tags callers branch on."""

    SOURCE_LANGUAGE_REQUIRED = "source_language_required"
    NO_ROUTE_AVAILABLE = "no_route_available"
    ENGINE_FAULT = "engine_fault"
    CONFIGURATION_FAULT = "configuration_fault"
    ACCESS_DENIED = "access_denied"


class EngineFaultKind(str, Enum):
    """Sub-kind reported by the engine collaborator."""

    NATIVE = "native"
    MALFORMED_INPUT = "malformed_input"
    UNSUPPORTED_PAIR = "unsupported_pair"


class AppError(Exception):
    """Base of every failure the translation layer reports."""

    kind: ErrorKind

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict:
        return {"error": self.kind.value, "detail": str(self)}


class SourceLanguageRequired(AppError):
    kind = ErrorKind.SOURCE_LANGUAGE_REQUIRED

    def __init__(self, target: Optional[Language] = None) -> None:
        detail = "source language is required"
        if target is not None:
            detail += f" (target {target.code}, no default source configured)"
        super().__init__(detail)
        self.target = target


class NoRouteAvailable(AppError):
    kind = ErrorKind.NO_ROUTE_AVAILABLE

    def __init__(self, requested: LanguagePair, pivot: Optional[Language] = None) -> None:
        detail = f"no model route for {requested}"
        if pivot is not None:
            detail += f" (direct or via {pivot.code})"
        super().__init__(detail)
        self.requested = requested
        self.pivot = pivot


class EngineFault(AppError):
    """The engine failed while loading or translating.

    ``hop``, ``pair`` and ``requested`` are filled in by the orchestrator so a
    failure in the second leg of a pivot route can be told apart from the
    first.
    """

    kind = ErrorKind.ENGINE_FAULT

    def __init__(
        self,
        detail: str,
        fault: EngineFaultKind = EngineFaultKind.NATIVE,
        *,
        pair: Optional[LanguagePair] = None,
    ) -> None:
        super().__init__(detail)
        self.fault = fault
        self.pair = pair
        self.hop: Optional[int] = None
        self.requested: Optional[LanguagePair] = None

    def annotate(self, *, hop: int, pair: LanguagePair, requested: LanguagePair) -> "EngineFault":
        self.hop = hop
        self.pair = pair
        self.requested = requested
        return self

    def __str__(self) -> str:
        where = []
        if self.hop is not None:
            where.append(f"hop {self.hop}")
        if self.pair is not None:
            where.append(str(self.pair))
        if self.requested is not None and self.requested != self.pair:
            where.append(f"requested {self.requested}")
        prefix = f"[{', '.join(where)}] " if where else ""
        return f"{prefix}{self.fault.value}: {self.detail}"

    def to_dict(self) -> dict:
        out = super().to_dict()
        out["fault"] = self.fault.value
        if self.hop is not None:
            out["hop"] = self.hop
        return out


class ConfigurationFault(AppError):
    kind = ErrorKind.CONFIGURATION_FAULT


class AccessDenied(AppError):
    kind = ErrorKind.ACCESS_DENIED

    def __init__(self, detail: str = "unauthorized") -> None:
        super().__init__(detail)
