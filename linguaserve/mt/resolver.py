"""Resolve a (source?, target) request to a route over loaded pairs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Optional

from linguaserve.languages import Language, parse_language

from .core.types import LanguagePair, NoRouteAvailable, SourceLanguageRequired


@dataclass(frozen=True)
class RoutingPolicy:
    """Routing knobs.

    ``pivot`` is the single language tried for two-hop routes; None disables
    pivoting. ``default_source`` is substituted when a request has no source;
    None makes the source mandatory.
    """

    pivot: Optional[Language] = None
    default_source: Optional[Language] = None

    @classmethod
    def from_codes(cls, pivot: str = "", default_source: str = "") -> "RoutingPolicy":
        return cls(
            pivot=parse_language(pivot) if pivot else None,
            default_source=parse_language(default_source) if default_source else None,
        )


@dataclass(frozen=True)
class Route:
    hops: tuple[LanguagePair, ...]
    source: Language
    target: Language
    defaulted_source: bool = False

    @property
    def is_direct(self) -> bool:
        return len(self.hops) == 1

    @property
    def requested(self) -> LanguagePair:
        return LanguagePair(self.source, self.target)

    @property
    def pivot(self) -> Optional[Language]:
        return None if self.is_direct else self.hops[0].target


def resolve(
    snapshot: AbstractSet[LanguagePair],
    source_hint: Optional[Language],
    target: Language,
    policy: RoutingPolicy = RoutingPolicy(),
) -> Route:
    """Pick the route for a request against one registry snapshot.

    A direct model always wins. Otherwise only ``policy.pivot`` is tried,
    which costs two more set lookups.

    Raises:
        SourceLanguageRequired: no ``source_hint`` and no default source
        NoRouteAvailable: neither a direct nor a pivot route is loaded
    """
    defaulted = False
    source = source_hint
    if source is None:
        if policy.default_source is None:
            raise SourceLanguageRequired(target)
        source = policy.default_source
        defaulted = True

    direct = LanguagePair(source, target)
    if direct in snapshot:
        return Route((direct,), source, target, defaulted)

    pivot = policy.pivot
    if pivot is None or pivot == source or pivot == target:
        raise NoRouteAvailable(direct)

    first = LanguagePair(source, pivot)
    second = LanguagePair(pivot, target)
    if first in snapshot and second in snapshot:
        return Route((first, second), source, target, defaulted)
    raise NoRouteAvailable(direct, pivot)
