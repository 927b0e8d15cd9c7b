"""Registry of language pairs currently resident in the engine."""

from __future__ import annotations

import threading
from typing import Iterable, Optional

from .core.types import LanguagePair


class ModelRegistry:
    """Copy-on-write set of loaded pairs.

    Readers get an immutable ``frozenset``; ``add`` swaps in a new set under a
    lock, so a snapshot taken before a load never changes underneath its
    holder.
    """

    def __init__(self, pairs: Optional[Iterable[LanguagePair]] = None) -> None:
        self._lock = threading.Lock()
        self._pairs: frozenset[LanguagePair] = frozenset(pairs or ())

    def snapshot(self) -> frozenset[LanguagePair]:
        return self._pairs

    def is_supported(self, pair: LanguagePair) -> bool:
        return pair in self._pairs

    def add(self, pair: LanguagePair) -> bool:
        """Record ``pair`` as loaded. Returns False if it was already present."""
        with self._lock:
            if pair in self._pairs:
                return False
            self._pairs = self._pairs | {pair}
            return True

    def __len__(self) -> int:
        return len(self._pairs)

    def __contains__(self, pair: object) -> bool:
        return pair in self._pairs

    def sorted_pairs(self) -> list[LanguagePair]:
        return sorted(self._pairs, key=lambda p: p.model_name)
