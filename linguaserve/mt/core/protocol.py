"""MT engine protocol.

The engine is stateful: pairs are loaded into it one model directory at a
time and stay resident for the life of the process. Language arguments are
two-letter codes.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, TypedDict, runtime_checkable


class EngineCapabilities(TypedDict):
    """Engine capability metadata."""

    family: str  # "ct2-marian" | "fake" | ...
    loaded: list[str]  # model names, e.g. ["enzh", "zhen"]
    workers: int
    device: str


@runtime_checkable
class TranslationEngine(Protocol):
    """Narrow surface the orchestration layer uses.

    Failures are reported by raising
    :class:`~linguaserve.mt.core.types.EngineFault` with a structured
    ``fault`` sub-kind.
    """

    def load(self, pair_name: str, model_path: Path) -> None:
        """Load the model directory for ``pair_name`` (e.g. ``enzh``)."""
        ...

    def is_supported(self, source: str, target: str) -> bool:
        """Whether a model for ``source -> target`` is resident."""
        ...

    def translate(self, source: str, target: str, text: str) -> str:
        """Translate ``text`` with the resident ``source -> target`` model."""
        ...

    def capabilities(self) -> EngineCapabilities:
        ...
