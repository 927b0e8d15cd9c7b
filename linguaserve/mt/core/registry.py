"""Engine factory registry.

Engines register a factory under a short name on import; the name in
``LS_ENGINE`` selects which one the server builds at startup.
"""

from __future__ import annotations

from typing import Any, Callable, Dict

from .protocol import TranslationEngine

EngineFactory = Callable[..., TranslationEngine]
_registry: Dict[str, EngineFactory] = {}


def register_engine(name: str, factory: EngineFactory) -> None:
    """Register an engine factory by name."""
    _registry[name] = factory


def available_engines() -> list[str]:
    """Get list of registered engine names."""
    return sorted(_registry.keys())


def create_engine(name: str, **options: Any) -> TranslationEngine:
    """Create an engine instance by name, passing ``options`` to its factory."""
    try:
        factory = _registry[name]
    except KeyError:
        raise ValueError(f"Unknown MT engine: {name}") from None
    return factory(**options)
