"""Application state shared by every request."""

from __future__ import annotations

import threading
from typing import Iterable, Optional

from linguaserve.logging import PerformanceMetrics, StructuredLogger, create_logger

from .core.protocol import TranslationEngine
from .core.types import LanguagePair
from .guard import EngineGuard
from .model_registry import ModelRegistry
from .resolver import RoutingPolicy


class AppState:
    """The engine guard, the loaded-pair registry and the routing policy.

    Built once at startup and handed to request handlers by reference. Only
    model loads mutate it, through :attr:`registry`.
    """

    def __init__(
        self,
        engine: TranslationEngine,
        *,
        workers: int = 1,
        policy: Optional[RoutingPolicy] = None,
        pairs: Optional[Iterable[LanguagePair]] = None,
        logger: Optional[StructuredLogger] = None,
    ) -> None:
        self.guard = EngineGuard(engine, max_concurrency=workers)
        self.registry = ModelRegistry(pairs)
        self.load_lock = threading.Lock()
        self.policy = policy or RoutingPolicy()
        self.logger = logger or create_logger(component="translation")
        self.metrics = PerformanceMetrics(logger=self.logger, component="translation")
        self.metrics.set_threshold("translation_latency", warning=1500.0, critical=5000.0)
        self.metrics.set_threshold("model_load_time", warning=10000.0, critical=30000.0)

    @property
    def workers(self) -> int:
        return self.guard.max_concurrency
