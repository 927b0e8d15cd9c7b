"""Bounded-concurrency access to the shared translation engine.

Every load and translate call enters the engine through :class:`EngineGuard`.
At most ``max_concurrency`` calls run inside the engine at once; callers
beyond that wait and are admitted strictly in arrival order.
"""

from __future__ import annotations

import threading
from collections import deque
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Deque, Iterator, TypeVar

from .core.protocol import EngineCapabilities, TranslationEngine
from .core.types import AppError, EngineFault, EngineFaultKind

T = TypeVar("T")


class FifoGate:
    """Counting gate that admits waiters in FIFO order."""

    def __init__(self, limit: int) -> None:
        if limit <= 0:
            raise ValueError("limit must be positive")
        self.limit = limit
        self._cond = threading.Condition(threading.Lock())
        self._waiting: Deque[object] = deque()
        self._active = 0

    def acquire(self) -> None:
        ticket = object()
        with self._cond:
            self._waiting.append(ticket)
            self._cond.wait_for(lambda: self._waiting[0] is ticket and self._active < self.limit)
            self._waiting.popleft()
            self._active += 1
            # The next in line may also fit under the limit
            self._cond.notify_all()

    def release(self) -> None:
        with self._cond:
            if self._active <= 0:
                raise RuntimeError("release() without matching acquire()")
            self._active -= 1
            self._cond.notify_all()

    @contextmanager
    def slot(self) -> Iterator[None]:
        self.acquire()
        try:
            yield
        finally:
            self.release()

    @property
    def active(self) -> int:
        with self._cond:
            return self._active

    @property
    def waiting(self) -> int:
        with self._cond:
            return len(self._waiting)


class EngineGuard:
    """Capability object wrapping the one engine instance.

    Anything the engine raises that is not already an :class:`AppError`
    (normally an :class:`EngineFault`) is reported as ``EngineFault(NATIVE)``
    with the original exception chained.
    """

    def __init__(self, engine: TranslationEngine, max_concurrency: int = 1) -> None:
        self._engine = engine
        self._gate = FifoGate(max_concurrency)

    @property
    def max_concurrency(self) -> int:
        return self._gate.limit

    @property
    def in_flight(self) -> int:
        return self._gate.active

    @property
    def waiting(self) -> int:
        return self._gate.waiting

    def _call(self, fn: Callable[[], T]) -> T:
        with self._gate.slot():
            try:
                return fn()
            except AppError:
                raise
            except Exception as exc:
                raise EngineFault(f"{type(exc).__name__}: {exc}", EngineFaultKind.NATIVE) from exc

    def load(self, pair_name: str, model_path: Path) -> None:
        self._call(lambda: self._engine.load(pair_name, model_path))

    def is_supported(self, source: str, target: str) -> bool:
        return self._call(lambda: self._engine.is_supported(source, target))

    def translate(self, source: str, target: str, text: str) -> str:
        return self._call(lambda: self._engine.translate(source, target, text))

    def capabilities(self) -> EngineCapabilities:
        return self._engine.capabilities()
