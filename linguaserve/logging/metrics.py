"""Performance metrics collection with structured logging integration."""

from __future__ import annotations

import threading
import time
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, Iterator, List, Optional

from .structured import StructuredLogger


@dataclass
class MetricValue:
    timestamp: float
    value: float
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class MetricStats:
    """Statistical summary of metric measurements."""

    count: int = 0
    sum: float = 0.0
    min: Optional[float] = None
    max: Optional[float] = None
    avg: Optional[float] = None
    p50: Optional[float] = None
    p95: Optional[float] = None


class PerformanceMetrics:
    """Collect latency samples and counters from concurrent request threads."""

    def __init__(
        self,
        logger: Optional[StructuredLogger] = None,
        window_size: int = 1000,
        component: Optional[str] = None,
    ) -> None:
        """Initialize performance metrics collector.

        Args:
            logger: Optional structured logger for threshold alerts
            window_size: Size of sliding window kept per latency metric
            component: Component name for the metrics namespace
        """
        self.logger = logger
        self.component = component or "unknown"
        self.window_size = window_size

        self.metrics: Dict[str, Deque[MetricValue]] = {}
        self.counters: Dict[str, float] = {}
        self.thresholds: Dict[str, Dict[str, float]] = {}
        self._lock = threading.Lock()

    def record_latency(self, name: str, duration_ms: float, **metadata: Any) -> None:
        with self._lock:
            if name not in self.metrics:
                self.metrics[name] = deque(maxlen=self.window_size)
            self.metrics[name].append(
                MetricValue(timestamp=time.time(), value=duration_ms, metadata=metadata)
            )
        self._check_thresholds(name, duration_ms)

    def increment_counter(self, name: str, value: float = 1.0) -> None:
        with self._lock:
            self.counters[name] = self.counters.get(name, 0.0) + value

    @contextmanager
    def timer(self, name: str, **metadata: Any) -> Iterator[Dict[str, float]]:
        """Time the enclosed block and record it as latency ``name``.

        The yielded dict receives ``duration_ms`` once the block exits, whether
        it exits normally or by exception.
        """
        out: Dict[str, float] = {}
        start = time.perf_counter()
        try:
            yield out
        finally:
            out["duration_ms"] = (time.perf_counter() - start) * 1000.0
            self.record_latency(name, out["duration_ms"], **metadata)

    def set_threshold(
        self,
        name: str,
        warning: Optional[float] = None,
        critical: Optional[float] = None,
    ) -> None:
        limits: Dict[str, float] = {}
        if warning is not None:
            limits["warning"] = warning
        if critical is not None:
            limits["critical"] = critical
        with self._lock:
            self.thresholds[name] = limits

    def _check_thresholds(self, name: str, value: float) -> None:
        limits = self.thresholds.get(name)
        if not limits or not self.logger:
            return

        if "critical" in limits and value >= limits["critical"]:
            self.logger.critical(
                f"Metric threshold exceeded (critical): {name}",
                metric_name=name,
                metric_value=value,
                threshold_value=limits["critical"],
            )
        elif "warning" in limits and value >= limits["warning"]:
            self.logger.warning(
                f"Metric threshold exceeded (warning): {name}",
                metric_name=name,
                metric_value=value,
                threshold_value=limits["warning"],
            )

    def get_stats(self, name: str) -> Optional[MetricStats]:
        with self._lock:
            values: List[float] = [m.value for m in self.metrics.get(name, ())]
        if not values:
            return None

        ordered = sorted(values)
        n = len(ordered)
        total = sum(ordered)
        return MetricStats(
            count=n,
            sum=total,
            min=ordered[0],
            max=ordered[-1],
            avg=total / n,
            p50=ordered[n // 2],
            p95=ordered[int(n * 0.95)] if n > 1 else ordered[0],
        )

    def get_all_metrics(self) -> Dict[str, Any]:
        with self._lock:
            names = list(self.metrics)
            counters = dict(self.counters)

        summary: Dict[str, Any] = {}
        for name in names:
            stats = self.get_stats(name)
            if stats:
                summary[name] = {
                    "count": stats.count,
                    "avg": stats.avg,
                    "min": stats.min,
                    "max": stats.max,
                    "p50": stats.p50,
                    "p95": stats.p95,
                }
        return {
            "component": self.component,
            "timestamp": time.time(),
            "counters": counters,
            "metrics": summary,
        }

    def reset(self) -> None:
        with self._lock:
            self.metrics.clear()
            self.counters.clear()
