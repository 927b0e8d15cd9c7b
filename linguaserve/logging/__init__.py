"""Structured logging and metrics for linguaserve."""

from .structured import StructuredLogger, LogLevel, create_logger
from .metrics import PerformanceMetrics
from .redaction import DataRedactor

__all__ = [
    "StructuredLogger",
    "LogLevel",
    "create_logger",
    "PerformanceMetrics",
    "DataRedactor",
]
