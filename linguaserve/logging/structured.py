"""Structured JSON-lines logging shared by request threads."""

from __future__ import annotations

import json
import os
import sys
import threading
import time
import uuid
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Union

from .redaction import DataRedactor


class LogLevel(Enum):
    """Standard log levels, ordered by severity."""

    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_RANK[self]


_LEVEL_RANK = {
    LogLevel.DEBUG: 10,
    LogLevel.INFO: 20,
    LogLevel.WARNING: 30,
    LogLevel.ERROR: 40,
    LogLevel.CRITICAL: 50,
}


class StructuredLogger:
    """Structured logger with a consistent entry format and redaction.

    One logger may be used from many request threads at once; each entry is
    written as a single line under a lock.
    """

    def __init__(
        self,
        component: str,
        instance_id: Optional[str] = None,
        output_file: Optional[Union[str, Path, TextIO]] = None,
        enable_console: bool = True,
        redactor: Optional[DataRedactor] = None,
        min_level: LogLevel = LogLevel.INFO,
        max_log_size_mb: Optional[int] = None,
        max_log_files: int = 5,
        console_stream: Optional[TextIO] = None,
    ) -> None:
        """Initialize structured logger.

        Args:
            component: Component identifier (e.g., 'translation', 'loader', 'api')
            instance_id: Optional process/instance ID for correlation
            output_file: Optional file path or handle for log output
            enable_console: Whether to output to stdout (default: True)
            redactor: Optional data redactor for sensitive information
            min_level: Entries below this level are dropped
            max_log_size_mb: Rotate the log file past this size (None = no limit)
            max_log_files: Rotated files to keep (default: 5)
            console_stream: Stream for console output (default: stdout at write time)
        """
        self.component = component
        self.instance_id = instance_id or str(uuid.uuid4())[:8]
        self.start_time = time.time()
        self.redactor = redactor or DataRedactor()
        self.min_level = min_level

        self.max_log_size_bytes = (max_log_size_mb * 1024 * 1024) if max_log_size_mb else None
        self.max_log_files = max_log_files
        self.log_file_path: Optional[Path] = None

        self.console_enabled = enable_console
        self.console_stream = console_stream
        self.log_file: Optional[TextIO] = None
        self._lock = threading.Lock()

        if output_file:
            if isinstance(output_file, (str, Path)):
                self.log_file_path = Path(output_file)
                self.log_file_path.parent.mkdir(parents=True, exist_ok=True)
                self._open_log_file()
            else:
                self.log_file = output_file

    def _format_log_entry(self, level: LogLevel, message: str, **context: Any) -> Dict[str, Any]:
        safe_context = self.redactor.redact_dict(context)

        return {
            "timestamp": time.time(),
            "iso_timestamp": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()) + "Z",
            "level": level.value,
            "component": self.component,
            "instance_id": self.instance_id,
            "uptime": time.time() - self.start_time,
            "thread": threading.current_thread().name,
            "message": message,
            **safe_context,
        }

    def _open_log_file(self) -> None:
        if self.log_file_path:
            self.log_file = open(self.log_file_path, "a", encoding="utf-8")

    def _rotate_log_if_needed(self) -> None:
        """Rotate log file if size limit is exceeded. Caller holds the lock."""
        if not self.log_file_path or not self.max_log_size_bytes:
            return
        if not self.log_file_path.exists():
            return
        if self.log_file_path.stat().st_size <= self.max_log_size_bytes:
            return

        if self.log_file:
            self.log_file.close()
            self.log_file = None

        suffix = self.log_file_path.suffix
        for i in range(self.max_log_files - 1, 0, -1):
            older = self.log_file_path.with_suffix(f".{i}{suffix}")
            newer = self.log_file_path.with_suffix(f".{i + 1}{suffix}")
            if older.exists():
                older.replace(newer)
        self.log_file_path.replace(self.log_file_path.with_suffix(f".1{suffix}"))
        self._open_log_file()

    def _write_log(self, entry: Dict[str, Any]) -> None:
        json_line = json.dumps(entry, default=str, ensure_ascii=False, separators=(",", ":"))

        with self._lock:
            if self.console_enabled:
                print(json_line, file=self.console_stream or sys.stdout, flush=True)

            if self.log_file_path or self.log_file:
                try:
                    self._rotate_log_if_needed()
                except OSError:
                    # Keep writing to whatever file is still open
                    if self.log_file is None:
                        self._open_log_file()
                if self.log_file:
                    self.log_file.write(json_line + "\n")
                    self.log_file.flush()

    def log(self, level: LogLevel, message: str, **context: Any) -> None:
        if level.rank < self.min_level.rank:
            return
        self._write_log(self._format_log_entry(level, message, **context))

    def debug(self, message: str, **context: Any) -> None:
        self.log(LogLevel.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self.log(LogLevel.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self.log(LogLevel.WARNING, message, **context)

    def error(self, message: str, **context: Any) -> None:
        self.log(LogLevel.ERROR, message, **context)

    def critical(self, message: str, **context: Any) -> None:
        self.log(LogLevel.CRITICAL, message, **context)

    def close(self) -> None:
        """Close log file handle if open."""
        with self._lock:
            if self.log_file and hasattr(self.log_file, "close"):
                self.log_file.close()
            self.log_file = None


def _env_int(name: str) -> Optional[int]:
    """Integer env value, or None when unset or not an integer."""
    raw = os.getenv(name, "").strip()
    try:
        return int(raw) if raw else None
    except ValueError:
        return None


def create_logger(
    component: str,
    instance_id: Optional[str] = None,
    log_dir: Optional[Union[str, Path]] = None,
    **kwargs: Any,
) -> StructuredLogger:
    """Factory function to create structured logger with standard configuration.

    Args:
        component: Component identifier
        instance_id: Optional instance ID for correlation
        log_dir: Optional directory for log files (uses LS_LOG_DIR if not provided)
        **kwargs: Additional arguments passed to StructuredLogger

    Environment:
        LS_LOG_DIR: directory for ``<component>.jsonl`` files
        LS_LOG_LEVEL: minimum level (debug|info|warning|error|critical)
        LS_LOG_MAX_SIZE_MB / LS_LOG_MAX_FILES: rotation limits
    """
    if log_dir is None:
        from linguaserve.config.paths import resolve_log_dir

        log_dir = resolve_log_dir()

    if "min_level" not in kwargs:
        raw_level = os.getenv("LS_LOG_LEVEL", "info").lower()
        try:
            kwargs["min_level"] = LogLevel(raw_level)
        except ValueError:
            kwargs["min_level"] = LogLevel.INFO

    if "max_log_size_mb" not in kwargs:
        size_mb = _env_int("LS_LOG_MAX_SIZE_MB")
        if size_mb is not None:
            kwargs["max_log_size_mb"] = size_mb

    if "max_log_files" not in kwargs:
        max_files = _env_int("LS_LOG_MAX_FILES")
        if max_files is not None:
            kwargs["max_log_files"] = max_files

    output_file = None
    if log_dir:
        output_file = Path(log_dir) / f"{component}.jsonl"

    return StructuredLogger(
        component=component, instance_id=instance_id, output_file=output_file, **kwargs
    )
