"""Sensitive data redaction for structured logging."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Pattern, Union

REDACTED = "[REDACTED]"


class DataRedactor:
    """Redact API keys, bearer tokens and local directory layout from log data."""

    def __init__(self, custom_patterns: Optional[List[Pattern[str]]] = None) -> None:
        self.patterns: List[Pattern[str]] = [
            # Bearer tokens in echoed headers
            re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]{8,}", re.IGNORECASE),
            # key=value style secrets
            re.compile(
                r"((?:api[_-]?key|token|secret|password)[\"']?\s*[=:]\s*[\"']?)[A-Za-z0-9_-]{8,}",
                re.IGNORECASE,
            ),
            # User home directories
            re.compile(r"(/home/|/Users/)[^/\s]+"),
            re.compile(r"(C:\\Users\\)[^\\\s]+"),
        ]
        if custom_patterns:
            self.patterns.extend(custom_patterns)

        # Field names redacted entirely
        self.sensitive_fields = {
            "api_key",
            "authorization",
            "x-api-key",
            "token",
            "secret",
            "password",
        }

    def redact_string(self, text: str) -> str:
        result = text
        for pattern in self.patterns:
            if pattern.groups:
                result = pattern.sub(lambda m: m.group(1) + REDACTED, result)
            else:
                result = pattern.sub(REDACTED, result)
        return result

    def redact_path(self, path: Union[str, Path]) -> str:
        """Hide the directory part of a path, keeping the final component.

        Model directories are named after their language pair, so the leaf is
        the useful part for diagnostics.
        """
        return f"{REDACTED}/{Path(str(path)).name}"

    def redact_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for key, value in data.items():
            if key.lower() in self.sensitive_fields:
                result[key] = REDACTED
            elif isinstance(value, dict):
                result[key] = self.redact_dict(value)
            elif isinstance(value, (list, tuple)):
                result[key] = [self._redact_value(item) for item in value]
            else:
                result[key] = self._redact_value(value)
        return result

    def _redact_value(self, value: Any) -> Any:
        if isinstance(value, dict):
            return self.redact_dict(value)
        if isinstance(value, Path):
            return self.redact_path(value)
        if isinstance(value, str):
            return self.redact_string(value)
        return value

    def add_pattern(self, pattern: Union[str, Pattern[str]]) -> None:
        if isinstance(pattern, str):
            pattern = re.compile(pattern)
        self.patterns.append(pattern)

    def add_sensitive_field(self, field_name: str) -> None:
        self.sensitive_fields.add(field_name.lower())
