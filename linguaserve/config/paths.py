"""Path utilities for configurable storage locations."""

from __future__ import annotations

import os
from pathlib import Path

# Default models directory relative to the working directory when no override exists
_DEFAULT_MODELS_DIR = "models"


def resolve_models_dir(override: str | os.PathLike[str] | None = None) -> Path:
    """Return the models directory as an absolute path.

    An explicit ``override`` wins over ``LS_MODELS_DIR``, which wins over the
    project default. ``~`` is expanded.
    """
    configured = override or os.getenv("LS_MODELS_DIR") or _DEFAULT_MODELS_DIR
    return Path(configured).expanduser().resolve()


def resolve_log_dir() -> Path | None:
    """Return the configured JSONL log directory, or None when logging to stdout only."""
    configured = os.getenv("LS_LOG_DIR")
    if not configured:
        return None
    return Path(configured).expanduser().resolve()


__all__ = ["resolve_models_dir", "resolve_log_dir"]
