"""linguaserve centralized configuration for runtime settings.

All settings are backed by environment variables following the LS_* naming
convention.

Example:
    >>> from linguaserve.config import ENGINE, ROUTING
    >>> ENGINE.workers
    1
    >>> ROUTING.pivot_lang
    'en'

Environment Variables:
    LS_ENGINE: Engine factory name (default: ct2)
    LS_MODELS_DIR: Directory containing <src><tgt> model directories (default: ./models)
    LS_MODELS: Comma separated model names to load at startup (default: all)
    LS_WORKERS: Concurrent engine calls allowed (default: 1)
    LS_PIVOT_LANG: Pivot language for two-hop routes, empty disables (default: en)
    LS_DEFAULT_SOURCE_LANG: Source used when a request names none (default: unset)
    LS_API_HOST / LS_API_PORT: Server bind address (default: 127.0.0.1:3000)
    LS_API_KEY: Required API key when set (default: unset)
"""

from __future__ import annotations

from linguaserve.config.defaults import API, ENGINE, ROUTING  # noqa: F401
from linguaserve.config.paths import resolve_log_dir, resolve_models_dir  # noqa: F401

__all__ = [
    "API",
    "ENGINE",
    "ROUTING",
    "resolve_log_dir",
    "resolve_models_dir",
]
