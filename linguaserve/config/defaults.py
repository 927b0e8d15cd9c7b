"""linguaserve config defaults.

No side effects on import. Values can be overridden via env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass


def _env(name: str, default: str) -> str:
    if not name.startswith("LS_"):
        raise ValueError(f"Only LS_* env vars are allowed, got: {name}")
    return os.getenv(name, default)


def _env_int(name: str, default: int) -> int:
    raw = _env(name, str(default))
    try:
        return int(raw)
    except Exception:
        return default


def _env_list(name: str) -> tuple[str, ...]:
    raw = _env(name, "")
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def _env_path_absolute(name: str, default: str) -> str:
    """Get an environment variable as an absolute path string."""
    from pathlib import Path

    raw = _env(name, "") or default
    return str(Path(raw).expanduser().resolve())


@dataclass(frozen=True)
class EngineDefaults:
    name: str = _env("LS_ENGINE", "ct2")
    models_dir: str = _env_path_absolute("LS_MODELS_DIR", "models")
    # Empty means "every model directory found"
    models: tuple[str, ...] = _env_list("LS_MODELS")
    workers: int = max(1, _env_int("LS_WORKERS", 1))
    device: str = _env("LS_DEVICE", "auto")  # auto|cpu|cuda
    compute_type: str = _env("LS_COMPUTE_TYPE", "default")
    beam_size: int = _env_int("LS_BEAM_SIZE", 2)
    max_decoding_length: int = _env_int("LS_MAX_DECODING_LENGTH", 256)


@dataclass(frozen=True)
class RoutingDefaults:
    # Empty pivot disables two-hop routing
    pivot_lang: str = _env("LS_PIVOT_LANG", "en").strip()
    # Empty default source means requests must name their source language
    default_source_lang: str = _env("LS_DEFAULT_SOURCE_LANG", "").strip()


@dataclass(frozen=True)
class APIDefaults:
    host: str = _env("LS_API_HOST", "127.0.0.1")
    port: int = _env_int("LS_API_PORT", 3000)
    api_key: str = _env("LS_API_KEY", "")


ENGINE = EngineDefaults()
ROUTING = RoutingDefaults()
API = APIDefaults()
