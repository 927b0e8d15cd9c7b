# tests/conftest.py
# Enforce offline, register the fake engine, and provide state builders.

from __future__ import annotations

import os
import socket
from typing import Iterable, Optional

import pytest

from linguaserve.logging import create_logger
from linguaserve.mt import AppState, RoutingPolicy, register_engine
from tests.fakes.fake_engine import FakeEngine
from tests.util.pairs import lang, pair


def _set_offline_env() -> None:
    """Force offline behavior and quiet logs for tests."""
    os.environ.setdefault("HF_HUB_OFFLINE", "1")
    os.environ.setdefault("TRANSFORMERS_OFFLINE", "1")
    os.environ.setdefault("HF_HUB_DISABLE_TELEMETRY", "1")
    os.environ.setdefault("LS_LOG_LEVEL", "warning")


def pytest_sessionstart(session: pytest.Session) -> None:  # noqa: ARG001
    """
    Pytest lifecycle hook that runs before any tests are collected.
    We:
      1) enforce offline env
      2) register the fake engine under the name "fake"
    """
    _set_offline_env()
    register_engine("fake", FakeEngine)


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def make_state(fake_engine):
    """Build an AppState over ``fake_engine`` with the named pairs resident."""

    def _make(
        models: Iterable[str] = (),
        *,
        pivot: Optional[str] = None,
        default_source: Optional[str] = None,
        workers: int = 1,
        engine: Optional[FakeEngine] = None,
    ) -> AppState:
        engine = engine or fake_engine
        models = list(models)
        engine.preload(*models)
        policy = RoutingPolicy(
            pivot=lang(pivot) if pivot else None,
            default_source=lang(default_source) if default_source else None,
        )
        return AppState(
            engine,
            workers=workers,
            policy=policy,
            pairs=[pair(m) for m in models],
            logger=create_logger(component="test", enable_console=False, log_dir=""),
        )

    return _make


@pytest.fixture
def models_dir(tmp_path):
    """A models directory with enzh, zhen, enfr and frde subdirectories."""
    root = tmp_path / "models"
    for name in ("enzh", "zhen", "enfr", "frde"):
        (root / name).mkdir(parents=True)
    return root


@pytest.fixture
def forbid_network(monkeypatch):
    real_create_connection = socket.create_connection

    def guarded(address, *args, **kwargs):
        host = address[0] if isinstance(address, tuple) else address
        if host not in {"127.0.0.1", "::1", "localhost"}:
            raise RuntimeError(f"Blocked outbound connection to {host}")
        return real_create_connection(address, *args, **kwargs)

    monkeypatch.setattr(socket, "create_connection", guarded, raising=True)
