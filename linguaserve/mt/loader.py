"""Load ``<src><tgt>`` model directories into the engine and the registry."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from linguaserve.config.defaults import ENGINE, ROUTING, EngineDefaults, RoutingDefaults
from linguaserve.logging import StructuredLogger

from .core.registry import create_engine
from .core.types import AppError, ConfigurationFault, LanguagePair
from .resolver import RoutingPolicy
from .state import AppState


@dataclass
class LoadReport:
    loaded: List[LanguagePair] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


def load_model(state: AppState, name: str, path: Path) -> LanguagePair:
    """Load one model directory and register its pair.

    The pair is registered only after the engine reports success, so the
    registry never lists a pair the engine does not hold. Loading a pair that
    is already registered is a no-op.

    Raises:
        ConfigurationFault: bad model name or missing directory
        EngineFault: the engine could not load the model
    """
    try:
        pair = LanguagePair.from_model_name(name)
    except ValueError as exc:
        raise ConfigurationFault(f"invalid model name {name!r}: {exc}") from exc

    path = Path(path)
    if not path.is_dir():
        raise ConfigurationFault(f"model directory not found for {name}: {path}")

    # Loads are serialized with each other. The engine load itself takes a
    # guard slot, so translations queued behind it wait like any other call
    with state.load_lock:
        if pair in state.registry:
            state.logger.debug("Model already loaded", model=name)
            return pair

        state.logger.info("Loading model", model=name, path=path)
        start = time.perf_counter()
        state.guard.load(name, path)
        load_ms = (time.perf_counter() - start) * 1000.0
        state.registry.add(pair)

    state.metrics.record_latency("model_load_time", load_ms, model=name)
    state.logger.info("Model loaded", model=name, pair=str(pair), load_time_ms=load_ms)
    return pair


def discover_models(models_dir: Path) -> List[str]:
    """List candidate model names (4-character subdirectories), sorted."""
    if not models_dir.is_dir():
        return []
    return sorted(p.name for p in models_dir.iterdir() if p.is_dir() and len(p.name) == 4)


def load_models_dir(
    state: AppState,
    models_dir: Path,
    only: Optional[Iterable[str]] = None,
) -> LoadReport:
    """Load every model under ``models_dir``, or just the names in ``only``.

    One bad model does not stop the others; its error is recorded in the
    report and logged.
    """
    models_dir = Path(models_dir)
    report = LoadReport()
    names = list(only) if only else discover_models(models_dir)

    if not models_dir.is_dir():
        state.logger.warning("Models directory not found", models_dir=models_dir)

    for name in names:
        try:
            report.loaded.append(load_model(state, name, models_dir / name))
        except AppError as exc:
            report.failed[name] = str(exc)
            state.logger.error(
                "Failed to load model", model=name, error=exc.kind.value, detail=str(exc)
            )

    state.logger.info(
        "Model loading finished",
        loaded=[p.model_name for p in report.loaded],
        failed=sorted(report.failed),
        total=len(state.registry),
    )
    if not len(state.registry):
        state.logger.warning("No models loaded; every request will fail with no_route_available")
    return report


def policy_from_defaults(routing: RoutingDefaults = ROUTING) -> RoutingPolicy:
    try:
        return RoutingPolicy.from_codes(routing.pivot_lang, routing.default_source_lang)
    except ValueError as exc:
        raise ConfigurationFault(f"invalid routing configuration: {exc}") from exc


def build_app_state(
    engine_defaults: EngineDefaults = ENGINE,
    routing: RoutingDefaults = ROUTING,
    models_dir: Optional[Path] = None,
    logger: Optional[StructuredLogger] = None,
) -> AppState:
    """Create the engine, wrap it in state, and load the configured models.

    ``logger`` replaces the default ``translation`` component logger.
    """
    policy = policy_from_defaults(routing)
    try:
        engine = create_engine(
            engine_defaults.name,
            workers=engine_defaults.workers,
            device=engine_defaults.device,
            compute_type=engine_defaults.compute_type,
            beam_size=engine_defaults.beam_size,
            max_decoding_length=engine_defaults.max_decoding_length,
        )
    except ValueError as exc:
        raise ConfigurationFault(str(exc)) from exc

    state = AppState(engine, workers=engine_defaults.workers, policy=policy, logger=logger)
    state.logger.info(
        "Application state created",
        engine=engine_defaults.name,
        workers=engine_defaults.workers,
        pivot=policy.pivot.code if policy.pivot else None,
        default_source=policy.default_source.code if policy.default_source else None,
    )
    load_models_dir(
        state,
        Path(models_dir or engine_defaults.models_dir),
        only=engine_defaults.models or None,
    )
    return state
