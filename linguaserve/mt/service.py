"""Translation orchestration: resolve a route, run its hops, report failures."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from linguaserve.languages import Language

from .core.types import AppError, EngineFault, LanguagePair
from .resolver import resolve
from .state import AppState


@dataclass(frozen=True)
class TranslationResult:
    """Translated text plus the languages actually used.

    ``source`` differs from the caller's hint when the configured default
    source was substituted.
    """

    text: str
    source: Language
    target: Language
    route: tuple[LanguagePair, ...]
    duration_ms: float = 0.0

    @property
    def pivot(self) -> Optional[Language]:
        return self.route[0].target if len(self.route) > 1 else None


def translate(
    state: AppState,
    text: str,
    source: Optional[Language],
    target: Language,
) -> TranslationResult:
    """Translate ``text`` into ``target``.

    The route is resolved once against the registry snapshot taken on entry;
    models loaded while this call runs are not used by it. For a pivot route
    the first hop's output is passed unchanged to the second hop. Any engine
    failure aborts the call.

    Raises:
        SourceLanguageRequired: ``source`` is None and no default is configured
        NoRouteAvailable: no direct or pivot route exists; the engine is not called
        EngineFault: the engine failed; ``hop`` and ``pair`` say where
    """
    snapshot = state.registry.snapshot()
    try:
        route = resolve(snapshot, source, target, state.policy)
    except AppError as exc:
        state.metrics.increment_counter("translations_rejected")
        state.logger.info(
            "Translation request rejected",
            error=exc.kind.value,
            detail=str(exc),
            source=source.code if source else None,
            target=target.code,
        )
        raise

    state.logger.debug(
        "Route resolved",
        route=[p.model_name for p in route.hops],
        defaulted_source=route.defaulted_source,
        text_length=len(text),
    )

    current = text
    with state.metrics.timer("translation_latency", hops=len(route.hops)) as timing:
        for hop, pair in enumerate(route.hops, start=1):
            try:
                current = state.guard.translate(pair.source.code, pair.target.code, current)
            except EngineFault as exc:
                exc.annotate(hop=hop, pair=pair, requested=route.requested)
                state.metrics.increment_counter("translations_failed")
                state.logger.error(
                    "Translation failed",
                    fault=exc.fault.value,
                    hop=hop,
                    hops=len(route.hops),
                    pair=pair.model_name,
                    detail=exc.detail,
                )
                raise

    state.metrics.increment_counter("translations_success")
    state.logger.info(
        "Translation completed",
        route=[p.model_name for p in route.hops],
        input_length=len(text),
        output_length=len(current),
        duration_ms=timing["duration_ms"],
    )
    return TranslationResult(
        text=current,
        source=route.source,
        target=route.target,
        route=route.hops,
        duration_ms=timing["duration_ms"],
    )


async def translate_async(
    state: AppState,
    text: str,
    source: Optional[Language],
    target: Language,
) -> TranslationResult:
    """Run :func:`translate` on a worker thread so the event loop stays free."""
    return await asyncio.to_thread(translate, state, text, source, target)
