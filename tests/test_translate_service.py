"""Tests for the translation orchestrator."""

from __future__ import annotations

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from linguaserve.mt import (
    EngineFault,
    EngineFaultKind,
    ErrorKind,
    NoRouteAvailable,
    SourceLanguageRequired,
    load_model,
    translate,
    translate_async,
)
from tests.util.pairs import lang, pair


def test_direct_translation(make_state, fake_engine):
    state = make_state(["enzh", "zhen"])
    fake_engine.outputs[("en", "zh")] = "你好"

    result = translate(state, "hello", lang("en"), lang("zh"))

    assert result.text == "你好"
    assert result.source == lang("en")
    assert result.target == lang("zh")
    assert result.route == (pair("enzh"),)
    assert result.pivot is None
    assert fake_engine.translate_calls() == [("translate", "en", "zh", "hello")]


def test_every_loaded_pair_translates(make_state):
    names = ["enzh", "zhen", "enfr", "fren"]
    state = make_state(names)
    for p in state.registry.snapshot():
        assert state.registry.is_supported(p)
        result = translate(state, "x", p.source, p.target)
        assert result.route == (p,)


def test_empty_registry_is_no_route(make_state, fake_engine):
    state = make_state([])
    with pytest.raises(NoRouteAvailable) as excinfo:
        translate(state, "hello", lang("en"), lang("zh"))
    assert excinfo.value.requested == pair("enzh")
    assert excinfo.value.kind is ErrorKind.NO_ROUTE_AVAILABLE
    assert fake_engine.translate_calls() == []


def test_no_route_never_calls_engine(make_state, fake_engine):
    state = make_state(["enfr", "zhen"], pivot="fr")
    with pytest.raises(NoRouteAvailable):
        translate(state, "hello", lang("en"), lang("zh"))
    assert fake_engine.translate_calls() == []


def test_pivot_runs_hops_in_order(make_state, fake_engine):
    state = make_state(["enfr", "frzh"], pivot="fr")

    result = translate(state, "hello", lang("en"), lang("zh"))

    assert fake_engine.translate_calls() == [
        ("translate", "en", "fr", "hello"),
        ("translate", "fr", "zh", "[en>fr]hello"),
    ]
    assert result.text == "[fr>zh][en>fr]hello"
    assert result.source == lang("en")
    assert result.target == lang("zh")
    assert result.pivot == lang("fr")


def test_pivot_feeds_hop_output_verbatim(make_state, fake_engine):
    state = make_state(["enfr", "frzh"], pivot="fr")
    fake_engine.outputs[("en", "fr")] = "  Bonjour\n\tle monde  "

    translate(state, "hello world", lang("en"), lang("zh"))

    assert fake_engine.translate_calls()[1] == ("translate", "fr", "zh", "  Bonjour\n\tle monde  ")


def test_pivot_empty_intermediate_still_runs_second_hop(make_state, fake_engine):
    state = make_state(["enfr", "frzh"], pivot="fr")
    fake_engine.outputs[("en", "fr")] = ""

    result = translate(state, "hello", lang("en"), lang("zh"))

    assert fake_engine.translate_calls()[1] == ("translate", "fr", "zh", "")
    assert result.text == "[fr>zh]"


def test_empty_text_goes_to_engine(make_state, fake_engine):
    state = make_state(["enzh"])
    result = translate(state, "", lang("en"), lang("zh"))
    assert result.text == "[en>zh]"
    assert fake_engine.translate_calls() == [("translate", "en", "zh", "")]


def test_first_hop_failure_aborts(make_state, fake_engine):
    state = make_state(["enfr", "frzh"], pivot="fr")
    fake_engine.translate_failures[("en", "fr")] = RuntimeError("null pointer")

    with pytest.raises(EngineFault) as excinfo:
        translate(state, "webollama", lang("en"), lang("zh"))

    fault = excinfo.value
    assert fault.fault is EngineFaultKind.NATIVE
    assert fault.hop == 1
    assert fault.pair == pair("enfr")
    assert fault.requested == pair("enzh")
    assert len(fake_engine.translate_calls()) == 1


def test_second_hop_failure_returns_no_partial_result(make_state, fake_engine):
    state = make_state(["enfr", "frzh"], pivot="fr")
    fake_engine.translate_failures[("fr", "zh")] = EngineFault(
        "bad input", EngineFaultKind.MALFORMED_INPUT
    )

    with pytest.raises(EngineFault) as excinfo:
        translate(state, "hello", lang("en"), lang("zh"))

    assert excinfo.value.fault is EngineFaultKind.MALFORMED_INPUT
    assert excinfo.value.hop == 2
    assert excinfo.value.pair == pair("frzh")
    assert "hop 2" in str(excinfo.value)
    assert excinfo.value.to_dict()["hop"] == 2


def test_source_required(make_state, fake_engine):
    state = make_state(["enzh"])
    with pytest.raises(SourceLanguageRequired):
        translate(state, "hello", None, lang("zh"))
    assert fake_engine.translate_calls() == []


def test_default_source_is_reported(make_state):
    state = make_state(["enzh", "zhen"], default_source="en")
    result = translate(state, "webollama", None, lang("zh"))
    assert result.source == lang("en")
    assert result.target == lang("zh")


def test_metrics_counters(make_state, fake_engine):
    state = make_state(["enzh"])
    translate(state, "a", lang("en"), lang("zh"))
    with pytest.raises(NoRouteAvailable):
        translate(state, "a", lang("zh"), lang("en"))
    fake_engine.translate_failures[("en", "zh")] = RuntimeError("x")
    with pytest.raises(EngineFault):
        translate(state, "a", lang("en"), lang("zh"))

    counters = state.metrics.get_all_metrics()["counters"]
    assert counters["translations_success"] == 1
    assert counters["translations_rejected"] == 1
    assert counters["translations_failed"] == 1
    assert state.metrics.get_stats("translation_latency").count == 2


def test_load_during_in_flight_translations(make_state, fake_engine, tmp_path):
    """A load that lands mid-flight neither disturbs nor joins running requests."""
    state = make_state(["enfr", "frzh"], pivot="fr", workers=4)
    (tmp_path / "enzh").mkdir()
    fake_engine.hold = threading.Event()

    with ThreadPoolExecutor(max_workers=4) as pool:
        futures = [
            pool.submit(translate, state, f"t{i}", lang("en"), lang("zh")) for i in range(3)
        ]
        # Let the requests enter the engine, then load the direct pair
        for _ in range(200):
            if fake_engine.active >= 3:
                break
            time.sleep(0.01)
        load_model(state, "enzh", tmp_path / "enzh")
        fake_engine.hold.set()
        results = [f.result(timeout=5) for f in futures]

    for i, result in enumerate(results):
        # Each call kept the pivot route resolved from its own snapshot
        assert result.route == (pair("enfr"), pair("frzh"))
        assert result.text == f"[fr>zh][en>fr]t{i}"

    # New requests see the direct model
    assert translate(state, "n", lang("en"), lang("zh")).route == (pair("enzh"),)


def test_concurrent_requests_share_state(make_state, fake_engine):
    state = make_state(["enzh", "zhen"], workers=2)
    fake_engine.delay = 0.005

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(
            pool.map(lambda i: translate(state, f"w{i}", lang("en"), lang("zh")).text, range(16))
        )

    assert results == [f"[en>zh]w{i}" for i in range(16)]
    assert fake_engine.max_active <= 2


@pytest.mark.asyncio
async def test_translate_async(make_state):
    state = make_state(["enzh"])
    result = await translate_async(state, "hello", lang("en"), lang("zh"))
    assert result.text == "[en>zh]hello"


@pytest.mark.asyncio
async def test_translate_async_propagates_errors(make_state):
    state = make_state([])
    with pytest.raises(NoRouteAvailable):
        await translate_async(state, "hello", lang("en"), lang("zh"))
