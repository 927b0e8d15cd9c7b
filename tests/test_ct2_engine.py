"""CT2 Marian engine with fake ctranslate2/transformers modules."""

from __future__ import annotations

import sys
import types
from types import SimpleNamespace

import pytest

from linguaserve.mt import ConfigurationFault, EngineFault, EngineFaultKind, available_engines
from linguaserve.mt.engines.ct2_marian import CT2MarianEngine


class _FakeTranslator:
    instances: list = []

    def __init__(self, path, device="cpu", compute_type="default", inter_threads=1):
        if "broken" in path:
            raise RuntimeError("model.bin is truncated")
        self.path = path
        self.device = device
        self.compute_type = compute_type
        self.inter_threads = inter_threads
        self.batches = []
        self.fail = False
        _FakeTranslator.instances.append(self)

    def translate_batch(self, batch, beam_size=1, max_decoding_length=256):
        if self.fail:
            raise RuntimeError("CUDA out of memory")
        self.batches.append(list(batch))
        # Upper-case every token as the "translation"
        return [SimpleNamespace(hypotheses=[[t.upper() for t in tokens]]) for tokens in batch]


class _FakeTokenizer:
    def encode(self, line):
        if "\x00" in line:
            raise ValueError("NUL byte in input")
        return line.split()

    def convert_ids_to_tokens(self, ids):
        return list(ids)

    def convert_tokens_to_ids(self, tokens):
        return list(tokens)

    def decode(self, ids, skip_special_tokens=True):
        return " ".join(ids)


@pytest.fixture
def fake_ct2(monkeypatch, forbid_network):
    _FakeTranslator.instances = []
    ct2 = types.ModuleType("ctranslate2")
    ct2.Translator = _FakeTranslator
    ct2.get_cuda_device_count = lambda: 0

    transformers = types.ModuleType("transformers")
    transformers.AutoTokenizer = SimpleNamespace(from_pretrained=lambda path: _FakeTokenizer())

    monkeypatch.setitem(sys.modules, "ctranslate2", ct2)
    monkeypatch.setitem(sys.modules, "transformers", transformers)
    return ct2


def test_registered_as_ct2():
    assert "ct2" in available_engines()


def test_load_and_translate(fake_ct2, tmp_path):
    engine = CT2MarianEngine(workers=2, beam_size=4)
    engine.load("enzh", tmp_path / "enzh")

    assert engine.is_supported("en", "zh")
    assert not engine.is_supported("zh", "en")
    translator = _FakeTranslator.instances[0]
    assert translator.device == "cpu"
    assert translator.inter_threads == 2

    assert engine.translate("en", "zh", "hello world") == "HELLO WORLD"
    assert engine.capabilities() == {
        "family": "ct2-marian",
        "loaded": ["enzh"],
        "workers": 2,
        "device": "auto",
    }


def test_blank_lines_pass_through(fake_ct2, tmp_path):
    engine = CT2MarianEngine()
    engine.load("enzh", tmp_path)

    assert engine.translate("en", "zh", "a b\n\n  \nc") == "A B\n\n  \nC"
    # Blank lines never reach the translator; non-blank ones go in one batch
    assert _FakeTranslator.instances[0].batches == [[["a", "b"], ["c"]]]


def test_blank_text_is_returned_as_is(fake_ct2, tmp_path):
    engine = CT2MarianEngine()
    engine.load("enzh", tmp_path)
    assert engine.translate("en", "zh", "") == ""
    assert engine.translate("en", "zh", " \n ") == " \n "
    assert _FakeTranslator.instances[0].batches == []


def test_unsupported_pair(fake_ct2):
    with pytest.raises(EngineFault) as excinfo:
        CT2MarianEngine().translate("en", "zh", "hi")
    assert excinfo.value.fault is EngineFaultKind.UNSUPPORTED_PAIR


def test_lone_surrogate_is_malformed(fake_ct2, tmp_path):
    engine = CT2MarianEngine()
    engine.load("enzh", tmp_path)
    with pytest.raises(EngineFault) as excinfo:
        engine.translate("en", "zh", "bad \ud800 text")
    assert excinfo.value.fault is EngineFaultKind.MALFORMED_INPUT


def test_tokenizer_rejection_is_malformed(fake_ct2, tmp_path):
    engine = CT2MarianEngine()
    engine.load("enzh", tmp_path)
    with pytest.raises(EngineFault) as excinfo:
        engine.translate("en", "zh", "a\x00b")
    assert excinfo.value.fault is EngineFaultKind.MALFORMED_INPUT


def test_translator_failure_is_native(fake_ct2, tmp_path):
    engine = CT2MarianEngine()
    engine.load("enzh", tmp_path)
    _FakeTranslator.instances[0].fail = True
    with pytest.raises(EngineFault) as excinfo:
        engine.translate("en", "zh", "hi")
    assert excinfo.value.fault is EngineFaultKind.NATIVE
    assert "out of memory" in str(excinfo.value)


def test_load_failure_is_native(fake_ct2, tmp_path):
    engine = CT2MarianEngine()
    with pytest.raises(EngineFault) as excinfo:
        engine.load("enzh", tmp_path / "broken")
    assert excinfo.value.fault is EngineFaultKind.NATIVE
    assert not engine.is_supported("en", "zh")


def test_auto_device_prefers_cuda(fake_ct2, tmp_path):
    fake_ct2.get_cuda_device_count = lambda: 1
    CT2MarianEngine().load("enzh", tmp_path)
    assert _FakeTranslator.instances[0].device == "cuda"


def test_missing_ctranslate2_is_configuration_fault(monkeypatch, tmp_path):
    # A None entry makes the import raise ImportError
    monkeypatch.setitem(sys.modules, "ctranslate2", None)
    with pytest.raises(ConfigurationFault, match="ctranslate2"):
        CT2MarianEngine().load("enzh", tmp_path)
