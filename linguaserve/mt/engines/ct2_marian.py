"""CTranslate2 engine for per-direction Marian (OPUS-MT style) models.

Each ``<src><tgt>`` directory holds a converted CTranslate2 model together
with its tokenizer files (``source.spm``, ``target.spm``, ``vocab.json``,
``tokenizer_config.json``), as produced by ``ct2-transformers-converter
--copy_files``.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..core.protocol import EngineCapabilities, TranslationEngine
from ..core.registry import register_engine
from ..core.types import ConfigurationFault, EngineFault, EngineFaultKind


@dataclass
class _ResidentModel:
    translator: Any
    tokenizer: Any

    def encode(self, line: str) -> List[str]:
        return self.tokenizer.convert_ids_to_tokens(self.tokenizer.encode(line))

    def decode(self, tokens: List[str]) -> str:
        ids = self.tokenizer.convert_tokens_to_ids(tokens)
        return self.tokenizer.decode(ids, skip_special_tokens=True)


class CT2MarianEngine:
    """One CTranslate2 translator per loaded direction.

    ``workers`` is passed to CTranslate2 as ``inter_threads``, so each model
    can serve that many batches in parallel; the guard in front of the engine
    uses the same bound.
    """

    def __init__(
        self,
        workers: int = 1,
        device: str = "auto",
        compute_type: str = "default",
        beam_size: int = 2,
        max_decoding_length: int = 256,
    ) -> None:
        self._workers = max(1, int(workers))
        self._device = device
        self._compute_type = compute_type
        self._beam_size = beam_size
        self._max_decoding_length = max_decoding_length
        self._models: Dict[Tuple[str, str], _ResidentModel] = {}
        self._lock = threading.Lock()

    def _resolve_device(self, ct2: Any) -> str:
        if self._device != "auto":
            return self._device
        try:
            return "cuda" if ct2.get_cuda_device_count() > 0 else "cpu"
        except Exception:
            return "cpu"

    def load(self, pair_name: str, model_path: Path) -> None:
        # Lazy import to avoid heavy dependency on module load
        try:
            import ctranslate2 as ct2  # type: ignore[import-untyped]
        except ImportError as exc:
            raise ConfigurationFault("ctranslate2 package required for the ct2 engine") from exc
        try:
            from transformers import AutoTokenizer
        except ImportError as exc:
            raise ConfigurationFault("transformers package required for the ct2 engine") from exc

        source, target = pair_name[:2], pair_name[2:4]
        device = self._resolve_device(ct2)
        try:
            translator = ct2.Translator(
                str(model_path),
                device=device,
                compute_type=self._compute_type,
                inter_threads=self._workers,
            )
            tokenizer = AutoTokenizer.from_pretrained(str(model_path))
        except Exception as exc:
            raise EngineFault(
                f"failed to load model {pair_name}: {exc}", EngineFaultKind.NATIVE
            ) from exc

        with self._lock:
            self._models[(source, target)] = _ResidentModel(translator, tokenizer)

    def is_supported(self, source: str, target: str) -> bool:
        return (source, target) in self._models

    def translate(self, source: str, target: str, text: str) -> str:
        """Translate line by line in one batch; blank lines pass through."""
        model = self._models.get((source, target))
        if model is None:
            raise EngineFault(
                f"no model loaded for {source}{target}", EngineFaultKind.UNSUPPORTED_PAIR
            )

        try:
            text.encode("utf-8")
        except (AttributeError, UnicodeError) as exc:
            raise EngineFault(f"input is not valid text: {exc}", EngineFaultKind.MALFORMED_INPUT)

        lines = text.split("\n")
        todo = [(i, line) for i, line in enumerate(lines) if line.strip()]
        if not todo:
            return text

        try:
            batch = [model.encode(line) for _, line in todo]
        except (ValueError, UnicodeError) as exc:
            raise EngineFault(f"tokenization failed: {exc}", EngineFaultKind.MALFORMED_INPUT)

        try:
            results = model.translator.translate_batch(
                batch,
                beam_size=self._beam_size,
                max_decoding_length=self._max_decoding_length,
            )
            out = list(lines)
            for (i, _), result in zip(todo, results):
                out[i] = model.decode(result.hypotheses[0])
        except Exception as exc:
            raise EngineFault(f"translation failed: {exc}", EngineFaultKind.NATIVE) from exc

        return "\n".join(out)

    def capabilities(self) -> EngineCapabilities:
        with self._lock:
            loaded = sorted(f"{s}{t}" for s, t in self._models)
        return {
            "family": "ct2-marian",
            "loaded": loaded,
            "workers": self._workers,
            "device": self._device,
        }


def _create_ct2_marian_engine(**options: Any) -> TranslationEngine:
    """Factory function for the CT2 Marian engine."""
    return CT2MarianEngine(**options)


# Register engine on module import
register_engine("ct2", _create_ct2_marian_engine)
