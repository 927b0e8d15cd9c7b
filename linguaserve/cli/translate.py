from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import List, Optional

from linguaserve.config.defaults import ENGINE, ROUTING
from linguaserve.config.paths import resolve_models_dir
from linguaserve.languages import UnknownLanguageError, parse_language
from linguaserve.logging import create_logger
from linguaserve.mt import AppError, ErrorKind, build_app_state, translate

# Request-shape problems exit 2, infrastructure problems exit 1
_REQUEST_ERRORS = {ErrorKind.SOURCE_LANGUAGE_REQUIRED, ErrorKind.NO_ROUTE_AVAILABLE}


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Translate text with locally loaded models")
    ap.add_argument("text", nargs="*", help="Text to translate (default: read stdin)")
    ap.add_argument("--from", dest="source", help="Source language code")
    ap.add_argument("--to", dest="target", required=True, help="Target language code")
    ap.add_argument("--models-dir", help="Directory of <src><tgt> model directories")
    ap.add_argument("--models", help="Comma separated model names to load (default: all)")
    ap.add_argument("--pivot", help="Pivot language; pass an empty string to disable")
    ap.add_argument("--default-source", help="Source language used when --from is omitted")
    args = ap.parse_args(argv)

    engine = ENGINE
    if args.models_dir:
        engine = replace(engine, models_dir=str(resolve_models_dir(args.models_dir)))
    if args.models:
        names = tuple(n.strip() for n in args.models.split(",") if n.strip())
        engine = replace(engine, models=names)
    routing = ROUTING
    if args.pivot is not None:
        routing = replace(routing, pivot_lang=args.pivot.strip())
    if args.default_source is not None:
        routing = replace(routing, default_source_lang=args.default_source.strip())

    text = " ".join(args.text) if args.text else sys.stdin.read().rstrip("\n")

    try:
        target = parse_language(args.target)
        source = parse_language(args.source) if args.source else None
    except UnknownLanguageError as exc:
        print(f"[cli] {exc}", file=sys.stderr)
        return 2

    try:
        # stdout carries only the translation
        logger = create_logger(component="translation", console_stream=sys.stderr)
        state = build_app_state(engine, routing, logger=logger)
        result = translate(state, text, source, target)
    except AppError as exc:
        print(f"[cli] {exc.kind.value}: {exc}", file=sys.stderr)
        return 2 if exc.kind in _REQUEST_ERRORS else 1

    print(result.text)
    if result.pivot is not None:
        print(
            f"[cli] {result.source}->{result.pivot}->{result.target} "
            f"({result.duration_ms:.0f} ms)",
            file=sys.stderr,
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
