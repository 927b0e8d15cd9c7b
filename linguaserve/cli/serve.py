from __future__ import annotations

import argparse
from dataclasses import replace

from linguaserve.config.defaults import API, ENGINE, ROUTING
from linguaserve.config.paths import resolve_models_dir


def main() -> None:
    ap = argparse.ArgumentParser(description="Run the linguaserve HTTP API")
    ap.add_argument("--host", default=API.host)
    ap.add_argument("--port", type=int, default=API.port)
    ap.add_argument("--models-dir", help="Directory of <src><tgt> model directories")
    ap.add_argument("--workers", type=int, help="Concurrent engine calls")
    ap.add_argument("--pivot", help="Pivot language; pass an empty string to disable")
    ap.add_argument("--log-level", default="info")
    args = ap.parse_args()

    engine = ENGINE
    if args.models_dir:
        engine = replace(engine, models_dir=str(resolve_models_dir(args.models_dir)))
    if args.workers:
        engine = replace(engine, workers=max(1, args.workers))
    routing = ROUTING if args.pivot is None else replace(ROUTING, pivot_lang=args.pivot.strip())

    import uvicorn

    from linguaserve.api.server import create_app
    from linguaserve.mt import build_app_state

    state = build_app_state(engine, routing)
    uvicorn.run(create_app(state), host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
