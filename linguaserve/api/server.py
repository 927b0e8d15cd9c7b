"""linguaserve HTTP API (FastAPI).

Endpoints:
- POST /translate -> {"text", "from"?, "to"} translated through a direct or pivot route
- GET /models      -> loaded language pairs and the routing policy
- GET /healthz     -> liveness plus number of loaded models

When ``LS_API_KEY`` is set, /translate and /models require it either as
``Authorization: Bearer <key>`` or ``X-API-Key: <key>``.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from linguaserve import __version__
from linguaserve.config.defaults import API
from linguaserve.languages import UnknownLanguageError, parse_language
from linguaserve.mt import (
    AccessDenied,
    AppError,
    AppState,
    ConfigurationFault,
    EngineFault,
    EngineFaultKind,
    ErrorKind,
    build_app_state,
    translate_async,
)

logger = logging.getLogger(__name__)

_STATUS_BY_KIND = {
    ErrorKind.SOURCE_LANGUAGE_REQUIRED: 400,
    ErrorKind.NO_ROUTE_AVAILABLE: 404,
    ErrorKind.ENGINE_FAULT: 500,
    ErrorKind.CONFIGURATION_FAULT: 500,
    ErrorKind.ACCESS_DENIED: 401,
}


def status_for(exc: AppError) -> int:
    if isinstance(exc, EngineFault) and exc.fault is EngineFaultKind.MALFORMED_INPUT:
        return 422
    return _STATUS_BY_KIND.get(exc.kind, 500)


class TranslateReq(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    source: Optional[str] = Field(default=None, alias="from")
    target: str = Field(alias="to")


class TranslateResp(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str
    source: str = Field(alias="from")
    target: str = Field(alias="to")


class ModelInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    source: str = Field(alias="from")
    target: str = Field(alias="to")


class ModelsResp(BaseModel):
    models: List[ModelInfo]
    pivot: Optional[str] = None
    default_source: Optional[str] = None


def _app_state(request: Request) -> AppState:
    state = getattr(request.app.state, "translation", None)
    if state is None:
        raise ConfigurationFault("application state not initialized")
    return state


def require_api_key(request: Request) -> None:
    expected: str = getattr(request.app.state, "api_key", "") or ""
    if not expected:
        return

    candidates = []
    auth = request.headers.get("authorization", "")
    if auth[:7].lower() == "bearer ":
        candidates.append(auth[7:].strip())
    candidates.append(request.headers.get("x-api-key", ""))

    # Either credential may carry the key
    if not any(
        supplied and secrets.compare_digest(supplied.encode(), expected.encode())
        for supplied in candidates
    ):
        raise AccessDenied()


router = APIRouter()


@router.post(
    "/translate",
    response_model=TranslateResp,
    response_model_by_alias=True,
    dependencies=[Depends(require_api_key)],
)
async def post_translate(req: TranslateReq, request: Request) -> TranslateResp:
    state = _app_state(request)
    target = parse_language(req.target)
    source = parse_language(req.source) if req.source else None

    result = await translate_async(state, req.text, source, target)
    return TranslateResp(text=result.text, source=result.source.code, target=result.target.code)


@router.get(
    "/models",
    response_model=ModelsResp,
    response_model_by_alias=True,
    dependencies=[Depends(require_api_key)],
)
def get_models(request: Request) -> ModelsResp:
    state = _app_state(request)
    policy = state.policy
    return ModelsResp(
        models=[
            ModelInfo(name=p.model_name, source=p.source.code, target=p.target.code)
            for p in state.registry.sorted_pairs()
        ],
        pivot=policy.pivot.code if policy.pivot else None,
        default_source=policy.default_source.code if policy.default_source else None,
    )


@router.get("/healthz")
def healthz(request: Request) -> Dict[str, Any]:
    state = getattr(request.app.state, "translation", None)
    return {
        "status": "ok" if state is not None else "starting",
        "version": __version__,
        "models": len(state.registry) if state is not None else 0,
    }


def create_app(state: Optional[AppState] = None, api_key: Optional[str] = None) -> FastAPI:
    """Build the API application.

    Without an explicit ``state`` the application builds one from the
    ``LS_*`` settings during startup, loading the configured models.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "translation", None) is None:
            app.state.translation = await asyncio.to_thread(build_app_state)
        yield

    app = FastAPI(title="linguaserve", version=__version__, lifespan=lifespan)
    app.state.translation = state
    app.state.api_key = API.api_key if api_key is None else api_key
    app.include_router(router)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        status = status_for(exc)
        if status >= 500:
            logger.error("Request to %s failed: %s", request.url.path, exc)
        return JSONResponse(status_code=status, content=exc.to_dict())

    @app.exception_handler(UnknownLanguageError)
    async def unknown_language_handler(request: Request, exc: UnknownLanguageError):
        return JSONResponse(
            status_code=400, content={"error": "invalid_language", "detail": str(exc)}
        )

    # Global safety net: log exceptions, return generic 500 without internals
    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})

    return app


app = create_app()
