"""linguaserve MT (Machine Translation) orchestration."""

# Import core interfaces
from .core import (
    AccessDenied,
    AppError,
    ConfigurationFault,
    EngineFault,
    EngineFaultKind,
    ErrorKind,
    LanguagePair,
    NoRouteAvailable,
    SourceLanguageRequired,
    TranslationEngine,
    available_engines,
    create_engine,
    register_engine,
)
from .guard import EngineGuard
from .loader import LoadReport, build_app_state, load_model, load_models_dir
from .model_registry import ModelRegistry
from .resolver import Route, RoutingPolicy, resolve
from .service import TranslationResult, translate, translate_async
from .state import AppState

# Import engines (auto-registers on import)
from . import engines  # noqa: F401

__all__ = [
    "AccessDenied",
    "AppError",
    "AppState",
    "ConfigurationFault",
    "EngineFault",
    "EngineFaultKind",
    "EngineGuard",
    "ErrorKind",
    "LanguagePair",
    "LoadReport",
    "ModelRegistry",
    "NoRouteAvailable",
    "Route",
    "RoutingPolicy",
    "SourceLanguageRequired",
    "TranslationEngine",
    "TranslationResult",
    "available_engines",
    "build_app_state",
    "create_engine",
    "load_model",
    "load_models_dir",
    "register_engine",
    "resolve",
    "translate",
    "translate_async",
]
