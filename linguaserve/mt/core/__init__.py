"""MT core module."""

from .protocol import EngineCapabilities, TranslationEngine
from .registry import available_engines, create_engine, register_engine
from .types import (
    AccessDenied,
    AppError,
    ConfigurationFault,
    EngineFault,
    EngineFaultKind,
    ErrorKind,
    LanguagePair,
    NoRouteAvailable,
    SourceLanguageRequired,
)

__all__ = [
    "AccessDenied",
    "AppError",
    "ConfigurationFault",
    "EngineCapabilities",
    "EngineFault",
    "EngineFaultKind",
    "ErrorKind",
    "LanguagePair",
    "NoRouteAvailable",
    "SourceLanguageRequired",
    "TranslationEngine",
    "available_engines",
    "create_engine",
    "register_engine",
]
