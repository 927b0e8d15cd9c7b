"""Language code canonicalization."""

from .codes import Language, UnknownLanguageError, parse_language, supported_codes

__all__ = [
    "Language",
    "UnknownLanguageError",
    "parse_language",
    "supported_codes",
]
