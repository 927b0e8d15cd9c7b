"""Canonical language identifiers.

Requests and model directory names carry language codes in several shapes
(``en``, ``EN``, ``eng``, ``zh-CN``, ``zh_Hans``, ``cmn``). They are all
canonicalized to a :class:`Language` keyed by its ISO 639-1 code, so two
spellings of the same language compare equal.

Examples:
    >>> Language.from_639_1("en") == parse_language("eng")
    True
    >>> parse_language("zh-Hant").code
    'zh'
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Tuple


class UnknownLanguageError(ValueError):
    """Raised when a code does not name a known language."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Unsupported language code: {code!r}")
        self.code = code


# ISO 639-1 -> (English name, ISO 639-2/3 aliases)
_LANGUAGES: Dict[str, Tuple[str, Tuple[str, ...]]] = {
    "ar": ("Arabic", ("ara", "arb")),
    "bg": ("Bulgarian", ("bul",)),
    "ca": ("Catalan", ("cat",)),
    "cs": ("Czech", ("ces", "cze")),
    "da": ("Danish", ("dan",)),
    "de": ("German", ("deu", "ger")),
    "el": ("Greek", ("ell", "gre")),
    "en": ("English", ("eng",)),
    "es": ("Spanish", ("spa",)),
    "et": ("Estonian", ("est",)),
    "fa": ("Persian", ("fas", "per")),
    "fi": ("Finnish", ("fin",)),
    "fr": ("French", ("fra", "fre")),
    "he": ("Hebrew", ("heb",)),
    "hi": ("Hindi", ("hin",)),
    "hr": ("Croatian", ("hrv",)),
    "hu": ("Hungarian", ("hun",)),
    "id": ("Indonesian", ("ind",)),
    "is": ("Icelandic", ("isl", "ice")),
    "it": ("Italian", ("ita",)),
    "ja": ("Japanese", ("jpn",)),
    "ko": ("Korean", ("kor",)),
    "lt": ("Lithuanian", ("lit",)),
    "lv": ("Latvian", ("lav",)),
    "ms": ("Malay", ("msa", "may")),
    "nb": ("Norwegian Bokmal", ("nob",)),
    "nl": ("Dutch", ("nld", "dut")),
    "nn": ("Norwegian Nynorsk", ("nno",)),
    "pl": ("Polish", ("pol",)),
    "pt": ("Portuguese", ("por",)),
    "ro": ("Romanian", ("ron", "rum")),
    "ru": ("Russian", ("rus",)),
    "sk": ("Slovak", ("slk", "slo")),
    "sl": ("Slovenian", ("slv",)),
    "sq": ("Albanian", ("sqi", "alb")),
    "sr": ("Serbian", ("srp",)),
    "sv": ("Swedish", ("swe",)),
    "th": ("Thai", ("tha",)),
    "tr": ("Turkish", ("tur",)),
    "uk": ("Ukrainian", ("ukr",)),
    "vi": ("Vietnamese", ("vie",)),
    # Chinese script/variety tags all fold into one identity
    "zh": ("Chinese", ("zho", "chi", "cmn", "yue")),
}

_ALIASES: Dict[str, str] = {
    alias: code for code, (_, aliases) in _LANGUAGES.items() for alias in aliases
}


@dataclass(frozen=True)
class Language:
    """A natural language, identified by its ISO 639-1 code."""

    code: str
    name: str = field(default="", compare=False)

    @classmethod
    def from_639_1(cls, code: str) -> "Language":
        """Strict lookup of a two-letter code (case-insensitive)."""
        key = code.strip().lower()
        if len(key) != 2 or key not in _LANGUAGES:
            raise UnknownLanguageError(code)
        return cls(key, _LANGUAGES[key][0])

    @classmethod
    def parse(cls, code: str) -> "Language":
        return parse_language(code)

    def __str__(self) -> str:
        return self.code


def parse_language(code: str) -> Language:
    """Canonicalize a BCP-47-ish tag or ISO 639 code to a :class:`Language`.

    Region and script subtags are ignored (``pt-BR`` is ``pt``).

    Raises:
        UnknownLanguageError: if the primary subtag is not a known language
    """
    if not isinstance(code, str) or not code.strip():
        raise UnknownLanguageError(str(code))

    primary = code.strip().replace("_", "-").split("-", 1)[0].lower()
    if primary in _LANGUAGES:
        return Language(primary, _LANGUAGES[primary][0])
    if primary in _ALIASES:
        canonical = _ALIASES[primary]
        return Language(canonical, _LANGUAGES[canonical][0])
    raise UnknownLanguageError(code)


def supported_codes() -> frozenset[str]:
    """Return every canonical two-letter code this module knows."""
    return frozenset(_LANGUAGES)
