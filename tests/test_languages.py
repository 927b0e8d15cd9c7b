"""Tests for language code canonicalization."""

from __future__ import annotations

import pytest

from linguaserve.languages import Language, UnknownLanguageError, parse_language, supported_codes


class TestLanguage:
    def test_from_639_1(self):
        en = Language.from_639_1("en")
        assert en.code == "en"
        assert en.name == "English"
        assert str(en) == "en"

    def test_from_639_1_is_case_insensitive(self):
        assert Language.from_639_1("ZH") == Language.from_639_1("zh")

    @pytest.mark.parametrize("code", ["eng", "e", "xx", "", "en-US"])
    def test_from_639_1_rejects_non_two_letter(self, code):
        with pytest.raises(UnknownLanguageError):
            Language.from_639_1(code)

    def test_equality_ignores_name(self):
        assert Language("en", "English") == Language("en", "")
        assert hash(Language("en", "English")) == hash(Language("en"))

    def test_usable_as_set_member(self):
        assert len({parse_language("en"), parse_language("eng"), parse_language("EN")}) == 1


class TestParseLanguage:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("en", "en"),
            ("eng", "en"),
            ("zh-CN", "zh"),
            ("zh_Hans", "zh"),
            ("zh-Hant", "zh"),
            ("cmn", "zh"),
            ("pt-BR", "pt"),
            ("  fr  ", "fr"),
            ("deu", "de"),
            ("ger", "de"),
        ],
    )
    def test_aliases_canonicalize(self, raw, expected):
        assert parse_language(raw).code == expected

    @pytest.mark.parametrize("raw", ["", "   ", "klingon", "xx-YY"])
    def test_unknown(self, raw):
        with pytest.raises(UnknownLanguageError):
            parse_language(raw)

    def test_unknown_is_value_error(self):
        with pytest.raises(ValueError, match="Unsupported language code"):
            parse_language("qq")

    def test_supported_codes_are_two_letters(self):
        codes = supported_codes()
        assert {"en", "zh", "fr", "de"} <= codes
        assert all(len(c) == 2 for c in codes)
