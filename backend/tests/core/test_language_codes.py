"""Language Codes tests — name lookup, vendor code mapping, input validators."""

import pytest

from app.core.language_codes import (
    base_language, language_name, to_speechmatics_code, to_translate_code,
    validate_language_code, validate_text_input,
)


@pytest.mark.parametrize("code,expected", [
    ("es", "Spanish"),
    ("en-GB", "English"),
    ("es-MX", "Spanish"),
    ("xx", "English"),
    (None, "English"),
])
def test_language_name(code, expected):
    assert language_name(code) == expected


def test_base_language():
    assert base_language("en-US") == "en"
    assert base_language("fr") == "fr"


def test_translate_code_accepts_names():
    assert to_translate_code("Spanish") == "es"
    assert to_translate_code(" chinese ") == "zh"


def test_translate_code_passes_unknown_through_lowercased():
    assert to_translate_code("FR") == "fr"
    assert to_translate_code("Klingon") == "klingon"


def test_speechmatics_code_falls_back_to_english():
    assert to_speechmatics_code("pt-BR") == "pt"
    assert to_speechmatics_code("te") == "en"
    assert to_speechmatics_code(None) == "en"


def test_validate_text_input():
    assert validate_text_input("hello") is None
    assert validate_text_input("") == "Text input must be a non-empty string"
    assert validate_text_input(42) == "Text input must be a non-empty string"
    assert validate_text_input("   ") == "Text input cannot be empty"
    assert validate_text_input("x" * 10_001) == "Text input too long (max 10,000 characters)"


def test_validate_language_code():
    assert validate_language_code("en") is None
    assert validate_language_code("en-US") is None
    assert validate_language_code("EN") == "Invalid language code format"
    assert validate_language_code(123) == "Language code must be a non-empty string"
