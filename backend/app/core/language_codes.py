"""Language Codes — pure lookup tables and validators for language identifiers.

Invariants:
    - language_name() never fails: unknown codes map to "English"
    - to_translate_code() accepts codes or English names, case-insensitive;
      unknown values pass through lowercased
    - to_speechmatics_code() always returns a code Speechmatics accepts (default "en")
    - Pure functions, no I/O

Design Decisions:
    - Three tables instead of one: Gemini prompts want names, Google Translate
      wants ISO codes, Speechmatics supports a narrower set
"""

import re

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "en-US": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese (Mandarin)",
    "ar": "Arabic",
    "hi": "Hindi",
    "sa": "Sanskrit",
    "mr": "Marathi",
    "te": "Telugu",
    "ml": "Malayalam",
    "ur": "Urdu",
    "pa": "Punjabi",
}

# Google Translate accepts ISO codes; clients sometimes send names
_TRANSLATE_CODES: dict[str, str] = {
    name.split(" ")[0].lower(): code
    for code, name in LANGUAGE_NAMES.items() if "-" not in code
}

SPEECHMATICS_LANGUAGES = frozenset({
    "en", "es", "fr", "de", "it", "pt", "ru", "ja", "ko", "zh", "ar", "hi", "sa",
})

_GEMINI_CODE_PATTERN = re.compile(r"^[a-z]{2,5}(-[A-Z]{2})?$")
LANGUAGE_SHORTCODE_PATTERN = re.compile(r"^[A-Z]{2,3}(-[A-Z]{2})?$")

MAX_TEXT_LENGTH = 10_000


def language_name(code: str | None) -> str:
    """Human-readable language name for prompts."""
    if not code:
        return "English"
    return LANGUAGE_NAMES.get(code) or LANGUAGE_NAMES.get(base_language(code), "English")


def base_language(code: str) -> str:
    """'en-US' → 'en'; codes without a region are returned unchanged."""
    idx = code.find("-")
    return code[:idx] if idx > 0 else code


def to_translate_code(lang: str) -> str:
    key = lang.strip().lower()
    return _TRANSLATE_CODES.get(key, key)


def to_speechmatics_code(lang: str | None) -> str:
    if not lang:
        return "en"
    if lang in SPEECHMATICS_LANGUAGES:
        return lang
    base = base_language(lang).lower()
    return base if base in SPEECHMATICS_LANGUAGES else "en"


def validate_text_input(text) -> str | None:
    """Return an error message, or None when the text is acceptable."""
    if not text or not isinstance(text, str):
        return "Text input must be a non-empty string"
    if not text.strip():
        return "Text input cannot be empty"
    if len(text) > MAX_TEXT_LENGTH:
        return "Text input too long (max 10,000 characters)"
    return None


def validate_language_code(code) -> str | None:
    """Return an error message, or None for codes like 'en' or 'en-US'."""
    if not code or not isinstance(code, str):
        return "Language code must be a non-empty string"
    if not _GEMINI_CODE_PATTERN.match(code):
        return "Invalid language code format"
    return None
