"""Supported target languages."""

from __future__ import annotations

from transview.exceptions import UnsupportedLanguageError

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "ja": "Japanese",
    "zh-Hans": "Simplified Chinese",
    "zh-Hant": "Traditional Chinese",
    "ko": "Korean",
    "de": "German",
    "fr": "French",
    "es": "Spanish",
    "it": "Italian",
    "pt-BR": "Brazilian Portuguese",
    "ru": "Russian",
}

# Native names shown in the display's language picker.
LANGUAGE_LABELS: dict[str, str] = {
    "en": "English",
    "ja": "日本語",
    "zh-Hans": "中文（简体）",
    "zh-Hant": "中文（繁體）",
    "ko": "한국어",
    "de": "Deutsch",
    "fr": "Français",
    "es": "Español",
    "it": "Italiano",
    "pt-BR": "Português (Brasil)",
    "ru": "Русский",
}

_BY_LOWER = {code.lower(): code for code in LANGUAGE_NAMES}


def normalize_language_code(code: str) -> str:
    """Return the canonical spelling of `code` (case-insensitive match).

    Raises:
        UnsupportedLanguageError: if the code is not in the supported set.
    """
    raw = str(code or "").strip()
    canonical = _BY_LOWER.get(raw.lower())
    if canonical is None:
        raise UnsupportedLanguageError(raw)
    return canonical


def is_supported_language(code: str) -> bool:
    return str(code or "").strip().lower() in _BY_LOWER


def language_name(code: str) -> str:
    """English name used in backend prompts; unknown codes pass through."""
    raw = str(code or "").strip()
    canonical = _BY_LOWER.get(raw.lower())
    if canonical is None:
        return raw
    return LANGUAGE_NAMES[canonical]
