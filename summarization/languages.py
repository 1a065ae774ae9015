"""
Target language lookup.

Maps what callers send (display names, common aliases, ISO codes) to the
language name used in the prompt. Unknown values pass through unchanged.
"""

from typing import Dict, List

SUPPORTED_LANGUAGES: List[str] = [
    "English",
    "Spanish",
    "Chinese (Mandarin)",
    "Tagalog",
    "Vietnamese",
    "Arabic",
    "French",
    "Korean",
    "Russian",
    "German",
    "Hindi",
    "Portuguese",
    "Italian",
    "Japanese",
    "Urdu",
    "Polish",
    "Persian",
    "Turkish",
    "Greek",
    "Hebrew",
]

LANGUAGE_ALIASES: Dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "espanol": "Spanish",
    "español": "Spanish",
    "zh": "Chinese (Mandarin)",
    "chinese": "Chinese (Mandarin)",
    "mandarin": "Chinese (Mandarin)",
    "tl": "Tagalog",
    "filipino": "Tagalog",
    "vi": "Vietnamese",
    "ar": "Arabic",
    "fr": "French",
    "ko": "Korean",
    "ru": "Russian",
    "de": "German",
    "hi": "Hindi",
    "pt": "Portuguese",
    "it": "Italian",
    "ja": "Japanese",
    "ur": "Urdu",
    "pl": "Polish",
    "fa": "Persian",
    "farsi": "Persian",
    "tr": "Turkish",
    "el": "Greek",
    "he": "Hebrew",
}

_LOOKUP: Dict[str, str] = {
    **{name.lower(): name for name in SUPPORTED_LANGUAGES},
    **LANGUAGE_ALIASES,
}


def resolve_language(language: str) -> str:
    """Normalize a requested language name; unrecognized values are returned stripped."""
    cleaned = (language or "").strip()
    return _LOOKUP.get(cleaned.lower(), cleaned)
