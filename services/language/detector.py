"""
Heuristic language detection.

Role: text → one of a small set of known languages, using lexical cues only.

Rules:
- Spanish wins when it matches: diacritics/inverted punctuation or a
  whole-word hit on the Spanish function-word list
- English is only checked when Spanish does not match
- Neither list matches → UNKNOWN
- This is not real language identification; mixed text resolves to Spanish
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Pattern


class Language(str, Enum):
    """Languages the detector can tell apart."""
    ES = "es"
    EN = "en"
    UNKNOWN = "unknown"


KNOWN_LANGUAGES = (Language.ES, Language.EN)

LANGUAGE_NAMES = {
    "es": "Spanish",
    "en": "English",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "zh": "Chinese",
    "ja": "Japanese",
    "ko": "Korean",
    "ru": "Russian",
}

_SPANISH_CHARS_RE = re.compile(r"[ñáéíóúü¿¡]", re.IGNORECASE)

SPANISH_WORDS = (
    "es", "la", "el", "de", "que", "y", "a", "en", "un", "ser", "se", "no",
    "te", "lo", "le", "da", "su", "por", "son", "con", "para", "al", "una",
    "del", "está", "todo", "pero", "más", "hay", "muy", "fue", "tener",
    "como", "donde",
)

ENGLISH_WORDS = (
    "the", "and", "or", "but", "in", "on", "at", "to", "for", "of", "with",
    "by", "from", "up", "about", "into", "through", "during", "before",
    "after", "above", "below", "between", "among", "under", "over", "since",
    "until", "while", "because", "although", "however", "therefore",
    "moreover", "furthermore", "nevertheless", "consequently", "accordingly",
    "indeed", "certainly", "obviously", "apparently", "perhaps", "probably",
    "possibly", "definitely", "absolutely",
)

# Keyword lists are short noun phrases, so only articles and prepositions help
KEYWORD_SPANISH_WORDS = (
    "la", "el", "de", "los", "las", "en", "con", "por", "para", "una", "uno", "un",
)

KEYWORD_ENGLISH_WORDS = (
    "the", "and", "or", "of", "in", "on", "at", "by", "for", "with", "about", "from",
)


def _word_pattern(words: Iterable[str]) -> Pattern[str]:
    alternatives = "|".join(re.escape(w) for w in words)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


@dataclass(frozen=True)
class DetectorProfile:
    """Word lists used by one detection context."""

    name: str
    spanish: Pattern[str]
    english: Pattern[str]


DEFAULT = DetectorProfile(
    name="default",
    spanish=_word_pattern(SPANISH_WORDS),
    english=_word_pattern(ENGLISH_WORDS),
)

KEYWORDS = DetectorProfile(
    name="keywords",
    spanish=_word_pattern(KEYWORD_SPANISH_WORDS),
    english=_word_pattern(KEYWORD_ENGLISH_WORDS),
)


def is_spanish(text: str, profile: DetectorProfile = DEFAULT) -> bool:
    return bool(_SPANISH_CHARS_RE.search(text) or profile.spanish.search(text))


def is_english(text: str, profile: DetectorProfile = DEFAULT) -> bool:
    return bool(profile.english.search(text))


def detect(text: str, profile: DetectorProfile = DEFAULT) -> Language:
    """
    Guess the language of `text`.

    Args:
        text: Sample to classify
        profile: Word lists to match against

    Returns:
        Language.ES, Language.EN or Language.UNKNOWN
    """
    if not text:
        return Language.UNKNOWN
    if is_spanish(text, profile):
        return Language.ES
    if is_english(text, profile):
        return Language.EN
    return Language.UNKNOWN


def other(lang: str) -> str:
    """The single other known language; unknown codes are returned as-is."""
    if lang == Language.ES.value:
        return Language.EN.value
    if lang == Language.EN.value:
        return Language.ES.value
    return lang


def language_name(code: str) -> str:
    return LANGUAGE_NAMES.get(code, code)
