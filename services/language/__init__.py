"""
Language heuristics exports.
"""

from .detector import (
    Language,
    KNOWN_LANGUAGES,
    DetectorProfile,
    DEFAULT,
    KEYWORDS,
    detect,
    is_spanish,
    is_english,
    other,
    language_name,
)

__all__ = [
    "Language",
    "KNOWN_LANGUAGES",
    "DetectorProfile",
    "DEFAULT",
    "KEYWORDS",
    "detect",
    "is_spanish",
    "is_english",
    "other",
    "language_name",
]
