"""
Translation flow on top of the inference boundary.

detect source → auto-flip target → prompt → generate → clean reply

Auto-flip: when the requested target equals the detected source language,
the target becomes the single other known language, so a translation is
never asked to produce the language it was given.
"""

import logging
import re
from typing import Optional

from inference import EmptyResponse, GenerateOptions, GenerateRequest, InferenceBackend
from services.language import KNOWN_LANGUAGES, Language, detect, language_name, other

from .prompting import TRANSLATION_MARKER, build_translation_prompt
from .state_schema import TranslationOutcome

logger = logging.getLogger(__name__)

TRANSLATION_OPTIONS = GenerateOptions(temperature=0.1, top_p=0.9, num_predict=200)

# Checked in order, first match only; case-insensitive literal prefixes
TRANSLATION_PREFIXES = (
    f"{TRANSLATION_MARKER} SPANISH:",
    f"{TRANSLATION_MARKER} ENGLISH:",
    TRANSLATION_MARKER,
    "TRADUCCIÓN AL",
    "Traducción:",
    "Translation:",
    "TRADUÇÃO:",
    "Traduction:",
    "Übersetzung:",
    "Traduzione:",
    "翻译:",
    "翻譯:",
    "번역:",
)

_WRAPPING_QUOTES = ('"', "'")
_EXTRA_NEWLINES_RE = re.compile(r"\n{3,}")


def resolve_target(detected: str, target_lang: str) -> str:
    """Apply auto-flip: a target equal to the detected source becomes the other language."""
    if detected in KNOWN_LANGUAGES and target_lang == detected:
        flipped = other(detected)
        logger.info(
            "Text detected as %s, switching translation target to %s",
            language_name(detected), language_name(flipped),
        )
        return flipped
    return target_lang


def strip_prefix(text: str) -> str:
    for prefix in TRANSLATION_PREFIXES:
        if text[:len(prefix)].upper() == prefix.upper():
            return text[len(prefix):].strip()
    return text


def strip_wrapping_quotes(text: str) -> str:
    for quote in _WRAPPING_QUOTES:
        if len(text) >= 2 and text.startswith(quote) and text.endswith(quote):
            return text[1:-1]
    return text


def clean_translation(text: str) -> str:
    """
    Remove reply noise around a translation.

    - one known preamble prefix
    - one pair of fully-wrapping quotes
    - runs of 3+ newlines collapse to exactly 2
    """
    cleaned = strip_prefix(text.strip())
    cleaned = strip_wrapping_quotes(cleaned)
    return _EXTRA_NEWLINES_RE.sub("\n\n", cleaned).strip()


async def translate(
    backend: InferenceBackend,
    text: str,
    target_lang: str,
    source_lang: Optional[Language] = None,
) -> TranslationOutcome:
    """
    Translate `text` with auto-flip.

    Args:
        backend: Inference boundary to call
        text: Text to translate
        target_lang: Requested target language code
        source_lang: Already-known source language; detected from `text` when omitted

    Returns:
        TranslationOutcome with the cleaned translation

    Raises:
        EmptyResponse: Reply is empty once cleaned
        InferenceError: Any failure of the generation call
    """
    detected = (source_lang or detect(text)).value
    actual_target = resolve_target(detected, target_lang)

    logger.info(
        "Translating %d chars from %s to %s",
        len(text), detected, language_name(actual_target),
    )

    request = GenerateRequest(
        model=backend.catalog.translation,
        prompt=build_translation_prompt(text, actual_target),
        stream=False,
        options=TRANSLATION_OPTIONS,
    )
    reply = await backend.generate_text(request)

    cleaned = clean_translation(reply)
    if not cleaned:
        raise EmptyResponse("Translation resulted in empty text")

    logger.debug("Translation completed: %s...", cleaned[:100])
    return TranslationOutcome(
        translated_text=cleaned,
        detected_source_lang=detected,
        actual_target_lang=actual_target,
    )
