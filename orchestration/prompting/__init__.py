"""
Prompt Builder layer.

Exports the fixed task prompts and the caption/translation prompt assemblers.
"""

from .prompt_builder import (
    OCR_PROMPT,
    KEYWORDS_PROMPT,
    CAPTION_PROMPTS,
    TRANSLATION_MARKER,
    build_caption_prompt,
    build_translation_prompt,
)

__all__ = [
    "OCR_PROMPT",
    "KEYWORDS_PROMPT",
    "CAPTION_PROMPTS",
    "TRANSLATION_MARKER",
    "build_caption_prompt",
    "build_translation_prompt",
]
