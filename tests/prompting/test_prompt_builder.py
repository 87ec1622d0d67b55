"""
tests/prompting/test_prompt_builder.py

Unit tests for the PromptBuilder layer.

Verifies:
✔ OCR prompt asks for text only
✔ Caption prompt per language, English fallback
✔ Keyword prompt asks for exactly five comma-separated keywords
✔ Translation prompt embeds the full text and ends with the marker
"""

from orchestration.prompting import (
    CAPTION_PROMPTS,
    KEYWORDS_PROMPT,
    OCR_PROMPT,
    TRANSLATION_MARKER,
    build_caption_prompt,
    build_translation_prompt,
)


class TestFixedPrompts:
    """Tests for the fixed image prompts."""

    def test_ocr_prompt_asks_for_text_only(self):
        assert "ONLY the text" in OCR_PROMPT
        assert "No visible text" in OCR_PROMPT

    def test_keywords_prompt_asks_for_five(self):
        assert "exactly 5 keywords" in KEYWORDS_PROMPT
        assert "commas" in KEYWORDS_PROMPT


class TestCaptionPrompt:
    def test_spanish_caption_prompt(self):
        assert build_caption_prompt("es") == CAPTION_PROMPTS["es"]
        assert build_caption_prompt("es").startswith("Describe esta imagen")

    def test_english_caption_prompt(self):
        assert build_caption_prompt("en") == CAPTION_PROMPTS["en"]

    def test_unsupported_language_falls_back_to_english(self):
        assert build_caption_prompt("ja") == CAPTION_PROMPTS["en"]


class TestTranslationPrompt:
    """Tests for build_translation_prompt()."""

    def test_ends_with_marker(self):
        prompt = build_translation_prompt("Hola", "en")
        assert prompt.endswith(f"{TRANSLATION_MARKER} ENGLISH:")

    def test_names_target_language(self):
        prompt = build_translation_prompt("Hello", "es")
        assert "into Spanish" in prompt

    def test_text_is_never_truncated(self):
        text = "palabra " * 1000
        assert text in build_translation_prompt(text, "en")

    def test_unknown_code_used_verbatim(self):
        prompt = build_translation_prompt("Hello", "xx")
        assert prompt.endswith("TRANSLATION TO XX:")
