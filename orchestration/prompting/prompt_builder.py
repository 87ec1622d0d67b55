"""
Prompt Builder Layer
====================

Fixed prompts and templates sent to the inference service.

Responsibilities:
- OCR prompt: extract visible text only, no commentary
- Caption prompts: one template per supported output language
- Keyword prompt: exactly five comma-separated keywords, in the image's own language
- Translation prompt: structured instructions to return only the translation

Invariants:
- Prompts never embed image data; images travel in the request's `images` field
- The translation prompt ends with a "TRANSLATION TO <LANGUAGE>:" marker, which
  is one of the preambles stripped from replies
"""

from services.language import language_name

OCR_PROMPT = (
    "Extract all the visible text in this image. Return ONLY the text, "
    "without additional explanations, without formatting and without comments. "
    'If there is no text, answer "No visible text".'
)

CAPTION_PROMPTS = {
    "es": (
        "Describe esta imagen en detalle. Incluye los elementos principales, "
        "colores, acciones y contexto visible."
    ),
    "en": (
        "Describe this image in detail. Include the main elements, colors, "
        "actions, and visible context."
    ),
}

DEFAULT_CAPTION_LANG = "en"

# Neutral wording so the model answers in the image's native language
KEYWORDS_PROMPT = (
    "Analyze this image and extract exactly 5 keywords or main concepts that "
    "represent its content. Separate each keyword with commas and answer ONLY "
    "with the keywords, without sentences or additional explanations."
)

TRANSLATION_MARKER = "TRANSLATION TO"

TRANSLATION_TEMPLATE = """You are a professional translator. Your only task is to translate the following text into {language}.

INSTRUCTIONS:
- Translate EXACTLY the text provided
- Keep the same meaning, tone and style
- Do NOT add explanations, notes or additional text
- Do NOT include the original text in your answer
- Only return the translation

TEXT TO TRANSLATE:
{text}

{marker} {language_upper}:"""


def build_caption_prompt(target_lang: str) -> str:
    """Caption prompt for `target_lang`; unsupported languages fall back to English."""
    return CAPTION_PROMPTS.get(target_lang, CAPTION_PROMPTS[DEFAULT_CAPTION_LANG])


def build_translation_prompt(text: str, target_lang: str) -> str:
    """
    Assemble the translation prompt.

    Args:
        text: Text to translate (never truncated)
        target_lang: Language code the reply must be written in

    Returns:
        Prompt string ending with the translation marker
    """
    language = language_name(target_lang)
    return TRANSLATION_TEMPLATE.format(
        language=language,
        text=text,
        marker=TRANSLATION_MARKER,
        language_upper=language.upper(),
    )
