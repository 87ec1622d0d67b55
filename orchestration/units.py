"""
Background execution units.

One unit performs exactly one task. It receives a TaskRequest, talks to the
inference boundary, and reports through its outbox queue:

  progress*  →  success | error

Rules:
- Exactly one terminal message per unit, then the unit returns
- Every failure is caught here and reported as an error message
- The primary call always completes before a chained translation starts
- Only keyword extraction absorbs a failed follow-up translation
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Type

from inference import EmptyResponse, InferenceBackend, InferenceError, Unavailable
from services.language import KEYWORDS, KNOWN_LANGUAGES, detect, language_name

from .aggregator import ResultAggregator
from .messages import ErrorMessage, ProgressMessage, SuccessMessage, TaskRequest
from .prompting import KEYWORDS_PROMPT, OCR_PROMPT, build_caption_prompt
from .state_schema import TaskKind, TaskResult
from .translation import translate

logger = logging.getLogger(__name__)


class TaskUnit(ABC):
    """
    Base class for a single-task background unit.

    Subclasses implement execute(); run() wraps it in the message protocol.
    """

    kind: TaskKind
    failure_prefix: str = "Task failed"

    def __init__(self, backend: InferenceBackend):
        self.backend = backend

    async def run(self, request: TaskRequest, outbox: asyncio.Queue) -> None:
        """Execute the request and emit exactly one terminal message."""
        aggregator = ResultAggregator(started_at=request.submitted_at)
        logger.info("[%s] unit started (target=%s)", self.kind.value, request.target_lang)

        try:
            result = await self.execute(request, aggregator, outbox)
        except Exception as e:
            logger.error("[%s] unit failed: %s", self.kind.value, e, exc_info=True)
            await outbox.put(ErrorMessage(message=f"{self.failure_prefix}: {e}"))
            return

        logger.info("[%s] unit completed in %.2fms", self.kind.value, result.duration_ms)
        await outbox.put(SuccessMessage(payload=result))

    @staticmethod
    async def progress(outbox: asyncio.Queue, status: str) -> None:
        await outbox.put(ProgressMessage(status=status))

    @abstractmethod
    async def execute(
        self,
        request: TaskRequest,
        aggregator: ResultAggregator,
        outbox: asyncio.Queue,
    ) -> TaskResult:
        raise NotImplementedError


class RecognizeTextUnit(TaskUnit):
    """Extract visible text; the result is never translated here."""

    kind = TaskKind.RECOGNIZE_TEXT
    failure_prefix = "Could not recognize text in the image"

    async def execute(self, request, aggregator, outbox):
        await self.progress(outbox, "Recognizing text...")
        text = await self.backend.describe_image(
            request.image_b64, OCR_PROMPT, self.backend.catalog.ocr
        )
        text = text.strip()
        if not text:
            raise EmptyResponse("No text recognized")
        return aggregator.finish(text)


class DescribeImageUnit(TaskUnit):
    """Describe the image in the requested language; never translated here."""

    kind = TaskKind.DESCRIBE_IMAGE
    failure_prefix = "Could not describe the image"

    async def execute(self, request, aggregator, outbox):
        await self.progress(outbox, "Generating description...")
        caption = await self.backend.describe_image(
            request.image_b64,
            build_caption_prompt(request.target_lang),
            self.backend.catalog.caption,
        )
        return aggregator.finish(caption)


class ExtractKeywordsUnit(TaskUnit):
    """
    Five keywords in the image's own language, translated when needed.

    The follow-up translation runs only when the keywords are in one known
    language and the target is the other. If it fails the untranslated
    keywords are returned.
    """

    kind = TaskKind.EXTRACT_KEYWORDS
    failure_prefix = "Could not extract keywords from the image"

    async def execute(self, request, aggregator, outbox):
        await self.progress(
            outbox, f"Extracting keywords in {language_name(request.target_lang)}..."
        )
        keywords = await self.backend.describe_image(
            request.image_b64, KEYWORDS_PROMPT, self.backend.catalog.caption
        )

        detected = detect(keywords, KEYWORDS)
        logger.info("Keywords detected as %s", detected.value)

        needs_translation = (
            detected in KNOWN_LANGUAGES
            and request.target_lang in KNOWN_LANGUAGES
            and request.target_lang != detected
        )
        if not needs_translation:
            return aggregator.finish(keywords)

        await self.progress(outbox, "Translating keywords...")
        try:
            outcome = await translate(
                self.backend, keywords, request.target_lang, source_lang=detected
            )
        except InferenceError as e:
            logger.warning("Keyword translation failed, keeping untranslated keywords: %s", e)
            return aggregator.finish(keywords)

        return aggregator.finish(keywords, outcome, replace_original=True)


class TranslateTextUnit(TaskUnit):
    """Translate text input with language detection and auto-flip."""

    kind = TaskKind.TRANSLATE_TEXT
    failure_prefix = "Could not translate the text"

    async def execute(self, request, aggregator, outbox):
        text = request.text or ""
        if not text.strip():
            logger.info("Empty text, returning empty translation")
            return aggregator.finish("")

        await self.progress(outbox, "Starting translation with automatic detection...")
        if not await self.backend.probe_availability():
            raise Unavailable("Inference service is not available for translation")

        outcome = await translate(self.backend, text, request.target_lang)
        await self.progress(
            outbox,
            f"Translation from {language_name(outcome.detected_source_lang)} "
            f"to {language_name(outcome.actual_target_lang)} completed",
        )
        return aggregator.finish(text, outcome)


UNIT_TYPES: Dict[TaskKind, Type[TaskUnit]] = {
    unit.kind: unit
    for unit in (RecognizeTextUnit, DescribeImageUnit, ExtractKeywordsUnit, TranslateTextUnit)
}


def create_unit(kind: TaskKind, backend: InferenceBackend) -> TaskUnit:
    """Create a fresh unit for `kind`; units are never reused."""
    return UNIT_TYPES[TaskKind(kind)](backend)
