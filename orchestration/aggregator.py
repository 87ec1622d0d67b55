"""
Result aggregation.

Builds the TaskResult delivered with a unit's success message. Duration is
measured once, from the submission timestamp to the moment the result is
built, so it covers any chained translation call.
"""

import time
from typing import Optional

from .state_schema import TaskResult, TranslationOutcome


class ResultAggregator:
    """Collects timing for one task and composes its TaskResult."""

    def __init__(self, started_at: Optional[float] = None):
        self.started_at = started_at if started_at is not None else time.perf_counter()

    def start(self) -> "ResultAggregator":
        """Restart timing from now."""
        self.started_at = time.perf_counter()
        return self

    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started_at) * 1000

    def finish(
        self,
        original_text: str,
        translation: Optional[TranslationOutcome] = None,
        replace_original: bool = False,
    ) -> TaskResult:
        """
        Compose the final result.

        Without a translation, translated_text equals original_text and no
        language fields are set. With replace_original the translation also
        stands in for the original text (keyword extraction).
        """
        if translation is None:
            return TaskResult(
                original_text=original_text,
                translated_text=original_text,
                duration_ms=self.elapsed_ms(),
            )

        if replace_original:
            original_text = translation.translated_text

        return TaskResult(
            original_text=original_text,
            translated_text=translation.translated_text,
            duration_ms=self.elapsed_ms(),
            detected_source_lang=translation.detected_source_lang,
            actual_target_lang=translation.actual_target_lang,
        )
