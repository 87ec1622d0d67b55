"""
Task Orchestrator

Public API for running tasks. For every task the orchestrator:

  1. checks the inference service is reachable (pre-flight)
  2. spawns a fresh background unit (asyncio task) for the task kind
  3. hands it a TaskRequest and relays its progress/success/error messages
  4. discards the unit once a terminal message has been read

Units share nothing with the orchestrator except their outbox queue.
Tasks are never retried; a failed task must be re-submitted.
"""

import asyncio
import logging
import time
from enum import Enum
from typing import AsyncIterator, Callable, Optional, Union

from inference import InferenceBackend

from .aggregator import ResultAggregator
from .availability import AvailabilityMonitor
from .messages import (
    ErrorMessage,
    ProgressMessage,
    SuccessMessage,
    TaskRequest,
    TerminalMessage,
    UnitMessage,
)
from .state_schema import Task, TaskKind, TaskStatus, TranslationOutcome
from .units import create_unit

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[ProgressMessage], None]

UNAVAILABLE_MESSAGE = (
    "Inference service is not available. Make sure Ollama is running."
)


class ProcessMode(str, Enum):
    """Image actions offered to the user."""
    TRANSLATE = "translate"   # recognize text, then translate it
    CAPTION = "caption"
    KEYWORDS = "keywords"


_SINGLE_TASK_MODES = {
    ProcessMode.CAPTION: TaskKind.DESCRIBE_IMAGE,
    ProcessMode.KEYWORDS: TaskKind.EXTRACT_KEYWORDS,
}


async def _next_message(outbox: asyncio.Queue, worker: asyncio.Task) -> Optional[UnitMessage]:
    """Next message from the unit, or None if the unit ended without one."""
    getter = asyncio.ensure_future(outbox.get())
    try:
        done, _ = await asyncio.wait({getter, worker}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        getter.cancel()
        raise
    if getter in done:
        return getter.result()

    getter.cancel()
    if not outbox.empty():
        return outbox.get_nowait()
    return None


class TaskOrchestrator:
    """
    Runs one isolated background unit per task.

    Usage:
        orchestrator = TaskOrchestrator(OllamaClient())
        message = await orchestrator.submit("translate_text", "en", text="Hola")
        if message.type == "success":
            print(message.payload.translated_text)
    """

    def __init__(
        self,
        backend: InferenceBackend,
        monitor: Optional[AvailabilityMonitor] = None,
        preflight: bool = True,
    ):
        """
        Args:
            backend:   Inference boundary handed to every unit
            monitor:   Optional availability monitor updated by pre-flight probes
            preflight: Probe the service before spawning each unit
        """
        self.backend = backend
        self.monitor = monitor
        self.preflight = preflight

    async def _check_available(self) -> bool:
        available = await self.backend.probe_availability()
        if self.monitor is not None:
            self.monitor.report(available)
        return available

    async def stream(self, task: Task) -> AsyncIterator[UnitMessage]:
        """
        Run `task` and yield every message its unit emits.

        The last message yielded is always terminal (success or error).
        """
        submitted_at = time.perf_counter()
        task.transition(TaskStatus.RUNNING)
        logger.info("Task %s submitted (target=%s)", task.kind.value, task.target_lang)

        if self.preflight and not await self._check_available():
            logger.error("Inference service unavailable, task %s not started", task.kind.value)
            task.transition(TaskStatus.FAILED)
            yield ErrorMessage(message=UNAVAILABLE_MESSAGE)
            return

        try:
            request = TaskRequest.from_task(task, submitted_at)
        except Exception as e:
            task.transition(TaskStatus.FAILED)
            yield ErrorMessage(message=f"Could not prepare task: {e}")
            return

        outbox: asyncio.Queue = asyncio.Queue()
        unit = create_unit(task.kind, self.backend)
        worker = asyncio.create_task(unit.run(request, outbox), name=f"unit-{task.kind.value}")

        try:
            while True:
                message = await _next_message(outbox, worker)
                if message is None:
                    message = ErrorMessage(message="Background unit exited without a result")

                if message.terminal:
                    task.transition(
                        TaskStatus.SUCCEEDED if message.type == "success" else TaskStatus.FAILED
                    )
                    logger.info("Task %s %s", task.kind.value, task.status.value)
                    yield message
                    return

                yield message
        finally:
            if not worker.done():
                worker.cancel()
            try:
                await worker
            except asyncio.CancelledError:
                pass

    async def run(
        self, task: Task, on_progress: Optional[ProgressCallback] = None
    ) -> TerminalMessage:
        """Run `task` to completion and return its terminal message."""
        terminal: Optional[TerminalMessage] = None
        async for message in self.stream(task):
            if message.terminal:
                terminal = message
            elif on_progress is not None:
                on_progress(message)
        return terminal

    async def submit(
        self,
        kind: Union[TaskKind, str],
        target_lang: str,
        image: Optional[Union[bytes, str]] = None,
        text: Optional[str] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TerminalMessage:
        """Create a Task for a single user action and run it."""
        try:
            task = Task(kind=kind, target_lang=target_lang, image_payload=image, text_input=text)
        except ValueError as e:
            return ErrorMessage(message=str(e))
        return await self.run(task, on_progress)

    async def process_image(
        self,
        mode: Union[ProcessMode, str],
        image: Union[bytes, str],
        target_lang: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> TerminalMessage:
        """
        Run one image action.

        caption/keywords run a single task. translate recognizes the text
        first and, once that unit has finished, runs a translation unit over
        it; the two never overlap. Duration covers the whole action.
        """
        mode = ProcessMode(mode)
        if mode in _SINGLE_TASK_MODES:
            return await self.submit(
                _SINGLE_TASK_MODES[mode], target_lang, image=image, on_progress=on_progress
            )

        aggregator = ResultAggregator()
        recognized = await self.submit(
            TaskKind.RECOGNIZE_TEXT, target_lang, image=image, on_progress=on_progress
        )
        if recognized.type == "error":
            return recognized

        original = recognized.payload.original_text
        if not original or target_lang == "auto":
            return SuccessMessage(payload=aggregator.finish(original))

        translated = await self.submit(
            TaskKind.TRANSLATE_TEXT, target_lang, text=original, on_progress=on_progress
        )
        if translated.type == "error":
            return translated

        result = translated.payload
        outcome = TranslationOutcome(
            translated_text=result.translated_text,
            detected_source_lang=result.detected_source_lang,
            actual_target_lang=result.actual_target_lang,
        )
        return SuccessMessage(payload=aggregator.finish(original, outcome))
