"""
Task orchestration for local image/text inference.

Spawns one isolated background unit per task, relays its messages, and
aggregates the final TaskResult.

Example usage:
    from inference import OllamaClient
    from orchestration import TaskOrchestrator

    orchestrator = TaskOrchestrator(OllamaClient())
    message = await orchestrator.process_image("keywords", image_bytes, "es")
"""

from .state_schema import Task, TaskKind, TaskStatus, TaskResult, TranslationOutcome
from .messages import TaskRequest, ProgressMessage, SuccessMessage, ErrorMessage, UnitMessage
from .aggregator import ResultAggregator
from .availability import Availability, AvailabilityStatus, AvailabilityMonitor
from .translation import translate, clean_translation, resolve_target
from .units import TaskUnit, create_unit
from .orchestrator import TaskOrchestrator, ProcessMode

__all__ = [
    "Task",
    "TaskKind",
    "TaskStatus",
    "TaskResult",
    "TranslationOutcome",
    "TaskRequest",
    "ProgressMessage",
    "SuccessMessage",
    "ErrorMessage",
    "UnitMessage",
    "ResultAggregator",
    "Availability",
    "AvailabilityStatus",
    "AvailabilityMonitor",
    "translate",
    "clean_translation",
    "resolve_target",
    "TaskUnit",
    "create_unit",
    "TaskOrchestrator",
    "ProcessMode",
]
