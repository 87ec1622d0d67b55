"""
Task state schema and types.

A Task is created for a single user action and lives only as long as the
orchestration call that created it. Its status is written only by the
orchestrator, never by the background unit executing it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import BaseModel


class TaskKind(str, Enum):
    RECOGNIZE_TEXT = "recognize_text"
    DESCRIBE_IMAGE = "describe_image"
    EXTRACT_KEYWORDS = "extract_keywords"
    TRANSLATE_TEXT = "translate_text"


IMAGE_KINDS = (TaskKind.RECOGNIZE_TEXT, TaskKind.DESCRIBE_IMAGE, TaskKind.EXTRACT_KEYWORDS)


class TaskStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATUSES = (TaskStatus.SUCCEEDED, TaskStatus.FAILED)

_TRANSITIONS = {
    TaskStatus.PENDING: (TaskStatus.RUNNING,),
    TaskStatus.RUNNING: TERMINAL_STATUSES,
    TaskStatus.SUCCEEDED: (),
    TaskStatus.FAILED: (),
}


@dataclass
class Task:
    """
    One user-triggered unit of work.

    Invariants:
    - image kinds carry image_payload; translate_text carries text_input
    - status only moves Pending → Running → {Succeeded, Failed}
    - terminal states are final; a failed task is re-submitted as a new Task
    """

    kind: TaskKind
    target_lang: str
    image_payload: Optional[Union[bytes, str]] = None  # raw bytes, base64 or data URL
    text_input: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING

    def __post_init__(self):
        """Validate task schema."""
        self.kind = TaskKind(self.kind)
        if not self.target_lang:
            raise ValueError("target_lang must not be empty")
        if self.kind in IMAGE_KINDS and not self.image_payload:
            raise ValueError(f"{self.kind.value} requires an image payload")
        if self.kind == TaskKind.TRANSLATE_TEXT and self.text_input is None:
            raise ValueError("translate_text requires text input")

    @property
    def finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    def transition(self, status: TaskStatus) -> None:
        if status not in _TRANSITIONS[self.status]:
            raise ValueError(f"Invalid task transition: {self.status.value} -> {status.value}")
        self.status = status


@dataclass(frozen=True)
class TranslationOutcome:
    """Result of one translation call, after auto-flip."""

    translated_text: str
    detected_source_lang: str
    actual_target_lang: str


class TaskResult(BaseModel):
    """Final structured result delivered through the success message."""

    original_text: str
    translated_text: str
    duration_ms: float
    backend: Literal["inference"] = "inference"
    detected_source_lang: Optional[str] = None
    actual_target_lang: Optional[str] = None
