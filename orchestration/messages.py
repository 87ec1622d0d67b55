"""
Message protocol between the orchestrator and background units.

Inbound:
  TaskRequest     - sent once when the unit is spawned

Outbound:
  progress {status}    - advisory, any number of times
  success {payload}    - exactly once, terminal
  error {message}      - exactly once, terminal, exclusive with success

Messages carry plain values only; a unit never receives a reference to
orchestrator state.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from services.payload import encode_image

from .state_schema import Task, TaskKind, TaskResult


class TaskRequest(BaseModel):
    """Structured request handed to a unit when it is spawned."""

    kind: TaskKind
    target_lang: str
    image_b64: Optional[str] = None
    text: Optional[str] = None
    submitted_at: float  # time.perf_counter() at submission

    @classmethod
    def from_task(cls, task: Task, submitted_at: float) -> "TaskRequest":
        image = task.image_payload
        if isinstance(image, (bytes, bytearray)):
            image = encode_image(bytes(image))
        return cls(
            kind=task.kind,
            target_lang=task.target_lang,
            image_b64=image,
            text=task.text_input,
            submitted_at=submitted_at,
        )


class ProgressMessage(BaseModel):
    type: Literal["progress"] = "progress"
    status: str

    @property
    def terminal(self) -> bool:
        return False


class SuccessMessage(BaseModel):
    type: Literal["success"] = "success"
    payload: TaskResult

    @property
    def terminal(self) -> bool:
        return True


class ErrorMessage(BaseModel):
    type: Literal["error"] = "error"
    message: str

    @property
    def terminal(self) -> bool:
        return True


UnitMessage = Annotated[
    Union[ProgressMessage, SuccessMessage, ErrorMessage],
    Field(discriminator="type"),
]

TerminalMessage = Union[SuccessMessage, ErrorMessage]
