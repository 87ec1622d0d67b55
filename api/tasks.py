"""
Task Endpoints

Exposes the orchestrator over HTTP:
  - POST /tasks    single task (recognize_text, describe_image, extract_keywords, translate_text)
  - POST /process  image action (translate, caption, keywords)
  - GET  /status   inference availability and model inventory

Responses mirror the unit message protocol:
  {"status": "success", "result": {...}} or {"status": "error", "message": "..."}

An unreachable inference service is reported with HTTP 503, a malformed
request with HTTP 400. Every other task failure is HTTP 200 with an error body.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from infra import InfraBootstrap, bootstrap_infrastructure
from orchestration import Availability, ProcessMode, Task, TaskKind
from orchestration.messages import TerminalMessage
from orchestration.orchestrator import UNAVAILABLE_MESSAGE

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])


class TaskBody(BaseModel):
    kind: TaskKind
    target_lang: str
    image_base64: Optional[str] = None
    text: Optional[str] = None


class ProcessBody(BaseModel):
    mode: ProcessMode
    image_base64: str
    target_lang: str = "auto"


class StatusResponse(BaseModel):
    state: str
    available: bool
    models: Optional[List[str]] = None
    required: List[str]
    missing: List[str]
    backend: str


def get_bootstrap() -> InfraBootstrap:
    """Dependency returning the process-wide infrastructure."""
    return bootstrap_infrastructure()


def _respond(message: TerminalMessage) -> JSONResponse:
    if message.type == "success":
        return JSONResponse(
            status_code=200,
            content={"status": "success", "result": message.payload.model_dump()},
        )

    status_code = 503 if message.message == UNAVAILABLE_MESSAGE else 200
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message.message},
    )


@router.post("/tasks")
async def submit_task(body: TaskBody, infra: InfraBootstrap = Depends(get_bootstrap)):
    """Run one task to completion and return its terminal message."""
    try:
        task = Task(
            kind=body.kind,
            target_lang=body.target_lang,
            image_payload=body.image_base64,
            text_input=body.text,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    logger.debug(
        "POST /tasks kind=%s image=%d chars text=%d chars",
        body.kind.value,
        len(body.image_base64 or ""),
        len(body.text or ""),
    )
    message = await infra.get_orchestrator().run(task)
    return _respond(message)


@router.post("/process")
async def process_image(body: ProcessBody, infra: InfraBootstrap = Depends(get_bootstrap)):
    """Run one image action (translate runs recognition, then translation)."""
    if not body.image_base64.strip():
        raise HTTPException(status_code=400, detail="image_base64 must not be empty")

    message = await infra.get_orchestrator().process_image(
        body.mode, body.image_base64, body.target_lang
    )
    return _respond(message)


@router.get("/status", response_model=StatusResponse)
async def status(infra: InfraBootstrap = Depends(get_bootstrap)) -> Dict[str, Any]:
    """Last known availability; refreshed on request when nothing is known yet."""
    monitor = infra.get_monitor()
    current = monitor.current
    if current.state is Availability.CHECKING:
        current = await monitor.refresh()

    return {
        "state": current.state.value,
        "available": current.available,
        "models": current.models,
        "required": current.required,
        "missing": current.missing,
        "backend": infra.config.inference_backend,
    }
