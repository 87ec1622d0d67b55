from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class GenerateOptions(BaseModel):
    """Sampling options forwarded verbatim to /api/generate."""

    temperature: Optional[float] = None
    top_p: Optional[float] = None
    top_k: Optional[int] = None
    num_predict: Optional[int] = None
    stop: Optional[List[str]] = None


class GenerateRequest(BaseModel):
    """
    Body of a POST /api/generate call.

    `images` is only set for multimodal requests and then carries exactly
    one cleaned base64 payload.
    """

    model: str
    prompt: str
    images: Optional[List[str]] = Field(default=None, min_length=1, max_length=1)
    stream: bool = False
    options: GenerateOptions = Field(default_factory=GenerateOptions)

    def to_payload(self) -> Dict[str, Any]:
        """JSON body with unset fields dropped."""
        return self.model_dump(exclude_none=True)


class GenerateChunk(BaseModel):
    """One {model, response, done} object, whole reply or one streamed line."""

    model: Optional[str] = None
    response: str = ""
    done: Optional[bool] = None


@dataclass
class ModelCatalog:
    """Model identifiers the application expects to find installed."""

    translation: str = "llama3.1:8b-instruct-q5_k_m"
    caption: str = "minicpm-v:latest"
    ocr: str = "minicpm-v:latest"
    default: str = "phi3:3.8b-mini-4k-instruct-q4_K_M"

    def required(self) -> List[str]:
        seen: List[str] = []
        for name in (self.translation, self.caption, self.ocr, self.default):
            if name not in seen:
                seen.append(name)
        return seen


@dataclass
class ModelInventory:
    installed: List[str] = field(default_factory=list)
    required: List[str] = field(default_factory=list)

    @property
    def missing(self) -> List[str]:
        return [name for name in self.required if name not in self.installed]

    @property
    def complete(self) -> bool:
        return not self.missing
