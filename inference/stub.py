from typing import List, Optional, Union

from services.payload import prepare

from .base import InferenceBackend
from .errors import Unavailable
from .types import GenerateRequest, ModelCatalog

Reply = Union[str, Exception]


class StubInferenceClient(InferenceBackend):
    """
    Deterministic fake inference service for testing and CI.

    Replies are fixed at construction time. A reply given as an exception
    instance is raised instead of returned, which lets tests drive failure
    paths without a network. Every generation request is recorded in
    `requests` in call order.
    """

    def __init__(
        self,
        available: bool = True,
        models: Optional[List[str]] = None,
        image_reply: Reply = "Stubbed image output.",
        text_reply: Optional[Reply] = None,
        catalog: Optional[ModelCatalog] = None,
    ):
        self.available = available
        self.models = list(models) if models is not None else []
        self.image_reply = image_reply
        self.text_reply = text_reply
        self.catalog = catalog or ModelCatalog()
        self.requests: List[GenerateRequest] = []
        self.probes = 0

    async def probe_availability(self) -> bool:
        self.probes += 1
        return self.available

    async def list_models(self) -> List[str]:
        return list(self.models) if self.available else []

    async def generate_text(self, request: GenerateRequest) -> str:
        self.requests.append(request)
        if not self.available:
            raise Unavailable()
        if self.text_reply is None:
            return f"Default stub output for model: {request.model}"
        return self._resolve(self.text_reply)

    async def describe_image(
        self, image_b64: str, prompt: str, model: Optional[str] = None
    ) -> str:
        if not await self.probe_availability():
            raise Unavailable()
        image = prepare(image_b64)
        self.requests.append(
            GenerateRequest(
                model=model or self.catalog.caption,
                prompt=prompt,
                images=[image],
                stream=False,
            )
        )
        return self._resolve(self.image_reply)

    @staticmethod
    def _resolve(reply: Reply) -> str:
        if isinstance(reply, Exception):
            raise reply
        return reply
