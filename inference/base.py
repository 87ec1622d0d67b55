from abc import ABC, abstractmethod
from typing import List, Optional

from .types import GenerateRequest, ModelCatalog, ModelInventory


class InferenceBackend(ABC):
    """
    Abstract inference boundary.
    Orchestration code must depend ONLY on this interface.
    """

    catalog: ModelCatalog

    @abstractmethod
    async def probe_availability(self) -> bool:
        """Return True when the service answers; never raises."""
        raise NotImplementedError

    @abstractmethod
    async def list_models(self) -> List[str]:
        """Return installed model identifiers, or [] on any failure."""
        raise NotImplementedError

    @abstractmethod
    async def generate_text(self, request: GenerateRequest) -> str:
        """Run a text generation and return the normalized reply."""
        raise NotImplementedError

    @abstractmethod
    async def describe_image(
        self, image_b64: str, prompt: str, model: Optional[str] = None
    ) -> str:
        """Run a multimodal generation over one image."""
        raise NotImplementedError

    async def inventory(self) -> ModelInventory:
        """Installed models alongside the ones this application needs."""
        installed = await self.list_models()
        return ModelInventory(installed=installed, required=self.catalog.required())

    async def aclose(self) -> None:
        """Release any held connections."""
        return None
