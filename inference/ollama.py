import logging
import time
from typing import List, Optional

import httpx

from services.payload import prepare

from .base import InferenceBackend
from .errors import HTTPError, InferenceError, InferenceTimeout, Unavailable
from .normalizer import normalize
from .types import GenerateOptions, GenerateRequest, ModelCatalog

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:11434"
DEFAULT_TIMEOUT_S = 120.0
DEFAULT_PROBE_TIMEOUT_S = 5.0

TAGS_PATH = "/api/tags"
GENERATE_PATH = "/api/generate"

# Sampling used for every image request
IMAGE_OPTIONS = GenerateOptions(temperature=0.1, top_p=0.9, top_k=40)


class OllamaClient(InferenceBackend):
    """
    Async HTTP client for a local Ollama service.

    Uses /api/tags for availability and model inventory, and /api/generate
    for both text and image generation. Replies are read as text and passed
    through the response normalizer, so single-object, NDJSON and plain-text
    bodies are all accepted.

    The client keeps no per-call state; the underlying httpx.AsyncClient only
    pools connections.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        catalog: Optional[ModelCatalog] = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        probe_timeout_s: float = DEFAULT_PROBE_TIMEOUT_S,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Ollama client.

        Args:
            base_url:        Base URL of the Ollama service
            catalog:         Model identifiers used per task
            timeout_s:       Timeout for generation calls
            probe_timeout_s: Timeout for /api/tags calls
            transport:       Optional httpx transport (tests inject a MockTransport)
        """
        self.base_url = base_url.rstrip("/")
        self.catalog = catalog or ModelCatalog()
        self.timeout_s = timeout_s
        self.probe_timeout_s = probe_timeout_s
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout_s,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def __aenter__(self) -> "OllamaClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    # ── Inventory ────────────────────────────────────────────────────────

    async def probe_availability(self) -> bool:
        """GET /api/tags; True only on a 2xx answer. Never raises."""
        logger.debug("Checking availability at %s", self.base_url)
        try:
            response = await self._client.get(TAGS_PATH, timeout=self.probe_timeout_s)
        except Exception as e:
            logger.info("Inference service unreachable: %s", e)
            return False

        if response.is_success:
            logger.debug("Inference service available")
            return True

        logger.warning("Inference service not available: HTTP %d", response.status_code)
        return False

    async def list_models(self) -> List[str]:
        """Installed model names from /api/tags, or [] on any failure."""
        try:
            response = await self._client.get(TAGS_PATH, timeout=self.probe_timeout_s)
            response.raise_for_status()
            data = response.json()
            models = data.get("models") or []
            return [m["name"] for m in models if isinstance(m, dict) and m.get("name")]
        except Exception as e:
            logger.warning("Failed to list models: %s", e)
            return []

    # ── Generation ───────────────────────────────────────────────────────

    async def generate_text(self, request: GenerateRequest) -> str:
        """
        POST /api/generate and return the normalized reply.

        Raises:
            Unavailable:     Service unreachable
            InferenceTimeout: No answer within timeout_s
            HTTPError:       Non-2xx status
            EmptyResponse:   Nothing recoverable from the body
            InferenceError:  Reply could not be read (e.g. undecodable content)
        """
        logger.info("Generating with model %s", request.model)
        logger.debug("Prompt: %s...", request.prompt[:100])

        start = time.perf_counter()
        try:
            response = await self._client.post(GENERATE_PATH, json=request.to_payload())
        except httpx.TimeoutException:
            raise InferenceTimeout(self.timeout_s)
        except httpx.TransportError as e:
            raise Unavailable(f"Could not reach inference service at {self.base_url}: {e}")
        except httpx.HTTPError as e:
            raise InferenceError(f"Invalid reply from inference service: {e}")

        # Body is read as text first; it is not assumed to be valid JSON
        body = response.text

        if not response.is_success:
            logger.warning("Generation failed: HTTP %d: %s", response.status_code, body[:200])
            raise HTTPError(response.status_code, body[:200] or None)

        text = normalize(body)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info("Generated %d chars in %.2fms", len(text), duration_ms)
        return text

    async def describe_image(
        self, image_b64: str, prompt: str, model: Optional[str] = None
    ) -> str:
        """
        Run a multimodal generation over one image.

        Args:
            image_b64: Base64 payload or data URL
            prompt:    Instruction for the model
            model:     Multimodal model identifier (catalog caption model by default)

        Raises:
            Unavailable:    Availability probe failed
            InvalidPayload: Image fails base64 validation
            ParseError:     Malformed data URL
        """
        if not await self.probe_availability():
            raise Unavailable()

        image = prepare(image_b64)
        model = model or self.catalog.caption
        logger.info("Analyzing image with model %s (%d base64 chars)", model, len(image))

        request = GenerateRequest(
            model=model,
            prompt=prompt,
            images=[image],
            stream=False,
            options=IMAGE_OPTIONS,
        )
        return await self.generate_text(request)
