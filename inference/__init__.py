"""
Inference boundary for the local model-serving service.

This package provides a clean abstraction over the inference service,
allowing orchestration code to remain agnostic of the transport.

Supported backends:
- OllamaClient: Local Ollama over HTTP (default)
- StubInferenceClient: Deterministic fake service (CI/tests)

Example usage:
    from inference import OllamaClient, GenerateRequest

    async with OllamaClient() as client:
        if await client.probe_availability():
            text = await client.generate_text(
                GenerateRequest(model="phi3", prompt="Hello, world!")
            )
"""

from .types import GenerateRequest, GenerateOptions, GenerateChunk, ModelCatalog, ModelInventory
from .errors import InferenceError, Unavailable, InferenceTimeout, HTTPError, EmptyResponse
from .normalizer import normalize
from .base import InferenceBackend
from .stub import StubInferenceClient
from .ollama import OllamaClient, DEFAULT_BASE_URL

__all__ = [
    "GenerateRequest",
    "GenerateOptions",
    "GenerateChunk",
    "ModelCatalog",
    "ModelInventory",
    "InferenceError",
    "Unavailable",
    "InferenceTimeout",
    "HTTPError",
    "EmptyResponse",
    "normalize",
    "InferenceBackend",
    "StubInferenceClient",
    "OllamaClient",
    "DEFAULT_BASE_URL",
]
