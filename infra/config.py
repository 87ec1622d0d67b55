"""
Infrastructure configuration system.

Environment-based backend selection with sensible defaults.
Defaults target a local Ollama service with no external dependencies.
"""

import os
from dataclasses import dataclass
from typing import Literal

from inference import InferenceBackend, ModelCatalog, OllamaClient, StubInferenceClient
from inference.ollama import DEFAULT_BASE_URL, DEFAULT_PROBE_TIMEOUT_S, DEFAULT_TIMEOUT_S
from orchestration.availability import DEFAULT_INTERVAL_S


InferenceBackendType = Literal["stub", "ollama"]

_DEFAULT_CATALOG = ModelCatalog()


@dataclass
class InfraConfig:
    """Infrastructure configuration from environment."""

    # Inference service
    inference_backend: InferenceBackendType
    ollama_base_url: str
    timeout_s: float
    probe_timeout_s: float

    # Availability monitor
    availability_interval_s: float

    # Models
    ocr_model: str
    caption_model: str
    translation_model: str
    default_model: str

    @classmethod
    def from_env(cls) -> "InfraConfig":
        """
        Load configuration from environment variables.

        Generation calls time out after INFERENCE_TIMEOUT_S (120 s by default)
        and /api/tags probes after PROBE_TIMEOUT_S (5 s).
        """
        return cls(
            inference_backend=os.getenv("INFERENCE_BACKEND", "ollama"),  # type: ignore
            ollama_base_url=os.getenv("OLLAMA_BASE_URL", DEFAULT_BASE_URL),
            timeout_s=float(os.getenv("INFERENCE_TIMEOUT_S", str(DEFAULT_TIMEOUT_S))),
            probe_timeout_s=float(os.getenv("PROBE_TIMEOUT_S", str(DEFAULT_PROBE_TIMEOUT_S))),
            availability_interval_s=float(
                os.getenv("AVAILABILITY_INTERVAL_S", str(DEFAULT_INTERVAL_S))
            ),
            ocr_model=os.getenv("OCR_MODEL", _DEFAULT_CATALOG.ocr),
            caption_model=os.getenv("CAPTION_MODEL", _DEFAULT_CATALOG.caption),
            translation_model=os.getenv("TRANSLATION_MODEL", _DEFAULT_CATALOG.translation),
            default_model=os.getenv("DEFAULT_MODEL", _DEFAULT_CATALOG.default),
        )

    def model_catalog(self) -> ModelCatalog:
        return ModelCatalog(
            translation=self.translation_model,
            caption=self.caption_model,
            ocr=self.ocr_model,
            default=self.default_model,
        )

    def create_inference_client(self) -> InferenceBackend:
        """Create inference backend instance based on configuration."""
        if self.inference_backend == "stub":
            return StubInferenceClient(catalog=self.model_catalog())
        # Default to ollama
        return OllamaClient(
            base_url=self.ollama_base_url,
            catalog=self.model_catalog(),
            timeout_s=self.timeout_s,
            probe_timeout_s=self.probe_timeout_s,
        )


def get_config() -> InfraConfig:
    """Get global infrastructure configuration."""
    return InfraConfig.from_env()
