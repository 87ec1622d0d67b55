"""
tests/unit/test_infra_config.py

Tests for the configuration and bootstrap layer.

Verifies:
✔ Defaults target a local Ollama service
✔ Environment overrides for URL, timeouts, interval and models
✔ create_inference_client() selects Ollama or the stub
✔ InfraBootstrap is a resettable singleton
"""

import pytest

from inference import ModelCatalog, OllamaClient, StubInferenceClient
from infra import InfraBootstrap, InfraConfig, bootstrap_infrastructure


ENV_VARS = (
    "INFERENCE_BACKEND",
    "OLLAMA_BASE_URL",
    "INFERENCE_TIMEOUT_S",
    "PROBE_TIMEOUT_S",
    "AVAILABILITY_INTERVAL_S",
    "OCR_MODEL",
    "CAPTION_MODEL",
    "TRANSLATION_MODEL",
    "DEFAULT_MODEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestInfraConfig:
    """Test infrastructure configuration."""

    def test_config_from_env_defaults(self, clean_env):
        """Verify defaults are the local stack."""
        config = InfraConfig.from_env()

        assert config.inference_backend == "ollama"
        assert config.ollama_base_url == "http://localhost:11434"
        assert config.timeout_s == 120.0
        assert config.probe_timeout_s == 5.0
        assert config.availability_interval_s == 60.0
        assert config.model_catalog() == ModelCatalog()

    def test_config_overrides(self, clean_env):
        clean_env.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434")
        clean_env.setenv("INFERENCE_TIMEOUT_S", "30")
        clean_env.setenv("TRANSLATION_MODEL", "qwen2.5:7b")
        clean_env.setenv("OCR_MODEL", "llava:13b")

        config = InfraConfig.from_env()

        assert config.ollama_base_url == "http://gpu-box:11434"
        assert config.timeout_s == 30.0
        catalog = config.model_catalog()
        assert catalog.translation == "qwen2.5:7b"
        assert catalog.ocr == "llava:13b"
        assert catalog.caption == "minicpm-v:latest"

    @pytest.mark.asyncio
    async def test_creates_ollama_client(self, clean_env):
        client = InfraConfig.from_env().create_inference_client()
        assert isinstance(client, OllamaClient)
        assert client.timeout_s == 120.0
        await client.aclose()

    def test_creates_stub_client(self, clean_env):
        clean_env.setenv("INFERENCE_BACKEND", "stub")
        clean_env.setenv("CAPTION_MODEL", "llava")
        client = InfraConfig.from_env().create_inference_client()
        assert isinstance(client, StubInferenceClient)
        assert client.catalog.caption == "llava"


class TestInfraBootstrap:
    """Test bootstrap singleton."""

    def setup_method(self):
        InfraBootstrap.reset()

    def teardown_method(self):
        InfraBootstrap.reset()

    def test_singleton(self, clean_env):
        clean_env.setenv("INFERENCE_BACKEND", "stub")
        first = bootstrap_infrastructure()
        second = bootstrap_infrastructure()
        assert first is second

    def test_wires_components(self, clean_env):
        clean_env.setenv("INFERENCE_BACKEND", "stub")
        infra = bootstrap_infrastructure()

        backend = infra.get_inference_backend()
        assert isinstance(backend, StubInferenceClient)
        assert infra.get_monitor().backend is backend
        assert infra.get_orchestrator().backend is backend
        assert infra.get_orchestrator().monitor is infra.get_monitor()
        assert "inference=stub" in repr(infra)

    def test_reset(self, clean_env):
        clean_env.setenv("INFERENCE_BACKEND", "stub")
        first = bootstrap_infrastructure()
        InfraBootstrap.reset()
        assert bootstrap_infrastructure() is not first
