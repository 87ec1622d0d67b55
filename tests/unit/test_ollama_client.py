"""
tests/unit/test_ollama_client.py

Tests for OllamaClient against a mocked HTTP transport.

Verifies:
✔ probe_availability: True on 2xx, False on non-2xx and connection errors
✔ list_models: names from /api/tags, [] on failure
✔ generate_text: request body, normalization, HTTPError, timeout, unreachable, undecodable reply
✔ describe_image: probe first, payload cleaned, image sampling options
"""

import base64
import json

import httpx
import pytest

from inference import (
    EmptyResponse,
    GenerateRequest,
    HTTPError,
    InferenceError,
    InferenceTimeout,
    ModelCatalog,
    OllamaClient,
    Unavailable,
)
from services.payload import InvalidPayload


IMAGE_B64 = base64.b64encode(bytes(range(256))).decode("ascii")
TAGS = {"models": [{"name": "minicpm-v:latest"}, {"name": "phi3:3.8b-mini-4k-instruct-q4_K_M"}]}


# ─────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────


def make_client(handler, **kwargs):
    return OllamaClient(base_url="http://ollama.test", transport=httpx.MockTransport(handler), **kwargs)


def ollama_handler(generate_body='{"model":"m","response":"ok","done":true}', tags_status=200, seen=None):
    """Handler serving /api/tags and /api/generate; generate bodies are appended to `seen`."""

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(tags_status, json=TAGS)
        if request.url.path == "/api/generate":
            if seen is not None:
                seen.append(json.loads(request.content))
            return httpx.Response(200, text=generate_body)
        return httpx.Response(404)

    return handler


# ─────────────────────────────────────────────────────
# Availability & inventory
# ─────────────────────────────────────────────────────


class TestAvailability:
    @pytest.mark.asyncio
    async def test_probe_true_on_success(self):
        async with make_client(ollama_handler()) as client:
            assert await client.probe_availability() is True

    @pytest.mark.asyncio
    async def test_probe_false_on_server_error(self):
        async with make_client(ollama_handler(tags_status=500)) as client:
            assert await client.probe_availability() is False

    @pytest.mark.asyncio
    async def test_probe_false_on_connection_refused(self):
        def refuse(request):
            raise httpx.ConnectError("Connection refused", request=request)

        async with make_client(refuse) as client:
            assert await client.probe_availability() is False

    @pytest.mark.asyncio
    async def test_list_models(self):
        async with make_client(ollama_handler()) as client:
            models = await client.list_models()
        assert models == ["minicpm-v:latest", "phi3:3.8b-mini-4k-instruct-q4_K_M"]

    @pytest.mark.asyncio
    async def test_list_models_empty_on_failure(self):
        async with make_client(ollama_handler(tags_status=503)) as client:
            assert await client.list_models() == []

    @pytest.mark.asyncio
    async def test_inventory_reports_missing_models(self):
        async with make_client(ollama_handler()) as client:
            inventory = await client.inventory()
        assert inventory.missing == ["llama3.1:8b-instruct-q5_k_m"]
        assert inventory.complete is False


# ─────────────────────────────────────────────────────
# Text generation
# ─────────────────────────────────────────────────────


class TestGenerateText:
    @pytest.mark.asyncio
    async def test_request_body(self):
        seen = []
        async with make_client(ollama_handler(seen=seen)) as client:
            text = await client.generate_text(GenerateRequest(model="phi3", prompt="Hello"))

        assert text == "ok"
        assert seen == [{"model": "phi3", "prompt": "Hello", "stream": False, "options": {}}]

    @pytest.mark.asyncio
    async def test_stream_body_is_normalized(self):
        body = '{"model":"m","response":"Hello","done":false}\n{"model":"m","response":" world","done":true}'
        async with make_client(ollama_handler(generate_body=body)) as client:
            text = await client.generate_text(GenerateRequest(model="m", prompt="p"))
        assert text == "Hello world"

    @pytest.mark.asyncio
    async def test_http_error_keeps_status_and_detail(self):
        def handler(request):
            return httpx.Response(500, text="model not found")

        async with make_client(handler) as client:
            with pytest.raises(HTTPError) as exc_info:
                await client.generate_text(GenerateRequest(model="m", prompt="p"))

        assert exc_info.value.status == 500
        assert "model not found" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_empty_body_raises_empty_response(self):
        async with make_client(ollama_handler(generate_body="")) as client:
            with pytest.raises(EmptyResponse):
                await client.generate_text(GenerateRequest(model="m", prompt="p"))

    @pytest.mark.asyncio
    async def test_timeout_raises_inference_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        async with make_client(handler, timeout_s=120.0) as client:
            with pytest.raises(InferenceTimeout) as exc_info:
                await client.generate_text(GenerateRequest(model="m", prompt="p"))

        assert "120s" in str(exc_info.value)
        assert isinstance(exc_info.value, Unavailable)

    @pytest.mark.asyncio
    async def test_undecodable_reply_raises_inference_error(self):
        def handler(request):
            return httpx.Response(200, content=b"not gzip data", headers={"Content-Encoding": "gzip"})

        async with make_client(handler) as client:
            with pytest.raises(InferenceError) as exc_info:
                await client.generate_text(GenerateRequest(model="m", prompt="p"))

        assert not isinstance(exc_info.value, Unavailable)
        assert "Invalid reply" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_unreachable_raises_unavailable(self):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(Unavailable):
                await client.generate_text(GenerateRequest(model="m", prompt="p"))


# ─────────────────────────────────────────────────────
# Image generation
# ─────────────────────────────────────────────────────


class TestDescribeImage:
    @pytest.mark.asyncio
    async def test_image_request_body(self):
        seen = []
        async with make_client(ollama_handler(seen=seen)) as client:
            text = await client.describe_image(f"data:image/png;base64,{IMAGE_B64}", "Describe")

        assert text == "ok"
        body = seen[0]
        assert body["model"] == ModelCatalog().caption
        assert body["images"] == [IMAGE_B64]
        assert body["stream"] is False
        assert body["options"] == {"temperature": 0.1, "top_p": 0.9, "top_k": 40}

    @pytest.mark.asyncio
    async def test_explicit_model(self):
        seen = []
        async with make_client(ollama_handler(seen=seen)) as client:
            await client.describe_image(IMAGE_B64, "Read", model="llava")
        assert seen[0]["model"] == "llava"

    @pytest.mark.asyncio
    async def test_unavailable_service_raises_before_generating(self):
        seen = []
        async with make_client(ollama_handler(tags_status=500, seen=seen)) as client:
            with pytest.raises(Unavailable):
                await client.describe_image(IMAGE_B64, "Describe")
        assert seen == []

    @pytest.mark.asyncio
    async def test_invalid_payload_raises(self):
        async with make_client(ollama_handler()) as client:
            with pytest.raises(InvalidPayload):
                await client.describe_image("abcd", "Describe")
