"""Tests for the Gemini API client using httpx.MockTransport."""

import json

import pytest
import httpx

from src.core.gemini_client import GeminiClient, GeminiError


@pytest.fixture
def mock_client():
    """Factory that creates a GeminiClient with a mocked transport."""
    async def _make(handler):
        client = GeminiClient(api_key="test-key", model="test-model")
        transport = httpx.MockTransport(handler)
        client._client = httpx.AsyncClient(
            transport=transport,
            base_url="https://generativelanguage.googleapis.com/v1beta",
            headers={"x-goog-api-key": "test-key"},
            timeout=30.0,
        )
        return client
    return _make


def _reply(text: str) -> dict:
    return {
        "candidates": [{
            "content": {"role": "model", "parts": [{"text": text}]},
            "finishReason": "STOP",
        }],
    }


class TestGenerateJson:
    async def test_returns_reply_text(self, mock_client):
        def handler(request):
            return httpx.Response(200, json=_reply('{"status": "Healthy"}'))

        client = await mock_client(handler)
        text = await client.generate_json("prompt", {"type": "OBJECT"})
        assert json.loads(text) == {"status": "Healthy"}

    async def test_request_shape(self, mock_client):
        captured = {}

        def handler(request):
            captured["url"] = str(request.url)
            captured["key"] = request.headers.get("x-goog-api-key")
            captured["body"] = json.loads(request.content)
            return httpx.Response(200, json=_reply("{}"))

        client = await mock_client(handler)
        await client.generate_json("Analyze this", {"type": "OBJECT"})

        assert captured["url"].endswith("/v1beta/models/test-model:generateContent")
        assert captured["key"] == "test-key"
        body = captured["body"]
        assert body["contents"][0]["parts"][0]["text"] == "Analyze this"
        assert body["generationConfig"]["responseMimeType"] == "application/json"
        assert body["generationConfig"]["responseSchema"] == {"type": "OBJECT"}

    async def test_joins_multiple_parts(self, mock_client):
        def handler(request):
            return httpx.Response(200, json={
                "candidates": [{"content": {"parts": [{"text": '{"a":'}, {"text": " 1}"}]}}],
            })

        client = await mock_client(handler)
        assert await client.generate_json("p", {}) == '{"a": 1}'

    async def test_empty_text_raises(self, mock_client):
        def handler(request):
            return httpx.Response(200, json=_reply("   "))

        client = await mock_client(handler)
        with pytest.raises(GeminiError) as exc_info:
            await client.generate_json("p", {})
        assert "empty" in exc_info.value.message

    async def test_no_candidates_raises(self, mock_client):
        def handler(request):
            return httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})

        client = await mock_client(handler)
        with pytest.raises(GeminiError) as exc_info:
            await client.generate_json("p", {})
        assert exc_info.value.status == "NO_CANDIDATES"

    async def test_api_error_raises_gemini_error(self, mock_client):
        def handler(request):
            return httpx.Response(403, json={
                "error": {
                    "code": 403,
                    "message": "API key not valid.",
                    "status": "PERMISSION_DENIED",
                },
            })

        client = await mock_client(handler)
        with pytest.raises(GeminiError) as exc_info:
            await client.generate_json("p", {})
        assert exc_info.value.status_code == 403
        assert exc_info.value.status == "PERMISSION_DENIED"
        assert "not valid" in exc_info.value.message

    async def test_non_json_error_body(self, mock_client):
        def handler(request):
            return httpx.Response(502, text="Bad Gateway")

        client = await mock_client(handler)
        with pytest.raises(GeminiError) as exc_info:
            await client.generate_json("p", {})
        assert exc_info.value.status_code == 502
        assert exc_info.value.status == "UNKNOWN"

    async def test_timeout_raises_gemini_error(self, mock_client):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = await mock_client(handler)
        with pytest.raises(GeminiError) as exc_info:
            await client.generate_json("p", {})
        assert exc_info.value.status_code == 408


class TestClientLifecycle:
    async def test_lazy_client_and_close(self):
        client = GeminiClient(api_key="k")
        http = client.client
        assert http.headers["x-goog-api-key"] == "k"
        assert client.client is http
        await client.close()
        assert http.is_closed
        assert client.client is not http
        await client.close()
