"""Gemini API client wrapper.

Async HTTP client for the Google Generative Language REST API
(https://generativelanguage.googleapis.com/v1beta). Handles authentication,
structured JSON output requests, and error mapping.
"""

from typing import Any, Optional

import httpx

BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_TIMEOUT = 30.0


class GeminiError(Exception):
    """Base exception for Gemini API errors."""

    def __init__(self, status_code: int, status: str, message: str):
        self.status_code = status_code
        self.status = status
        self.message = message
        super().__init__(f"Gemini API Error [{status_code}] {status}: {message}")


class GeminiClient:
    """Async client for the Gemini generateContent endpoint."""

    def __init__(self, api_key: str, model: str = DEFAULT_MODEL):
        self.api_key = api_key
        self.model = model
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=BASE_URL,
                headers={"x-goog-api-key": self.api_key},
                timeout=DEFAULT_TIMEOUT,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    async def _request(self, path: str, json_data: dict[str, Any]) -> dict[str, Any]:
        """POST to the Gemini API and return the decoded body."""
        try:
            response = await self.client.post(path, json=json_data)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            try:
                body = e.response.json() if e.response.content else {}
            except ValueError:
                body = {}
            error = body.get("error", {}) if isinstance(body, dict) else {}
            raise GeminiError(
                status_code=e.response.status_code,
                status=error.get("status", "UNKNOWN"),
                message=error.get("message", str(e)),
            ) from e
        except httpx.TimeoutException as e:
            raise GeminiError(
                status_code=408,
                status="DEADLINE_EXCEEDED",
                message="Request to Gemini API timed out. Please try again.",
            ) from e

        return response.json()

    async def generate_json(
        self,
        prompt: str,
        response_schema: dict[str, Any],
    ) -> str:
        """Ask the model for a JSON reply matching *response_schema*.

        Returns the raw reply text (still JSON-encoded). Raises
        :class:`GeminiError` when the reply carries no text.
        """
        data = await self._request(
            f"/models/{self.model}:generateContent",
            {
                "contents": [{"role": "user", "parts": [{"text": prompt}]}],
                "generationConfig": {
                    "responseMimeType": "application/json",
                    "responseSchema": response_schema,
                },
            },
        )

        candidates = data.get("candidates") or []
        parts = (candidates[0].get("content") or {}).get("parts", []) if candidates else []
        text = "".join(p.get("text", "") for p in parts).strip()
        if not text:
            reason = candidates[0].get("finishReason", "EMPTY") if candidates else "NO_CANDIDATES"
            raise GeminiError(
                status_code=200,
                status=reason,
                message="AI returned an empty or invalid response.",
            )
        return text
