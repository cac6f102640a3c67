"""Unit tests for the Azure OpenAI client."""

import json

import httpx
import pytest
import respx
from httpx import Response

from techletter.clients.azure_openai import AzureOpenAIClient
from techletter.errors import CompletionError

ENDPOINT = (
    "https://example.openai.azure.com/openai/deployments/gpt-4o/chat/completions"
    "?api-version=2024-02-15-preview"
)


def _completion(content: str) -> dict:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


class TestAzureOpenAIClient:
    """Tests for AzureOpenAIClient."""

    @pytest.fixture
    def client(self) -> AzureOpenAIClient:
        """Create a test client."""
        return AzureOpenAIClient(endpoint=ENDPOINT, api_key="az-test-key")

    @respx.mock
    async def test_complete_success(self, client: AzureOpenAIClient) -> None:
        """Should send both messages with fixed parameters and return the content."""
        route = respx.post(ENDPOINT).mock(
            return_value=Response(200, json=_completion("📰 SUBJECT LINE\nBig news"))
        )

        result = await client.complete("system text", "user text")

        assert result == "📰 SUBJECT LINE\nBig news"
        request = route.calls.last.request
        assert request.headers["api-key"] == "az-test-key"
        body = json.loads(request.content)
        assert body == {
            "messages": [
                {"role": "system", "content": "system text"},
                {"role": "user", "content": "user text"},
            ],
            "max_tokens": 1500,
            "temperature": 0.7,
        }
        await client.close()

    @respx.mock
    async def test_custom_generation_parameters(self) -> None:
        """Should send configured max_tokens and temperature."""
        route = respx.post(ENDPOINT).mock(return_value=Response(200, json=_completion("X")))

        async with AzureOpenAIClient(
            endpoint=ENDPOINT, api_key="k", max_tokens=800, temperature=0.2
        ) as client:
            await client.complete("s", "u")

        body = json.loads(route.calls.last.request.content)
        assert body["max_tokens"] == 800
        assert body["temperature"] == 0.2

    @respx.mock
    async def test_error_message_from_body(self, client: AzureOpenAIClient) -> None:
        """Should use the service's error message on an error status."""
        respx.post(ENDPOINT).mock(
            return_value=Response(429, json={"error": {"message": "rate limited"}})
        )

        with pytest.raises(CompletionError) as exc_info:
            await client.complete("s", "u")
        assert exc_info.value.reason == "rate limited"
        await client.close()

    @respx.mock
    async def test_error_without_message(self, client: AzureOpenAIClient) -> None:
        """Should fall back to a status-coded message."""
        respx.post(ENDPOINT).mock(return_value=Response(500, text="Internal Server Error"))

        with pytest.raises(CompletionError) as exc_info:
            await client.complete("s", "u")
        assert exc_info.value.reason == "Failed to generate newsletter (Status: 500)"
        await client.close()

    @respx.mock
    async def test_error_object_without_message(self, client: AzureOpenAIClient) -> None:
        """Should fall back when the error object has no message."""
        respx.post(ENDPOINT).mock(
            return_value=Response(401, json={"error": {"code": "401"}})
        )

        with pytest.raises(CompletionError, match=r"\(Status: 401\)"):
            await client.complete("s", "u")
        await client.close()

    @pytest.mark.parametrize(
        "payload",
        [
            {},
            {"choices": []},
            {"choices": [{"message": {}}]},
            {"choices": [{"message": {"content": ""}}]},
            {"choices": [{"message": {"content": None}}]},
        ],
    )
    @respx.mock
    async def test_missing_content(self, client: AzureOpenAIClient, payload: dict) -> None:
        """Should raise when a success response has no message content."""
        respx.post(ENDPOINT).mock(return_value=Response(200, json=payload))

        with pytest.raises(CompletionError, match="No newsletter content generated"):
            await client.complete("s", "u")
        await client.close()

    @respx.mock
    async def test_timeout(self, client: AzureOpenAIClient) -> None:
        """Should raise CompletionError on timeout."""
        respx.post(ENDPOINT).mock(side_effect=httpx.ReadTimeout("timed out"))

        with pytest.raises(CompletionError, match="Failed to generate newsletter: timeout"):
            await client.complete("s", "u")
        await client.close()

    @respx.mock
    async def test_connection_error(self, client: AzureOpenAIClient) -> None:
        """Should raise CompletionError on connection failure."""
        respx.post(ENDPOINT).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(CompletionError) as exc_info:
            await client.complete("s", "u")
        assert exc_info.value.reason == (
            "Failed to generate newsletter: request error: connection refused"
        )
        await client.close()
