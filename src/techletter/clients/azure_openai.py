"""Azure OpenAI chat-completions client for Techletter."""

from typing import Any

import httpx

from techletter.errors import CompletionError
from techletter.utils.logging import get_logger

logger = get_logger(__name__)

GENERATE_FAILED = "Failed to generate newsletter"
NO_CONTENT = "No newsletter content generated"


class AzureOpenAIClient:
    """Client for a single Azure OpenAI chat-completions deployment.

    ``endpoint`` is the full deployment URL, including the ``api-version``
    query parameter.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        max_tokens: int = 1500,
        temperature: float = 0.7,
        timeout: float = 60.0,
    ) -> None:
        self._endpoint = endpoint
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client = httpx.AsyncClient(
            headers={"api-key": api_key},
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AzureOpenAIClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def complete(self, system_prompt: str, prompt: str) -> str:
        """Generate a chat completion for a system instruction and user prompt.

        Args:
            system_prompt: The system-role instruction.
            prompt: The user-role prompt.

        Returns:
            The first choice's message content.

        Raises:
            CompletionError: If the request fails, the service returns an error
                status, or the response carries no message content.
        """
        logger.info("Requesting completion", prompt_length=len(prompt))

        body = {
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }

        try:
            response = await self._client.post(self._endpoint, json=body)
        except httpx.TimeoutException as e:
            logger.warning("Timeout requesting completion")
            raise CompletionError(f"{GENERATE_FAILED}: timeout") from e
        except httpx.RequestError as e:
            logger.warning("Request error requesting completion", error=str(e))
            raise CompletionError(f"{GENERATE_FAILED}: request error: {e}") from e

        if response.is_error:
            message = self._error_message(response)
            logger.warning(
                "Completion service returned an error",
                status=response.status_code,
                error=message,
            )
            raise CompletionError(message)

        content = self._first_message_content(response)
        if not content:
            logger.warning("Completion response has no content", status=response.status_code)
            raise CompletionError(NO_CONTENT)

        logger.info("Completion received", length=len(content))
        return content

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Pick the service's error message, falling back to the status code."""
        fallback = f"{GENERATE_FAILED} (Status: {response.status_code})"
        try:
            data = response.json()
        except ValueError:
            return fallback
        if not isinstance(data, dict):
            return fallback
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        return fallback

    @staticmethod
    def _first_message_content(response: httpx.Response) -> str | None:
        """Return ``choices[0].message.content`` or None if any part is missing."""
        try:
            data: Any = response.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError):
            return None
        return content if isinstance(content, str) else None
