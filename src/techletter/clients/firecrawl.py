"""Firecrawl scrape API client for Techletter."""

from typing import Any

import httpx

from techletter.errors import ExtractionError
from techletter.models import Article
from techletter.utils.logging import get_logger

logger = get_logger(__name__)

FIRECRAWL_API_BASE = "https://api.firecrawl.dev/v1"
FETCH_FAILED = "Failed to fetch article"
NO_CONTENT = "No content found in the article"


class FirecrawlClient:
    """Client for extracting article content with the Firecrawl scrape endpoint."""

    def __init__(
        self,
        api_key: str,
        base_url: str = FIRECRAWL_API_BASE,
        default_title: str = "TechCrunch Article",
        timeout: float = 60.0,
    ) -> None:
        self._default_title = default_title
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Authorization": f"Bearer {api_key}"},
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "FirecrawlClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.close()

    async def scrape(self, url: str) -> Article:
        """Scrape a URL and return its markdown content and title.

        Args:
            url: A validated article URL.

        Returns:
            The extracted Article.

        Raises:
            ExtractionError: On transport failure, an unsuccessful response, or
                a response without article content.
        """
        logger.info("Fetching article", url=url)

        payload = await self._post_scrape(url)

        if not payload.get("success"):
            error = payload.get("error")
            logger.warning("Firecrawl reported failure", url=url, error=error)
            raise ExtractionError(f"{FETCH_FAILED}: {error}" if error else FETCH_FAILED)

        data = payload.get("data")
        content = data.get("markdown") if isinstance(data, dict) else None
        if not isinstance(content, str) or not content.strip():
            logger.warning("Firecrawl returned no content", url=url)
            raise ExtractionError(NO_CONTENT)

        article = Article(url=url, title=self._title(data.get("metadata")), content=content)
        logger.info(
            "Article extracted",
            url=url,
            title=article.title,
            word_count=article.word_count,
        )
        return article

    def _title(self, metadata: object) -> str:
        """Pick the page title from scrape metadata, or the placeholder."""
        if isinstance(metadata, dict):
            for key in ("title", "ogTitle"):
                title = metadata.get(key)
                if isinstance(title, str) and title.strip():
                    return title
        return self._default_title

    async def _post_scrape(self, url: str) -> dict[str, Any]:
        """Send the scrape request and decode the JSON body.

        Error statuses still carry Firecrawl's ``{"success": false, "error": ...}``
        body, so they are decoded rather than raised.

        Raises:
            ExtractionError: If the request fails or the body is not JSON.
        """
        try:
            response = await self._client.post(
                "/scrape", json={"url": url, "formats": ["markdown"]}
            )
        except httpx.TimeoutException as e:
            logger.warning("Timeout scraping URL", url=url)
            raise ExtractionError(f"{FETCH_FAILED}: timeout") from e
        except httpx.RequestError as e:
            logger.warning("Request error scraping URL", url=url, error=str(e))
            raise ExtractionError(f"{FETCH_FAILED}: request error: {e}") from e

        try:
            payload = response.json()
        except ValueError as e:
            logger.warning("Invalid Firecrawl response", url=url, status=response.status_code)
            raise ExtractionError(f"{FETCH_FAILED} (Status: {response.status_code})") from e

        if not isinstance(payload, dict):
            raise ExtractionError(f"{FETCH_FAILED} (Status: {response.status_code})")
        if response.is_error:
            logger.warning("HTTP error scraping URL", url=url, status=response.status_code)
            payload["success"] = False
        return payload
