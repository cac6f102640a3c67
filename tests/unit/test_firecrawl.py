"""Unit tests for the Firecrawl client."""

import json

import httpx
import pytest
import respx
from httpx import Response

from techletter.clients.firecrawl import FirecrawlClient
from techletter.errors import ExtractionError

SCRAPE_URL = "https://api.firecrawl.dev/v1/scrape"
ARTICLE_URL = "https://techcrunch.com/2024/05/01/some-story/"


class TestFirecrawlClient:
    """Tests for FirecrawlClient."""

    @pytest.fixture
    def client(self) -> FirecrawlClient:
        """Create a test client."""
        return FirecrawlClient(api_key="fc-test-key")

    @respx.mock
    async def test_scrape_success(self, client: FirecrawlClient) -> None:
        """Should return the markdown body and title."""
        route = respx.post(SCRAPE_URL).mock(
            return_value=Response(
                200,
                json={
                    "success": True,
                    "data": {
                        "markdown": "# Story\n\nThe startup announced a round.",
                        "metadata": {
                            "title": "Startup raises $10M",
                            "description": "A funding story",
                            "sourceURL": ARTICLE_URL,
                            "statusCode": 200,
                        },
                    },
                },
            )
        )

        article = await client.scrape(ARTICLE_URL)

        assert article.url == ARTICLE_URL
        assert article.title == "Startup raises $10M"
        assert article.content == "# Story\n\nThe startup announced a round."
        assert route.call_count == 1
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer fc-test-key"
        assert json.loads(request.content) == {"url": ARTICLE_URL, "formats": ["markdown"]}
        await client.close()

    @respx.mock
    async def test_missing_title_uses_default(self, client: FirecrawlClient) -> None:
        """Should fall back to the placeholder title when metadata has none."""
        respx.post(SCRAPE_URL).mock(
            return_value=Response(
                200, json={"success": True, "data": {"markdown": "Body", "metadata": {}}}
            )
        )

        article = await client.scrape(ARTICLE_URL)

        assert article.title == "TechCrunch Article"
        await client.close()

    @respx.mock
    async def test_custom_default_title(self) -> None:
        """Should use the configured placeholder title."""
        respx.post(SCRAPE_URL).mock(
            return_value=Response(200, json={"success": True, "data": {"markdown": "Body"}})
        )

        async with FirecrawlClient(api_key="k", default_title="The Verge Article") as client:
            article = await client.scrape(ARTICLE_URL)

        assert article.title == "The Verge Article"

    @respx.mock
    async def test_unsuccessful_response(self, client: FirecrawlClient) -> None:
        """Should raise ExtractionError when Firecrawl reports failure."""
        respx.post(SCRAPE_URL).mock(return_value=Response(200, json={"success": False}))

        with pytest.raises(ExtractionError) as exc_info:
            await client.scrape(ARTICLE_URL)
        assert exc_info.value.reason == "Failed to fetch article"
        await client.close()

    @respx.mock
    async def test_error_status_includes_service_error(self, client: FirecrawlClient) -> None:
        """Should surface Firecrawl's error text on an error status."""
        respx.post(SCRAPE_URL).mock(
            return_value=Response(402, json={"success": False, "error": "Payment required"})
        )

        with pytest.raises(ExtractionError, match="Failed to fetch article: Payment required"):
            await client.scrape(ARTICLE_URL)
        await client.close()

    @respx.mock
    async def test_error_status_without_json(self, client: FirecrawlClient) -> None:
        """Should report the status code when the error body is not JSON."""
        respx.post(SCRAPE_URL).mock(return_value=Response(502, text="Bad Gateway"))

        with pytest.raises(ExtractionError, match=r"Status: 502"):
            await client.scrape(ARTICLE_URL)
        await client.close()

    @respx.mock
    async def test_empty_content(self, client: FirecrawlClient) -> None:
        """Should raise ExtractionError when the markdown is empty."""
        respx.post(SCRAPE_URL).mock(
            return_value=Response(
                200,
                json={"success": True, "data": {"markdown": "", "metadata": {"title": "T"}}},
            )
        )

        with pytest.raises(ExtractionError) as exc_info:
            await client.scrape(ARTICLE_URL)
        assert exc_info.value.reason == "No content found in the article"
        await client.close()

    @respx.mock
    async def test_missing_data(self, client: FirecrawlClient) -> None:
        """Should treat a success without data as empty content."""
        respx.post(SCRAPE_URL).mock(return_value=Response(200, json={"success": True}))

        with pytest.raises(ExtractionError, match="No content found"):
            await client.scrape(ARTICLE_URL)
        await client.close()

    @pytest.mark.parametrize(
        "data",
        [
            {"markdown": 123},
            {"markdown": ["# Story"]},
            ["not", "a", "dict"],
            "markdown text",
        ],
    )
    @respx.mock
    async def test_malformed_data_is_extraction_error(
        self, client: FirecrawlClient, data: object
    ) -> None:
        """Should report malformed scrape data as missing content."""
        respx.post(SCRAPE_URL).mock(
            return_value=Response(200, json={"success": True, "data": data})
        )

        with pytest.raises(ExtractionError) as exc_info:
            await client.scrape(ARTICLE_URL)
        assert exc_info.value.reason == "No content found in the article"
        await client.close()

    @pytest.mark.parametrize(
        "metadata",
        [["title"], "Startup raises $10M", {"title": 42}, {"title": "   "}],
    )
    @respx.mock
    async def test_malformed_metadata_uses_default_title(
        self, client: FirecrawlClient, metadata: object
    ) -> None:
        """Should fall back to the placeholder title when metadata is unusable."""
        respx.post(SCRAPE_URL).mock(
            return_value=Response(
                200,
                json={"success": True, "data": {"markdown": "Body", "metadata": metadata}},
            )
        )

        article = await client.scrape(ARTICLE_URL)

        assert article.title == "TechCrunch Article"
        assert article.content == "Body"
        await client.close()

    @respx.mock
    async def test_timeout(self, client: FirecrawlClient) -> None:
        """Should raise ExtractionError on timeout."""
        respx.post(SCRAPE_URL).mock(side_effect=httpx.TimeoutException("timeout"))

        with pytest.raises(ExtractionError, match="Failed to fetch article: timeout"):
            await client.scrape(ARTICLE_URL)
        await client.close()

    @respx.mock
    async def test_connection_error(self, client: FirecrawlClient) -> None:
        """Should raise ExtractionError on connection failure."""
        respx.post(SCRAPE_URL).mock(side_effect=httpx.ConnectError("connection refused"))

        with pytest.raises(ExtractionError, match="request error: connection refused"):
            await client.scrape(ARTICLE_URL)
        await client.close()
