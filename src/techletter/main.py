"""FastAPI application entry point for Techletter."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from techletter import __version__
from techletter.api.routes import page_router, router
from techletter.clients.azure_openai import AzureOpenAIClient
from techletter.clients.firecrawl import FirecrawlClient
from techletter.config import get_settings
from techletter.services.formatter import PageRenderer
from techletter.services.orchestrator import NewsletterOrchestrator
from techletter.services.sessions import SessionStore
from techletter.utils.logging import get_logger, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager.

    Settings are loaded first so a missing secret stops startup before any
    client is created.
    """
    settings = get_settings()
    setup_logging(settings.log_level, json_logs=settings.json_logs)
    logger = get_logger(__name__)
    logger.info("Techletter starting", version=__version__, source=settings.source_domain)

    async with FirecrawlClient(
        api_key=settings.firecrawl_api_key,
        base_url=settings.firecrawl_api_url,
        default_title=settings.default_title,
        timeout=settings.request_timeout,
    ) as firecrawl:
        async with AzureOpenAIClient(
            endpoint=settings.azure_endpoint,
            api_key=settings.azure_api_key,
            max_tokens=settings.max_tokens,
            temperature=settings.temperature,
            timeout=settings.request_timeout,
        ) as azure:
            def new_orchestrator() -> NewsletterOrchestrator:
                return NewsletterOrchestrator(
                    firecrawl_client=firecrawl,
                    azure_client=azure,
                    source_domain=settings.source_domain,
                    source_name=settings.source_name,
                    max_content_chars=settings.max_content_chars,
                )

            app.state.sessions = SessionStore(new_orchestrator, settings.max_sessions)
            app.state.renderer = PageRenderer(settings.source_name)
            yield

    logger.info("Techletter shutting down")


app = FastAPI(
    title="Techletter",
    description="Turn TechCrunch articles into newsletters with Firecrawl and Azure OpenAI",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(router)
app.include_router(page_router)
