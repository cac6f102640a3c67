"""API and page routes for Techletter."""

from dataclasses import dataclass, replace

from fastapi import APIRouter, Cookie, Depends, Form, HTTPException, Request, Response, status
from fastapi.responses import HTMLResponse

from techletter import __version__
from techletter.api.models import HealthResponse, NewsletterRequest, NewsletterResponse
from techletter.errors import WorkflowBusyError
from techletter.services.formatter import PageRenderer
from techletter.services.orchestrator import NewsletterOrchestrator
from techletter.services.sessions import SESSION_COOKIE, SessionStore
from techletter.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/v1", tags=["api"])
page_router = APIRouter(tags=["page"])


@dataclass(frozen=True)
class Session:
    """The visitor's session ID and its orchestrator."""

    id: str
    orchestrator: NewsletterOrchestrator

    def attach(self, response: Response) -> None:
        """Set the session cookie on a response."""
        response.set_cookie(SESSION_COOKIE, self.id, httponly=True, samesite="lax")


def get_sessions(request: Request) -> SessionStore:
    """Return the session store created in the application lifespan."""
    return request.app.state.sessions


def get_renderer(request: Request) -> PageRenderer:
    """Return the page renderer created in the application lifespan."""
    return request.app.state.renderer


def get_session(
    session_id: str | None = Cookie(default=None, alias=SESSION_COOKIE),
    sessions: SessionStore = Depends(get_sessions),
) -> Session:
    """Resolve the visitor's session from its cookie, starting one if needed."""
    resolved_id, orchestrator = sessions.get(session_id)
    return Session(id=resolved_id, orchestrator=orchestrator)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="healthy", version=__version__)


@router.get("/newsletter", response_model=NewsletterResponse)
async def get_newsletter(
    response: Response,
    session: Session = Depends(get_session),
) -> NewsletterResponse:
    """Return the session's workflow status and last result."""
    session.attach(response)
    return NewsletterResponse.from_state(session.orchestrator.state)


@router.post("/newsletter", response_model=NewsletterResponse)
async def create_newsletter(
    body: NewsletterRequest,
    response: Response,
    session: Session = Depends(get_session),
) -> NewsletterResponse:
    """Generate a newsletter from an article URL.

    This endpoint:
    1. Validates the URL belongs to the configured source site
    2. Scrapes the article with Firecrawl
    3. Generates the newsletter with Azure OpenAI

    Workflow failures are reported in the ``error`` field of a 200 response.
    A submission while the same session has a run in flight is rejected with 409.
    Clients that do not send the session cookie back get a fresh session per call.
    """
    logger.info("Newsletter endpoint called", url=body.url)
    session.attach(response)
    try:
        state = await session.orchestrator.run(body.url)
    except WorkflowBusyError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=e.reason,
            headers={"set-cookie": response.headers["set-cookie"]},
        ) from e
    return NewsletterResponse.from_state(state)


@page_router.get("/", response_class=HTMLResponse)
async def page(
    session: Session = Depends(get_session),
    renderer: PageRenderer = Depends(get_renderer),
) -> HTMLResponse:
    """Render the newsletter generator page."""
    response = HTMLResponse(renderer.render(session.orchestrator.state))
    session.attach(response)
    return response


@page_router.post("/", response_class=HTMLResponse)
async def submit_page(
    url: str = Form(default=""),
    session: Session = Depends(get_session),
    renderer: PageRenderer = Depends(get_renderer),
) -> HTMLResponse:
    """Handle the page form submission and render the result."""
    logger.info("Page form submitted", url=url)
    try:
        state = await session.orchestrator.run(url)
        status_code = status.HTTP_200_OK
    except WorkflowBusyError as e:
        state = replace(session.orchestrator.state, error=e.reason)
        status_code = status.HTTP_409_CONFLICT
    response = HTMLResponse(renderer.render(state), status_code=status_code)
    session.attach(response)
    return response
