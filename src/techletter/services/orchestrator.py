"""Newsletter workflow orchestrator for Techletter."""

from techletter.clients.azure_openai import AzureOpenAIClient
from techletter.clients.firecrawl import FirecrawlClient
from techletter.errors import IllegalTransitionError, NewsletterError, WorkflowBusyError
from techletter.models import Article, WorkflowState, WorkflowStatus
from techletter.services.prompt import SYSTEM_PROMPT, build_prompt
from techletter.services.validation import check_url
from techletter.utils.logging import get_logger

logger = get_logger(__name__)

UNEXPECTED_ERROR = "An unexpected error occurred"
BUSY_ERROR = "A newsletter is already being generated, please wait"

TRANSITIONS: frozenset[tuple[WorkflowStatus, WorkflowStatus]] = frozenset(
    {
        (WorkflowStatus.IDLE, WorkflowStatus.SCRAPING),
        (WorkflowStatus.SCRAPING, WorkflowStatus.GENERATING),
        (WorkflowStatus.SCRAPING, WorkflowStatus.IDLE),
        (WorkflowStatus.GENERATING, WorkflowStatus.IDLE),
    }
)


class NewsletterOrchestrator:
    """Runs validate -> scrape -> prompt -> complete and keeps the result.

    The orchestrator owns the presentation state: current status, the last
    error, the last newsletter and the article title. Each run clears the
    previous result before starting and always ends back in ``idle``.
    """

    def __init__(
        self,
        firecrawl_client: FirecrawlClient,
        azure_client: AzureOpenAIClient,
        source_domain: str = "techcrunch.com",
        source_name: str = "TechCrunch",
        max_content_chars: int | None = None,
    ) -> None:
        self._firecrawl = firecrawl_client
        self._azure = azure_client
        self._source_domain = source_domain
        self._source_name = source_name
        self._max_content_chars = max_content_chars

        self._status = WorkflowStatus.IDLE
        self._url = ""
        self._title = ""
        self._newsletter = ""
        self._error = ""

    @property
    def state(self) -> WorkflowState:
        """Current presentation state."""
        return WorkflowState(
            status=self._status,
            url=self._url,
            title=self._title,
            newsletter=self._newsletter,
            error=self._error,
        )

    async def run(self, url: str | None) -> WorkflowState:
        """Run the complete workflow for one submitted URL.

        Failures never propagate: they are recorded as the state's error and
        the status returns to idle.

        Args:
            url: The URL as submitted by the user.

        Returns:
            The state after the run.

        Raises:
            WorkflowBusyError: If another run is still in flight.
        """
        if self._status is not WorkflowStatus.IDLE:
            logger.warning("Rejecting submission while busy", status=self._status.value)
            raise WorkflowBusyError(BUSY_ERROR)

        self._reset(url or "")

        try:
            checked_url = check_url(url, self._source_domain, self._source_name)
        except NewsletterError as e:
            logger.info("URL rejected", url=url, reason=e.reason)
            self._error = e.reason
            return self.state

        logger.info("Starting newsletter run", url=checked_url)
        self._transition(WorkflowStatus.SCRAPING)

        try:
            article = await self._firecrawl.scrape(checked_url)
            self._title = article.title
            self._transition(WorkflowStatus.GENERATING)
            self._newsletter = await self._generate(article)
        except NewsletterError as e:
            logger.warning(
                "Newsletter run failed",
                url=checked_url,
                step=self._status.value,
                reason=e.reason,
            )
            self._fail(e.reason)
        except Exception:
            logger.exception("Unexpected error in newsletter run", url=checked_url)
            self._fail(UNEXPECTED_ERROR)
        else:
            logger.info(
                "Newsletter generated",
                url=checked_url,
                title=self._title,
                length=len(self._newsletter),
            )
        finally:
            if self._status is not WorkflowStatus.IDLE:
                self._transition(WorkflowStatus.IDLE)

        return self.state

    async def _generate(self, article: Article) -> str:
        """Build the prompt for an article and ask for the newsletter."""
        prompt = build_prompt(
            article.title,
            article.content,
            source_name=self._source_name,
            max_content_chars=self._max_content_chars,
        )
        return await self._azure.complete(SYSTEM_PROMPT, prompt)

    def _reset(self, url: str) -> None:
        self._url = url
        self._title = ""
        self._newsletter = ""
        self._error = ""

    def _fail(self, reason: str) -> None:
        # No partial output survives a failed run.
        self._title = ""
        self._newsletter = ""
        self._error = reason

    def _transition(self, target: WorkflowStatus) -> None:
        if (self._status, target) not in TRANSITIONS:
            raise IllegalTransitionError(
                f"Illegal status transition {self._status.value} -> {target.value}"
            )
        logger.debug("Status transition", source=self._status.value, target=target.value)
        self._status = target
