"""Error taxonomy for the newsletter workflow.

Every workflow failure carries a human-readable ``reason`` that is shown to the
user as-is.
"""


class NewsletterError(Exception):
    """Base class for all Techletter errors."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class InputValidationError(NewsletterError):
    """The submitted URL is empty or does not belong to the source site."""


class ExtractionError(NewsletterError):
    """The scraping service could not return article content."""


class CompletionError(NewsletterError):
    """The completion service failed or returned no newsletter text."""


class ConfigurationError(NewsletterError):
    """A required secret is missing; the service cannot start."""


class WorkflowBusyError(NewsletterError):
    """A run was submitted while another one is still in flight."""


class IllegalTransitionError(RuntimeError):
    """The orchestrator attempted a status change outside its transition table."""
