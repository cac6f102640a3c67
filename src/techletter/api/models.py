"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, Field

from techletter.models import WorkflowState, WorkflowStatus
from techletter.services.formatter import newsletter_paragraphs


class NewsletterRequest(BaseModel):
    """Request model for the newsletter endpoint."""

    url: str = Field(default="", description="Article URL to turn into a newsletter")


class NewsletterResponse(BaseModel):
    """Response model describing the current workflow state."""

    status: WorkflowStatus = Field(description="Workflow status")
    url: str = Field(default="", description="Last submitted URL")
    title: str = Field(default="", description="Title of the last article")
    newsletter: str = Field(default="", description="Generated newsletter text")
    paragraphs: list[str] = Field(
        default_factory=list, description="Newsletter split into display paragraphs"
    )
    error: str = Field(default="", description="Error message of the last run")

    @classmethod
    def from_state(cls, state: WorkflowState) -> "NewsletterResponse":
        """Build a response from an orchestrator state snapshot."""
        return cls(
            status=state.status,
            url=state.url,
            title=state.title,
            newsletter=state.newsletter,
            paragraphs=newsletter_paragraphs(state.newsletter) if state.newsletter else [],
            error=state.error,
        )


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str = Field(description="Health status")
    version: str = Field(description="Application version")
