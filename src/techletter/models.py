"""Shared data models for Techletter."""

from dataclasses import dataclass
from enum import Enum


class WorkflowStatus(str, Enum):
    """Where the newsletter workflow currently is."""

    IDLE = "idle"
    SCRAPING = "scraping"
    GENERATING = "generating"


@dataclass(frozen=True)
class Article:
    """An article extracted by the scraping service."""

    url: str
    title: str
    content: str

    @property
    def word_count(self) -> int:
        return len(self.content.split())


@dataclass(frozen=True)
class WorkflowState:
    """Snapshot of the orchestrator's presentation state."""

    status: WorkflowStatus = WorkflowStatus.IDLE
    url: str = ""
    title: str = ""
    newsletter: str = ""
    error: str = ""

    @property
    def is_busy(self) -> bool:
        """Whether a run is in flight and new submissions must wait."""
        return self.status is not WorkflowStatus.IDLE
