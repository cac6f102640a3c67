"""Per-visitor newsletter sessions for Techletter."""

from collections import OrderedDict
from collections.abc import Callable
from uuid import uuid4

from techletter.services.orchestrator import NewsletterOrchestrator
from techletter.utils.logging import get_logger

logger = get_logger(__name__)

SESSION_COOKIE = "techletter_session"


class SessionStore:
    """Keeps one orchestrator, and so one presentation state, per visitor.

    Sessions are identified by an opaque ID handed out in a cookie. Unknown IDs
    are never adopted: a fresh session with a new ID is created instead. The
    least recently used session is dropped once ``max_sessions`` is reached.
    """

    def __init__(
        self,
        factory: Callable[[], NewsletterOrchestrator],
        max_sessions: int = 1000,
    ) -> None:
        self._factory = factory
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[str, NewsletterOrchestrator] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: str | None) -> tuple[str, NewsletterOrchestrator]:
        """Return the session's ID and orchestrator, creating a session if needed.

        Args:
            session_id: ID from the visitor's cookie, if any.

        Returns:
            Tuple of (session_id, orchestrator). The ID differs from the one
            passed in when a new session was created.
        """
        if session_id is not None and session_id in self._sessions:
            self._sessions.move_to_end(session_id)
            return session_id, self._sessions[session_id]

        new_id = uuid4().hex
        self._sessions[new_id] = self._factory()
        while len(self._sessions) > self._max_sessions:
            self._sessions.popitem(last=False)
            logger.info("Session evicted", session_count=len(self._sessions))
        logger.debug("Session created", session_count=len(self._sessions))
        return new_id, self._sessions[new_id]
