"""Unit tests for SessionStore."""

from unittest.mock import MagicMock

from techletter.services.orchestrator import NewsletterOrchestrator
from techletter.services.sessions import SessionStore


def _factory() -> MagicMock:
    return MagicMock(side_effect=lambda: MagicMock(spec=NewsletterOrchestrator))


class TestSessionStore:
    """Tests for SessionStore."""

    def test_new_session_without_id(self) -> None:
        """Should create a session when no ID is given."""
        factory = _factory()
        store = SessionStore(factory)

        session_id, orchestrator = store.get(None)

        assert session_id
        assert orchestrator is not None
        factory.assert_called_once()

    def test_existing_session_is_reused(self) -> None:
        """Should return the same orchestrator for a known ID."""
        store = SessionStore(_factory())
        session_id, orchestrator = store.get(None)

        again_id, again = store.get(session_id)

        assert again_id == session_id
        assert again is orchestrator
        assert len(store) == 1

    def test_sessions_are_separate(self) -> None:
        """Should give different visitors different orchestrators."""
        store = SessionStore(_factory())

        first_id, first = store.get(None)
        second_id, second = store.get(None)

        assert first_id != second_id
        assert first is not second

    def test_unknown_id_gets_new_session(self) -> None:
        """Should not adopt an ID it never issued."""
        store = SessionStore(_factory())

        session_id, _ = store.get("made-up")

        assert session_id != "made-up"

    def test_least_recently_used_evicted(self) -> None:
        """Should drop the oldest untouched session once full."""
        store = SessionStore(_factory(), max_sessions=2)
        first_id, _ = store.get(None)
        second_id, _ = store.get(None)
        store.get(first_id)

        store.get(None)

        assert len(store) == 2
        assert store.get(first_id)[0] == first_id
        assert store.get(second_id)[0] != second_id
