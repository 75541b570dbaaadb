"""In-memory session store adapter.

Holds operator sessions created by the login flow. The admin dashboard
only reads from it. For multi-process deployments, consider SQLite or
Redis backed implementations.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID


@dataclass(frozen=True)
class Session:
    id: str  # Session cookie value
    operator_id: UUID
    expires_at: datetime
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class InMemorySessionStore:
    """In-memory session storage - suitable for single-process deployments."""

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}

    def get(self, session_id: str) -> Session | None:
        """Get a live session by id. Expired sessions are evicted."""
        session = self._sessions.get(session_id)
        if session is None:
            return None
        if session.expires_at <= datetime.now(UTC):
            self._sessions.pop(session_id, None)
            return None
        return session

    def save(self, session: Session) -> None:
        """Save session keyed by its id."""
        self._sessions[session.id] = session

    def delete(self, session_id: str) -> None:
        """Delete session by id."""
        self._sessions.pop(session_id, None)

    def clear(self) -> None:
        """Clear all sessions - useful for testing."""
        self._sessions.clear()
