"""Server-side login sessions keyed by an opaque cookie token."""
import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoginSession:
    user_id: str
    expires_at: datetime


class SessionStore:
    """In-memory session table.

    Tokens are random and carry no information; the user id only lives
    server-side. Expired sessions are dropped when touched and by the
    periodic ``purge_expired`` job.
    """

    def __init__(self, ttl: timedelta = timedelta(hours=24)):
        self.ttl = ttl
        self._sessions: dict[str, LoginSession] = {}
        self._lock = threading.Lock()

    def create(self, user_id: str, now: datetime | None = None) -> str:
        now = now or datetime.now(UTC)
        token = secrets.token_urlsafe(32)
        with self._lock:
            self._sessions[token] = LoginSession(user_id=user_id, expires_at=now + self.ttl)
        logger.info(f"Opened session for user {user_id}")
        return token

    def resolve(self, token: str | None, now: datetime | None = None) -> str | None:
        """User id for a live session, or None."""
        if not token:
            return None
        now = now or datetime.now(UTC)
        with self._lock:
            session = self._sessions.get(token)
            if session is None:
                return None
            if session.expires_at <= now:
                del self._sessions[token]
                return None
            return session.user_id

    def destroy(self, token: str | None) -> None:
        if not token:
            return
        with self._lock:
            session = self._sessions.pop(token, None)
        if session is not None:
            logger.info(f"Closed session for user {session.user_id}")

    def purge_expired(self, now: datetime | None = None) -> int:
        now = now or datetime.now(UTC)
        with self._lock:
            expired = [t for t, s in self._sessions.items() if s.expires_at <= now]
            for token in expired:
                del self._sessions[token]
        return len(expired)

    def __len__(self) -> int:
        return len(self._sessions)
