# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Authentication service - configured user credentials and session tokens."""
import hmac
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from courtdesk.core.config import settings
from courtdesk.core.logging import get_logger
from courtdesk.metrics.prometheus import ACTIVE_SESSIONS, LOGINS
from courtdesk.models.domain import ANONYMOUS, AuthState, UserProfile
from courtdesk.repositories.session_repository import SessionRepository

logger = get_logger(__name__)


class AuthService:
    def __init__(
        self,
        session_repo: SessionRepository,
        on_session_end: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._sessions = session_repo
        self._on_session_end = on_session_end

    def _ended(self, tokens: list[str]) -> None:
        """Tell the owner of per-session state that these sessions are gone."""
        if self._on_session_end is not None:
            for token in tokens:
                self._on_session_end(token)
        ACTIVE_SESSIONS.set(self._sessions.count())

    def login(self, email: str, password: str) -> Dict[str, Any]:
        """Open a session. Raises ValueError / PermissionError."""
        email = (email or "").strip().lower()
        if not email or not password:
            LOGINS.labels(outcome="invalid").inc()
            raise ValueError("Email and password required")
        expected = settings.USER_CREDENTIALS.get(email)
        if expected is None or not hmac.compare_digest(expected["password"], password):
            LOGINS.labels(outcome="rejected").inc()
            logger.warning("Login rejected", extra={"email": email, "outcome": "rejected"})
            raise PermissionError("Invalid email or password")

        self._ended(self._sessions.purge_expired())
        token = secrets.token_urlsafe(32)
        expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.SESSION_TTL_MINUTES)
        user = {"email": email, "name": expected["name"] or None}
        self._sessions.save(token, {"user": user, "expires_at": expires_at.isoformat()})

        LOGINS.labels(outcome="success").inc()
        ACTIVE_SESSIONS.set(self._sessions.count())
        logger.info("Login successful", extra={"email": email, "outcome": "success"})
        return {
            "token": token,
            "user": user,
            "expires_at": expires_at.isoformat(),
            "message": "Login successful",
        }

    def logout(self, token: Optional[str]) -> bool:
        removed = self._sessions.delete(token) is not None if token else False
        if removed:
            self._ended([token])
            logger.info("Session closed")
        return removed

    def get_auth_state(self, token: Optional[str]) -> AuthState:
        """Resolve a token into the auth snapshot; unknown or expired tokens are anonymous."""
        if not token:
            return ANONYMOUS
        session = self._sessions.get(token)
        if session is None:
            return ANONYMOUS
        if datetime.fromisoformat(session["expires_at"]) <= datetime.now(timezone.utc):
            self._sessions.delete(token)
            self._ended([token])
            logger.info("Session expired")
            return ANONYMOUS
        return AuthState(user=UserProfile(**session["user"]), is_authenticated=True)

    def require_user(self, token: Optional[str]) -> UserProfile:
        state = self.get_auth_state(token)
        if not state.is_authenticated or state.user is None:
            raise PermissionError("Authentication required")
        return state.user
