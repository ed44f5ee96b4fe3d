# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Session storage.
Tokens map to the signed-in user and an expiry timestamp.
"""

from datetime import datetime, timezone
from typing import Any, Optional


class SessionRepository:
    """In-memory session storage."""

    def __init__(self) -> None:
        self._store: dict[str, dict[str, Any]] = {}

    def get(self, token: str) -> Optional[dict[str, Any]]:
        return self._store.get(token)

    def save(self, token: str, session: dict[str, Any]) -> None:
        self._store[token] = session

    def delete(self, token: str) -> Optional[dict[str, Any]]:
        return self._store.pop(token, None)

    def count(self) -> int:
        return len(self._store)

    def purge_expired(self, now: Optional[datetime] = None) -> list[str]:
        """Drop expired sessions, returning their tokens."""
        now = now or datetime.now(timezone.utc)
        expired = [
            token for token, session in self._store.items()
            if datetime.fromisoformat(session["expires_at"]) <= now
        ]
        for token in expired:
            del self._store[token]
        return expired

    def clear(self) -> None:
        self._store.clear()
