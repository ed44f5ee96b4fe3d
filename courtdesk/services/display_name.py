# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Display-name resolver for the dashboard greeting.

Starts from the session user's own name (or email) and upgrades it to the
team roster's name for the first member whose email matches
case-insensitively. Roster faults degrade to the fallback name.

Every ``resolve`` call takes a new generation; a roster response that comes
back after a newer call (or ``cancel()``) is discarded.
"""

import asyncio
from typing import Any, Optional

from courtdesk.core.config import settings
from courtdesk.core.logging import get_logger
from courtdesk.metrics.prometheus import DISPLAY_NAME_RESOLUTIONS
from courtdesk.models.domain import UserProfile
from courtdesk.services.team_roster import TeamRoster, find_duplicate_emails

logger = get_logger(__name__)


def initial_name(user: Optional[UserProfile]) -> str:
    if user is None:
        return ""
    return user.fallback_name


class DisplayNameResolver:
    def __init__(self, roster: TeamRoster, timeout: Optional[float] = None) -> None:
        self._roster = roster
        self._timeout = settings.TEAM_ROSTER_TIMEOUT if timeout is None else timeout
        self._generation = 0
        self.display_name = ""

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def display_initial(self) -> str:
        return self.display_name[:1].upper() if self.display_name else "U"

    def cancel(self) -> None:
        """Drop whatever result is still in flight."""
        self._generation += 1

    async def resolve(self, user: Optional[UserProfile]) -> Optional[str]:
        """Resolve the name for ``user``.

        Returns the display name, or None when a newer call superseded this
        one (the stored ``display_name`` is then left to that call).
        """
        self._generation += 1
        generation = self._generation
        fallback = initial_name(user)
        self.display_name = fallback

        if user is None or not user.email:
            DISPLAY_NAME_RESOLUTIONS.labels(source="fallback").inc()
            return fallback

        try:
            members = await asyncio.wait_for(self._roster.fetch_all(), timeout=self._timeout)
        except Exception as exc:
            if generation != self._generation:
                DISPLAY_NAME_RESOLUTIONS.labels(source="stale").inc()
                return None
            logger.warning(
                "Display name lookup failed, using fallback: %s", str(exc) or type(exc).__name__,
                extra={"email": user.email, "outcome": "error"},
            )
            DISPLAY_NAME_RESOLUTIONS.labels(source="error").inc()
            return fallback

        if generation != self._generation:
            DISPLAY_NAME_RESOLUTIONS.labels(source="stale").inc()
            return None

        match = self._first_match(members, user.email)
        name = match.get("name") if match is not None else None
        if isinstance(name, str) and name:
            self.display_name = name
            DISPLAY_NAME_RESOLUTIONS.labels(source="roster").inc()
        else:
            DISPLAY_NAME_RESOLUTIONS.labels(source="fallback").inc()
        return self.display_name

    @staticmethod
    def _first_match(members: Any, email: str) -> Optional[dict[str, Any]]:
        """First member whose email matches; entries without a string email are skipped."""
        target = email.lower()
        matches = [
            m for m in (members if isinstance(members, list) else [])
            if isinstance(m, dict) and isinstance(m.get("email"), str) and m["email"].lower() == target
        ]
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                "Duplicate roster email, using first match: %d entries", len(matches),
                extra={"email": email, "duplicates": find_duplicate_emails(matches)},
            )
        return matches[0]
