# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Team roster - the firm's team-member records.

``TeamService`` owns CRUD over the local repository. The display-name
resolver only needs ``fetch_all()``, which either the local roster or a
remote roster endpoint (``TEAM_ROSTER_URL``) can provide.
"""

import uuid
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

import httpx

from courtdesk.core.logging import get_logger
from courtdesk.metrics.prometheus import TEAM_MEMBERS
from courtdesk.repositories.document_repository import DocumentRepository

logger = get_logger(__name__)


class TeamRoster(Protocol):
    async def fetch_all(self) -> list[dict[str, Any]]: ...


def _normalise_email(email: Optional[str]) -> str:
    return email.strip().lower() if isinstance(email, str) else ""


def find_duplicate_emails(members: list[dict[str, Any]]) -> list[str]:
    """Emails (lower-cased) shared by more than one member, in first-seen order."""
    counts = Counter(_normalise_email(m.get("email")) for m in members)
    seen: list[str] = []
    for member in members:
        email = _normalise_email(member.get("email"))
        if email and counts[email] > 1 and email not in seen:
            seen.append(email)
    return seen


class TeamService:
    """Business logic for team-member records."""

    def __init__(self, team_repo: DocumentRepository) -> None:
        self._members = team_repo

    # ── Queries ──

    def list_members(self) -> list[dict[str, Any]]:
        return self._members.get_all()

    def get_member(self, member_id: str) -> dict[str, Any]:
        member = self._members.get_by_id(member_id)
        if member is None:
            raise KeyError(f"Team member '{member_id}' not found")
        return member

    def duplicates(self) -> dict[str, Any]:
        members = self._members.get_all()
        duplicated = find_duplicate_emails(members)
        return {
            "duplicates": [
                {
                    "email": email,
                    "member_ids": [
                        m["id"] for m in members if _normalise_email(m.get("email")) == email
                    ],
                }
                for email in duplicated
            ],
            "total": len(duplicated),
        }

    # ── Commands ──

    def create_member(
        self,
        name: str,
        role: str = "associate",
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> dict[str, Any]:
        now = datetime.now(timezone.utc).isoformat()
        member = {
            "id": str(uuid.uuid4()),
            "name": name,
            "role": role,
            "email": email,
            "phone": phone,
            "created_at": now,
            "updated_at": now,
        }
        self._members.save(member["id"], member)
        TEAM_MEMBERS.set(self._members.count())
        if email and _normalise_email(email) in find_duplicate_emails(self._members.get_all()):
            logger.warning("Team member email already in roster", extra={"email": email})
        logger.info("Team member created: role=%s", role, extra={"member_id": member["id"]})
        return member

    def update_member(self, member_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        member = self.get_member(member_id)
        for field in ("name", "role", "email", "phone"):
            if changes.get(field) is not None:
                member[field] = changes[field]
        member["updated_at"] = datetime.now(timezone.utc).isoformat()
        self._members.save(member_id, member)
        logger.info("Team member updated", extra={"member_id": member_id})
        return member

    def delete_member(self, member_id: str) -> dict[str, str]:
        if self._members.delete(member_id) is None:
            raise KeyError(f"Team member '{member_id}' not found")
        TEAM_MEMBERS.set(self._members.count())
        logger.info("Team member deleted", extra={"member_id": member_id})
        return {"message": f"Team member '{member_id}' deleted"}

    # ── Seed ──

    def seed_defaults(self) -> list[str]:
        """Create a demo roster so the dashboard is usable immediately."""
        default_members = [
            {"name": "Nandeesh Kumar", "role": "partner", "email": "nandeesh@example.com", "phone": "+91 98450 00001"},
            {"name": "Priya Sharma", "role": "senior-associate", "email": "priya@example.com", "phone": "+91 98450 00002"},
            {"name": "Rahul Verma", "role": "associate", "email": "rahul@example.com", "phone": None},
            {"name": "Anita Rao", "role": "paralegal", "email": "anita@example.com", "phone": None},
        ]
        ids = [self.create_member(**m)["id"] for m in default_members]
        logger.info("Seeded %d demo team members", len(ids))
        return ids


class LocalTeamRoster:
    """Roster source backed by the in-memory team repository."""

    def __init__(self, team_repo: DocumentRepository) -> None:
        self._members = team_repo

    async def fetch_all(self) -> list[dict[str, Any]]:
        return self._members.get_all()


class RemoteTeamRoster:
    """Roster source backed by an external team-members endpoint."""

    def __init__(self, client: httpx.AsyncClient, url: str, timeout: float) -> None:
        self._client = client
        self._url = url
        self._timeout = timeout

    async def fetch_all(self) -> list[dict[str, Any]]:
        """Raises httpx errors; callers decide how to degrade."""
        try:
            resp = await self._client.get(self._url, timeout=self._timeout)
            resp.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Team roster fetch failed: %s", exc, extra={"url": self._url})
            raise
        payload = resp.json()
        if isinstance(payload, dict):
            payload = payload.get("members") or payload.get("data") or []
        return [m for m in payload if isinstance(m, dict)]
