# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: Tasks and projects - CRUD, filtering and search.
Records come back enriched with assignee names looked up in the team roster.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from courtdesk.core.logging import get_logger
from courtdesk.repositories.document_repository import DocumentRepository

logger = get_logger(__name__)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _contains(value: Optional[str], query: str) -> bool:
    return bool(value) and query in value.lower()


class _WorkItemService:
    """Shared CRUD over one document collection."""

    kind = "item"
    fields: tuple[str, ...] = ()

    def __init__(self, repo: DocumentRepository, team_repo: DocumentRepository) -> None:
        self._items = repo
        self._team = team_repo

    def assignee_name(self, assignee_id: Optional[str]) -> str:
        if not assignee_id:
            return "Unassigned"
        member = self._team.get_by_id(assignee_id)
        return member["name"] if member else "Unknown"

    def _enrich(self, item: dict[str, Any]) -> dict[str, Any]:
        return item

    def _matches(self, item: dict[str, Any], query: str) -> bool:
        raise NotImplementedError

    # ── Queries ──

    def list_items(
        self,
        status: Optional[str] = None,
        priority: Optional[str] = None,
        query: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        items = self._items.get_all()
        if status:
            items = [i for i in items if i["status"] == status]
        if priority:
            items = [i for i in items if i["priority"] == priority]
        if query and query.strip():
            needle = query.strip().lower()
            items = [i for i in items if self._matches(i, needle)]
        return [self._enrich(i) for i in items]

    def get(self, item_id: str) -> dict[str, Any]:
        item = self._items.get_by_id(item_id)
        if item is None:
            raise KeyError(f"{self.kind.capitalize()} '{item_id}' not found")
        return self._enrich(item)

    def count_by_status(self, statuses: tuple[str, ...]) -> dict[str, int]:
        counts = {s: 0 for s in statuses}
        for item in self._items.get_all():
            counts[item["status"]] = counts.get(item["status"], 0) + 1
        return counts

    # ── Commands ──

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        now = _now()
        item = {"id": str(uuid.uuid4()), **{f: data.get(f) for f in self.fields}}
        item["created_at"] = now
        item["updated_at"] = now
        self._items.save(item["id"], item)
        logger.info("%s created: id=%s, status=%s", self.kind.capitalize(), item["id"], item["status"])
        return self._enrich(item)

    def update(self, item_id: str, changes: dict[str, Any]) -> dict[str, Any]:
        item = self._items.get_by_id(item_id)
        if item is None:
            raise KeyError(f"{self.kind.capitalize()} '{item_id}' not found")
        applied = [f for f in self.fields if changes.get(f) is not None]
        for field in applied:
            item[field] = changes[field]
        item["updated_at"] = _now()
        self._items.save(item_id, item)
        logger.info("%s updated: id=%s, fields=%s", self.kind.capitalize(), item_id, applied)
        return self._enrich(item)

    def delete(self, item_id: str) -> dict[str, str]:
        if self._items.delete(item_id) is None:
            raise KeyError(f"{self.kind.capitalize()} '{item_id}' not found")
        logger.info("%s deleted: id=%s", self.kind.capitalize(), item_id)
        return {"message": f"{self.kind.capitalize()} '{item_id}' deleted"}


class TaskService(_WorkItemService):
    kind = "task"
    fields = (
        "title", "description", "status", "priority",
        "assignee_id", "project_id", "due_date", "tags",
    )

    def _enrich(self, item: dict[str, Any]) -> dict[str, Any]:
        item["assignee_name"] = self.assignee_name(item.get("assignee_id"))
        return item

    def _matches(self, item: dict[str, Any], query: str) -> bool:
        return (
            _contains(item.get("title"), query)
            or _contains(item.get("description"), query)
            or any(_contains(tag, query) for tag in item.get("tags") or [])
        )

    def seed_defaults(self, member_ids: list[str], project_ids: list[str]) -> list[str]:
        """Create demo tasks linked to the seeded roster and projects."""
        def pick(ids: list[str], i: int) -> Optional[str]:
            return ids[i % len(ids)] if ids else None

        default_tasks = [
            ("Review contract for ABC Corp", "Review the service agreement contract", "todo", "high", 0, 0, "2024-02-15", ["contract", "review"]),
            ("Prepare court documents", "Prepare documents for the upcoming hearing", "in-progress", "urgent", 1, 1, "2024-02-10", ["court", "documents"]),
            ("Client meeting preparation", "Prepare agenda and materials for the client meeting", "review", "medium", 0, 0, "2024-02-20", ["meeting", "client"]),
            ("Research case law", "Research relevant case law for the ongoing litigation", "done", "medium", 2, 1, "2024-01-25", ["research", "case-law"]),
            ("Update client database", "Update client contact information and case status", "todo", "low", 1, 2, "2024-03-01", ["database"]),
        ]
        ids = []
        for title, description, status, priority, assignee, project, due, tags in default_tasks:
            task = self.create({
                "title": title, "description": description, "status": status,
                "priority": priority, "assignee_id": pick(member_ids, assignee),
                "project_id": pick(project_ids, project), "due_date": due, "tags": tags,
            })
            ids.append(task["id"])
        logger.info("Seeded %d demo tasks", len(ids))
        return ids


class ProjectService(_WorkItemService):
    kind = "project"
    fields = (
        "name", "description", "client_name", "status", "priority",
        "assignee_ids", "start_date", "end_date",
    )

    def _enrich(self, item: dict[str, Any]) -> dict[str, Any]:
        item["assignee_names"] = [self.assignee_name(a) for a in item.get("assignee_ids") or []]
        return item

    def _matches(self, item: dict[str, Any], query: str) -> bool:
        return (
            _contains(item.get("name"), query)
            or _contains(item.get("description"), query)
            or _contains(item.get("client_name"), query)
        )

    def seed_defaults(self, member_ids: list[str]) -> list[str]:
        """Create demo projects assigned across the seeded roster."""
        lead = member_ids[:1]
        default_projects = [
            {"name": "ABC Corp contract renewal", "description": "Service agreement review and renegotiation",
             "client_name": "ABC Corporation", "status": "active", "priority": "high",
             "assignee_ids": member_ids[:2], "start_date": "2024-01-10", "end_date": "2024-03-31"},
            {"name": "Property dispute, Bengaluru", "description": "Civil suit before the City Civil Court",
             "client_name": "R. Gupta", "status": "active", "priority": "urgent",
             "assignee_ids": member_ids[1:3], "start_date": "2024-01-05", "end_date": None},
            {"name": "Compliance audit", "description": "Annual regulatory compliance review",
             "client_name": "XYZ Industries", "status": "planning", "priority": "medium",
             "assignee_ids": lead, "start_date": "2024-02-01", "end_date": "2024-04-30"},
        ]
        ids = [self.create(p)["id"] for p in default_projects]
        logger.info("Seeded %d demo projects", len(ids))
        return ids
