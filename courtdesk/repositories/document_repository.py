# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: Document collection data access.
One instance per collection (team members, tasks, projects).
NO business rules here - pure CRUD, insertion order preserved.
"""

from typing import Any, Optional


class DocumentRepository:
    """In-memory document collection keyed by id."""

    def __init__(self, collection: str) -> None:
        self.collection = collection
        self._store: dict[str, dict[str, Any]] = {}

    # ── Read ──

    def get_all(self) -> list[dict[str, Any]]:
        return [dict(doc) for doc in self._store.values()]

    def get_by_id(self, doc_id: str) -> Optional[dict[str, Any]]:
        doc = self._store.get(doc_id)
        return dict(doc) if doc is not None else None

    def exists(self, doc_id: str) -> bool:
        return doc_id in self._store

    def count(self) -> int:
        return len(self._store)

    # ── Write ──

    def save(self, doc_id: str, document: dict[str, Any]) -> None:
        self._store[doc_id] = dict(document)

    def delete(self, doc_id: str) -> Optional[dict[str, Any]]:
        return self._store.pop(doc_id, None)

    # ── Bulk / internal ──

    def clear(self) -> None:
        self._store.clear()
