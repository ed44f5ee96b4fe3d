# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package - re-exports the in-memory stores."""
from courtdesk.repositories.document_repository import DocumentRepository
from courtdesk.repositories.session_repository import SessionRepository

__all__ = ["DocumentRepository", "SessionRepository"]
