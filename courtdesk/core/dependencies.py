# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
FastAPI dependency injection - wire repositories and services.
"""

from typing import Optional

import httpx
from fastapi import Header

from courtdesk.core.config import settings
from courtdesk.repositories.document_repository import DocumentRepository
from courtdesk.repositories.session_repository import SessionRepository
from courtdesk.services.auth_service import AuthService
from courtdesk.services.display_name import DisplayNameResolver
from courtdesk.services.ecourts_service import ECourtsService
from courtdesk.services.team_roster import LocalTeamRoster, RemoteTeamRoster, TeamRoster, TeamService
from courtdesk.services.work_service import ProjectService, TaskService

# ── Singleton repository instances (in-memory stores) ──
_session_repo = SessionRepository()
_team_repo = DocumentRepository("team_members")
_task_repo = DocumentRepository("tasks")
_project_repo = DocumentRepository("projects")

# ── Per-session display-name resolvers, released when the session ends ──
_resolvers: dict[str, DisplayNameResolver] = {}


def drop_resolver(token: Optional[str]) -> None:
    resolver = _resolvers.pop(token, None) if token else None
    if resolver is not None:
        resolver.cancel()


# ── Service instances (with injected dependencies) ──
_auth_service = AuthService(session_repo=_session_repo, on_session_end=drop_resolver)
_team_service = TeamService(team_repo=_team_repo)
_task_service = TaskService(repo=_task_repo, team_repo=_team_repo)
_project_service = ProjectService(repo=_project_repo, team_repo=_team_repo)
_ecourts_service = ECourtsService()
_local_roster = LocalTeamRoster(team_repo=_team_repo)

# Shared client for the remote roster, opened in the app lifespan.
_http_client: Optional[httpx.AsyncClient] = None


def init_http_client() -> None:
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(timeout=settings.TEAM_ROSTER_TIMEOUT)


async def close_http_client() -> None:
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


# ── FastAPI dependency functions ──
def get_auth_service() -> AuthService:
    return _auth_service


def get_team_service() -> TeamService:
    return _team_service


def get_task_service() -> TaskService:
    return _task_service


def get_project_service() -> ProjectService:
    return _project_service


def get_ecourts_service() -> ECourtsService:
    return _ecourts_service


def get_team_roster() -> TeamRoster:
    if settings.TEAM_ROSTER_URL and _http_client is not None:
        return RemoteTeamRoster(
            client=_http_client,
            url=settings.TEAM_ROSTER_URL,
            timeout=settings.TEAM_ROSTER_TIMEOUT,
        )
    return _local_roster


def resolver_for_session(token: str) -> DisplayNameResolver:
    """Resolver owned by one session; overlapping dashboard loads share its generation."""
    resolver = _resolvers.get(token)
    if resolver is None:
        resolver = DisplayNameResolver(get_team_roster(), timeout=settings.TEAM_ROSTER_TIMEOUT)
        _resolvers[token] = resolver
    return resolver


def clear_resolvers() -> None:
    for token in list(_resolvers):
        drop_resolver(token)


def get_session_token(
    authorization: Optional[str] = Header(default=None),
    x_session_token: Optional[str] = Header(default=None),
) -> Optional[str]:
    if authorization and authorization.lower().startswith("bearer "):
        return authorization[7:].strip() or None
    return x_session_token or None


def get_session_repo() -> SessionRepository:
    return _session_repo


def get_team_repo() -> DocumentRepository:
    return _team_repo


def get_task_repo() -> DocumentRepository:
    return _task_repo


def get_project_repo() -> DocumentRepository:
    return _project_repo
