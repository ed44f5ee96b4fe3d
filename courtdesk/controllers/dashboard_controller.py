# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Dashboard - greeting with the resolved display name, work summary, logout.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from courtdesk.core.dependencies import (
    get_auth_service,
    get_project_service,
    get_session_token,
    get_task_service,
    get_team_service,
    resolver_for_session,
)
from courtdesk.models.domain import PROJECT_STATUSES, TASK_STATUSES
from courtdesk.services.auth_service import AuthService
from courtdesk.services.route_guard import LOGIN_PATH, RecordingNavigator
from courtdesk.services.team_roster import TeamService
from courtdesk.services.work_service import ProjectService, TaskService

router = APIRouter(prefix="/api/v1/dashboard", tags=["Dashboard"])


@router.get("")
async def dashboard(
    token: Optional[str] = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
    tasks: TaskService = Depends(get_task_service),
    projects: ProjectService = Depends(get_project_service),
    team: TeamService = Depends(get_team_service),
):
    try:
        user = auth.require_user(token)
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))

    resolver = resolver_for_session(token)
    resolved = await resolver.resolve(user)
    display_name = resolved if resolved is not None else resolver.display_name

    task_counts = tasks.count_by_status(TASK_STATUSES)
    return {
        "display_name": display_name,
        "display_initial": resolver.display_initial,
        "greeting": f"Welcome back, {display_name or 'User'}",
        "summary": {
            "tasks": task_counts,
            "open_tasks": sum(n for status, n in task_counts.items() if status != "done"),
            "projects": projects.count_by_status(PROJECT_STATUSES),
            "team_members": len(team.list_members()),
        },
    }


@router.post("/logout")
def dashboard_logout(
    token: Optional[str] = Depends(get_session_token),
    auth: AuthService = Depends(get_auth_service),
):
    """Sign out and send the browser to the login page (pushed, so Back returns here)."""
    logged_out = auth.logout(token)
    navigator = RecordingNavigator()
    navigator.push(LOGIN_PATH)
    mode, target = navigator.last
    return {"redirect": target, "navigation": mode, "logged_out": logged_out}
