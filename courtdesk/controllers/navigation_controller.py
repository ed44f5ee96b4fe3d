# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Navigation guard.
Evaluates the route guard for the caller's session and reports the decision.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from courtdesk.core.dependencies import get_auth_service, get_session_token
from courtdesk.services.auth_service import AuthService
from courtdesk.services.route_guard import RecordingNavigator, RouteGuard

router = APIRouter(prefix="/api/v1/navigation", tags=["Navigation"])


@router.get("/guard")
def evaluate_guard(
    path: Optional[str] = Query(default=None),
    loading: bool = Query(default=False),
    token: Optional[str] = Depends(get_session_token),
    service: AuthService = Depends(get_auth_service),
):
    state = service.get_auth_state(token)
    if loading:
        state = state.model_copy(update={"is_loading": True})
    navigator = RecordingNavigator()
    decision = RouteGuard(navigator).update(state, path)
    return decision.as_dict()
