# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Controller: Authentication - login, logout, session."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from courtdesk.core.dependencies import get_auth_service, get_session_token
from courtdesk.schemas import LoginRequest, LoginResponse, SessionResponse
from courtdesk.services.auth_service import AuthService

router = APIRouter(prefix="/api/v1/auth", tags=["Auth"])


@router.post("/login", response_model=LoginResponse)
def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    try:
        return service.login(payload.email, payload.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PermissionError as e:
        raise HTTPException(status_code=401, detail=str(e))


@router.post("/logout")
def logout(
    token: Optional[str] = Depends(get_session_token),
    service: AuthService = Depends(get_auth_service),
):
    return {"logged_out": service.logout(token)}


@router.get("/session", response_model=SessionResponse)
def session(
    token: Optional[str] = Depends(get_session_token),
    service: AuthService = Depends(get_auth_service),
):
    """Current authentication snapshot; anonymous when the token is missing or expired."""
    return service.get_auth_state(token).model_dump()
