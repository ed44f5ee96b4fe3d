# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Team roster CRUD endpoints.
Thin HTTP layer - delegates ALL logic to TeamService.
"""

from fastapi import APIRouter, Depends, HTTPException

from courtdesk.core.dependencies import get_team_service
from courtdesk.schemas import TeamMemberCreate, TeamMemberOut, TeamMemberUpdate
from courtdesk.services.team_roster import TeamService

router = APIRouter(prefix="/api/v1/team", tags=["Team"])


@router.get("")
def list_members(service: TeamService = Depends(get_team_service)):
    members = service.list_members()
    return {"members": members, "total": len(members)}


@router.post("", status_code=201, response_model=TeamMemberOut)
def create_member(
    payload: TeamMemberCreate,
    service: TeamService = Depends(get_team_service),
):
    return service.create_member(**payload.model_dump())


@router.get("/duplicates")
def duplicate_emails(service: TeamService = Depends(get_team_service)):
    """Emails held by more than one member; the dashboard greeting uses the first of each."""
    return service.duplicates()


@router.patch("/{member_id}", response_model=TeamMemberOut)
def update_member(
    member_id: str,
    payload: TeamMemberUpdate,
    service: TeamService = Depends(get_team_service),
):
    try:
        return service.update_member(member_id, payload.model_dump(exclude_unset=True))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{member_id}")
def delete_member(
    member_id: str,
    service: TeamService = Depends(get_team_service),
):
    try:
        return service.delete_member(member_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
