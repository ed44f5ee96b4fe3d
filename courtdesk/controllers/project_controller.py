# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Project endpoints.
Thin HTTP layer - delegates ALL logic to ProjectService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from courtdesk.core.dependencies import get_project_service
from courtdesk.models.domain import PRIORITIES, PROJECT_STATUSES
from courtdesk.schemas import ProjectCreate, ProjectUpdate
from courtdesk.services.work_service import ProjectService

router = APIRouter(prefix="/api/v1/projects", tags=["Projects"])


@router.get("")
def list_projects(
    status: Optional[str] = Query(default=None),
    priority: Optional[str] = Query(default=None),
    q: Optional[str] = Query(default=None, max_length=200),
    service: ProjectService = Depends(get_project_service),
):
    """List projects, optionally filtered by status / priority and a free-text query."""
    if status and status not in PROJECT_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of {PROJECT_STATUSES}")
    if priority and priority not in PRIORITIES:
        raise HTTPException(status_code=400, detail=f"priority must be one of {PRIORITIES}")
    projects = service.list_items(status=status, priority=priority, query=q)
    return {"projects": projects, "total": len(projects)}


@router.post("", status_code=201)
def create_project(
    payload: ProjectCreate,
    service: ProjectService = Depends(get_project_service),
):
    return service.create(payload.model_dump())


@router.get("/{project_id}")
def get_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    try:
        return service.get(project_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{project_id}")
def update_project(
    project_id: str,
    payload: ProjectUpdate,
    service: ProjectService = Depends(get_project_service),
):
    try:
        return service.update(project_id, payload.model_dump(exclude_unset=True))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{project_id}")
def delete_project(project_id: str, service: ProjectService = Depends(get_project_service)):
    try:
        return service.delete(project_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
