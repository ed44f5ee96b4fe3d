# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: Task endpoints.
Thin HTTP layer - delegates ALL logic to TaskService.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from courtdesk.core.dependencies import get_task_service
from courtdesk.models.domain import PRIORITIES, TASK_STATUSES
from courtdesk.schemas import TaskCreate, TaskUpdate
from courtdesk.services.work_service import TaskService

router = APIRouter(prefix="/api/v1/tasks", tags=["Tasks"])


@router.get("")
def list_tasks(
    status: Optional[str] = Query(default=None),
    priority: Optional[str] = Query(default=None),
    q: Optional[str] = Query(default=None, max_length=200),
    service: TaskService = Depends(get_task_service),
):
    """List tasks, optionally filtered by status / priority and a free-text query."""
    if status and status not in TASK_STATUSES:
        raise HTTPException(status_code=400, detail=f"status must be one of {TASK_STATUSES}")
    if priority and priority not in PRIORITIES:
        raise HTTPException(status_code=400, detail=f"priority must be one of {PRIORITIES}")
    tasks = service.list_items(status=status, priority=priority, query=q)
    return {"tasks": tasks, "total": len(tasks)}


@router.post("", status_code=201)
def create_task(
    payload: TaskCreate,
    service: TaskService = Depends(get_task_service),
):
    return service.create(payload.model_dump())


@router.get("/{task_id}")
def get_task(task_id: str, service: TaskService = Depends(get_task_service)):
    try:
        return service.get(task_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.patch("/{task_id}")
def update_task(
    task_id: str,
    payload: TaskUpdate,
    service: TaskService = Depends(get_task_service),
):
    try:
        return service.update(task_id, payload.model_dump(exclude_unset=True))
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/{task_id}")
def delete_task(task_id: str, service: TaskService = Depends(get_task_service)):
    try:
        return service.delete(task_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))
