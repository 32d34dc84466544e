from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.task import PagedResult, TaskRead, TaskWrite
from ..services.tasks import TaskService
from .auth import get_current_user_id

router = APIRouter()

MAX_PAGE_SIZE = 100


def get_task_service(db: Session = Depends(get_db)) -> TaskService:
    return TaskService(db)


@router.post("/tasks", response_model=TaskRead)
def create_task(
    task: TaskWrite,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Create a new task owned by the caller."""
    return service.create(user_id, task.name, task.description, task.due_date)


@router.get("/tasks", response_model=PagedResult[TaskRead])
def list_tasks(
    completed: Optional[bool] = None,
    due_on_or_before: Optional[datetime] = Query(default=None, alias="dueOnOrBefore"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=MAX_PAGE_SIZE, alias="pageSize"),
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """List the caller's tasks, newest first."""
    return service.list(
        user_id,
        completed=completed,
        due_on_or_before=due_on_or_before,
        page=page,
        page_size=page_size,
    )


@router.get("/tasks/{task_id}", response_model=TaskRead)
def get_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    return service.get(user_id, task_id)


@router.put("/tasks/{task_id}", response_model=TaskRead)
def update_task(
    task_id: str,
    task: TaskWrite,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Replace name, description and due date of a task."""
    return service.update(user_id, task_id, task.name, task.description, task.due_date)


@router.delete("/tasks/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    service.delete(user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/tasks/{task_id}/toggle", response_model=TaskRead)
def toggle_task(
    task_id: str,
    user_id: str = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
):
    """Flip the completion flag."""
    return service.toggle(user_id, task_id)
