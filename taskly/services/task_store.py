import logging
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from ..errors import NotFound, ValidationFailed
from ..models import Task
from ..models.task import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH
from ..models.types import to_utc
from .query import TaskQuery

logger = logging.getLogger(__name__)


def _clean_fields(
    name: Optional[str], description: Optional[str]
) -> Tuple[str, Optional[str]]:
    errors: Dict[str, str] = {}
    name = (name or "").strip()
    if not name:
        errors["name"] = "Task name is required"
    elif len(name) > NAME_MAX_LENGTH:
        errors["name"] = f"Task name max length is {NAME_MAX_LENGTH}"
    if description is not None:
        description = description.strip()
        if len(description) > DESCRIPTION_MAX_LENGTH:
            errors["description"] = f"Description max length is {DESCRIPTION_MAX_LENGTH}"
    if errors:
        raise ValidationFailed(errors)
    return name, description


class TaskStore:
    """Persistence for tasks. Knows nothing about who is asking; ownership
    is checked by ``TaskService``."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        owner_id: str,
        name: str,
        description: Optional[str],
        due_date: Optional[datetime],
        now: datetime,
    ) -> Task:
        name, description = _clean_fields(name, description)
        task = Task(
            owner_id=owner_id,
            name=name,
            description=description,
            due_date=to_utc(due_date),
            is_completed=False,
            created_at=now,
            updated_at=now,
        )
        self.db.add(task)
        self.db.commit()
        self.db.refresh(task)
        logger.debug("Created task %s for %s", task.id, owner_id)
        return task

    def get_by_id(self, task_id: str) -> Optional[Task]:
        return self.db.get(Task, task_id)

    def _require(self, task_id: str) -> Task:
        task = self.get_by_id(task_id)
        if task is None:
            raise NotFound("Task not found")
        return task

    def update(
        self,
        task_id: str,
        name: str,
        description: Optional[str],
        due_date: Optional[datetime],
        now: datetime,
    ) -> Task:
        name, description = _clean_fields(name, description)
        task = self._require(task_id)
        task.name = name
        task.description = description
        task.due_date = to_utc(due_date)
        task.updated_at = now
        self.db.commit()
        self.db.refresh(task)
        return task

    def toggle_complete(self, task_id: str, now: datetime) -> Task:
        task = self._require(task_id)
        task.is_completed = not task.is_completed
        task.completed_at = now if task.is_completed else None
        task.updated_at = now
        self.db.commit()
        self.db.refresh(task)
        logger.debug("Task %s completion toggled to %s", task.id, task.is_completed)
        return task

    def delete(self, task_id: str) -> None:
        task = self._require(task_id)
        self.db.delete(task)
        self.db.commit()

    def count(self, spec: TaskQuery) -> int:
        return spec.without_paging().filter(self.db.query(Task)).count()

    def list(self, spec: TaskQuery) -> List[Task]:
        return spec.apply(self.db.query(Task)).all()
