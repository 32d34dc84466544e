import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy.orm import Session

from ..errors import Forbidden, NotFound
from ..models import Task
from ..models.types import utcnow
from ..schemas.task import PagedResult, TaskRead
from .query import TaskQuery
from .task_store import TaskStore

logger = logging.getLogger(__name__)


class TaskService:
    """Owner-scoped task operations.

    ``caller_id`` is always the id taken from the verified access token; it
    is passed in explicitly, never looked up from ambient request state.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utcnow):
        self.store = TaskStore(db)
        self.clock = clock

    def load_owned(self, task_id: str, caller_id: str) -> Task:
        """The single ownership guard for get/update/toggle/delete."""
        task = self.store.get_by_id(task_id)
        if task is None:
            raise NotFound("Task not found")
        if task.owner_id != caller_id:
            logger.warning("User %s denied access to task %s", caller_id, task_id)
            raise Forbidden()
        return task

    def create(
        self,
        caller_id: str,
        name: str,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
    ) -> TaskRead:
        task = self.store.create(caller_id, name, description, due_date, self.clock())
        return TaskRead.model_validate(task)

    def get(self, caller_id: str, task_id: str) -> TaskRead:
        return TaskRead.model_validate(self.load_owned(task_id, caller_id))

    def list(
        self,
        caller_id: str,
        completed: Optional[bool] = None,
        due_on_or_before: Optional[datetime] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> PagedResult[TaskRead]:
        spec = TaskQuery(owner_id=caller_id, completed=completed, due_on_or_before=due_on_or_before)
        total_count = self.store.count(spec)
        items = self.store.list(spec.for_page(page, page_size))
        return PagedResult[TaskRead].create(
            [TaskRead.model_validate(t) for t in items],
            total_count=total_count,
            page=page,
            page_size=page_size,
        )

    def update(
        self,
        caller_id: str,
        task_id: str,
        name: str,
        description: Optional[str] = None,
        due_date: Optional[datetime] = None,
    ) -> TaskRead:
        self.load_owned(task_id, caller_id)
        task = self.store.update(task_id, name, description, due_date, self.clock())
        return TaskRead.model_validate(task)

    def toggle(self, caller_id: str, task_id: str) -> TaskRead:
        self.load_owned(task_id, caller_id)
        return TaskRead.model_validate(self.store.toggle_complete(task_id, self.clock()))

    def delete(self, caller_id: str, task_id: str) -> None:
        self.load_owned(task_id, caller_id)
        self.store.delete(task_id)
        logger.info("User %s deleted task %s", caller_id, task_id)
