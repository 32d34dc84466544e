"""Immutable filter/order/paging descriptor for task listings.

A list request builds one ``TaskQuery`` and runs it twice: once without
paging to count, once with paging for the items.
"""
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Query

from ..models import Task
from ..models.types import to_utc

ORDERABLE_FIELDS = ("created_at", "due_date", "name", "updated_at")


@dataclass(frozen=True)
class TaskQuery:
    owner_id: str
    completed: Optional[bool] = None
    due_on_or_before: Optional[datetime] = None
    order_by: str = "created_at"
    descending: bool = True
    skip: Optional[int] = None
    take: Optional[int] = None

    def __post_init__(self):
        if not self.owner_id:
            raise ValueError("owner_id is required")
        if self.order_by not in ORDERABLE_FIELDS:
            raise ValueError(f"Cannot order tasks by {self.order_by!r}")
        if (self.skip is None) != (self.take is None):
            raise ValueError("skip and take must be given together")
        if self.skip is not None and (self.skip < 0 or self.take < 1):
            raise ValueError("skip must be >= 0 and take >= 1")
        if self.due_on_or_before is not None:
            object.__setattr__(self, "due_on_or_before", to_utc(self.due_on_or_before))

    @property
    def is_paged(self) -> bool:
        return self.take is not None

    def for_page(self, page: int, page_size: int) -> "TaskQuery":
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be >= 1")
        return replace(self, skip=(page - 1) * page_size, take=page_size)

    def without_paging(self) -> "TaskQuery":
        return replace(self, skip=None, take=None)

    def filter(self, query: Query) -> Query:
        query = query.filter(Task.owner_id == self.owner_id)
        if self.completed is not None:
            query = query.filter(Task.is_completed.is_(self.completed))
        if self.due_on_or_before is not None:
            query = query.filter(
                Task.due_date.is_not(None),
                Task.due_date <= self.due_on_or_before,
            )
        return query

    def apply(self, query: Query) -> Query:
        """Filter, order and (when set) page ``query``."""
        query = self.filter(query)
        column = getattr(Task, self.order_by)
        # id breaks ties so pages stay disjoint when timestamps collide
        if self.descending:
            query = query.order_by(column.desc(), Task.id.desc())
        else:
            query = query.order_by(column.asc(), Task.id.asc())
        if self.is_paged:
            query = query.offset(self.skip).limit(self.take)
        return query
