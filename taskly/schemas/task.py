from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import Field

from .base import CamelModel
from ..models.task import DESCRIPTION_MAX_LENGTH, NAME_MAX_LENGTH

T = TypeVar("T")


class TaskWrite(CamelModel):
    """Body for both create and update; update replaces all three fields."""
    name: str = Field(min_length=1, max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    due_date: Optional[datetime] = None


class TaskRead(CamelModel):
    id: str
    owner_id: str
    owner_username: Optional[str] = None
    name: str
    description: Optional[str] = None
    due_date: Optional[datetime] = None
    is_completed: bool
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class PagedResult(CamelModel, Generic[T]):
    items: List[T]
    total_count: int
    page: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool

    @classmethod
    def create(cls, items: List[T], total_count: int, page: int, page_size: int) -> "PagedResult[T]":
        total_pages = -(-total_count // page_size)
        return cls(
            items=items,
            total_count=total_count,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next_page=page < total_pages,
            has_previous_page=page > 1,
        )
