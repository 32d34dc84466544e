from sqlalchemy import Index
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import Optional
from uuid import uuid4

from .types import UTCDateTime, utcnow

NAME_MAX_LENGTH = 120
DESCRIPTION_MAX_LENGTH = 1000


class Task(SQLModel, table=True):
    """A to-do item owned by exactly one user.

    ``completed_at`` is set when ``is_completed`` flips to true and cleared
    when it flips back.
    """
    __tablename__ = "tasks"
    __table_args__ = (Index("ix_tasks_owner_id_is_completed", "owner_id", "is_completed"),)

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    owner_id: str = Field(foreign_key="users.id", index=True)
    name: str = Field(max_length=NAME_MAX_LENGTH)
    description: Optional[str] = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    due_date: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    is_completed: bool = Field(default=False)
    completed_at: Optional[datetime] = Field(default=None, sa_type=UTCDateTime)
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)

    # Relationship back to user
    owner: Optional["User"] = Relationship(back_populates="tasks")

    @property
    def owner_username(self) -> Optional[str]:
        return self.owner.username if self.owner is not None else None
