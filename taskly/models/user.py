from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime
from typing import List
from uuid import uuid4

from .types import UTCDateTime, utcnow


class User(SQLModel, table=True):
    """Registered account. Username and email are stored trimmed and lower-cased."""
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    username: str = Field(max_length=50, unique=True, index=True)
    email: str = Field(max_length=256, unique=True, index=True)
    password_hash: str
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)

    # Relationship to tasks
    tasks: List["Task"] = Relationship(back_populates="owner")
