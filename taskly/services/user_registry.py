import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..models import User

logger = logging.getLogger(__name__)


def normalize_identity(value: str) -> str:
    return value.strip().lower()


class UserRegistry:
    """Lookup and creation of users. Username/email matching is case-insensitive."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.db.get(User, user_id)

    def find_by_username_or_email(self, term: str) -> Optional[User]:
        term = normalize_identity(term)
        if not term:
            return None
        return (
            self.db.query(User)
            .filter((func.lower(User.username) == term) | (func.lower(User.email) == term))
            .first()
        )

    def check_username_taken(self, username: str) -> bool:
        username = normalize_identity(username)
        query = self.db.query(User.id).filter(func.lower(User.username) == username)
        return self.db.query(query.exists()).scalar()

    def check_email_taken(self, email: str) -> bool:
        email = normalize_identity(email)
        query = self.db.query(User.id).filter(func.lower(User.email) == email)
        return self.db.query(query.exists()).scalar()

    def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        now: datetime,
        user_id: Optional[str] = None,
    ) -> User:
        """Insert a user. Uniqueness is the caller's check; the unique indexes
        still reject a racing duplicate with ``IntegrityError``."""
        user = User(
            username=normalize_identity(username),
            email=normalize_identity(email),
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        if user_id is not None:
            user.id = user_id
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise
        self.db.refresh(user)
        logger.info("Created user %s (%s)", user.id, user.username)
        return user
