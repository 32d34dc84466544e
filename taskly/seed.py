"""Demo users and tasks for a fresh database.

    python -m taskly.seed
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from .models import User
from .models.types import utcnow
from .services.passwords import PasswordHasher
from .services.task_store import TaskStore
from .services.user_registry import UserRegistry

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("11111111-1111-1111-1111-111111111111", "john_doe", "john@example.com", [
        ("Complete API Documentation", "Write comprehensive API documentation", 7),
        ("Setup CI/CD Pipeline", "Configure automated deployment pipeline", 14),
        ("Code Review", "Review pull requests from team", 2),
    ]),
    ("22222222-2222-2222-2222-222222222222", "jane_smith", "jane@example.com", [
        ("Design Database Schema", "Create ERD for new features", 5),
        ("Write Unit Tests", "Add test coverage for core functionality", 10),
    ]),
]


def seed_demo_data(db: Session, hasher: PasswordHasher, now: Optional[datetime] = None) -> bool:
    """Insert the demo data unless any user exists. Returns True if seeded."""
    if db.query(User.id).first() is not None:
        logger.info("Users already present; skipping demo seed")
        return False

    now = now or utcnow()
    users = UserRegistry(db)
    tasks = TaskStore(db)
    for user_id, username, email, task_rows in DEMO_USERS:
        user = users.create(username, email, hasher.hash(DEMO_PASSWORD), now, user_id=user_id)
        for name, description, due_in_days in task_rows:
            tasks.create(user.id, name, description, now + timedelta(days=due_in_days), now)

    logger.info("Seeded %d demo users", len(DEMO_USERS))
    return True


def main() -> None:
    from .config import LOG_DIR, LOG_LEVEL, PASSWORD_HASH_ROUNDS
    from .database import create_tables, session_scope
    from .logging_setup import setup_logging

    setup_logging(level=LOG_LEVEL, log_dir=LOG_DIR)
    create_tables()
    with session_scope() as db:
        seed_demo_data(db, PasswordHasher(rounds=PASSWORD_HASH_ROUNDS))


if __name__ == "__main__":
    main()
