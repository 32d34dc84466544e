from .auth import AuthService
from .passwords import PasswordHasher
from .query import TaskQuery
from .task_store import TaskStore
from .tasks import TaskService
from .tokens import IssuedToken, TokenClaims, TokenIssuer
from .user_registry import UserRegistry

__all__ = [
    "AuthService",
    "IssuedToken",
    "PasswordHasher",
    "TaskQuery",
    "TaskService",
    "TaskStore",
    "TokenClaims",
    "TokenIssuer",
    "UserRegistry",
]
