"""Error taxonomy shared by the services and the HTTP boundary.

Services raise these; ``taskly.main`` turns them into status codes and a
``{"error": {"kind", "message", "fields"}}`` envelope. Clients switch on
``kind``, never on ``message``.
"""
import enum
from typing import Dict, Iterable, List, Optional


class ErrorKind(str, enum.Enum):
    VALIDATION_FAILED = "validation_failed"
    INVALID_CREDENTIALS = "invalid_credentials"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    DUPLICATE_REGISTRATION = "duplicate_registration"
    CONFLICT = "conflict"
    UNEXPECTED = "unexpected"


class TasklyError(Exception):
    kind: ErrorKind = ErrorKind.UNEXPECTED
    default_message = "Something went wrong. Please try again later."

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def details(self) -> Optional[object]:
        """Extra structured payload for the response envelope."""
        return None


class ValidationFailed(TasklyError):
    kind = ErrorKind.VALIDATION_FAILED
    default_message = "Validation failed"

    def __init__(self, fields: Dict[str, str], message: Optional[str] = None):
        self.fields = dict(fields)
        super().__init__(message or "; ".join(self.fields.values()) or None)

    def details(self) -> Dict[str, str]:
        return self.fields


class InvalidCredentials(TasklyError):
    kind = ErrorKind.INVALID_CREDENTIALS
    default_message = "Invalid credentials"

    def __init__(self):
        # Always the same text: callers must not learn which check failed.
        super().__init__()


class Unauthenticated(TasklyError):
    kind = ErrorKind.UNAUTHENTICATED
    default_message = "Not authenticated"


class Forbidden(TasklyError):
    kind = ErrorKind.FORBIDDEN
    default_message = "You do not have access to this resource"


class NotFound(TasklyError):
    kind = ErrorKind.NOT_FOUND
    default_message = "Not found"


class DuplicateRegistration(TasklyError):
    kind = ErrorKind.DUPLICATE_REGISTRATION

    FIELD_ORDER = ("username", "email")

    def __init__(self, fields: Iterable[str]):
        wanted = set(fields)
        self.fields: List[str] = [f for f in self.FIELD_ORDER if f in wanted]
        if len(self.fields) == 1:
            message = f"This {self.fields[0]} is already taken"
        else:
            message = f"This {' and '.join(self.fields)} are already taken"
        super().__init__(message)

    def details(self) -> List[str]:
        return self.fields


class Conflict(TasklyError):
    kind = ErrorKind.CONFLICT
    default_message = "The request conflicts with the current state"
