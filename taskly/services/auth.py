import logging
from datetime import datetime
from typing import Callable, Dict, List

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import DuplicateRegistration, InvalidCredentials, NotFound, ValidationFailed
from ..models import User
from ..models.types import utcnow
from ..schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserRead
from .passwords import PasswordHasher
from .tokens import TokenIssuer
from .user_registry import UserRegistry

logger = logging.getLogger(__name__)


def validation_errors(exc: ValidationError) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "request"
        fields.setdefault(loc, err.get("msg", "Invalid value"))
    return fields


class AuthService:
    """Registration and login. Every call is independent; nothing is kept
    between requests."""

    def __init__(
        self,
        db: Session,
        hasher: PasswordHasher,
        issuer: TokenIssuer,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.users = UserRegistry(db)
        self.hasher = hasher
        self.issuer = issuer
        self.clock = clock

    def _auth_response(self, user: User) -> AuthResponse:
        issued = self.issuer.issue(user, self.clock())
        return AuthResponse(
            access_token=issued.token,
            expires_at_utc=issued.expires_at_utc,
            user=UserRead.model_validate(user),
        )

    def _conflicts(self, username: str, email: str) -> List[str]:
        fields = []
        if self.users.check_username_taken(username):
            fields.append("username")
        if self.users.check_email_taken(email):
            fields.append("email")
        return fields

    def register(self, username: str, email: str, password: str) -> AuthResponse:
        try:
            request = RegisterRequest(username=username, email=email, password=password)
        except ValidationError as exc:
            raise ValidationFailed(validation_errors(exc)) from exc

        conflicts = self._conflicts(request.username, request.email)
        if conflicts:
            logger.info("Registration rejected, taken: %s", ", ".join(conflicts))
            raise DuplicateRegistration(conflicts)

        password_hash = self.hasher.hash(request.password)
        try:
            user = self.users.create(request.username, request.email, password_hash, self.clock())
        except IntegrityError as exc:
            # Lost a race with a concurrent registration; report it like the
            # pre-check would have.
            conflicts = self._conflicts(request.username, request.email) or ["username", "email"]
            logger.warning("Registration hit unique constraint (%s): %s", ", ".join(conflicts), exc.orig)
            raise DuplicateRegistration(conflicts) from exc

        return self._auth_response(user)

    def login(self, username_or_email: str, password: str) -> AuthResponse:
        try:
            request = LoginRequest(username_or_email=username_or_email, password=password)
        except ValidationError as exc:
            raise ValidationFailed(validation_errors(exc)) from exc

        user = self.users.find_by_username_or_email(request.username_or_email)
        if user is None:
            # Run the KDF anyway so response time does not reveal unknown accounts.
            self.hasher.verify(request.password, self.hasher.dummy_hash())
            logger.info("Login failed: no user matches %r", request.username_or_email.strip())
            raise InvalidCredentials()
        if not self.hasher.verify(request.password, user.password_hash):
            logger.info("Login failed: wrong password for user %s", user.id)
            raise InvalidCredentials()

        logger.info("User %s logged in", user.id)
        return self._auth_response(user)

    def current_user(self, user_id: str) -> UserRead:
        user = self.users.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return UserRead.model_validate(user)
