import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from ..config import JwtOptions
from ..models import User
from ..models.types import to_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IssuedToken:
    token: str
    expires_at_utc: datetime


@dataclass(frozen=True)
class TokenClaims:
    """Identity carried by a verified access token."""
    user_id: str
    username: str
    email: str
    issued_at: datetime
    expires_at: datetime


def _from_timestamp(value) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


class TokenIssuer:
    """Issues and verifies stateless HS256 access tokens.

    There is no revocation list; a token is good until it expires.
    """

    def __init__(self, options: JwtOptions):
        if not options.secret:
            raise ValueError("JWT secret must be configured")
        self.options = options

    def issue(self, user: User, now: datetime) -> IssuedToken:
        # JWT time claims have one-second resolution.
        now = to_utc(now).replace(microsecond=0)
        expires = now + timedelta(minutes=self.options.expire_minutes)
        claims = {
            "sub": str(user.id),
            "username": user.username,
            "email": user.email,
            "iss": self.options.issuer,
            "aud": self.options.audience,
            "iat": now,
            "nbf": now,
            "exp": expires,
        }
        token = jwt.encode(claims, self.options.secret, algorithm=self.options.algorithm)
        return IssuedToken(token=token, expires_at_utc=expires)

    def verify(self, token: str, now: datetime) -> Optional[TokenClaims]:
        """Return the claims, or None for any structural, signature or time failure."""
        try:
            # Time window is checked below against the caller's clock.
            payload = jwt.decode(
                token,
                self.options.secret,
                algorithms=[self.options.algorithm],
                audience=self.options.audience,
                issuer=self.options.issuer,
                options={"verify_exp": False, "verify_nbf": False, "verify_iat": False},
            )
        except JWTError as exc:
            logger.info("Rejected access token: %s", exc)
            return None

        try:
            user_id = payload["sub"]
            issued_at = _from_timestamp(payload["iat"])
            not_before = _from_timestamp(payload["nbf"])
            expires_at = _from_timestamp(payload["exp"])
        except (KeyError, TypeError, ValueError, OverflowError) as exc:
            logger.info("Rejected access token with malformed claims: %r", exc)
            return None

        now = to_utc(now)
        if not (not_before <= now <= expires_at):
            logger.info("Rejected access token outside its validity window (sub=%s)", user_id)
            return None

        return TokenClaims(
            user_id=user_id,
            username=payload.get("username", ""),
            email=payload.get("email", ""),
            issued_at=issued_at,
            expires_at=expires_at,
        )
