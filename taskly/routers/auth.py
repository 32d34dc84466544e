from functools import lru_cache
from typing import Optional

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from ..config import PASSWORD_HASH_ROUNDS, jwt_options
from ..database import get_db
from ..errors import Unauthenticated
from ..models.types import utcnow
from ..schemas.user import AuthResponse, LoginRequest, LogoutResponse, RegisterRequest, UserRead
from ..services.auth import AuthService
from ..services.passwords import PasswordHasher
from ..services.tokens import TokenClaims, TokenIssuer

router = APIRouter()


@lru_cache()
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=PASSWORD_HASH_ROUNDS)


@lru_cache()
def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(jwt_options())


def get_auth_service(
    db: Session = Depends(get_db),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> AuthService:
    return AuthService(db, hasher, issuer)


def _get_token_from_request(request: Request) -> Optional[str]:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.lower().startswith("bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return None


def get_current_claims(
    request: Request,
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """Verify the bearer token; every failure looks the same to the client."""
    token = _get_token_from_request(request)
    if not token:
        raise Unauthenticated()
    claims = issuer.verify(token, utcnow())
    if claims is None:
        raise Unauthenticated("Could not validate credentials")
    return claims


def get_current_user_id(claims: TokenClaims = Depends(get_current_claims)) -> str:
    return claims.user_id


@router.post("/register", response_model=AuthResponse)
def register(
    payload: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Create an account and sign it in."""
    return service.register(payload.username, payload.email, payload.password)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Sign in with username or email."""
    return service.login(payload.username_or_email, payload.password)


@router.post("/logout", response_model=LogoutResponse)
def logout(user_id: str = Depends(get_current_user_id)):
    """Tokens are stateless; the client just drops its copy."""
    return LogoutResponse()


@router.get("/me", response_model=UserRead)
def read_users_me(
    user_id: str = Depends(get_current_user_id),
    service: AuthService = Depends(get_auth_service),
):
    """Get current user information."""
    return service.current_user(user_id)
