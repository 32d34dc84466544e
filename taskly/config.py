from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Load environment variables from repo root and the package's parent (if present).
REPO_ROOT = Path(__file__).resolve().parents[1]
load_dotenv(REPO_ROOT / ".env")
load_dotenv(Path.cwd() / ".env")


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./taskly.db")

JWT_SECRET = os.getenv("JWT_SECRET", "change-me-to-a-long-random-secret-value")
JWT_ISSUER = os.getenv("JWT_ISSUER", "taskly")
JWT_AUDIENCE = os.getenv("JWT_AUDIENCE", "taskly-clients")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# bcrypt_pbkdf rounds used by the password hasher.
PASSWORD_HASH_ROUNDS = int(os.getenv("PASSWORD_HASH_ROUNDS", "64"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_DIR = os.getenv("LOG_DIR") or None

SEED_DEMO_DATA = _env_bool("SEED_DEMO_DATA")

_cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000")
CORS_ORIGINS = [origin.strip() for origin in _cors_origins.split(",") if origin.strip()]


@dataclass(frozen=True)
class JwtOptions:
    """Signing parameters for access tokens, fixed at process startup."""

    secret: str
    issuer: str
    audience: str
    expire_minutes: int = 60
    algorithm: str = "HS256"


def jwt_options() -> JwtOptions:
    return JwtOptions(
        secret=JWT_SECRET,
        issuer=JWT_ISSUER,
        audience=JWT_AUDIENCE,
        expire_minutes=ACCESS_TOKEN_EXPIRE_MINUTES,
    )
