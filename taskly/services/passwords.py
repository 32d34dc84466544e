import base64
import binascii
import hmac
import os
from typing import Optional

import bcrypt

SALT_BYTES = 16
KEY_BYTES = 32
SEPARATOR = "."


class PasswordHasher:
    """Salted one-way password hashing on bcrypt_pbkdf.

    Stored form is ``base64(salt).base64(key)``; the work factor comes from
    configuration and must stay fixed for existing hashes to verify.
    """

    def __init__(self, rounds: int = 64):
        if rounds < 1:
            raise ValueError("rounds must be >= 1")
        self.rounds = rounds
        self._dummy_hash: Optional[str] = None

    def _derive(self, password: str, salt: bytes) -> bytes:
        return bcrypt.kdf(
            password=password.encode("utf-8"),
            salt=salt,
            desired_key_bytes=KEY_BYTES,
            rounds=self.rounds,
            ignore_few_rounds=True,
        )

    def hash(self, password: str) -> str:
        salt = os.urandom(SALT_BYTES)
        key = self._derive(password, salt)
        return SEPARATOR.join(
            (base64.b64encode(salt).decode("ascii"), base64.b64encode(key).decode("ascii"))
        )

    def verify(self, password: str, stored_hash: str) -> bool:
        """Constant-time check; malformed hashes and empty passwords are simply False."""
        parts = (stored_hash or "").split(SEPARATOR)
        if len(parts) != 2:
            return False
        try:
            salt = base64.b64decode(parts[0], validate=True)
            expected = base64.b64decode(parts[1], validate=True)
        except (binascii.Error, ValueError):
            return False
        if not salt or len(expected) != KEY_BYTES or not password:
            return False
        return hmac.compare_digest(self._derive(password, salt), expected)

    def dummy_hash(self) -> str:
        """A real hash of a random secret, for spending the same KDF time when
        there is no stored hash to check against."""
        if self._dummy_hash is None:
            self._dummy_hash = self.hash(base64.b64encode(os.urandom(SALT_BYTES)).decode("ascii"))
        return self._dummy_hash
