"""
Crypto Module

passlib-backed implementations of the PasswordHasher and LegacyCrypt
capabilities. Account hashes use bcrypt with the "2y" ident so hashes
written by older deployments keep verifying.
"""

from typing import Optional

from passlib.hash import bcrypt, des_crypt

from config import settings
from utils.exceptions import InternalError
from utils.logger import get_logger

logger = get_logger(__name__)


class BcryptPasswordHasher:
    """Adaptive one-way password hashing."""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or settings.PASSWORD_BCRYPT_ROUNDS
        self._handler = bcrypt.using(rounds=self.rounds, ident="2y")

    def hash(self, password: str) -> str:
        try:
            hashed = self._handler.hash(password)
        except Exception as e:
            logger.error(f"Password hashing failed: {e}")
            raise InternalError("password hash function failed") from e

        if not hashed:
            raise InternalError("password hash function returned an empty result")
        return hashed

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        if not password_hash:
            return False
        try:
            return bool(bcrypt.verify(password, password_hash))
        except (ValueError, TypeError) as e:
            logger.warning(f"Rejecting malformed password hash: {e}")
            return False


class DesLegacyCrypt:
    """Traditional DES crypt(3), as used for normal tripcodes."""

    def crypt(self, secret: str, salt: str) -> str:
        # crypt(3) reads the secret as a C string
        secret = secret.split("\x00", 1)[0]
        try:
            return des_crypt.using(salt=salt).hash(secret)
        except ValueError as e:
            raise InternalError(f"des crypt failed for salt {salt!r}") from e
