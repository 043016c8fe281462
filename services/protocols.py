"""
Service Protocol Definitions

This module defines typing.Protocol interfaces for the capabilities the
moderation services depend on. These protocols enable loose coupling,
dependency injection, and easier testing.

Protocols defined:
- PasswordHasher: Interface for one-way adaptive password hashing
- LegacyCrypt: Interface for the DES-based crypt used by tripcodes
- CaptchaVerifier: Interface for captcha form validation
- AuditSink: Interface for appending moderation log entries
"""

from typing import Protocol, Optional, Mapping, Any

from data.models import LogEntry


class PasswordHasher(Protocol):
    """Protocol defining the interface for password hashing.

    Implementations should provide methods for:
    - Hashing a plain password for storage
    - Verifying a plain password against a stored hash
    """

    def hash(self, password: str) -> str:
        """Hash a password for database storage.

        Raises:
            InternalError: If the underlying hash function fails.
        """
        ...

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        """Check a password against a stored hash.

        Returns:
            True on match, False on mismatch or a missing/invalid hash.
        """
        ...


class LegacyCrypt(Protocol):
    """Protocol defining the traditional two-character-salt DES crypt."""

    def crypt(self, secret: str, salt: str) -> str:
        """Return the 13 character crypt(3) string for secret and salt."""
        ...


class CaptchaVerifier(Protocol):
    """Protocol defining captcha validation of a submitted form."""

    def validate(self, form: Mapping[str, Any]) -> None:
        """Validate the captcha token carried in a form.

        Raises:
            CaptchaError: If the token is missing or rejected.
        """
        ...


class AuditSink(Protocol):
    """Protocol defining the append-only moderation audit trail."""

    def record(self, ip: str, username: Optional[str], message: str) -> LogEntry:
        """Append an entry and return it."""
        ...
