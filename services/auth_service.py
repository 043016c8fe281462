"""
Auth Service Module

Staff login, logout and role lookup backed by the server-side session in the
request context. Role based permission checks belong to the routing layer.
"""

from typing import Optional

from data.models import Account
from services.context import RequestContext, SESSION_USERNAME, SESSION_ROLE
from services.protocols import PasswordHasher
from utils.crypto import BcryptPasswordHasher
from utils.exceptions import AuthError
from utils.logger import get_logger

logger = get_logger(__name__)


class AuthService:
    """Session/auth gate for staff accounts."""

    def __init__(self, hasher: Optional[PasswordHasher] = None):
        self.hasher = hasher or BcryptPasswordHasher()

    def login(self, ctx: RequestContext, account: Account, password: str) -> bool:
        """
        Check credentials and, on success, store the identity in the session.

        Returns:
            bool: True on success, False if the password does not match.
        """
        if not self.verify_password(password, account.password_hash):
            logger.warning(f"Failed login for {account.username} from {ctx.ip}")
            return False

        ctx.session[SESSION_USERNAME] = account.username
        ctx.session[SESSION_ROLE] = account.role

        ctx.log('Logged in')
        return True

    def is_logged_in(self, ctx: RequestContext) -> bool:
        return ctx.session.get(SESSION_USERNAME) is not None and ctx.session.get(SESSION_ROLE) is not None

    def logout(self, ctx: RequestContext) -> bool:
        """Log the logout and clear the session."""
        ctx.log('Logged out')
        ctx.session.clear()
        return True

    def get_role(self, ctx: RequestContext) -> Optional[int]:
        return ctx.session.get(SESSION_ROLE)

    def require_login(self, ctx: RequestContext) -> str:
        """
        Return the logged in username.

        Raises:
            AuthError: If no staff identity is in the session.
        """
        if not self.is_logged_in(ctx):
            raise AuthError("login required")
        return ctx.username

    def hash_password(self, password: str) -> str:
        return self.hasher.hash(password)

    def verify_password(self, password: str, password_hash: Optional[str]) -> bool:
        """Check a password against a stored hash, False for a missing or invalid hash."""
        return self.hasher.verify(password, password_hash) is True
