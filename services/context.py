"""
Request Context Module

The explicit per-request state handed to every moderation action: the
client address, the server-side session holding the staff identity and the
audit sink that records what the identity did.
"""

from dataclasses import dataclass
from typing import Any, Mapping, MutableMapping, Optional

from config import settings
from data.models import LogEntry
from services.protocols import AuditSink
from utils.helpers import get_client_remote_address

SESSION_USERNAME = 'mb_username'
SESSION_ROLE = 'mb_role'


@dataclass
class RequestContext:
    ip: str
    session: MutableMapping[str, Any]
    audit: AuditSink

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, Any],
        session: MutableMapping[str, Any],
        audit: AuditSink,
        cloudflare: Optional[bool] = None
    ) -> "RequestContext":
        """Build a context from a WSGI environ style mapping."""
        if cloudflare is None:
            cloudflare = settings.CLOUDFLARE
        return cls(get_client_remote_address(cloudflare, environ), session, audit)

    @property
    def username(self) -> Optional[str]:
        return self.session.get(SESSION_USERNAME)

    @property
    def role(self) -> Optional[int]:
        return self.session.get(SESSION_ROLE)

    def log(self, message: str) -> LogEntry:
        """Append a moderation log entry for the current identity."""
        return self.audit.record(self.ip, self.username, message)
