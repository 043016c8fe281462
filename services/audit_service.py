"""
Audit Service Module

The moderation log: an append-only trail of staff actions persisted through
the store and mirrored to the application logger.
"""

import time
from typing import Callable, Optional

from data.models import LogEntry
from data.protocols import ModerationStore
from utils.logger import get_logger

logger = get_logger(__name__)


class ModerationLog:
    """AuditSink writing entries through ModerationStore.insert_log()."""

    def __init__(self, store: ModerationStore, clock: Callable[[], float] = time.time):
        self.store = store
        self.clock = clock

    def record(self, ip: str, username: Optional[str], message: str) -> LogEntry:
        entry = LogEntry(ip=ip, timestamp=int(self.clock()), username=username, message=message)
        self.store.insert_log(entry.ip, entry.timestamp, entry.username, entry.message)
        logger.info(f"[{entry.username or '-'}@{entry.ip}] {entry.message}")
        return entry
