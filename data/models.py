"""
Data Models for the Moderation Core

This module contains data classes and models used throughout the application.
Store implementations convert their rows with the from_row() helpers so
services never deal with raw column dictionaries.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any


@dataclass(frozen=True)
class PostRef:
    """A parsed "{board_id}/{post_id}" selection token."""
    board_id: str
    post_id: int                       # 0 when the token was malformed

    def __str__(self) -> str:
        return f"{self.board_id}/{self.post_id}"


@dataclass
class Post:
    """Data class for a single post (thread root or reply)."""
    board_id: str
    post_id: int
    parent_id: int = 0                 # 0 = thread root
    name: str = ""
    tripcode: Optional[str] = None
    email: str = ""
    message: str = ""
    file: str = ""                     # stored path or embed URL, '' if absent
    file_hex: str = ""                 # content hash shared by duplicate uploads
    thumb: str = ""                    # stored path, '' if absent
    embed: bool = False
    imported: bool = False
    role: int = 0
    timestamp: int = 0                 # unix time
    locked: bool = False
    stickied: bool = False

    @property
    def is_reply(self) -> bool:
        return self.parent_id > 0

    @property
    def ref(self) -> PostRef:
        return PostRef(self.board_id, self.post_id)

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Post":
        """Build a Post from a store row, coercing 0/1 flag columns to bool."""
        return cls(
            board_id=str(row["board_id"]),
            post_id=int(row["post_id"]),
            parent_id=int(row.get("parent_id") or 0),
            name=row.get("name") or "",
            tripcode=row.get("tripcode"),
            email=row.get("email") or "",
            message=row.get("message") or "",
            file=row.get("file") or "",
            file_hex=row.get("file_hex") or "",
            thumb=row.get("thumb") or "",
            embed=bool(row.get("embed")),
            imported=bool(row.get("imported")),
            role=int(row.get("role") or 0),
            timestamp=int(row.get("timestamp") or 0),
            locked=bool(row.get("locked")),
            stickied=bool(row.get("stickied")),
        )


@dataclass
class BoardConfig:
    """Data class for the per-board settings used while rendering."""
    board_id: str
    anonymous: str = "Anonymous"
    truncate: int = 15                 # line breaks kept before truncating
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, board_id: str, cfg: Dict[str, Any]) -> "BoardConfig":
        known = {"anonymous", "truncate"}
        return cls(
            board_id=board_id,
            anonymous=cfg.get("anonymous", "Anonymous"),
            truncate=int(cfg.get("truncate", 15)),
            extra={k: v for k, v in cfg.items() if k not in known},
        )


@dataclass
class Account:
    """Data class for a staff account."""
    username: str
    password_hash: Optional[str]
    role: int

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Account":
        return cls(
            username=row["username"],
            password_hash=row.get("password"),
            role=int(row.get("role") or 0),
        )


@dataclass(frozen=True)
class LogEntry:
    """Data class for an append-only moderation log row."""
    ip: str
    timestamp: int
    username: Optional[str]
    message: str


@dataclass
class RenderedMessage:
    """Result of rendering a raw message."""
    rendered: str
    truncated: bool


@dataclass
class RebuildPost:
    """Partial post carrying only the rendered columns a rebuild writes."""
    board_id: str
    post_id: int
    message_rendered: str
    message_truncated: bool
    nameblock: str
    file_rendered: str


class ImportTableType(str, Enum):
    """Supported external table layouts for import."""
    TINYIB_ACCOUNTS = "tinyib_accounts"
    TINYIB_POSTS = "tinyib_posts"


@dataclass
class ImportParams:
    """Connection and target parameters for an import run."""
    db_name: str
    db_user: str
    db_pass: str
    table_name: str
    table_type: str
    board_id: str = ""
    db_host: str = "localhost"
