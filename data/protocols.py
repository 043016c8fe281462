"""
Data Layer Protocol Definitions

This module defines typing.Protocol interfaces for the collaborators the
moderation core consumes but does not implement: the relational store, the
board registry and the message/nameblock renderer. These protocols enable
dependency injection, making services testable without a real database.

Protocols defined:
- ModerationStore: Interface for post, report, log and import queries
- BoardRegistry: Interface for looking up board configuration
- PostRenderer: Interface for rendering nameblocks and messages
"""

from typing import Protocol, Optional, Sequence

from data.models import (
    Post, BoardConfig, RebuildPost, RenderedMessage, ImportParams
)


class ModerationStore(Protocol):
    """Protocol defining the store operations used by moderation actions.

    Implementations must perform the count-then-delete sequence of file
    deduplication under at least read-committed isolation, and serialize
    the auto-increment reset/refresh around post imports.
    """

    def insert_log(self, ip: str, timestamp: int, username: Optional[str], message: str) -> None:
        """Append one row to the moderation log."""
        ...

    def select_rebuild_posts(self, board_id: str) -> Sequence[Post]:
        """Return every post on a board."""
        ...

    def update_rebuild_post(self, post: RebuildPost) -> bool:
        """Write the rendered columns of a post.

        Returns:
            True if the row was updated, False otherwise.
        """
        ...

    def select_post_with_replies(self, board_id: str, post_id: int) -> Sequence[Post]:
        """Return the post plus all of its replies (empty if not found)."""
        ...

    def select_files_by_md5(self, file_hex: str) -> Sequence[Post]:
        """Return every post referencing the given content hash."""
        ...

    def delete_post(self, board_id: str, post_id: int, cascade: bool) -> bool:
        """Delete a post row.

        Returns:
            True if the row was deleted, False otherwise.
        """
        ...

    def bump_thread(self, board_id: str, parent_id: int) -> bool:
        """Recompute the bump order of a thread."""
        ...

    def delete_reports_by_post_id(self, board_id: str, post_id: int) -> int:
        """Delete all reports for a post.

        Returns:
            Number of reports removed.
        """
        ...

    def toggle_post_locked(self, board_id: str, post_id: int) -> int:
        """Flip the locked flag. Returns the number of posts affected (0 or 1)."""
        ...

    def toggle_post_stickied(self, board_id: str, post_id: int) -> int:
        """Flip the stickied flag. Returns the number of posts affected (0 or 1)."""
        ...

    def insert_import_accounts_tinyib(self, params: ImportParams, table_name: str) -> int:
        """Copy accounts from an external table. Returns rows inserted."""
        ...

    def insert_import_posts_tinyib(self, params: ImportParams, table_name: str, board_id: str) -> int:
        """Copy posts from an external table. Returns rows inserted."""
        ...

    def init_post_auto_increment(self, board_id: str) -> None:
        """Reset the board's post id counter before an import."""
        ...

    def refresh_post_auto_increment(self, board_id: str) -> None:
        """Move the board's post id counter past the highest imported id."""
        ...


class BoardRegistry(Protocol):
    """Protocol defining board configuration lookup."""

    def get_board_cfg(self, board_id: str) -> BoardConfig:
        """Return the board config.

        Raises:
            NotFoundError: If the board does not exist.
        """
        ...

    def has_board(self, board_id: str) -> bool:
        """Return True if the board exists."""
        ...


class PostRenderer(Protocol):
    """Protocol defining the message and nameblock templates."""

    def render_nameblock(
        self,
        name: str,
        tripcode: Optional[str],
        email: str,
        role: int,
        timestamp: int
    ) -> str:
        """Render the name/tripcode/email/role/timestamp block as HTML."""
        ...

    def render_message(self, board_id: str, message: str, truncate: int) -> RenderedMessage:
        """Render a raw message as HTML, truncated after `truncate` line breaks."""
        ...
