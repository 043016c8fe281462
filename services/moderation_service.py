"""
Moderation Service Module

This module executes the bulk moderation actions staff can run: import,
rebuild, delete, approve, toggle lock and toggle sticky. Each action writes
an audit entry before and after it runs and returns a human-readable status.

Per-item failures (a missing post, a failed update, a file that cannot be
unlinked) never abort a batch; they are collected as warnings and appended
to the status.
"""

import os
from typing import Callable, Iterable, List, Optional, Union
from urllib.parse import quote

from config import settings
from data.models import ImportTableType, Post, RebuildPost
from data.operations import ImportRequest, RebuildRequest, SelectionRequest
from data.protocols import ModerationStore, BoardRegistry, PostRenderer
from services.context import RequestContext
from utils.helpers import strip_html_tags
from utils.logger import get_logger
from utils.text import clean_field, decode_special_chars

logger = get_logger(__name__)

Selection = Union[SelectionRequest, Iterable[str]]


def format_status(status: str, warnings: List[str]) -> str:
    """Append collected warnings to a status line."""
    if not warnings:
        return status
    return status + "<br>Warnings:<br>- " + "<br>  - ".join(warnings)


def _as_selection(selection: Selection) -> SelectionRequest:
    if isinstance(selection, SelectionRequest):
        return selection
    return SelectionRequest.from_tokens(selection)


class ModerationService:
    """Bulk moderation actions over posts in the store."""

    def __init__(
        self,
        store: ModerationStore,
        boards: BoardRegistry,
        renderer: PostRenderer,
        upload_root: Optional[str] = None,
        static_thumb_marker: Optional[str] = None
    ):
        """
        Initialize the moderation service.

        Args:
            store: The relational store.
            boards: Board configuration registry.
            renderer: Message and nameblock renderer used by rebuild.
            upload_root: Directory stored file paths are relative to.
            static_thumb_marker: Substring identifying built-in thumbnails.
        """
        self.store = store
        self.boards = boards
        self.renderer = renderer
        self.upload_root = upload_root or settings.UPLOAD_ROOT
        self.static_thumb_marker = static_thumb_marker or settings.STATIC_THUMB_MARKER

    def _finish(self, ctx: RequestContext, status: str, warnings: List[str]) -> str:
        for warning in warnings:
            logger.warning(warning)
        status = format_status(status, warnings)
        ctx.log(status)
        return status

    # =========================================================================
    # Import
    # =========================================================================

    def import_data(self, ctx: RequestContext, request: ImportRequest) -> str:
        """
        Import accounts or posts from an external database table.

        Post imports reset the board's post id counter first and move it
        past the imported ids afterwards.
        """
        params = request.params
        ctx.log(
            f"Executed import, source db: {params.db_name}, "
            f"source table: {params.table_name}, target board: {params.board_id}"
        )

        inserted = 0
        warnings = []

        try:
            table_type = ImportTableType(params.table_type)
        except ValueError:
            table_type = None
            warnings.append(f"Unsupported table_type '{params.table_type}'")

        try:
            if table_type is ImportTableType.TINYIB_ACCOUNTS:
                inserted = self.store.insert_import_accounts_tinyib(params, params.table_name)
            elif table_type is ImportTableType.TINYIB_POSTS:
                if not self.boards.has_board(params.board_id):
                    warnings.append(f"Target BOARD id '{params.board_id}' not found")
                else:
                    self.store.init_post_auto_increment(params.board_id)
                    try:
                        inserted = self.store.insert_import_posts_tinyib(
                            params, params.table_name, params.board_id
                        )
                    finally:
                        self.store.refresh_post_auto_increment(params.board_id)
        except Exception as e:
            logger.error(f"Import from {params.db_name}.{params.table_name} failed: {e}")
            warnings.append(f"Import failed: {e}")

        return self._finish(ctx, f"Imported {inserted} rows", warnings)

    # =========================================================================
    # Rebuild
    # =========================================================================

    def _rebuild_post(self, post: Post, board_id: str, anonymous: str, truncate: int) -> RebuildPost:
        name = post.name if post.name != '' else anonymous
        email = post.email
        message = post.message

        # imported rows carry raw, possibly double-escaped HTML
        if post.imported:
            name = clean_field(name)
            email = clean_field(email)
            message = strip_html_tags(message)
            message = decode_special_chars(message)

        nameblock = self.renderer.render_nameblock(name, post.tripcode, email, post.role, post.timestamp)
        rendered = self.renderer.render_message(board_id, message, truncate)

        file_rendered = quote(post.file, safe='') if post.embed else post.file

        return RebuildPost(
            board_id=post.board_id,
            post_id=post.post_id,
            message_rendered=rendered.rendered,
            message_truncated=rendered.truncated,
            nameblock=nameblock,
            file_rendered=file_rendered,
        )

    def rebuild(self, ctx: RequestContext, request: RebuildRequest) -> str:
        """
        Re-render the message and nameblock of every post on a board.

        Raises:
            NotFoundError: If the board does not exist.
        """
        ctx.log(f"Executed rebuild, target board: {request.board_id}")

        board_cfg = self.boards.get_board_cfg(request.board_id)
        posts = self.store.select_rebuild_posts(request.board_id)

        processed = 0
        total = len(posts)
        warnings = []
        for post in posts:
            try:
                rebuilt = self._rebuild_post(post, request.board_id, board_cfg.anonymous, board_cfg.truncate)
                updated = self.store.update_rebuild_post(rebuilt)
            except Exception as e:
                logger.error(f"Error rebuilding post /{post.ref}/: {e}")
                updated = False

            if not updated:
                warnings.append(f"Failed to rebuild post /{post.ref}/")
                continue

            processed += 1

        return self._finish(ctx, f"Rebuilt {processed}/{total} posts", warnings)

    # =========================================================================
    # Delete
    # =========================================================================

    def _stored_path(self, path: str) -> str:
        return os.path.join(self.upload_root, path.lstrip('/'))

    def _unlink(self, path: str, what: str, post: Post, warnings: List[str]) -> None:
        try:
            os.unlink(self._stored_path(path))
        except OSError as e:
            logger.debug(f"unlink {path}: {e}")
            warnings.append(
                f"Failed to delete {what} for post /{post.ref}/ (maybe it didn't exist?)"
            )

    def _delete_post(self, post: Post, warnings: List[str]) -> bool:
        static_thumb = self.static_thumb_marker in post.thumb

        try:
            references = len(self.store.select_files_by_md5(post.file_hex))
        except Exception as e:
            logger.error(f"Error counting references to {post.file_hex!r}: {e}")
            references = None
            if post.file or post.thumb:
                warnings.append(f"Failed to count file references for post /{post.ref}/, file kept")

        # only the last post referencing a file may remove it from disk
        if references == 1:
            if not post.embed and post.file:
                self._unlink(post.file, "file", post, warnings)

            if not static_thumb and post.thumb:
                self._unlink(post.thumb, "thumbnail", post, warnings)

        try:
            deleted = self.store.delete_post(post.board_id, post.post_id, True)
        except Exception as e:
            logger.error(f"Error deleting post /{post.ref}/: {e}")
            deleted = False

        if not deleted:
            warnings.append(f"Failed to delete post /{post.ref}/ from db")
            return False

        if post.is_reply:
            try:
                self.store.bump_thread(post.board_id, post.parent_id)
            except Exception as e:
                logger.error(f"Error debumping thread /{post.board_id}/{post.parent_id}/: {e}")
                warnings.append(f"Failed to debump thread /{post.board_id}/{post.parent_id}/")

        return True

    def delete(self, ctx: RequestContext, selection: Selection) -> str:
        """
        Delete the selected posts and all of their replies.

        Stored files are unlinked only when no other post references the
        same content hash; built-in thumbnails are never unlinked.
        """
        selection = _as_selection(selection)
        ctx.log('Executed delete, target posts: ' + ', '.join(selection.tokens))

        processed = 0
        total = 0
        warnings = []
        for ref in selection.refs:
            try:
                posts = self.store.select_post_with_replies(ref.board_id, ref.post_id)
            except Exception as e:
                logger.error(f"Error selecting post /{ref}/: {e}")
                warnings.append(f"Failed to select post /{ref}/")
                continue

            total += len(posts)

            # replies before their thread root, the root delete cascades
            for post in sorted(posts, key=lambda p: not p.is_reply):
                if self._delete_post(post, warnings):
                    processed += 1

        return self._finish(ctx, f"Deleted {processed}/{total} posts", warnings)

    # =========================================================================
    # Approve / Toggle
    # =========================================================================

    def _for_each_selected(
        self,
        ctx: RequestContext,
        action: str,
        selection: Selection,
        apply: Callable[[str, int], int],
        status: str
    ) -> str:
        selection = _as_selection(selection)
        ctx.log(f"Executed {action}, target posts: " + ', '.join(selection.tokens))

        processed = 0
        warnings = []
        for ref in selection.refs:
            try:
                processed += apply(ref.board_id, ref.post_id)
            except Exception as e:
                logger.error(f"Error during {action} of /{ref}/: {e}")
                warnings.append(f"Failed to {action} post /{ref}/")

        return self._finish(ctx, status.format(processed), warnings)

    def approve(self, ctx: RequestContext, selection: Selection) -> str:
        """Delete every report filed against the selected posts."""
        return self._for_each_selected(
            ctx, 'approve', selection, self.store.delete_reports_by_post_id, "Approved {} reports"
        )

    def toggle_lock(self, ctx: RequestContext, selection: Selection) -> str:
        """Lock or unlock the selected posts."""
        return self._for_each_selected(
            ctx, 'toggle_lock', selection, self.store.toggle_post_locked, "Toggled lock state for {} posts"
        )

    def toggle_sticky(self, ctx: RequestContext, selection: Selection) -> str:
        """Sticky or unsticky the selected posts."""
        return self._for_each_selected(
            ctx, 'toggle_sticky', selection, self.store.toggle_post_stickied, "Toggled sticky state for {} posts"
        )
