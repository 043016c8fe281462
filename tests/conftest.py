"""
Shared Test Fixtures for the Moderation Core

This module provides common fixtures used across all test modules.
Fixtures include an in-memory store, a recording renderer, request
contexts, HTTP response mocks, and data factories for test objects.
"""

import pytest
from unittest.mock import MagicMock, patch
from typing import Optional, Dict, Any, List
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from data.models import Post, RebuildPost, RenderedMessage, ImportParams
from utils.text import truncate_linebreaks


# =============================================================================
# Store Fixtures
# =============================================================================

class InMemoryStore:
    """
    ModerationStore implementation backed by dictionaries.

    Mirrors the contract the real store fulfils: delete_post with
    cascade=True removes replies too, toggles return the number of posts
    affected, and every call is recorded in `calls` for assertions.
    """

    def __init__(self):
        self.posts: Dict[tuple, Post] = {}
        self.reports: Dict[tuple, int] = {}
        self.logs: List[tuple] = []
        self.rebuilt: Dict[tuple, RebuildPost] = {}
        self.failing_updates = set()
        self.failing_deletes = set()
        self.import_rows = {"accounts": 0, "posts": 0}
        self.calls: List[tuple] = []

    def add(self, post: Post) -> Post:
        self.posts[(post.board_id, post.post_id)] = post
        return post

    def add_row(self, row: Dict[str, Any]) -> Post:
        return self.add(Post.from_row(row))

    def insert_log(self, ip, timestamp, username, message):
        self.logs.append((ip, timestamp, username, message))

    def select_rebuild_posts(self, board_id):
        return [p for p in self.posts.values() if p.board_id == board_id]

    def update_rebuild_post(self, post):
        key = (post.board_id, post.post_id)
        if key in self.failing_updates or key not in self.posts:
            return False
        self.rebuilt[key] = post
        return True

    def select_post_with_replies(self, board_id, post_id):
        root = self.posts.get((board_id, post_id))
        if root is None:
            return []
        replies = [p for p in self.posts.values() if p.board_id == board_id and p.parent_id == post_id]
        return [root] + replies

    def select_files_by_md5(self, file_hex):
        return [p for p in self.posts.values() if p.file_hex == file_hex]

    def delete_post(self, board_id, post_id, cascade):
        self.calls.append(("delete_post", board_id, post_id, cascade))
        key = (board_id, post_id)
        if key in self.failing_deletes or key not in self.posts:
            return False
        del self.posts[key]
        if cascade:
            for reply_key in [k for k, p in self.posts.items() if p.board_id == board_id and p.parent_id == post_id]:
                del self.posts[reply_key]
        return True

    def bump_thread(self, board_id, parent_id):
        self.calls.append(("bump_thread", board_id, parent_id))
        return True

    def delete_reports_by_post_id(self, board_id, post_id):
        return self.reports.pop((board_id, post_id), 0)

    def _toggle(self, board_id, post_id, attr):
        post = self.posts.get((board_id, post_id))
        if post is None:
            return 0
        setattr(post, attr, not getattr(post, attr))
        return 1

    def toggle_post_locked(self, board_id, post_id):
        return self._toggle(board_id, post_id, "locked")

    def toggle_post_stickied(self, board_id, post_id):
        return self._toggle(board_id, post_id, "stickied")

    def insert_import_accounts_tinyib(self, params, table_name):
        self.calls.append(("insert_import_accounts_tinyib", table_name))
        return self.import_rows["accounts"]

    def insert_import_posts_tinyib(self, params, table_name, board_id):
        self.calls.append(("insert_import_posts_tinyib", table_name, board_id))
        return self.import_rows["posts"]

    def init_post_auto_increment(self, board_id):
        self.calls.append(("init_post_auto_increment", board_id))

    def refresh_post_auto_increment(self, board_id):
        self.calls.append(("refresh_post_auto_increment", board_id))


@pytest.fixture
def store():
    """
    Provide an empty in-memory store.

    Usage:
        def test_delete(store, post_factory):
            store.add(post_factory(post_id=1))
            # ... test code

    Returns:
        InMemoryStore: A fresh store per test.
    """
    return InMemoryStore()


# =============================================================================
# Renderer and Board Fixtures
# =============================================================================

class RecordingRenderer:
    """PostRenderer that produces simple deterministic HTML and records its inputs."""

    def __init__(self):
        self.nameblocks: List[tuple] = []
        self.messages: List[tuple] = []

    def render_nameblock(self, name, tripcode, email, role, timestamp):
        self.nameblocks.append((name, tripcode, email, role, timestamp))
        trip = f'<span class="trip">!{tripcode}</span>' if tripcode else ''
        return f'<span class="name">{name}</span>{trip} <time>{timestamp}</time>'

    def render_message(self, board_id, message, truncate):
        self.messages.append((board_id, message, truncate))
        rendered, truncated = truncate_linebreaks(message.replace('\n', '<br>'), truncate)
        return RenderedMessage(rendered=rendered, truncated=truncated)


@pytest.fixture
def renderer():
    """Provide a recording renderer."""
    return RecordingRenderer()


@pytest.fixture
def boards():
    """
    Provide a settings-style board registry with two boards.

    Returns:
        SettingsBoardRegistry: Registry for /b/ and /tech/.
    """
    from services.board_service import SettingsBoardRegistry

    return SettingsBoardRegistry({
        "b": {"anonymous": "Anonymous", "truncate": 2},
        "tech": {"anonymous": "Nameless", "truncate": 15, "name": "Technology"},
    })


# =============================================================================
# Request Context Fixtures
# =============================================================================

@pytest.fixture
def audit(store):
    """Provide a ModerationLog with a fixed clock writing to the store."""
    from services.audit_service import ModerationLog

    return ModerationLog(store, clock=lambda: 1700000000)


@pytest.fixture
def ctx(audit):
    """
    Provide a request context for a logged-in admin.

    Returns:
        RequestContext: Context with ip 203.0.113.7 and username 'admin'.
    """
    from services.context import RequestContext

    return RequestContext(
        ip="203.0.113.7",
        session={"mb_username": "admin", "mb_role": 1},
        audit=audit
    )


@pytest.fixture
def anonymous_ctx(audit):
    """Provide a request context with an empty session."""
    from services.context import RequestContext

    return RequestContext(ip="198.51.100.2", session={}, audit=audit)


# =============================================================================
# Logging Fixtures
# =============================================================================

@pytest.fixture
def capture_logs():
    """
    Capture log messages for assertion in tests.

    Returns:
        list: A list that will contain captured log records.
    """
    import logging

    class LogCapture(logging.Handler):
        def __init__(self):
            super().__init__()
            self.records = []

        def emit(self, record):
            self.records.append(record)

    handler = LogCapture()
    handler.setLevel(logging.DEBUG)

    app_logger = logging.getLogger("moderation")
    app_logger.addHandler(handler)

    yield handler.records

    app_logger.removeHandler(handler)


# =============================================================================
# HTTP Response Fixtures
# =============================================================================

@pytest.fixture
def mock_http_response():
    """
    Factory fixture for creating mock HTTP responses.

    Usage:
        def test_http_request(mock_http_response):
            response = mock_http_response(json_data={'success': True})
            # ... test code

    Returns:
        callable: A factory function for creating mock responses.
    """
    def _create_response(
        status_code: int = 200,
        text: str = '',
        json_data: Optional[Dict[str, Any]] = None,
    ) -> MagicMock:
        import json

        mock_response = MagicMock()
        mock_response.status_code = status_code
        mock_response.ok = 200 <= status_code < 300

        if text:
            mock_response.text = text
        elif json_data is not None:
            mock_response.text = json.dumps(json_data)
        else:
            mock_response.text = ''

        if json_data is not None:
            mock_response.json.return_value = json_data
        else:
            mock_response.json.side_effect = ValueError("No JSON data")

        return mock_response

    return _create_response


@pytest.fixture
def mock_requests(mock_http_response):
    """
    Mock the requests library for HTTP testing.

    Returns:
        MagicMock: A mock requests module with response factory attached.
    """
    with patch('requests.get') as mock_get, \
         patch('requests.post') as mock_post:

        mock_req = MagicMock()
        mock_req.get = mock_get
        mock_req.post = mock_post
        mock_req.response = mock_http_response

        yield mock_req


# =============================================================================
# Data Model Factories
# =============================================================================

@pytest.fixture
def post_factory():
    """
    Factory fixture for creating Post test objects.

    Usage:
        def test_post(post_factory):
            post = post_factory(post_id=2, parent_id=1)

    Returns:
        callable: A factory function for creating Post objects.
    """
    def _create_post(
        board_id: str = "b",
        post_id: int = 1,
        parent_id: int = 0,
        **kwargs
    ) -> Post:
        defaults = dict(
            name="",
            email="",
            message="Test message",
            timestamp=1690000000,
        )
        defaults.update(kwargs)
        return Post(board_id=board_id, post_id=post_id, parent_id=parent_id, **defaults)

    return _create_post


@pytest.fixture
def import_params_factory():
    """Factory fixture for creating ImportParams test objects."""
    def _create_params(table_type: str = "tinyib_posts", board_id: str = "b", **kwargs) -> ImportParams:
        defaults = dict(
            db_name="tinyib",
            db_user="tinyib",
            db_pass="secret",
            table_name="b_posts",
        )
        defaults.update(kwargs)
        return ImportParams(table_type=table_type, board_id=board_id, **defaults)

    return _create_params
