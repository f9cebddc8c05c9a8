"""Test fixtures for wikipages tests.

This module provides:
- MediaWiki action API reply builders and mock HTTP responses
- FakeWikiClient, an in-memory wiki for scheduler and CLI tests
- A helper writing source trees to disk
"""

from .wiki_fixtures import (
    FakeWikiClient,
    edit_reply,
    error_reply,
    http_response,
    login_reply,
    missing_page_reply,
    revision_reply,
    token_reply,
    write_source_tree,
)

__all__ = [
    "FakeWikiClient",
    "edit_reply",
    "error_reply",
    "http_response",
    "login_reply",
    "missing_page_reply",
    "revision_reply",
    "token_reply",
    "write_source_tree",
]
