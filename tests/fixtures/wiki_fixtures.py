"""Test fixtures for wiki client and scheduler tests.

Provides:
- Builders for MediaWiki action API replies
- Mock HTTP responses for a requests session
- FakeWikiClient, an in-memory stand-in for APIWrapper
- A helper writing source trees to disk
"""

import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import MagicMock

from wikipages.wiki_client.errors import APIError, MissingTargetError
from wikipages.wiki_client.models import Revision


# ==============================================================================
# API replies
# ==============================================================================

def token_reply(kind: str = "login", token: str = "tok+\\") -> Dict[str, Any]:
    return {"batchcomplete": True, "query": {"tokens": {f"{kind}token": token}}}


def login_reply(result: str = "Success", reason: Optional[str] = None) -> Dict[str, Any]:
    login: Dict[str, Any] = {"result": result, "lgusername": "SyncBot"}
    if reason:
        login["reason"] = reason
    return {"login": login}


def revision_reply(
    title: str,
    content: str = "",
    timestamp: str = "2026-01-30T10:00:00Z",
    revid: int = 42,
) -> Dict[str, Any]:
    return {"query": {"pages": [{
        "pageid": 7,
        "ns": 0,
        "title": title,
        "revisions": [{
            "revid": revid,
            "timestamp": timestamp,
            "slots": {"main": {"contentmodel": "wikitext", "content": content}},
        }],
    }]}}


def missing_page_reply(title: str) -> Dict[str, Any]:
    return {"query": {"pages": [{"ns": 0, "title": title, "missing": True}]}}


def edit_reply(title: str, newrevid: int = 43) -> Dict[str, Any]:
    return {"edit": {
        "result": "Success",
        "title": title,
        "newrevid": newrevid,
        "newtimestamp": "2026-01-30T10:05:00Z",
    }}


def error_reply(code: str, info: str = "") -> Dict[str, Any]:
    return {"error": {"code": code, "info": info or code}}


def http_response(payload: Any = None, status_code: int = 200) -> MagicMock:
    """Mock requests.Response returning ``payload`` from .json()."""
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


# ==============================================================================
# In-memory client
# ==============================================================================

class FakeWikiClient:
    """In-memory wiki implementing login/edit/create like APIWrapper.

    Attributes:
        pages: Title -> current content; titles not present do not exist
        edit_errors: Title -> exception raised by edit
        create_errors: Title -> exception raised by create
        login_error: Exception raised by login, if set
        edits: (title, text, summary) for every submitted edit
        creates: (title, text, summary) for every create call
        reviser_results: Title -> what the reviser returned
    """

    def __init__(self, pages: Optional[Dict[str, str]] = None):
        self.pages: Dict[str, str] = dict(pages or {})
        self.edit_errors: Dict[str, Exception] = {}
        self.create_errors: Dict[str, Exception] = {}
        self.login_error: Optional[Exception] = None
        self.login_calls = 0
        self.edits: List[Tuple[str, str, str]] = []
        self.creates: List[Tuple[str, str, str]] = []
        self.reviser_results: Dict[str, Dict[str, str]] = {}
        self._lock = threading.Lock()

    def login(self) -> None:
        self.login_calls += 1
        if self.login_error is not None:
            raise self.login_error

    def edit(self, title: str, reviser) -> Revision:
        if title in self.edit_errors:
            raise self.edit_errors[title]
        with self._lock:
            if title not in self.pages:
                raise MissingTargetError(title)
            current = Revision(title=title, content=self.pages[title], timestamp="t0")
        change = reviser(current)
        with self._lock:
            self.reviser_results[title] = change
            if not change:
                return current
            self.pages[title] = change["text"]
            self.edits.append((title, change["text"], change["summary"]))
        return Revision(title=title, content=change["text"], timestamp="t1")

    def create(self, title: str, text: str, summary: str) -> Revision:
        with self._lock:
            self.creates.append((title, text, summary))
        if title in self.create_errors:
            raise self.create_errors[title]
        with self._lock:
            if title in self.pages:
                raise APIError("articleexists", "The article you tried to create has been created already.", title)
            self.pages[title] = text
        return Revision(title=title, content=text, timestamp="t1")


# ==============================================================================
# Source trees
# ==============================================================================

def write_source_tree(root: Path, files: Dict[str, str]) -> None:
    """Write {relative path: content} below ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
