"""Data models for the wiki client."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Revision:
    """The latest revision of a wiki page.

    Attributes:
        title: Full page title including namespace prefix
        content: Wikitext of the main slot ("" for a new page)
        timestamp: Revision timestamp, used as ``basetimestamp`` on edit
        revid: Revision id (None when unknown, e.g. for no-op edits)
    """
    title: str
    content: str = ""
    timestamp: Optional[str] = None
    revid: Optional[int] = None
