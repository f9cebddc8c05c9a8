"""Data models for file mapper.

This module defines the result of path resolution and the ContentUnit that
is threaded through the middleware pipeline.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ResolvedPath:
    """Page title and extension metadata derived from a source file path.

    Attributes:
        target_id: Full page title, e.g. "Gadget:Foo/doc"
        short_extension: Extension from the last dot, e.g. ".wikitext"
        long_extension: Extension from the first dot, e.g. ".doc.wikitext"
        stem: File name without its long extension; empty means the file
              cannot be mapped to a page
    """
    target_id: str
    short_extension: str
    long_extension: str
    stem: str


@dataclass
class ContentUnit:
    """A source file on its way to the wiki.

    Created once per discovered file, mutated by pipeline steps and dropped
    after the run. ``original_path`` and both extensions are fixed at
    creation; the remaining fields may be changed by steps, except that
    ``target_id`` can never be emptied.

    Attributes:
        original_path: Path of the source file
        target_id: Page title the content is written to
        short_extension: Extension from the last dot of the file name
        long_extension: Extension from the first dot of the file name
        content: Page text
        commit_message: Edit summary, defaults to the run-wide comment
        should_persist: False excludes the unit from the write phase
        errors: Failures recorded by pipeline steps, in order
    """
    original_path: str
    target_id: str
    short_extension: str
    long_extension: str
    content: str = ""
    commit_message: str = ""
    should_persist: bool = True
    errors: List[Exception] = field(default_factory=list)

    _FROZEN_FIELDS = ('original_path', 'short_extension', 'long_extension')

    def __setattr__(self, name, value):
        if name in self._FROZEN_FIELDS and name in self.__dict__:
            raise AttributeError(f"ContentUnit.{name} cannot be changed")
        if name == 'target_id' and not value:
            raise ValueError("ContentUnit.target_id must not be empty")
        super().__setattr__(name, value)

    def change(self, **fields) -> 'ContentUnit':
        """Update several mutable fields at once and return the unit.

        Example:
            >>> unit.change(content="-- minified", commit_message="Minify")
        """
        for name, value in fields.items():
            if name not in self.__dataclass_fields__ or name in self._FROZEN_FIELDS + ('errors',):
                raise AttributeError(f"ContentUnit.{name} cannot be changed")
            setattr(self, name, value)
        return self
