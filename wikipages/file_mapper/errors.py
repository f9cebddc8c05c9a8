"""Typed exception hierarchy for file mapper errors.

All exceptions inherit from FileMapperError and carry the offending path so
callers can report which source file was affected.
"""

from typing import Optional

from wikipages.wiki_client.errors import SyncError


class FileMapperError(SyncError):
    """Base exception for all file mapper errors."""
    pass


class FilesystemError(FileMapperError):
    """Raised when filesystem operations fail (read, write, permissions, etc)."""

    def __init__(self, file_path: str, operation: str, reason: Optional[str] = None):
        message = f"Filesystem operation '{operation}' failed for {file_path}"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.file_path = file_path
        self.operation = operation
        self.reason = reason


class PathResolutionError(FileMapperError):
    """Raised when a source file cannot be mapped to a page title."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(f"Cannot resolve page title for {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason
