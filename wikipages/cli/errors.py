"""Typed exception hierarchy for CLI-related errors.

All exceptions inherit from CLIError so commands can catch them in one place.
"""

from wikipages.wiki_client.errors import SyncError


class CLIError(SyncError):
    """Base exception for all CLI-related errors."""
    pass


class ProjectNotFoundError(CLIError):
    """Raised when the project file is not found."""

    def __init__(self, project_path: str):
        super().__init__(
            f"Project file not found at {project_path}"
        )
        self.project_path = project_path


class SourceFileError(CLIError):
    """Raised when a single-file command is given a path it cannot use."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(f"Cannot use {file_path}: {reason}")
        self.file_path = file_path
        self.reason = reason
