"""Typed exception hierarchy for the sync scheduler and its configuration.

This module defines the run-level errors: misuse of the scheduler state
machine, configuration problems and per-page write failures.
"""

from typing import Optional

from wikipages.wiki_client.errors import SyncError


class SchedulerError(SyncError):
    """Base exception for all scheduler errors."""
    pass


class ConfigurationError(SchedulerError):
    """Raised when the configuration is amended while a run is in progress."""

    def __init__(self, message: str = "Configuration cannot be changed while a run is in progress"):
        super().__init__(message)


class NotReadyError(SchedulerError):
    """Raised when a run is requested before login or during another run."""

    def __init__(self, state: str):
        super().__init__(
            f"Could not start because the scheduler is {state}; it must be ready"
        )
        self.state = state


class SourceMissingError(SchedulerError):
    """Raised when the source directory does not exist."""

    def __init__(self, source_directory: str):
        super().__init__(
            f"Could not start because source directory {source_directory} doesn't exist"
        )
        self.source_directory = source_directory


class RemoteWriteError(SchedulerError):
    """Reported when writing one page fails; the page is retried next run."""

    def __init__(self, target_id: str, operation: str, cause: Optional[BaseException] = None):
        message = f"{operation} failed for {target_id}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.target_id = target_id
        self.operation = operation
        self.cause = cause
        self.code = getattr(cause, 'code', None)
        self.__cause__ = cause


class ConfigError(SchedulerError):
    """Raised when the project file is invalid."""

    def __init__(self, message: str, config_field: Optional[str] = None):
        if config_field:
            full_message = f"Configuration error in field '{config_field}': {message}"
        else:
            full_message = f"Configuration error: {message}"
        super().__init__(full_message)
        self.config_field = config_field
        self.original_message = message
