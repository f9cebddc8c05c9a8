"""Typed exception hierarchy for middleware pipeline errors."""

from typing import Optional

from wikipages.wiki_client.errors import SyncError


class PipelineError(SyncError):
    """Base exception for all pipeline errors."""
    pass


class PipelineStepError(PipelineError):
    """Recorded on a ContentUnit when one of its pipeline steps fails.

    The original exception is kept as ``cause`` (and ``__cause__``).
    """

    def __init__(self, step_name: str, target_id: str, cause: Optional[BaseException] = None):
        message = f"Step '{step_name}' failed for {target_id}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
        self.step_name = step_name
        self.target_id = target_id
        self.cause = cause
        self.__cause__ = cause
