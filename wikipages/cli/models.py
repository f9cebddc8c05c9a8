"""Data models for CLI operations."""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    - SUCCESS (0): Operation completed successfully
    - GENERAL_ERROR (1): General error (project file issues, misuse)
    - AUTH_ERROR (3): Authentication failure or missing credentials
    - NETWORK_ERROR (4): Wiki API unreachable or failing
    - PAGE_ERRORS (5): Completed, but some pages had errors

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    AUTH_ERROR = 3
    NETWORK_ERROR = 4
    PAGE_ERRORS = 5


@dataclass
class CheckSummary:
    """Result of piping source files without writing them.

    Attributes:
        checked: Number of files piped
        failures: Original path -> error messages, for files with errors

    Example:
        >>> summary = CheckSummary(checked=3, failures={"src/Main/A.lua": ["boom"]})
        >>> summary.succeeded
        2
    """
    checked: int = 0
    failures: Dict[str, List[str]] = field(default_factory=dict)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def succeeded(self) -> int:
        return self.checked - self.failed
