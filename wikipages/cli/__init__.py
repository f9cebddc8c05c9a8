"""Command-line interface for wikipages.

This package provides the `wikipages` CLI tool: `run` writes changed pages
to the wiki, `check` and `build` run the pipeline locally without writing.
"""

from .run_command import RunCommand
from .build_command import BuildCommand
from .check_command import CheckCommand
from .models import ExitCode, CheckSummary
from .errors import CLIError, ProjectNotFoundError, SourceFileError

__all__ = [
    'RunCommand',
    'BuildCommand',
    'CheckCommand',
    'ExitCode',
    'CheckSummary',
    'CLIError',
    'ProjectNotFoundError',
    'SourceFileError',
]
