"""Check command: pipe one or all source files and report step failures.

Nothing is sent to the wiki and no login is needed.
"""

import logging
import os
from typing import Callable, List, Optional

from wikipages.cli.errors import CLIError, ProjectNotFoundError, SourceFileError
from wikipages.cli.models import CheckSummary, ExitCode
from wikipages.cli.output import OutputHandler
from wikipages.file_mapper.errors import (
    FileMapperError,
    FilesystemError,
    PathResolutionError,
)
from wikipages.file_mapper.file_lister import list_files
from wikipages.sync.config_loader import DEFAULT_PROJECT_FILE
from wikipages.sync.errors import ConfigError
from wikipages.sync.scheduler import SyncScheduler

logger = logging.getLogger(__name__)


class CheckCommand:
    """Runs the pipeline over source files without writing anything.

    Example:
        >>> exit_code = CheckCommand().run()
    """

    def __init__(
        self,
        project_path: str = DEFAULT_PROJECT_FILE,
        output_handler: Optional[OutputHandler] = None,
        scheduler_factory: Callable[[str], SyncScheduler] = SyncScheduler.from_file,
    ):
        self.project_path = project_path
        self.output_handler = output_handler or OutputHandler()
        self.scheduler_factory = scheduler_factory

    def run(self, file: Optional[str] = None) -> ExitCode:
        """Pipe ``file`` (relative to the source directory), or every file.

        Returns:
            ExitCode.PAGE_ERRORS if any file had errors, otherwise SUCCESS
        """
        output = self.output_handler
        try:
            if not os.path.exists(self.project_path):
                raise ProjectNotFoundError(self.project_path)

            scheduler = self.scheduler_factory(self.project_path)
            source_directory = scheduler.config.source_directory

            if file is not None:
                file_path = os.path.join(source_directory, file)
                if not os.path.isfile(file_path):
                    raise SourceFileError(file, "not a file in the source directory")
                files = [file_path]
            else:
                files = list_files(source_directory)

            summary = self.check(scheduler, files)
            output.print_check_summary(summary)
            return ExitCode.PAGE_ERRORS if summary.failed else ExitCode.SUCCESS

        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            output.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except (CLIError, FileMapperError) as e:
            logger.error(f"Check failed: {e}")
            output.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during check")
            output.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def check(self, scheduler: SyncScheduler, files: List[str]) -> CheckSummary:
        """Pipe each file and collect the error messages per file."""
        summary = CheckSummary()
        for file_path in files:
            summary.checked += 1
            try:
                unit = scheduler.prepare_unit(file_path)
            except (PathResolutionError, FilesystemError) as e:
                summary.failures[file_path] = [str(e)]
                continue

            if unit.errors:
                summary.failures[file_path] = [str(error) for error in unit.errors]
            else:
                self.output_handler.debug(f"{file_path}: ok")
        return summary
