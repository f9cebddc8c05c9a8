"""Build command: pipe a single source file and show the result.

Nothing is sent to the wiki and no login is needed.
"""

import logging
import os
from typing import Callable, Optional

from wikipages.cli.errors import CLIError, ProjectNotFoundError, SourceFileError
from wikipages.cli.models import ExitCode
from wikipages.cli.output import OutputHandler
from wikipages.file_mapper.errors import FileMapperError, FilesystemError
from wikipages.sync.config_loader import DEFAULT_PROJECT_FILE
from wikipages.sync.errors import ConfigError
from wikipages.sync.scheduler import SyncScheduler

logger = logging.getLogger(__name__)


class BuildCommand:
    """Pipes one file and prints the content that would be written.

    Example:
        >>> exit_code = BuildCommand().run("Main/Widget.lua", out="build/Widget.lua")
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

    def run(self, file: str, out: Optional[str] = None) -> ExitCode:
        """Pipe ``file`` (relative to the source directory).

        Args:
            file: Source file path relative to the source directory
            out: Write the content here instead of printing it

        Returns:
            ExitCode.PAGE_ERRORS if a step failed, otherwise SUCCESS
        """
        output = self.output_handler
        try:
            if not os.path.exists(self.project_path):
                raise ProjectNotFoundError(self.project_path)

            scheduler = self.scheduler_factory(self.project_path)
            file_path = os.path.join(scheduler.config.source_directory, file)
            if not os.path.isfile(file_path):
                raise SourceFileError(file, "not a file in the source directory")

            unit = scheduler.prepare_unit(file_path)
            output.info(f"{unit.original_path} -> {unit.target_id}")

            for error in unit.errors:
                output.error(str(error))

            if not unit.should_persist:
                output.warning(f"{unit.target_id} is excluded; nothing written")
                return ExitCode.PAGE_ERRORS if unit.errors else ExitCode.SUCCESS

            if out:
                _write_output(out, unit.content)
                output.success(f"Wrote {unit.target_id} to {out}")
            else:
                output.print(unit.content)
            return ExitCode.SUCCESS

        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            output.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except (CLIError, FileMapperError) as e:
            logger.error(f"Build failed: {e}")
            output.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during build")
            output.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR


def _write_output(out: str, content: str) -> None:
    directory = os.path.dirname(out)
    try:
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(out, 'w', encoding='utf-8') as f:
            f.write(content)
    except OSError as e:
        raise FilesystemError(out, 'write', str(e))
