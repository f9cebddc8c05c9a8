"""Run command orchestration for CLI.

RunCommand loads the project file, logs in, pushes every changed source
file through the scheduler and reports the outcome.
"""

import logging
import os
from typing import Callable, List, Optional

from wikipages.cli.errors import CLIError, ProjectNotFoundError
from wikipages.cli.models import ExitCode
from wikipages.cli.output import OutputHandler
from wikipages.file_mapper.errors import FileMapperError
from wikipages.sync.config_loader import DEFAULT_PROJECT_FILE
from wikipages.sync.errors import ConfigError, SchedulerError
from wikipages.sync.events import CreateError, EditError, MiddlewareError
from wikipages.sync.scheduler import SyncScheduler
from wikipages.wiki_client.errors import (
    APIAccessError,
    APIUnreachableError,
    AuthenticationError,
    InvalidCredentialsError,
)

logger = logging.getLogger(__name__)


class RunCommand:
    """Orchestrates a complete run for the CLI.

    The run workflow:
        1. Load the project file into a scheduler
        2. Subscribe to per-page error notifications
        3. Log in and run
        4. Print the summary and return an exit code

    Example:
        >>> output = OutputHandler(verbosity=1)
        >>> exit_code = RunCommand(output_handler=output).run("Sync from CI")
        >>> sys.exit(exit_code)
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
        self.page_errors: List[str] = []

    def run(self, commit_message: Optional[str] = None) -> ExitCode:
        """Execute a run.

        Args:
            commit_message: Edit summary overriding the project default

        Returns:
            ExitCode indicating success or specific failure type
        """
        output = self.output_handler
        try:
            if not os.path.exists(self.project_path):
                raise ProjectNotFoundError(self.project_path)

            logger.info(f"Loading project from {self.project_path}")
            scheduler = self.scheduler_factory(self.project_path)
            self._subscribe(scheduler)

            with output.spinner("Logging in..."):
                scheduler.login()
            output.info(f"Logged in to {scheduler.config.credentials.get('api_url', 'wiki')}")

            with output.spinner("Writing pages..."):
                result = scheduler.run(commit_message)

            output.print_run_summary(result)

            if result.failed or self.page_errors:
                return ExitCode.PAGE_ERRORS
            return ExitCode.SUCCESS

        except (InvalidCredentialsError, AuthenticationError) as e:
            logger.error(f"Authentication failed: {e}")
            output.error(f"Authentication failed: {e}")
            output.info(
                "Check WIKIPAGES_API_URL, WIKIPAGES_USERNAME and WIKIPAGES_PASSWORD"
            )
            return ExitCode.AUTH_ERROR

        except (APIUnreachableError, APIAccessError) as e:
            logger.error(f"API error: {e}")
            output.error(f"API error: {e}")
            output.info("Check your internet connection and try again")
            return ExitCode.NETWORK_ERROR

        except ConfigError as e:
            logger.error(f"Configuration error: {e}")
            output.error(f"Configuration error: {e}")
            return ExitCode.GENERAL_ERROR

        except (CLIError, SchedulerError, FileMapperError) as e:
            logger.error(f"Run failed: {e}")
            output.error(f"Error: {e}")
            return ExitCode.GENERAL_ERROR

        except Exception as e:
            logger.exception("Unexpected error during run")
            output.error(f"Unexpected error: {e}")
            return ExitCode.GENERAL_ERROR

    def _subscribe(self, scheduler: SyncScheduler) -> None:
        output = self.output_handler

        def on_middleware_error(event: MiddlewareError) -> None:
            self.page_errors.append(event.unit.target_id)
            output.warning(f"{event.unit.original_path}: {event.error}")

        def on_write_error(event) -> None:
            output.warning(str(event.error))

        scheduler.events.subscribe(MiddlewareError, on_middleware_error)
        scheduler.events.subscribe(EditError, on_write_error)
        scheduler.events.subscribe(CreateError, on_write_error)
