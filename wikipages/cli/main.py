"""Main CLI entry point for the wikipages command.

This module provides the Typer application with the run, build and check
commands.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import typer

from wikipages import __version__
from wikipages.cli.build_command import BuildCommand
from wikipages.cli.check_command import CheckCommand
from wikipages.cli.models import ExitCode
from wikipages.cli.output import OutputHandler
from wikipages.cli.run_command import RunCommand
from wikipages.sync.config_loader import DEFAULT_PROJECT_FILE

app = typer.Typer(
    name="wikipages",
    help="""Push a directory of source files to a MediaWiki wiki.

QUICK START:
  wikipages run                       # Write changed pages
  wikipages check                     # Run the pipeline, write nothing
  wikipages build Main/Widget.lua     # Show what one file becomes""",
    add_completion=False,
    rich_markup_mode=None,
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)

GETTING_STARTED_MESSAGE = f"""wikipages run                        # Write changed pages to the wiki
wikipages check [FILE]               # Run the pipeline, report step errors
wikipages build FILE [--out PATH]    # Print what one file becomes
wikipages --help                     # Show all options

Projects are described by {DEFAULT_PROJECT_FILE} in the current directory.
Required environment variables (or a .env file):
  WIKIPAGES_API_URL     - api.php URL of the wiki
  WIKIPAGES_USERNAME    - Bot username (User@BotName)
  WIKIPAGES_PASSWORD    - Bot password"""


def _configure_logging(verbosity: int, logdir: Optional[str] = None) -> None:
    """Configure logging based on verbosity level.

    Configures only the 'wikipages' namespace logger to avoid affecting
    third-party libraries. The root logger is left unchanged.

    Args:
        verbosity: Verbosity level (0=WARNING, 1=INFO, 2=DEBUG)
        logdir: Optional directory for log files (creates timestamped log file)
    """
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    app_logger = logging.getLogger("wikipages")
    app_logger.setLevel(level)
    app_logger.handlers.clear()

    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter("%(asctime)s [%(levelname)8s] %(message)s", datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    app_logger.addHandler(console_handler)

    if logdir:
        log_path = Path(logdir)
        log_path.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = log_path / f"wikipages_{timestamp}.log"

        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s", datefmt=date_format
        )
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(file_formatter)
        app_logger.addHandler(file_handler)

        logger.info(f"Logging to file: {log_file}")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"wikipages version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """Push a directory of source files to a MediaWiki wiki."""
    if ctx.invoked_subcommand is None:
        typer.echo(GETTING_STARTED_MESSAGE)
        raise typer.Exit()


@app.command("run")
def run_command(
    project: str = typer.Option(
        DEFAULT_PROJECT_FILE,
        "--project",
        "-p",
        help="Project file",
        metavar="FILE",
    ),
    comment: Optional[str] = typer.Option(
        None,
        "--comment",
        "-m",
        help="Edit summary (overrides default_comment)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only print errors and the summary",
    ),
    logdir: Optional[str] = typer.Option(
        None,
        "--logdir",
        help="Directory for log files (creates timestamped log file)",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Write every changed source file to the wiki."""
    _configure_logging(verbosity, logdir)
    output = OutputHandler(verbosity=verbosity, no_color=no_color, quiet=quiet)
    exit_code = RunCommand(project_path=project, output_handler=output).run(comment)
    raise typer.Exit(exit_code)


@app.command("build")
def build_command(
    file: str = typer.Argument(
        ...,
        help="Source file, relative to the source directory",
    ),
    project: str = typer.Option(
        DEFAULT_PROJECT_FILE,
        "--project",
        "-p",
        help="Project file",
        metavar="FILE",
    ),
    out: Optional[str] = typer.Option(
        None,
        "--out",
        "-o",
        help="Write the result to this path instead of printing it",
        metavar="PATH",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only print errors and the result",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Run the pipeline on one file and print the resulting page content."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color, quiet=quiet)
    exit_code = BuildCommand(project_path=project, output_handler=output).run(file, out)
    raise typer.Exit(exit_code)


@app.command("check")
def check_command(
    file: Optional[str] = typer.Argument(
        None,
        help="Source file to check, relative to the source directory (default: all)",
    ),
    project: str = typer.Option(
        DEFAULT_PROJECT_FILE,
        "--project",
        "-p",
        help="Project file",
        metavar="FILE",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Only print errors and the summary",
    ),
    verbosity: int = typer.Option(
        0,
        "--verbosity",
        "-v",
        help="Verbosity level: 0=summary, 1=info, 2=debug",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """Run the pipeline on one or all files and report step errors."""
    _configure_logging(verbosity)
    output = OutputHandler(verbosity=verbosity, no_color=no_color, quiet=quiet)
    exit_code = CheckCommand(project_path=project, output_handler=output).run(file)
    if exit_code == ExitCode.PAGE_ERRORS:
        logger.warning("Some files failed the pipeline")
    raise typer.Exit(exit_code)


def main() -> None:
    """Main entry point for the CLI application."""
    app()


# Allow running as: python -m wikipages.cli.main
if __name__ == "__main__":
    main()
