"""Unit tests for main CLI entry point (main.py).

Tests the Typer CLI application using CliRunner.
"""

import logging

from unittest.mock import MagicMock, patch
from typer.testing import CliRunner

from wikipages import __version__
from wikipages.cli.main import app, _configure_logging, GETTING_STARTED_MESSAGE
from wikipages.cli.models import ExitCode


runner = CliRunner()


class TestConfigureLogging:
    """Test cases for _configure_logging function."""

    def test_verbosity_0_sets_warning_level(self):
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(0)

            mock_logger.setLevel.assert_called_with(logging.WARNING)

    def test_verbosity_1_sets_info_level(self):
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(1)

            mock_logger.setLevel.assert_called_with(logging.INFO)

    def test_verbosity_2_sets_debug_level(self):
        with patch('logging.getLogger') as mock_get_logger:
            mock_logger = MagicMock()
            mock_get_logger.return_value = mock_logger

            _configure_logging(2)

            mock_logger.setLevel.assert_called_with(logging.DEBUG)

    def test_configures_only_package_logger(self):
        _configure_logging(1)

        assert logging.getLogger("wikipages").level == logging.INFO
        assert len(logging.getLogger("wikipages").handlers) == 1

    def test_logdir_adds_file_handler(self, tmp_path):
        logdir = tmp_path / "logs"

        _configure_logging(1, str(logdir))

        handlers = logging.getLogger("wikipages").handlers
        assert len(handlers) == 2
        assert any(path.name.startswith("wikipages_") for path in logdir.iterdir())


class TestTopLevel:
    """Test cases for the application without a command."""

    def test_no_command_prints_getting_started(self):
        result = runner.invoke(app, [])

        assert result.exit_code == 0
        assert GETTING_STARTED_MESSAGE in result.output

    def test_version(self):
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"wikipages version {__version__}" in result.output


class TestCommands:
    """Test cases for run, build and check wiring."""

    @patch('wikipages.cli.main.RunCommand')
    def test_run_passes_options(self, mock_run_cmd):
        mock_run_cmd.return_value.run.return_value = ExitCode.SUCCESS

        result = runner.invoke(app, ["run", "--project", "site.yaml", "--comment", "Sync from CI", "--quiet"])

        assert result.exit_code == ExitCode.SUCCESS
        _, kwargs = mock_run_cmd.call_args
        assert kwargs["project_path"] == "site.yaml"
        assert kwargs["output_handler"].quiet is True
        mock_run_cmd.return_value.run.assert_called_once_with("Sync from CI")

    @patch('wikipages.cli.main.RunCommand')
    def test_run_exit_code_is_propagated(self, mock_run_cmd):
        mock_run_cmd.return_value.run.return_value = ExitCode.PAGE_ERRORS

        result = runner.invoke(app, ["run"])

        assert result.exit_code == ExitCode.PAGE_ERRORS

    @patch('wikipages.cli.main.RunCommand')
    def test_run_default_project(self, mock_run_cmd):
        mock_run_cmd.return_value.run.return_value = ExitCode.SUCCESS

        runner.invoke(app, ["run"])

        assert mock_run_cmd.call_args.kwargs["project_path"] == "wikipages.yaml"
        mock_run_cmd.return_value.run.assert_called_once_with(None)

    @patch('wikipages.cli.main.BuildCommand')
    def test_build_requires_file(self, mock_build_cmd):
        result = runner.invoke(app, ["build"])

        assert result.exit_code != 0
        mock_build_cmd.assert_not_called()

    @patch('wikipages.cli.main.BuildCommand')
    def test_build_passes_file_and_out(self, mock_build_cmd):
        mock_build_cmd.return_value.run.return_value = ExitCode.SUCCESS

        result = runner.invoke(app, ["build", "Main/Widget.lua", "--out", "build/Widget.lua"])

        assert result.exit_code == ExitCode.SUCCESS
        mock_build_cmd.return_value.run.assert_called_once_with("Main/Widget.lua", "build/Widget.lua")

    @patch('wikipages.cli.main.CheckCommand')
    def test_check_all_files(self, mock_check_cmd):
        mock_check_cmd.return_value.run.return_value = ExitCode.PAGE_ERRORS

        result = runner.invoke(app, ["check"])

        assert result.exit_code == ExitCode.PAGE_ERRORS
        mock_check_cmd.return_value.run.assert_called_once_with(None)
