"""Unit tests for cli.run_command module."""

import pytest
from unittest.mock import MagicMock

from wikipages.cli.models import ExitCode
from wikipages.cli.output import OutputHandler
from wikipages.cli.run_command import RunCommand
from wikipages.sync.scheduler import SyncScheduler
from wikipages.wiki_client.errors import (
    APIError,
    APIUnreachableError,
    AuthenticationError,
    InvalidCredentialsError,
)


@pytest.fixture
def make_command(fake_client):
    def make(project_path, **output_options):
        return RunCommand(
            project_path=project_path,
            output_handler=OutputHandler(no_color=True, **output_options),
            scheduler_factory=lambda path: SyncScheduler.from_file(
                path, client=fake_client, sleep=MagicMock()
            ),
        )
    return make


class TestRunCommand:
    """Test cases for RunCommand.run()."""

    def test_missing_project(self, make_command, tmp_path, capsys):
        exit_code = make_command(str(tmp_path / "wikipages.yaml")).run()

        assert exit_code == ExitCode.GENERAL_ERROR
        assert "Project file not found" in capsys.readouterr().out

    def test_successful_run(self, make_command, project, fake_client, capsys):
        path = project({"Main/Widget/Widget.lua": "return {}", "Main/common.css": "body {}"})

        exit_code = make_command(path).run("Sync from CI")

        assert exit_code == ExitCode.SUCCESS
        assert sorted(fake_client.pages) == ["Widget", "common.css"]
        assert {create[2] for create in fake_client.creates} == {"Sync from CI"}
        output = capsys.readouterr().out
        assert "Written: 2 page(s)" in output
        assert "Run completed successfully" in output

    def test_nothing_changed(self, make_command, project, capsys):
        path = project({"Main/A.wikitext": "a"})
        make_command(path).run()
        capsys.readouterr()

        exit_code = make_command(path).run()

        assert exit_code == ExitCode.SUCCESS
        assert "already up to date" in capsys.readouterr().out

    def test_failed_write_exit_code(self, make_command, project, fake_client, capsys):
        path = project({"Main/A.wikitext": "a"})
        fake_client.create_errors["A"] = APIError("protectedtitle", "protected", "A")

        exit_code = make_command(path).run()

        assert exit_code == ExitCode.PAGE_ERRORS
        output = capsys.readouterr().out
        assert "Failed: 1 page(s)" in output
        assert "create failed for A" in output

    def test_step_failure_exit_code(self, make_command, project, fake_client, capsys):
        path = project(
            {"Main/A.wikitext": "\tindented"},
            extra='steps:\n  - execute: "tests.fixtures.steps:reject_tabs"\n',
        )

        exit_code = make_command(path).run()

        assert exit_code == ExitCode.PAGE_ERRORS
        assert fake_client.creates == []
        assert "tabs are not allowed" in capsys.readouterr().out

    def test_quiet_hides_notifications(self, make_command, project, fake_client, capsys):
        path = project({"Main/A.wikitext": "a"})
        fake_client.create_errors["A"] = APIError("protectedtitle", "protected", "A")

        make_command(path, quiet=True).run()

        output = capsys.readouterr().out
        assert "create failed" not in output
        assert "Failed: 1 page(s)" in output

    @pytest.mark.parametrize("error, expected", [
        (AuthenticationError("SyncBot", "https://wiki.example.org/w/api.php", "Failed"), ExitCode.AUTH_ERROR),
        (InvalidCredentialsError(["WIKIPAGES_PASSWORD"]), ExitCode.AUTH_ERROR),
        (APIUnreachableError("https://wiki.example.org/w/api.php"), ExitCode.NETWORK_ERROR),
        (RuntimeError("unexpected"), ExitCode.GENERAL_ERROR),
    ])
    def test_login_errors(self, make_command, project, fake_client, error, expected):
        path = project({"Main/A.wikitext": "a"})
        fake_client.login_error = error

        assert make_command(path).run() == expected

    def test_invalid_project_file(self, make_command, project, capsys):
        path = project(extra="pacing_interval: -5\n")

        assert make_command(path).run() == ExitCode.GENERAL_ERROR
        assert "Configuration error" in capsys.readouterr().out

    def test_missing_source_directory(self, make_command, tmp_path):
        path = tmp_path / "wikipages.yaml"
        path.write_text("source_directory: nowhere\ncache_file: cache.json\n", encoding="utf-8")

        assert make_command(str(path)).run() == ExitCode.GENERAL_ERROR
