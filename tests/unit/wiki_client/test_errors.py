"""Unit tests for the exception hierarchy."""

import pytest

from wikipages.cli.errors import CLIError
from wikipages.file_mapper.errors import FileMapperError, FilesystemError, PathResolutionError
from wikipages.pipeline.errors import PipelineError, PipelineStepError
from wikipages.sync.errors import (
    ConfigError,
    ConfigurationError,
    NotReadyError,
    RemoteWriteError,
    SchedulerError,
    SourceMissingError,
)
from wikipages.wiki_client.errors import (
    APIAccessError,
    APIError,
    APIUnreachableError,
    AuthenticationError,
    InvalidCredentialsError,
    MissingTargetError,
    SyncError,
    WikiClientError,
)


class TestHierarchy:
    """Every error derives from SyncError through its package base."""

    @pytest.mark.parametrize("error, base", [
        (InvalidCredentialsError(['WIKIPAGES_PASSWORD']), WikiClientError),
        (AuthenticationError('SyncBot', 'https://wiki.example.org/w/api.php'), WikiClientError),
        (APIError('protectedpage'), WikiClientError),
        (MissingTargetError('Widget'), APIError),
        (APIUnreachableError('https://wiki.example.org/w/api.php'), WikiClientError),
        (APIAccessError(), WikiClientError),
        (FilesystemError('a.lua', 'read'), FileMapperError),
        (PathResolutionError('.lua', 'empty stem'), FileMapperError),
        (PipelineStepError('minify', 'Widget'), PipelineError),
        (ConfigurationError(), SchedulerError),
        (NotReadyError('idle'), SchedulerError),
        (SourceMissingError('src'), SchedulerError),
        (RemoteWriteError('Widget', 'edit'), SchedulerError),
        (ConfigError('bad'), SchedulerError),
        (CLIError('bad'), SyncError),
    ])
    def test_bases(self, error, base):
        assert isinstance(error, base)
        assert isinstance(error, SyncError)


class TestMessages:
    """Test cases for error attributes and messages."""

    def test_missing_target_carries_code(self):
        error = MissingTargetError('Gadget:Foo')

        assert error.code == MissingTargetError.CODE == 'missingtitle'
        assert error.title == 'Gadget:Foo'
        assert 'Gadget:Foo' in str(error)

    def test_not_ready_names_state(self):
        assert 'idle' in str(NotReadyError('idle'))

    def test_source_missing_message(self):
        error = SourceMissingError('/repo/src')

        assert str(error) == "Could not start because source directory /repo/src doesn't exist"

    def test_remote_write_error_keeps_remote_code(self):
        cause = APIError('protectedpage', 'This page is protected', 'Widget')

        error = RemoteWriteError('Widget', 'edit', cause)

        assert error.code == 'protectedpage'
        assert error.__cause__ is cause
        assert error.operation == 'edit'

    def test_pipeline_step_error_chains_cause(self):
        cause = ValueError('boom')

        error = PipelineStepError('minify', 'Widget', cause)

        assert error.cause is cause
        assert error.__cause__ is cause
        assert 'minify' in str(error)
        assert 'Widget' in str(error)
