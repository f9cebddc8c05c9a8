"""Shared fixtures for CLI tests."""

import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers added by _configure_logging so streams do not leak between tests."""
    yield
    app_logger = logging.getLogger("wikipages")
    for handler in list(app_logger.handlers):
        handler.close()
        app_logger.removeHandler(handler)
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture
def project(tmp_path, source_tree):
    """Factory writing a project file plus source files; returns the project path."""
    def make(files=None, extra=""):
        source_tree(files or {})
        path = tmp_path / "wikipages.yaml"
        path.write_text(
            "source_directory: src\n"
            "cache_file: .wikipages/cache.json\n"
            "pacing_interval: 0\n" + extra,
            encoding="utf-8",
        )
        return str(path)
    return make


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep Rich from wrapping long paths in captured output."""
    monkeypatch.setenv("COLUMNS", "500")
