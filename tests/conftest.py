"""Root pytest configuration for all tests."""

import pytest

from tests.fixtures.wiki_fixtures import FakeWikiClient, write_source_tree


@pytest.fixture
def fake_client():
    """In-memory wiki client recording every login, edit and create."""
    return FakeWikiClient()


@pytest.fixture
def source_tree(tmp_path):
    """Factory writing {relative path: content} below tmp_path/src."""
    root = tmp_path / "src"
    root.mkdir()

    def make(files=None):
        write_source_tree(root, files or {})
        return root

    return make
