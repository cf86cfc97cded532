"""Shared test fixtures and utilities."""

import pytest

from svcs.config import RepoSettings
from svcs.context import ProjectContext
from svcs.repository import Repository


@pytest.fixture
def ctx(tmp_path, monkeypatch):
    """Create an initialized context rooted at tmp_path (also the cwd)."""
    monkeypatch.chdir(tmp_path)
    return ProjectContext.init(tmp_path)


@pytest.fixture
def repo(ctx):
    """Repository with author "bob" and a short lock timeout."""
    repository = Repository(ctx, RepoSettings(lock_timeout=1.0))
    repository.set_author("bob")
    return repository


@pytest.fixture
def write_file(tmp_path):
    """Factory fixture to write files relative to tmp_path."""
    def _write(path: str, content="test content"):
        file_path = tmp_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            file_path.write_bytes(content)
        else:
            file_path.write_text(content)
        return file_path
    return _write


@pytest.fixture
def hello_world(repo, write_file):
    """Track a.txt="hello" and b.txt="world" (in that order)."""
    a = write_file("a.txt", "hello")
    b = write_file("b.txt", "world")
    repo.track("a.txt")
    repo.track("b.txt")
    return a, b
