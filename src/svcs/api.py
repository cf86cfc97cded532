"""Stable API for svcs operations.

A minimal surface for scripts and other tools that want to commit or restore
a directory without going through the CLI.
"""

from pathlib import Path
from typing import List, Optional

from .repository import Repository


def commit_dir(path: str = ".", message: str = "", author: Optional[str] = None) -> str:
    """Commit the tracked files of the repository at ``path``.

    Args:
        path: Working directory containing (or to contain) ``vcs/``
        message: Commit message
        author: Overrides the configured username

    Returns:
        The new commit id

    Raises:
        NoOpError: If nothing changed since the last commit
        AuthorNotSetError: If no author is given or configured
        NotFoundError, StorageIOError: On file access failures

    Example:
        >>> from svcs.api import commit_dir
        >>> commit_dir(".", "nightly snapshot", author="ci")
        '1a2b3c'
    """
    repo = Repository.open(Path(path))
    return repo.commit(message, author=author).commit_id


def checkout_dir(path: str, commit_id: str) -> List[Path]:
    """Restore ``commit_id`` into the working directory at ``path``.

    Returns:
        Paths that were written
    """
    repo = Repository.open(Path(path))
    return repo.checkout(commit_id)
