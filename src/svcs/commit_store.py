"""Snapshot directories under vcs/commits/.

Each commit is a directory named by the first characters of its
fingerprint, holding base-named copies of the tracked files. Directories are
written once and never modified by svcs afterwards, with one exception: a
fingerprint whose prefix collides with an existing id overwrites that
directory. There is no collision detection.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Sequence

from .config import RepoSettings
from .context import ProjectContext
from .core import Snapshot
from .errors import CommitNotFoundError, NotFoundError, StorageIOError, VcsError
from .hashing import commit_id_for, compute_fingerprint
from .utils import copy_file

logger = logging.getLogger(__name__)

# Leftovers of an interrupted atomic copy (see utils.copy_file)
_TEMP_NAME = re.compile(r"^\..+\.tmp-[^/]+$")


class CommitStore:
    """Creates and reads snapshot directories."""

    def __init__(self, ctx: ProjectContext, settings: Optional[RepoSettings] = None):
        self.ctx = ctx
        self.settings = settings or RepoSettings()
        self.root = ctx.commits_dir

    def list_ids(self) -> List[str]:
        """Commit ids in enumeration order (sorted by name)."""
        if not self.root.is_dir():
            return []
        return sorted(p.name for p in self.root.iterdir() if p.is_dir())

    def create(self, fingerprint: str, files: Sequence[Path]) -> Snapshot:
        """Store a snapshot of ``files`` under the id derived from ``fingerprint``.

        Files are stored by base name only; two tracked files with the same
        base name in different directories end up as one stored file (the
        later one wins).

        If a copy fails, files copied before it stay in the commit directory.

        Raises:
            NotFoundError: If a source file disappeared
            StorageIOError: If the directory can't be created or a copy fails
        """
        commit_id = commit_id_for(fingerprint)
        commit_path = self.root / commit_id

        if commit_path.exists():
            logger.warning("Commit directory %s already exists and will be overwritten", commit_id)

        try:
            commit_path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageIOError("create commit directory", commit_path, e) from e

        stored = []
        for src in files:
            src = Path(src)
            dst = commit_path / src.name
            try:
                copy_file(
                    src,
                    dst,
                    atomic=self.settings.atomic_writes,
                    chunk_size=self.settings.chunk_size,
                )
            except FileNotFoundError as e:
                raise NotFoundError(f"Can't find '{src}'") from e
            except OSError as e:
                raise StorageIOError("copy", src, e) from e
            if src.name not in stored:
                stored.append(src.name)
            logger.debug("Stored %s -> %s", src, dst)

        logger.debug("Created commit %s with %d files", commit_id, len(stored))
        return Snapshot(commit_id=commit_id, path=commit_path, files=stored)

    def read(self, commit_id: str) -> Snapshot:
        """Look up a commit by its exact id.

        Raises:
            CommitNotFoundError: If no directory matches
        """
        if not _is_plain_name(commit_id):
            raise CommitNotFoundError(commit_id)

        commit_path = self.root / commit_id
        if not commit_path.is_dir():
            raise CommitNotFoundError(commit_id)

        return Snapshot(
            commit_id=commit_id,
            path=commit_path,
            files=self._stored_files(commit_path),
        )

    def latest_fingerprint(self) -> Optional[str]:
        """Fingerprint of the last commit directory in enumeration order.

        Each directory is re-hashed from its stored files in enumeration
        order. This answers "did anything change since the last commit?" and
        is not a reconstruction of the fingerprint the commit was created
        with: when tracked order differs from sorted base-name order, the
        two don't match.

        Returns:
            Hex digest, or None if there are no readable commits
        """
        latest = None
        for commit_id in self.list_ids():
            commit_path = self.root / commit_id
            try:
                latest = compute_fingerprint(
                    [commit_path / name for name in self._stored_files(commit_path)],
                    chunk_size=self.settings.chunk_size,
                )
            except VcsError as e:
                logger.warning("Skipping unreadable commit %s: %s", commit_id, e)
        return latest

    def _stored_files(self, commit_path: Path) -> List[str]:
        try:
            return sorted(
                p.name for p in commit_path.iterdir()
                if p.is_file() and not _TEMP_NAME.match(p.name)
            )
        except OSError as e:
            raise StorageIOError("read commit directory", commit_path, e) from e


def _is_plain_name(commit_id: str) -> bool:
    """Reject ids that would resolve outside the commits directory."""
    return (
        bool(commit_id)
        and commit_id not in (".", "..")
        and "/" not in commit_id
        and "\\" not in commit_id
        and "\x00" not in commit_id
    )
