"""Restore a stored commit into the working area."""

import logging
from pathlib import Path
from typing import List, Optional

from .commit_store import CommitStore
from .config import RepoSettings
from .context import ProjectContext
from .errors import StorageIOError
from .utils import copy_file

logger = logging.getLogger(__name__)


class CheckoutEngine:
    """Overwrites working files with a commit's stored bytes.

    Every stored file is written to ``<root>/<base name>``; files that are not
    part of the commit are never touched or removed. There is no
    confirmation step and no backup of the overwritten content.
    """

    def __init__(
        self,
        ctx: ProjectContext,
        store: Optional[CommitStore] = None,
        settings: Optional[RepoSettings] = None,
    ):
        self.ctx = ctx
        self.settings = settings or RepoSettings()
        self.store = store or CommitStore(ctx, self.settings)

    def restore(self, commit_id: str) -> List[Path]:
        """Write every file of ``commit_id`` into the working root.

        Files are restored in enumeration order. If one write fails, the
        files restored before it keep their new content.

        Returns:
            Working paths that were written

        Raises:
            CommitNotFoundError: If the id is unknown
            StorageIOError: If a stored file can't be read or a working file
                can't be written
        """
        snapshot = self.store.read(commit_id)

        restored = []
        for src in snapshot.file_paths():
            dst = self.ctx.root / src.name
            try:
                copy_file(
                    src,
                    dst,
                    atomic=self.settings.atomic_writes,
                    chunk_size=self.settings.chunk_size,
                )
            except OSError as e:
                raise StorageIOError("restore", dst, e) from e
            restored.append(dst)
            logger.debug("Restored %s from commit %s", dst, commit_id)

        logger.debug("Checked out commit %s (%d files)", commit_id, len(restored))
        return restored
