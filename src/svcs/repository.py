"""Repository: the commit and checkout flows over one storage root.

commit:   fingerprint(tracked files) -> compare with latest stored commit
          -> CommitStore.create -> HistoryLog.append
checkout: CommitStore.read -> CheckoutEngine.restore
"""

import contextlib
import logging
from pathlib import Path
from typing import Iterator, List, Optional, Union

import portalocker

from .checkout import CheckoutEngine
from .commit_store import CommitStore
from .config import RepoSettings, load_settings
from .context import ProjectContext
from .core import CommitResult, HistoryEntry, TrackedFiles
from .errors import AuthorNotSetError, LockTimeoutError, NoOpError, NoTrackedFilesError
from .hashing import compute_fingerprint
from .history import HistoryLog
from .registry import AuthorStore, TrackedFileRegistry

logger = logging.getLogger(__name__)


class Repository:
    """All svcs components wired to one working root.

    Nothing here is global: the context and settings passed in decide where
    everything lives.
    """

    def __init__(self, ctx: ProjectContext, settings: Optional[RepoSettings] = None):
        """Initialize repository components.

        Args:
            ctx: Paths of the working area and its storage root
            settings: Tunables; loaded from vcs/settings.yaml when omitted
        """
        self.ctx = ctx
        self.settings = settings or load_settings(ctx.settings_path)

        self.authors = AuthorStore(ctx, atomic=self.settings.atomic_writes)
        self.tracked = TrackedFileRegistry(ctx)
        self.store = CommitStore(ctx, self.settings)
        self.history = HistoryLog(ctx)
        self.engine = CheckoutEngine(ctx, self.store, self.settings)

    @classmethod
    def open(cls, root: Optional[Union[str, Path]] = None) -> "Repository":
        """Open the repository at ``root``, creating the storage layout if needed."""
        ctx = ProjectContext.init(Path(root) if root is not None else None)
        return cls(ctx)

    @contextlib.contextmanager
    def lock(self) -> Iterator[None]:
        """Hold the advisory lock over the storage root.

        Raises:
            LockTimeoutError: If another process keeps the lock past
                ``settings.lock_timeout``
        """
        lock_path = self.ctx.lock_path
        lock_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            with portalocker.Lock(str(lock_path), "w", timeout=self.settings.lock_timeout):
                logger.debug("Acquired lock %s", lock_path)
                yield
        except portalocker.LockException as e:
            raise LockTimeoutError(lock_path, self.settings.lock_timeout) from e

    # ============= Author / tracking =============

    def get_author(self) -> Optional[str]:
        return self.authors.get()

    def set_author(self, name: str) -> None:
        with self.lock():
            self.authors.set(name)

    def tracked_files(self) -> TrackedFiles:
        return self.tracked.load()

    def track(self, path: str) -> bool:
        """Add a path to the index; see TrackedFileRegistry.add."""
        with self.lock():
            return self.tracked.add(path)

    # ============= Commit =============

    def fingerprint(self) -> str:
        """Fingerprint of the tracked files as they are on disk now.

        Raises:
            NoTrackedFilesError: If nothing is tracked
            NotFoundError: If a tracked file is missing
            StorageIOError: If a tracked file can't be read
        """
        paths = self.tracked.paths()
        if not paths:
            raise NoTrackedFilesError()
        return compute_fingerprint(paths, chunk_size=self.settings.chunk_size)

    def commit(self, message: str, author: Optional[str] = None) -> CommitResult:
        """Snapshot the tracked files and record the commit in history.

        Args:
            message: Commit message
            author: Overrides the configured username

        Returns:
            CommitResult describing the new commit

        Raises:
            AuthorNotSetError: If no author is given or configured
            NoOpError: If content matches the latest stored commit
            NoTrackedFilesError: If nothing is tracked
            NotFoundError, StorageIOError: On file access failures; a failed
                copy leaves a partial commit directory and no history entry
        """
        with self.lock():
            author = author or self.authors.get()
            if not author:
                raise AuthorNotSetError()

            fingerprint = self.fingerprint()
            latest = self.store.latest_fingerprint()
            if latest is not None and fingerprint == latest:
                logger.debug("Fingerprint %s matches latest commit", fingerprint)
                raise NoOpError()

            snapshot = self.store.create(fingerprint, self.tracked.paths())
            self.history.append(
                HistoryEntry(commit_id=snapshot.commit_id, author=author, message=message)
            )

        logger.info("Committed %s", snapshot.commit_id)
        return CommitResult(
            commit_id=snapshot.commit_id,
            fingerprint=fingerprint,
            author=author,
            message=message,
            files=snapshot.files,
        )

    # ============= Log / checkout =============

    def log(self) -> List[str]:
        """History blocks, newest first."""
        return self.history.render()

    def checkout(self, commit_id: str) -> List[Path]:
        """Restore a commit's files into the working area.

        Raises:
            CommitNotFoundError: If the id is unknown
            StorageIOError: If a write fails; earlier writes are kept
        """
        with self.lock():
            return self.engine.restore(commit_id)
