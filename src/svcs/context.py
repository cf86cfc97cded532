"""Project context holding the working root and storage paths."""

from pathlib import Path
from typing import Optional, Union

from .constants import (
    AUTHOR_FILE,
    COMMITS_DIR,
    INDEX_FILE,
    LOCK_FILE,
    LOG_FILE,
    SETTINGS_FILE,
    VCS_DIR,
)


class ProjectContext:
    """Resolves every storage path from one working root.

    Components receive a context at construction instead of reading a
    process-wide storage path, so several repositories can live side by
    side (as they do in the test suite).
    """

    def __init__(self, root: Optional[Union[str, Path]] = None):
        """Initialize context for a working area.

        Args:
            root: Working directory containing (or about to contain) ``vcs/``.
                Defaults to the current directory.
        """
        self.root = Path(root) if root is not None else Path.cwd()

    @classmethod
    def init(cls, path: Optional[Path] = None) -> "ProjectContext":
        """Create the storage layout at the given path and return its context."""
        ctx = cls(path)
        ctx.ensure_layout()
        return ctx

    def ensure_layout(self) -> None:
        """Create the commits directory and the three text files if missing.

        Existing files are never truncated.
        """
        self.commits_dir.mkdir(parents=True, exist_ok=True)
        for path in (self.author_path, self.index_path, self.log_path):
            path.touch(exist_ok=True)

    def absolute(self, path: Union[str, Path]) -> Path:
        """Resolve a tracked path (as stored in the index) against the root."""
        p = Path(path)
        if p.is_absolute():
            return p
        return self.root / p

    @property
    def storage_dir(self) -> Path:
        """Get the storage root directory."""
        return self.root / VCS_DIR

    @property
    def commits_dir(self) -> Path:
        return self.storage_dir / COMMITS_DIR

    @property
    def author_path(self) -> Path:
        """Get path to the username file."""
        return self.storage_dir / AUTHOR_FILE

    @property
    def index_path(self) -> Path:
        """Get path to tracked files list."""
        return self.storage_dir / INDEX_FILE

    @property
    def log_path(self) -> Path:
        """Get path to the history file."""
        return self.storage_dir / LOG_FILE

    @property
    def settings_path(self) -> Path:
        return self.storage_dir / SETTINGS_FILE

    @property
    def lock_path(self) -> Path:
        return self.storage_dir / LOCK_FILE
