"""Author name and tracked-file storage.

Both are tiny text files the commit engine only reads: the author string
goes into history entries and the tracked paths feed the fingerprint.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional

from .constants import TEXT_ENCODING, TEXT_ERRORS
from .context import ProjectContext
from .core import TrackedFiles
from .errors import NotFoundError, StorageIOError
from .utils import atomic_write_bytes

logger = logging.getLogger(__name__)


class AuthorStore:
    """Username kept as raw bytes in vcs/config.txt (no trailing newline)."""

    def __init__(self, ctx: ProjectContext, atomic: bool = True):
        self.path = ctx.author_path
        self.atomic = atomic

    def get(self) -> Optional[str]:
        """Return the username, or None if it was never set."""
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageIOError("read", self.path, e) from e
        return data.decode(TEXT_ENCODING, TEXT_ERRORS) if data else None

    def set(self, name: str) -> None:
        data = name.encode(TEXT_ENCODING, TEXT_ERRORS)
        try:
            if self.atomic:
                atomic_write_bytes(self.path, data)
            else:
                self.path.write_bytes(data)
        except OSError as e:
            raise StorageIOError("save username to", self.path, e) from e
        logger.debug("Username set to %r", name)


class TrackedFileRegistry:
    """Append-only list of tracked paths in vcs/index.txt."""

    def __init__(self, ctx: ProjectContext):
        self.ctx = ctx
        self.path = ctx.index_path

    def load(self) -> TrackedFiles:
        """Load tracked files (empty when the index doesn't exist yet)."""
        try:
            text = self.path.read_text(encoding=TEXT_ENCODING, errors=TEXT_ERRORS)
        except FileNotFoundError:
            return TrackedFiles()
        except OSError as e:
            raise StorageIOError("read", self.path, e) from e
        return TrackedFiles.from_text(text)

    def paths(self) -> List[Path]:
        """Tracked paths resolved against the working root, in tracked order."""
        return [self.ctx.absolute(p) for p in self.load().files]

    def add(self, path: str) -> bool:
        """Track a path.

        Returns:
            True if the path was appended, False if it was already tracked

        Raises:
            NotFoundError: If the path doesn't exist
            StorageIOError: If the index can't be written
        """
        if not self.ctx.absolute(path).exists():
            raise NotFoundError(f"Can't find '{path}'")

        if not self.load().add(path):
            logger.debug("%s is already tracked", path)
            return False

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("ab+") as f:
                # Keep one path per line even if the file was hand-edited
                if f.seek(0, os.SEEK_END) > 0:
                    f.seek(-1, os.SEEK_END)
                    if f.read(1) != b"\n":
                        f.write(b"\n")
                f.write(f"{path}\n".encode(TEXT_ENCODING, TEXT_ERRORS))
        except OSError as e:
            raise StorageIOError("write to", self.path, e) from e

        logger.debug("Tracking %s", path)
        return True
