"""Append-only commit history in vcs/log.txt."""

import logging
from typing import List

from .constants import TEXT_ENCODING, TEXT_ERRORS
from .context import ProjectContext
from .core import HistoryEntry
from .errors import StorageIOError

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"


class HistoryLog:
    """Commit records in creation order, replayed newest first.

    The file is only ever appended to. Messages containing a blank line
    can't be told apart from a block boundary when read back.
    """

    def __init__(self, ctx: ProjectContext):
        self.path = ctx.log_path

    def append(self, entry: HistoryEntry) -> None:
        """Add one block to the end of the log.

        Raises:
            StorageIOError: If the log can't be written
        """
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding=TEXT_ENCODING, errors=TEXT_ERRORS) as f:
                f.write(entry.to_block() + BLOCK_SEPARATOR)
        except OSError as e:
            raise StorageIOError("write to", self.path, e) from e
        logger.debug("Logged commit %s", entry.commit_id)

    def blocks(self) -> List[str]:
        """Raw blocks in creation order (empty if nothing was committed)."""
        try:
            content = self.path.read_text(encoding=TEXT_ENCODING, errors=TEXT_ERRORS)
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StorageIOError("read", self.path, e) from e

        content = content.strip()
        if not content:
            return []
        return content.split(BLOCK_SEPARATOR)

    def render(self) -> List[str]:
        """Blocks newest first, re-read from disk on every call."""
        return list(reversed(self.blocks()))

    def entries(self) -> List[HistoryEntry]:
        """Parsed entries in creation order.

        Raises:
            ValueError: If a block is malformed
        """
        return [HistoryEntry.from_block(block) for block in self.blocks()]
