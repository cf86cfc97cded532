"""Core data models for svcs.

Storage formats are plain text so the on-disk layout stays readable by other
implementations of the same tool:

    vcs/index.txt      one tracked path per line
    vcs/log.txt        "commit <id>\\nAuthor: <author>\\n<message>" blocks,
                       each followed by a blank line
    vcs/commits/<id>/  base-named copies of the tracked files
"""

from pathlib import Path
from typing import List

from pydantic import BaseModel, Field


# ============= File Tracking =============

class TrackedFiles(BaseModel):
    """Ordered set of tracked paths (stored in vcs/index.txt).

    Order is significant: it is the order in which file contents feed the
    fingerprint. Paths are stored exactly as they were added.
    """

    files: List[str] = Field(default_factory=list)

    def add(self, *paths) -> List[str]:
        """Append paths not already tracked; return the ones that were new."""
        added = []
        for p in paths:
            p = str(p)
            if p not in self.files:
                self.files.append(p)
                added.append(p)
        return added

    @classmethod
    def from_text(cls, text: str) -> "TrackedFiles":
        return cls(files=[line for line in text.strip().split("\n") if line])


# ============= History =============

class HistoryEntry(BaseModel):
    """One commit record in the history log. Never mutated once written."""

    commit_id: str
    author: str
    message: str

    def to_block(self) -> str:
        """Render as a log block (without the trailing separator)."""
        return f"commit {self.commit_id}\nAuthor: {self.author}\n{self.message}"

    @classmethod
    def from_block(cls, block: str) -> "HistoryEntry":
        """Parse a log block.

        Raises:
            ValueError: If the block lacks the commit or author header
        """
        lines = block.split("\n", 2)
        if len(lines) < 2 or not lines[0].startswith("commit ") or not lines[1].startswith("Author: "):
            raise ValueError(f"Malformed history block: {block!r}")
        return cls(
            commit_id=lines[0][len("commit "):],
            author=lines[1][len("Author: "):],
            message=lines[2] if len(lines) > 2 else "",
        )


# ============= Snapshots =============

class Snapshot(BaseModel):
    """A stored commit directory and the file names it holds."""

    commit_id: str
    path: Path
    files: List[str] = Field(default_factory=list)  # base names, enumeration order

    def file_paths(self) -> List[Path]:
        return [self.path / name for name in self.files]


class CommitResult(BaseModel):
    """Result of a successful commit."""

    commit_id: str
    fingerprint: str
    author: str
    message: str
    files: List[str] = Field(default_factory=list)  # base names as stored

    def summary(self) -> str:
        """Get human-readable summary."""
        noun = "file" if len(self.files) == 1 else "files"
        return f"commit {self.commit_id} ({len(self.files)} {noun})"
