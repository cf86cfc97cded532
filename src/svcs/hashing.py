"""Content fingerprints for change detection and commit identity.

A fingerprint is the SHA-256 of the raw concatenation of file contents in
the order given. There is no separator between files, so moving bytes from
the end of one file to the start of the next keeps the same fingerprint;
only content and order matter.
"""

from pathlib import Path
from typing import Iterable, Union
import hashlib

from .constants import COMMIT_ID_LENGTH
from .errors import NotFoundError, StorageIOError


def compute_fingerprint(paths: Iterable[Union[str, Path]], chunk_size: int = 8192) -> str:
    """Compute the fingerprint of files in the given order.

    Args:
        paths: Ordered file paths
        chunk_size: Read size for streaming

    Returns:
        64-character lowercase hex SHA-256 digest

    Raises:
        NotFoundError: If a file doesn't exist
        StorageIOError: If a file can't be read

    Example:
        >>> compute_fingerprint(["a.txt", "b.txt"])  # "hello" + "world"
        '936a185caaa266bb9cbe981e9e05cb78cd732b0b3280eb944412bb6f8f8f07af'
    """
    sha256 = hashlib.sha256()
    for path in paths:
        path = Path(path)
        try:
            with path.open("rb") as f:
                for chunk in iter(lambda: f.read(chunk_size), b""):
                    sha256.update(chunk)
        except FileNotFoundError as e:
            raise NotFoundError(f"Can't find '{path}'") from e
        except OSError as e:
            raise StorageIOError("read", path, e) from e
    return sha256.hexdigest()


def commit_id_for(fingerprint: str, length: int = COMMIT_ID_LENGTH) -> str:
    """Derive a commit id (fixed-length prefix) from a fingerprint."""
    if len(fingerprint) < length:
        raise ValueError(f"Fingerprint too short for a {length}-character id: {fingerprint!r}")
    return fingerprint[:length]


__all__ = [
    "compute_fingerprint",
    "commit_id_for",
]
