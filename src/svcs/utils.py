"""Utility functions for svcs."""

import contextlib
import logging
import os
import shutil
import stat
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def _fsync_dir(path: Path) -> None:
    """Fsync a directory so a rename inside it is durable.

    Best-effort: Windows and some filesystems don't support directory fsync.
    """
    try:
        flags = os.O_RDONLY
        if hasattr(os, "O_DIRECTORY"):
            flags |= os.O_DIRECTORY

        fd = os.open(str(path), flags)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except OSError:
        logger.debug("Directory fsync not supported for %s", path)


def _target_mode(path: Path) -> int:
    """Permission bits a replacement for ``path`` should carry.

    Temp files are created 0600; keep the mode of an existing target, or
    use the umask default for a new one.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Atomically replace ``path`` with ``data``.

    1. Writes to a temp file in the same directory and fsyncs it
    2. Renames it over the target (appears all-at-once)
    3. Fsyncs the parent directory (best-effort)

    Raises:
        OSError: On any write or rename failure; the temp file is removed
    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        delete=False,
        dir=path.parent,
        prefix=f".{path.name}.tmp-",
    ) as f:
        tmp = Path(f.name)
        try:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        except OSError:
            f.close()
            tmp.unlink(missing_ok=True)
            raise

    try:
        os.chmod(tmp, _target_mode(path))
        os.replace(tmp, path)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    _fsync_dir(path.parent)


def copy_file(src: Path, dst: Path, atomic: bool = True, chunk_size: int = 8192) -> int:
    """Copy the bytes of ``src`` to ``dst``, creating or overwriting it.

    Only content is copied. With ``atomic`` an existing ``dst`` keeps its
    permission bits, and a symlink at ``dst`` is replaced by a regular file
    instead of being written through. Without it the write follows the link.

    Args:
        src: Source file
        dst: Destination file
        atomic: Stage into a temp file next to ``dst`` and rename it into place
        chunk_size: Read size for streaming

    Returns:
        Number of bytes copied

    Raises:
        OSError: On read or write failure
    """
    if not atomic:
        with src.open("rb") as fsrc, dst.open("wb") as fdst:
            shutil.copyfileobj(fsrc, fdst, chunk_size)
            return fdst.tell()

    dst.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="wb",
        delete=False,
        dir=dst.parent,
        prefix=f".{dst.name}.tmp-",
    ) as tmp:
        tmppath = Path(tmp.name)

    try:
        with src.open("rb") as fsrc, tmppath.open("wb") as fdst:
            shutil.copyfileobj(fsrc, fdst, chunk_size)
            fdst.flush()
            os.fsync(fdst.fileno())
            size = fdst.tell()
        os.chmod(tmppath, _target_mode(dst))
        os.replace(tmppath, dst)
    except OSError:
        with contextlib.suppress(OSError):
            tmppath.unlink()
        raise

    _fsync_dir(dst.parent)
    return size
