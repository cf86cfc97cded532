"""Custom exceptions for svcs.

Core operations raise these instead of printing or exiting; the CLI turns
any of them into a single line of output.
"""


class VcsError(RuntimeError):
    """Base class for all svcs errors."""
    pass


class NotFoundError(VcsError):
    """A file, commit or setting that must exist is missing."""
    pass


class CommitNotFoundError(NotFoundError):
    """No commit directory matches the requested id."""

    def __init__(self, commit_id: str):
        self.commit_id = commit_id
        super().__init__(f"Commit '{commit_id}' does not exist")


class AuthorNotSetError(NotFoundError):
    """No username has been configured."""

    def __init__(self):
        super().__init__("No username configured. Run: svcs config <name>")


class StorageIOError(VcsError):
    """Reading, writing or copying a file failed."""

    def __init__(self, action: str, path, cause: OSError):
        self.action = action
        self.path = str(path)
        self.cause = cause
        reason = cause.strerror or str(cause)
        super().__init__(f"Could not {action} '{self.path}': {reason}")


# Commit Errors
class NoOpError(VcsError):
    """Nothing changed since the last commit."""

    def __init__(self, message: str = "Nothing to commit"):
        super().__init__(message)


class NoTrackedFilesError(NoOpError):
    """Commit requested with an empty index."""

    def __init__(self):
        super().__init__("No files are tracked")


# Configuration Errors
class ConfigError(VcsError):
    """Invalid settings file."""
    pass


class LockTimeoutError(VcsError):
    """Repository lock could not be acquired in time."""

    def __init__(self, lock_path, timeout: float):
        self.lock_path = str(lock_path)
        self.timeout = timeout
        super().__init__(
            f"Another svcs command holds the repository lock ({self.lock_path}); "
            f"gave up after {timeout:g}s"
        )
