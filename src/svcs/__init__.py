"""svcs: a small file-based version control system."""

from .constants import SVCS_VERSION

__version__ = SVCS_VERSION

__all__ = ["__version__"]
