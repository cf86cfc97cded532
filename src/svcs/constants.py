"""Constants for svcs."""

# Storage root directory (relative to the working area)
VCS_DIR = "vcs"

# Storage layout (inside VCS_DIR)
COMMITS_DIR = "commits"
AUTHOR_FILE = "config.txt"
INDEX_FILE = "index.txt"
LOG_FILE = "log.txt"
SETTINGS_FILE = "settings.yaml"
LOCK_FILE = ".lock"

# Commit ids are this many leading hex characters of the fingerprint
COMMIT_ID_LENGTH = 6

# Environment overrides
ROOT_ENV_VAR = "SVCS_ROOT"
DEBUG_ENV_VAR = "SVCS_DEBUG"

# Version
SVCS_VERSION = "0.1.0"

# Text stores hold raw bytes; undecodable bytes round-trip as surrogates
TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"
