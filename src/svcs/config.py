"""Repository settings helpers."""

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigError


class RepoSettings(BaseModel):
    """Tunables stored in vcs/settings.yaml (optional file)."""

    lock_timeout: float = Field(10.0, ge=0, description="Seconds to wait for the repository lock")
    atomic_writes: bool = Field(True, description="Write each file via temp file + rename")
    chunk_size: int = Field(8192, gt=0, description="Read size used when hashing and copying")


def load_settings(path: Path) -> RepoSettings:
    """Load settings from a YAML file, falling back to defaults when absent.

    Raises:
        ConfigError: If the file cannot be read or does not hold valid settings
    """
    if not path.exists():
        return RepoSettings()

    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Could not read settings from {path}: {e}") from e
    except yaml.YAMLError as e:
        reason = getattr(e, "problem", None) or "invalid YAML"
        raise ConfigError(f"Could not parse settings in {path}: {reason}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Settings in {path} must be a mapping, got {type(data).__name__}")

    try:
        return RepoSettings(**data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigError(f"Invalid settings in {path}: {problems}") from e

