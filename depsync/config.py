"""Runtime settings read from ``DEPSYNC_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

_TRUTHY = {"1", "true", "yes", "on"}


def _env_bool(key: str, default: bool) -> bool:
    raw = os.environ.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


@dataclass
class Settings:
    log_level: str = "INFO"
    log_format: str = "console"
    manifest_name: str = "dependencies.txt"
    base_dir: Path = Path(".deps")
    allow_local: bool = True
    template: Path | None = None
    git: str = "git"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the environment, falling back to defaults."""
        template = os.environ.get("DEPSYNC_TEMPLATE")
        return cls(
            log_level=os.environ.get("DEPSYNC_LOG_LEVEL", "INFO").upper(),
            log_format=os.environ.get("DEPSYNC_LOG_FORMAT", "console").lower(),
            manifest_name=os.environ.get("DEPSYNC_MANIFEST", "dependencies.txt"),
            base_dir=Path(os.environ.get("DEPSYNC_BASE_DIR", ".deps")),
            allow_local=_env_bool("DEPSYNC_ALLOW_LOCAL", True),
            template=Path(template) if template else None,
            git=os.environ.get("DEPSYNC_GIT", "git"),
        )
