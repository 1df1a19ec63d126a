"""Local override detection: prefer a sibling checkout over fetching."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import structlog

from depsync.manifest.models import Library

log = structlog.get_logger("depsync.override")


class OverrideResolver:
    """Look for ``<search_dir>/<library name>`` and use it when present.

    Any existing node that is not a regular file counts, which covers plain
    directories and symlinks to them.
    """

    def __init__(self, search_dir: Path | str = "..") -> None:
        self.search_dir = Path(search_dir)

    def candidate(self, library: Library) -> Path:
        return self.search_dir / library.name

    def resolve(self, library: Library) -> Path | None:
        """Return the absolute override path for *library*, or None."""
        expected = self.candidate(library)
        try:
            st = expected.stat()
        except (FileNotFoundError, NotADirectoryError):
            return None
        if stat.S_ISREG(st.st_mode):
            return None
        override = Path(os.path.abspath(expected))
        log.info("override.used", library=library.name, path=str(override))
        return override


def materialize_placeholder(path: Path) -> None:
    """Create the directory a fetch would have populated."""
    log.info("override.placeholder_created", path=str(path))
    Path(path).mkdir(parents=True, exist_ok=True)
