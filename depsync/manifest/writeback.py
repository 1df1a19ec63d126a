"""Persist edited manifest entries back to the files they came from."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from depsync.manifest.codec import write_manifest
from depsync.manifest.models import Library, ManifestSet

log = structlog.get_logger("depsync.manifest")


def save_modified(libraries: Iterable[Library], force: bool = False) -> list[Path]:
    """Rewrite every manifest that holds a dirty entry (or all, with *force*).

    A manifest is always rewritten as a whole group, in original entry
    order. Files whose entries are all clean are left untouched unless
    *force* is set. Returns the paths that were written.
    """
    manifest = libraries if isinstance(libraries, ManifestSet) else ManifestSet(libraries)
    written: list[Path] = []

    for origin, group in manifest.by_origin().items():
        modified = force or any(lib.dirty for lib in group)
        if not modified:
            continue
        if origin is None:
            log.warning("manifest.no_origin", entries=[lib.source_ref for lib in group])
            continue

        log.info("manifest.written", path=str(origin), entries=len(group), forced=force)
        write_manifest(origin, group)
        for lib in group:
            lib.dirty = False
        written.append(origin)

    return written
