"""Version conflict detection across every manifest read in one run."""

from __future__ import annotations

from collections.abc import Iterable

from depsync.exceptions import VersionConflictError
from depsync.manifest.models import Library


class ConflictTracker:
    """Remember the first non-empty version pinned for each source.

    One tracker is shared by all manifests of a resolution run so that a
    source pinned differently in two files is caught too.
    """

    def __init__(self) -> None:
        self._versions: dict[str, str] = {}

    def observe(self, library: Library) -> None:
        """Record *library*; raise VersionConflictError on a divergent pin."""
        if not library.version:
            return
        seen = self._versions.get(library.source_ref)
        if seen is None:
            self._versions[library.source_ref] = library.version
        elif seen != library.version:
            raise VersionConflictError(library.source_ref, seen, library.version)

    def version_of(self, source_ref: str) -> str | None:
        return self._versions.get(source_ref)


def check_conflicts(libraries: Iterable[Library]) -> None:
    """Run a fresh tracker over an in-memory set of libraries."""
    tracker = ConflictTracker()
    for lib in libraries:
        tracker.observe(lib)
