"""Manifest codec: one ``<source> [<version> [<mount>]]`` entry per line."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog

from depsync.exceptions import ManifestFormatError
from depsync.manifest.conflicts import ConflictTracker
from depsync.manifest.models import ROOT_MOUNT, UNPINNED, Library, ManifestSet, derive_name

log = structlog.get_logger("depsync.manifest")

_MAX_FIELDS = 3


def parse_manifest(
    content: str,
    origin: Path | None = None,
    tracker: ConflictTracker | None = None,
) -> ManifestSet:
    """Parse manifest text into a ManifestSet.

    Blank lines are skipped; there is no comment syntax. A source that is
    not an absolute URL is kept as a local path.
    """
    tracker = tracker or ConflictTracker()
    manifest = ManifestSet()

    for line_no, raw_line in enumerate(content.splitlines(), start=1):
        fields = raw_line.split()
        if not fields:
            continue
        if len(fields) > _MAX_FIELDS:
            raise ManifestFormatError(
                f"expected at most {_MAX_FIELDS} fields, got {len(fields)}: {raw_line.strip()!r}",
                origin=origin,
                line_no=line_no,
            )

        source_ref = fields[0]
        version = fields[1] if len(fields) > 1 else ""
        mount_path = fields[2] if len(fields) > 2 else ROOT_MOUNT

        lib = Library(
            source_ref=source_ref,
            version=version,
            mount_path=mount_path,
            origin=origin,
        )
        if not derive_name(source_ref, ROOT_MOUNT, lib.url):
            raise ManifestFormatError(
                f"cannot derive a dependency name from {source_ref!r}",
                origin=origin,
                line_no=line_no,
            )
        tracker.observe(lib)
        manifest.append(lib)

    return manifest


def serialize_manifest(libraries: Iterable[Library]) -> str:
    """Render libraries back to manifest text (``*`` for unpinned, ``/`` omitted)."""
    lines: list[str] = []
    for lib in libraries:
        version = lib.version or UNPINNED
        if lib.mount_path != ROOT_MOUNT:
            lines.append(f"{lib.source_ref} {version} {lib.mount_path}\n")
        else:
            lines.append(f"{lib.source_ref} {version}\n")
    return "".join(lines)


def read_manifest(path: Path, tracker: ConflictTracker | None = None) -> ManifestSet:
    """Read and parse a manifest file; entries remember *path* as their origin."""
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ManifestFormatError(f"not valid UTF-8: {e}", origin=path) from e
    manifest = parse_manifest(content, origin=path, tracker=tracker)
    log.debug("manifest.loaded", path=str(path), entries=len(manifest))
    return manifest


def write_manifest(path: Path, libraries: Iterable[Library]) -> None:
    Path(path).write_text(serialize_manifest(libraries), encoding="utf-8")


def load_manifests(paths: Iterable[Path]) -> ManifestSet:
    """Read several manifests with one shared conflict tracker."""
    tracker = ConflictTracker()
    combined = ManifestSet()
    for path in paths:
        combined.extend(read_manifest(path, tracker=tracker))
    return combined
