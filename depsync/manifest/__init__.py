"""Manifest model, codec, conflict tracking and writeback."""

from depsync.manifest.codec import (
    load_manifests,
    parse_manifest,
    read_manifest,
    serialize_manifest,
    write_manifest,
)
from depsync.manifest.conflicts import ConflictTracker, check_conflicts
from depsync.manifest.models import Library, ManifestSet, ResolvedDependency
from depsync.manifest.writeback import save_modified

__all__ = [
    "ConflictTracker",
    "Library",
    "ManifestSet",
    "ResolvedDependency",
    "check_conflicts",
    "load_manifests",
    "parse_manifest",
    "read_manifest",
    "save_modified",
    "serialize_manifest",
    "write_manifest",
]
