"""depsync: resolve source-checkout dependencies for a CMake build."""

__version__ = "0.1.0"

from depsync.exceptions import (
    DependencyNotFoundError,
    DepsyncError,
    FetchCancelledError,
    FetchError,
    ManifestFormatError,
    RenderError,
    VersionConflictError,
)
from depsync.manifest import (
    ConflictTracker,
    Library,
    ManifestSet,
    ResolvedDependency,
    load_manifests,
    parse_manifest,
    read_manifest,
    save_modified,
    serialize_manifest,
)
from depsync.resolver import (
    CMakeRenderer,
    GitFetcher,
    OverrideResolver,
    ResolutionEngine,
)

__all__ = [
    "CMakeRenderer",
    "ConflictTracker",
    "DependencyNotFoundError",
    "DepsyncError",
    "FetchCancelledError",
    "FetchError",
    "GitFetcher",
    "Library",
    "ManifestFormatError",
    "ManifestSet",
    "OverrideResolver",
    "RenderError",
    "ResolutionEngine",
    "ResolvedDependency",
    "VersionConflictError",
    "load_manifests",
    "parse_manifest",
    "read_manifest",
    "save_modified",
    "serialize_manifest",
]
