"""Turn manifest entries into materialized dependency paths."""

from __future__ import annotations

import os
import threading
from collections.abc import Sequence
from pathlib import Path

import structlog

from depsync.exceptions import DependencyNotFoundError, DepsyncError, FetchCancelledError, FetchError
from depsync.manifest.conflicts import check_conflicts
from depsync.manifest.models import Library, ResolvedDependency
from depsync.resolver.fetch import Fetcher
from depsync.resolver.override import OverrideResolver, materialize_placeholder
from depsync.resolver.render import Renderer

log = structlog.get_logger("depsync.resolve")


def infer_project_dir(libraries: Sequence[Library]) -> Path:
    """Directory of the last library's manifest, or the current directory.

    Only a fallback for callers that do not know their project directory;
    it assumes every library in the run belongs to one consuming project.
    """
    for lib in reversed(libraries):
        if lib.origin is not None:
            return lib.origin.parent
    return Path(".")


class ResolutionEngine:
    """Resolve libraries one by one, in manifest order.

    Per library: local override (if allowed) -> fetch for URL sources ->
    existing directory for local sources. Side effects of libraries that
    resolved before a failure, such as clones, are kept.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        overrides: OverrideResolver | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.overrides = overrides or OverrideResolver()
        self.renderer = renderer

    def resolve(
        self,
        libraries: Sequence[Library],
        base_dir: Path,
        *,
        use_head: bool = False,
        allow_local: bool = False,
        cancel: threading.Event | None = None,
    ) -> list[ResolvedDependency]:
        """Resolve every library to an absolute path.

        Raises:
            VersionConflictError: a source is pinned to two versions.
            DependencyNotFoundError: a library could not be materialized.
            FetchCancelledError: *cancel* was set during a fetch.
            OSError: filesystem failures, propagated as-is.
        """
        libraries = list(libraries)
        check_conflicts(libraries)

        resolved: list[ResolvedDependency] = []
        for lib in libraries:
            path = self._resolve_one(lib, Path(base_dir), use_head, allow_local, cancel)
            if path is None:
                raise DependencyNotFoundError(lib)

            path = Path(os.path.abspath(path))
            log.info("resolve.dependency", source=lib.source_ref, name=lib.name, path=str(path))
            resolved.append(ResolvedDependency(name=lib.name, path=path, mount_path=lib.mount_path))

        return resolved

    def refresh(
        self,
        libraries: Sequence[Library],
        base_dir: Path,
        *,
        project_dir: Path | None = None,
        use_head: bool = False,
        allow_local: bool = False,
        cancel: threading.Event | None = None,
    ) -> Path:
        """Resolve *libraries* and render the build-include file into *project_dir*.

        Returns the path of the rendered file.
        """
        if self.renderer is None:
            raise DepsyncError("No renderer configured")
        libraries = list(libraries)
        dependencies = self.resolve(
            libraries, base_dir, use_head=use_head, allow_local=allow_local, cancel=cancel
        )
        if project_dir is None:
            project_dir = infer_project_dir(libraries)
        return self.renderer.render(Path(project_dir), dependencies)

    # ── per-library steps ─────────────────────────────────────────────────

    def _resolve_one(
        self,
        lib: Library,
        base_dir: Path,
        use_head: bool,
        allow_local: bool,
        cancel: threading.Event | None,
    ) -> Path | None:
        if allow_local:
            override = self.overrides.resolve(lib)
            if override is not None:
                if lib.is_remote:
                    materialize_placeholder(self.fetcher.working_copy_path(lib, base_dir))
                return override

        if lib.is_remote:
            try:
                return self.fetcher.clone(lib, base_dir, use_head, cancel)
            except FetchCancelledError:
                raise
            except FetchError as e:
                log.error("resolve.fetch_failed", source=lib.source_ref, error=str(e))
                raise DependencyNotFoundError(lib) from e

        local = Path(lib.source_ref)
        if not local.is_dir():
            return None

        try:
            commit = self.fetcher.get_hash(local)
        except FetchError:
            log.info("resolve.directory", path=lib.source_ref)
        else:
            log.info("resolve.directory", path=lib.source_ref, commit=commit)
        return local
