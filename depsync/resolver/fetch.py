"""Materialize remote libraries as git working copies."""

from __future__ import annotations

import posixpath
import subprocess
import threading
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog

from depsync.exceptions import FetchCancelledError, FetchError
from depsync.manifest.models import Library

log = structlog.get_logger("depsync.fetch")


@runtime_checkable
class Fetcher(Protocol):
    """Interface the resolution engine needs from a fetch backend."""

    def clone(
        self,
        library: Library,
        base_dir: Path,
        use_head: bool = False,
        cancel: threading.Event | None = None,
    ) -> Path: ...

    def get_hash(self, path: Path) -> str: ...

    def working_copy_path(self, library: Library, base_dir: Path) -> Path: ...


def repository_name(library: Library) -> str:
    """Name of the shared working copy for *library* (mount suffix excluded).

    Examples:
        https://github.com/org/repo.git  -> repo
        https://example.com/libs/foo     -> foo
    """
    if library.url is None:
        return posixpath.basename(library.source_ref.rstrip("/"))
    base = posixpath.basename(library.url.path.rstrip("/"))
    return posixpath.splitext(base)[0]


class GitFetcher:
    """Clone or update working copies under a base directory with the git CLI.

    Every mount of the same repository shares one working copy, so a
    repository is only ever checked out at a single version per run.
    """

    def __init__(self, git: str = "git") -> None:
        self.git = git

    def working_copy_path(self, library: Library, base_dir: Path) -> Path:
        return Path(base_dir) / repository_name(library)

    def clone(
        self,
        library: Library,
        base_dir: Path,
        use_head: bool = False,
        cancel: threading.Event | None = None,
    ) -> Path:
        """Make sure the working copy exists and is checked out at the pin.

        With *use_head*, or when the library is unpinned, the remote's
        default branch (``origin/HEAD``) is checked out instead. A pin that
        names a remote branch checks out ``origin/<branch>`` so an updated
        working copy follows upstream rather than a stale local branch.

        Raises ``FetchError`` on any git failure and ``FetchCancelledError``
        if *cancel* is set before a command starts.
        """
        target = self.working_copy_path(library, base_dir)

        if not target.is_dir() or not (target / ".git").exists():
            log.info("fetch.clone", source=library.source_ref, path=str(target))
            target.parent.mkdir(parents=True, exist_ok=True)
            self._run([self.git, "clone", "--", library.source_ref, str(target)], cancel)
        else:
            log.info("fetch.update", source=library.source_ref, path=str(target))
            self._run([self.git, "-C", str(target), "fetch", "--tags", "origin"], cancel)

        if use_head or not library.version:
            ref = "origin/HEAD"
        else:
            ref = self._pinned_ref(target, library.version, cancel)
        self._run([self.git, "-C", str(target), "checkout", "--quiet", ref], cancel)
        return target

    def _pinned_ref(self, target: Path, version: str, cancel: threading.Event | None) -> str:
        """Return ``origin/<version>`` if it is a remote branch, else *version*."""
        remote = f"origin/{version}"
        try:
            self._run(
                [self.git, "-C", str(target), "rev-parse", "--verify", "--quiet", f"refs/remotes/{remote}"],
                cancel,
            )
        except FetchCancelledError:
            raise
        except FetchError:
            return version
        return remote

    def get_hash(self, path: Path) -> str:
        """Return the commit hash checked out at *path*."""
        out = self._run([self.git, "-C", str(path), "rev-parse", "HEAD"])
        return out.strip()

    @staticmethod
    def _run(cmd: list[str], cancel: threading.Event | None = None) -> str:
        """Run a git command, raising FetchError on failure."""
        if cancel is not None and cancel.is_set():
            raise FetchCancelledError(cmd)
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise FetchError(cmd, None, str(e)) from e
        if proc.returncode != 0:
            raise FetchError(cmd, proc.returncode, proc.stderr)
        return proc.stdout
