"""Custom exceptions for depsync."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depsync.manifest.models import Library


class DepsyncError(Exception):
    """Base exception for all depsync errors."""


class ManifestFormatError(DepsyncError):
    """Raised when a manifest line cannot be tokenized into an entry."""

    def __init__(self, message: str, origin: Path | None = None, line_no: int | None = None):
        self.origin = origin
        self.line_no = line_no
        where = ""
        if origin is not None:
            where = f"{origin}:{line_no}: " if line_no is not None else f"{origin}: "
        super().__init__(f"{where}{message}")


class VersionConflictError(DepsyncError):
    """Raised when one source is pinned to two different versions in a run."""

    def __init__(self, source_ref: str, first: str, second: str):
        self.source_ref = source_ref
        self.first = first
        self.second = second
        super().__init__(
            f"Version mismatch for {source_ref}: {first!r} vs {second!r}. "
            "Versions for repositories are required to be the same."
        )


class DependencyNotFoundError(DepsyncError):
    """Raised when neither an override, a fetch nor a local directory satisfies a library."""

    def __init__(self, library: Library):
        self.library = library
        super().__init__(f"Unable to find dependency: {library.name} ({library.source_ref})")


class FetchError(DepsyncError):
    """Raised when a fetch (git) command fails."""

    def __init__(self, cmd: list[str], returncode: int | None, stderr: str = ""):
        self.cmd = cmd
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(
            f"git command failed (exit {returncode}): {' '.join(cmd)}: {stderr.strip()}"
        )


class FetchCancelledError(FetchError):
    """Raised when a fetch is cancelled before a git command runs."""

    def __init__(self, cmd: list[str]):
        super().__init__(cmd, None, "cancelled")


class RenderError(DepsyncError):
    """Raised when the build-include template cannot be rendered."""
