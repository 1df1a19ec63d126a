"""Data models for manifests and resolution results."""

from __future__ import annotations

import posixpath
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import SplitResult, urlsplit

ROOT_MOUNT = "/"
UNPINNED = "*"


def parse_source_url(source_ref: str) -> SplitResult | None:
    """Return the split URL if *source_ref* is an absolute URL, else None.

    A URL needs a scheme of two or more characters and a network location;
    ``file:`` URLs may leave the location empty (``file:///srv/git/foo.git``).
    Everything else (``/opt/lib``, ``../lib``, ``C:\\lib``,
    ``git@host:org/repo``) is a local path.
    """
    try:
        parts = urlsplit(source_ref)
    except ValueError:
        return None
    if len(parts.scheme) < 2:
        return None
    if not parts.netloc and parts.scheme != "file":
        return None
    return parts


def derive_name(source_ref: str, mount_path: str = ROOT_MOUNT, url: SplitResult | None = None) -> str:
    """Compute the identifier used for override lookup and generated output.

    Examples:
        https://example.com/libs/foo.git, /     -> foo
        https://example.com/libs/foo.git, /sub  -> foo_sub
        /opt/src/bar, /a/b                      -> bar_a_b
    """
    if url is not None:
        base = posixpath.basename(url.path.rstrip("/"))
        name = posixpath.splitext(base)[0]
    else:
        name = posixpath.basename(source_ref.replace("\\", "/").rstrip("/"))
    if mount_path != ROOT_MOUNT:
        name += mount_path.replace("/", "_")
    return name


@dataclass
class Library:
    """A single dependency declared in a manifest file."""

    source_ref: str
    version: str = ""
    mount_path: str = ROOT_MOUNT
    origin: Path | None = None
    name: str = ""
    url: SplitResult | None = field(default=None, compare=False)
    dirty: bool = field(default=False, compare=False)

    def __post_init__(self) -> None:
        if self.version == UNPINNED:
            self.version = ""
        if not self.mount_path:
            self.mount_path = ROOT_MOUNT
        if self.url is None:
            self.url = parse_source_url(self.source_ref)
        if not self.name:
            self.name = derive_name(self.source_ref, self.mount_path, self.url)

    @property
    def is_remote(self) -> bool:
        return self.url is not None

    def pin(self, version: str) -> None:
        """Change the version pin and mark the entry for writeback."""
        version = "" if version == UNPINNED else version
        if version != self.version:
            self.version = version
            self.dirty = True


@dataclass(frozen=True)
class ResolvedDependency:
    """A library materialized at an absolute path on disk."""

    name: str
    path: Path
    mount_path: str = ROOT_MOUNT


class ManifestSet:
    """Ordered collection of libraries, possibly read from several manifests."""

    def __init__(self, libraries: Iterable[Library] | None = None) -> None:
        self.libraries: list[Library] = list(libraries or [])

    def __iter__(self) -> Iterator[Library]:
        return iter(self.libraries)

    def __len__(self) -> int:
        return len(self.libraries)

    def __getitem__(self, index: int) -> Library:
        return self.libraries[index]

    def __repr__(self) -> str:
        return f"ManifestSet({self.libraries!r})"

    def append(self, library: Library) -> None:
        self.libraries.append(library)

    def extend(self, libraries: Iterable[Library]) -> None:
        self.libraries.extend(libraries)

    def by_origin(self) -> dict[Path | None, list[Library]]:
        """Group libraries by originating manifest, in first-seen order."""
        groups: dict[Path | None, list[Library]] = {}
        for lib in self.libraries:
            groups.setdefault(lib.origin, []).append(lib)
        return groups
