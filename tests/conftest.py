"""Shared pytest fixtures for depsync tests."""

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from depsync.exceptions import FetchError
from depsync.manifest.models import Library, ResolvedDependency


class FakeFetcher:
    """In-memory Fetcher: 'clones' by creating a directory under base_dir."""

    def __init__(self, fail_for: set[str] | None = None, hashes: dict[str, str] | None = None):
        self.fail_for = fail_for or set()
        self.hashes = hashes or {}
        self.clone_calls: list[tuple[str, Path, bool]] = []
        self.hash_calls: list[Path] = []

    def working_copy_path(self, library: Library, base_dir: Path) -> Path:
        return Path(base_dir) / "wc" / library.name

    def clone(
        self,
        library: Library,
        base_dir: Path,
        use_head: bool = False,
        cancel: threading.Event | None = None,
    ) -> Path:
        self.clone_calls.append((library.source_ref, Path(base_dir), use_head))
        if library.source_ref in self.fail_for:
            raise FetchError(["git", "clone", library.source_ref], 128, "not found")
        target = self.working_copy_path(library, base_dir)
        target.mkdir(parents=True, exist_ok=True)
        return target

    def get_hash(self, path: Path) -> str:
        self.hash_calls.append(Path(path))
        if str(path) in self.hashes:
            return self.hashes[str(path)]
        raise FetchError(["git", "-C", str(path), "rev-parse", "HEAD"], 128, "not a git repository")


class FakeRenderer:
    def __init__(self) -> None:
        self.calls: list[tuple[Path, list[ResolvedDependency]]] = []

    def render(self, project_dir: Path, dependencies) -> Path:
        self.calls.append((Path(project_dir), list(dependencies)))
        return Path(project_dir) / "dependencies.cmake"


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def renderer() -> FakeRenderer:
    return FakeRenderer()


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch) -> Path:
    """A project directory nested one level down, used as the cwd.

    Overrides are looked up in its parent (``tmp_path``).
    """
    project = tmp_path / "project"
    project.mkdir()
    monkeypatch.chdir(project)
    return project


@pytest.fixture
def make_fetcher():
    """Factory for FakeFetchers with failing sources or known hashes."""
    return FakeFetcher
