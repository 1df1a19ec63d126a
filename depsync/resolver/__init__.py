"""Override detection, fetching, resolution and rendering."""

from depsync.resolver.engine import ResolutionEngine, infer_project_dir
from depsync.resolver.fetch import Fetcher, GitFetcher
from depsync.resolver.override import OverrideResolver, materialize_placeholder
from depsync.resolver.render import CMakeRenderer, Renderer

__all__ = [
    "CMakeRenderer",
    "Fetcher",
    "GitFetcher",
    "OverrideResolver",
    "Renderer",
    "ResolutionEngine",
    "infer_project_dir",
    "materialize_placeholder",
]
