"""CLI entry point: depsync.

Subcommands:
    depsync refresh [MANIFEST...]   # Fetch/override every dependency, write dependencies.cmake
    depsync list [MANIFEST...]      # Show parsed entries
    depsync format [MANIFEST...]    # Rewrite manifests in normalized form
    depsync freeze [MANIFEST...]    # Pin remote dependencies to their checked-out commit
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import NoReturn

import click
import structlog

from depsync.config import Settings
from depsync.core.logging import setup_logging
from depsync.exceptions import DepsyncError, FetchError, VersionConflictError
from depsync.manifest.codec import load_manifests
from depsync.manifest.models import ManifestSet
from depsync.manifest.writeback import save_modified
from depsync.resolver.engine import ResolutionEngine
from depsync.resolver.fetch import GitFetcher
from depsync.resolver.override import OverrideResolver
from depsync.resolver.render import CMakeRenderer

log = structlog.get_logger("depsync.cli")

EXIT_ERROR = 1
EXIT_CONFLICT = 2


def _manifest_paths(settings: Settings, manifests: tuple[str, ...]) -> list[Path]:
    if manifests:
        return [Path(m) for m in manifests]
    return [Path(settings.manifest_name)]


def _fail(err: Exception) -> NoReturn:
    click.echo(f"Error: {err}", err=True)
    sys.exit(EXIT_CONFLICT if isinstance(err, VersionConflictError) else EXIT_ERROR)


def _load(settings: Settings, manifests: tuple[str, ...]) -> ManifestSet:
    try:
        return load_manifests(_manifest_paths(settings, manifests))
    except (DepsyncError, OSError) as e:
        _fail(e)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """depsync: resolve source dependencies and generate CMake glue."""
    settings = Settings.from_env()
    setup_logging(settings, verbose=verbose)
    ctx.obj = settings


@main.command("refresh")
@click.argument("manifests", nargs=-1, type=click.Path(dir_okay=False))
@click.option("--head", "use_head", is_flag=True, help="Check out remote HEAD instead of the pins")
@click.option(
    "--local/--no-local",
    "allow_local",
    default=None,
    help="Allow ../<name> checkouts to override fetching (default: DEPSYNC_ALLOW_LOCAL)",
)
@click.option("--base-dir", type=click.Path(file_okay=False), default=None, help="Working copy directory")
@click.option(
    "--project-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Where to write dependencies.cmake (default: directory of the first manifest)",
)
@click.option("--template", type=click.Path(exists=True, dir_okay=False), default=None, help="Jinja2 template")
@click.pass_obj
def refresh(
    settings: Settings,
    manifests: tuple[str, ...],
    use_head: bool,
    allow_local: bool | None,
    base_dir: str | None,
    project_dir: str | None,
    template: str | None,
) -> None:
    """Resolve every dependency and write the build-include file."""
    libraries = _load(settings, manifests)
    if project_dir is None:
        project_dir = str(_manifest_paths(settings, manifests)[0].parent)

    engine = ResolutionEngine(
        fetcher=GitFetcher(git=settings.git),
        overrides=OverrideResolver(),
        renderer=CMakeRenderer(template_path=Path(template) if template else settings.template),
    )
    try:
        output = engine.refresh(
            libraries,
            Path(base_dir) if base_dir else settings.base_dir,
            project_dir=Path(project_dir),
            use_head=use_head,
            allow_local=settings.allow_local if allow_local is None else allow_local,
        )
    except (DepsyncError, OSError) as e:
        _fail(e)
    click.echo(f"Wrote {output}")


@main.command("list")
@click.argument("manifests", nargs=-1, type=click.Path(dir_okay=False))
@click.pass_obj
def list_cmd(settings: Settings, manifests: tuple[str, ...]) -> None:
    """List the entries of the manifests."""
    libraries = _load(settings, manifests)
    if not len(libraries):
        click.echo("No dependencies found.")
        return
    for lib in libraries:
        click.echo(f"  {lib.name:24s} {lib.version or '*':16s} {lib.mount_path:12s} {lib.source_ref}")


@main.command("format")
@click.argument("manifests", nargs=-1, type=click.Path(dir_okay=False))
@click.pass_obj
def format_cmd(settings: Settings, manifests: tuple[str, ...]) -> None:
    """Rewrite the manifests in normalized form."""
    libraries = _load(settings, manifests)
    try:
        written = save_modified(libraries, force=True)
    except OSError as e:
        _fail(e)
    for path in written:
        click.echo(f"Wrote {path}")


@main.command("freeze")
@click.argument("manifests", nargs=-1, type=click.Path(dir_okay=False))
@click.option("--base-dir", type=click.Path(file_okay=False), default=None, help="Working copy directory")
@click.pass_obj
def freeze(settings: Settings, manifests: tuple[str, ...], base_dir: str | None) -> None:
    """Pin remote dependencies to the commit currently checked out."""
    libraries = _load(settings, manifests)
    fetcher = GitFetcher(git=settings.git)
    root = Path(base_dir) if base_dir else settings.base_dir

    for lib in libraries:
        if not lib.is_remote:
            continue
        working_copy = fetcher.working_copy_path(lib, root)
        if not working_copy.is_dir():
            log.warning("freeze.missing_working_copy", source=lib.source_ref, path=str(working_copy))
            continue
        try:
            commit = fetcher.get_hash(working_copy)
        except FetchError as e:
            log.warning("freeze.hash_failed", source=lib.source_ref, error=str(e))
            continue
        lib.pin(commit)

    try:
        written = save_modified(libraries)
    except OSError as e:
        _fail(e)
    if not written:
        click.echo("Nothing to update.")
    for path in written:
        click.echo(f"Wrote {path}")


if __name__ == "__main__":
    main()
