"""Write the generated CMake include file."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

import structlog
from jinja2 import Environment, StrictUndefined, TemplateError

from depsync.exceptions import RenderError
from depsync.manifest.models import ResolvedDependency

log = structlog.get_logger("depsync.render")

DEFAULT_FILENAME = "dependencies.cmake"

DEFAULT_TEMPLATE = """\
# Generated by depsync. Do not edit.
{% for dep in dependencies %}
set({{ dep.name | cmake_var }}_DIR "{{ dep.path | cmake_path }}")
{%- if dep.mount_path == "/" %}
add_subdirectory("${{ '{' }}{{ dep.name | cmake_var }}_DIR}" "${CMAKE_BINARY_DIR}/deps/{{ dep.name }}")
{%- endif %}
{% endfor %}
"""


@runtime_checkable
class Renderer(Protocol):
    def render(self, project_dir: Path, dependencies: Sequence[ResolvedDependency]) -> Path: ...


def cmake_var(name: str) -> str:
    """Upper-case *name* and replace anything CMake dislikes in a variable name."""
    return "".join(c if c.isalnum() else "_" for c in name).upper()


def cmake_path(path: Path | str) -> str:
    # CMake wants forward slashes even on Windows
    return str(path).replace("\\", "/")


class CMakeRenderer:
    """Render resolved dependencies through a Jinja2 template.

    The template is either the built-in default or a file given explicitly;
    nothing is looked up relative to the installed package or executable.
    """

    def __init__(self, template_path: Path | None = None, filename: str = DEFAULT_FILENAME) -> None:
        self.template_path = Path(template_path) if template_path else None
        self.filename = filename
        self._env = Environment(
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        self._env.filters["cmake_var"] = cmake_var
        self._env.filters["cmake_path"] = cmake_path

    def _template_source(self) -> str:
        if self.template_path is None:
            return DEFAULT_TEMPLATE
        return self.template_path.read_text(encoding="utf-8")

    def render_text(self, dependencies: Sequence[ResolvedDependency]) -> str:
        try:
            template = self._env.from_string(self._template_source())
            return template.render(dependencies=list(dependencies))
        except TemplateError as e:
            raise RenderError(f"Template rendering failed: {e}") from e

    def render(self, project_dir: Path, dependencies: Sequence[ResolvedDependency]) -> Path:
        output = Path(project_dir) / self.filename
        text = self.render_text(dependencies)
        log.info("render.written", path=str(output), dependencies=len(dependencies))
        output.write_text(text, encoding="utf-8")
        return output
