"""Tests for CMakeRenderer."""

from __future__ import annotations

from pathlib import Path

import pytest

from depsync.exceptions import RenderError
from depsync.manifest.models import ResolvedDependency
from depsync.resolver.render import CMakeRenderer, Renderer, cmake_path, cmake_var


class TestFilters:
    def test_cmake_var(self):
        assert cmake_var("foo_sub") == "FOO_SUB"
        assert cmake_var("lib.v2-core") == "LIB_V2_CORE"

    def test_cmake_path(self):
        assert cmake_path("C:\\deps\\foo") == "C:/deps/foo"


class TestCMakeRenderer:
    def test_satisfies_protocol(self):
        assert isinstance(CMakeRenderer(), Renderer)

    def test_default_template(self, tmp_path):
        deps = [
            ResolvedDependency("foo", Path("/deps/foo"), "/"),
            ResolvedDependency("foo_sub", Path("/deps/foo"), "/sub"),
        ]
        output = CMakeRenderer().render(tmp_path, deps)

        assert output == tmp_path / "dependencies.cmake"
        text = output.read_text()
        assert 'set(FOO_DIR "/deps/foo")' in text
        assert 'set(FOO_SUB_DIR "/deps/foo")' in text
        assert 'add_subdirectory("${FOO_DIR}" "${CMAKE_BINARY_DIR}/deps/foo")' in text
        assert "FOO_SUB_DIR}\" " not in text

    def test_empty_dependency_list(self, tmp_path):
        text = CMakeRenderer().render(tmp_path, []).read_text()
        assert text.startswith("# Generated by depsync")
        assert "set(" not in text

    def test_custom_template_and_filename(self, tmp_path):
        template = tmp_path / "deps.j2"
        template.write_text(
            "{% for d in dependencies %}{{ d.name }}={{ d.path }}:{{ d.mount_path }}\n{% endfor %}"
        )
        renderer = CMakeRenderer(template_path=template, filename="deps.cmake")
        output = renderer.render(tmp_path, [ResolvedDependency("a", Path("/x/a"), "/m")])
        assert output.name == "deps.cmake"
        assert output.read_text() == "a=/x/a:/m\n"

    def test_undefined_variable_raises(self, tmp_path):
        template = tmp_path / "bad.j2"
        template.write_text("{{ nope }}")
        with pytest.raises(RenderError):
            CMakeRenderer(template_path=template).render(tmp_path, [])
        assert not (tmp_path / "dependencies.cmake").exists()

    def test_syntax_error_raises(self, tmp_path):
        template = tmp_path / "bad.j2"
        template.write_text("{% for %}")
        with pytest.raises(RenderError):
            CMakeRenderer(template_path=template).render_text([])
