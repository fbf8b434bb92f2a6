from __future__ import annotations

import numpy as np
import pytest

mgl = pytest.importorskip("moderngl")

from engine.core.errors import ShaderError
from engine.render.backend import QUAD_VERTICES, ModernGLBackend, classify_shader_error
from engine.render.shader import ShaderSources, create_program, load_sources


class DummyMember:
    def __init__(self) -> None:
        self.value = None
        self.written: bytes | None = None

    def write(self, data: bytes) -> None:
        self.written = data


class DummyProgram(dict):
    def __init__(self, *names: str) -> None:
        super().__init__({n: DummyMember() for n in names})
        self.released = False

    def release(self) -> None:
        self.released = True


class DummyReleasable:
    def __init__(self, data=None) -> None:
        self.data = data
        self.released = False
        self.renders: list[tuple] = []

    def release(self) -> None:
        self.released = True

    def render(self, mode, vertices=-1) -> None:
        self.renders.append((mode, vertices))


class DummyCtx:
    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.viewport = None
        self.cleared: list[tuple] = []
        self.layouts: list[list] = []

    def program(self, vertex_shader: str, fragment_shader: str):
        if self.error is not None:
            raise mgl.Error(self.error)
        return DummyProgram("model", "view_projection", "continuous_cycle")

    def buffer(self, data: bytes) -> DummyReleasable:
        return DummyReleasable(data)

    def vertex_array(self, program, content):
        self.layouts.append(content)
        return DummyReleasable()

    def clear(self, *color) -> None:
        self.cleared.append(color)


@pytest.mark.parametrize(
    "message, stage",
    [
        ("GLSL Compiler failed\n\nvertex_shader\n=============\n0:3: error", "vertex"),
        ("GLSL Compiler failed\n\nfragment_shader\n===============\n0:9: error", "fragment"),
        ("GLSL Linker failed\n\nerror: unresolved symbol", "link"),
        ("something unexpected", "link"),
    ],
)
def test_classify_shader_error(message: str, stage: str) -> None:
    assert classify_shader_error(message) == stage


def test_compile_failure_raises_shader_error(caplog) -> None:
    backend = ModernGLBackend(DummyCtx(error="GLSL Compiler failed\n\nfragment_shader\n0:1: oops"))
    with caplog.at_level("ERROR"):
        with pytest.raises(ShaderError) as ei:
            backend.compile_program("v", "f")
    assert ei.value.stage == "fragment"
    assert "oops" in ei.value.log
    assert any("fragment" in r.getMessage() for r in caplog.records)


def test_quad_geometry_layout_and_draw() -> None:
    ctx = DummyCtx()
    backend = ModernGLBackend(ctx)
    program = backend.compile_program("v", "f")
    geometry = backend.create_quad_geometry(program)

    assert geometry.vbo.data == QUAD_VERTICES.tobytes()
    assert ctx.layouts == [[(geometry.vbo, "2f", "position")]]

    backend.bind_and_draw(geometry)
    assert geometry.vao.renders == [(mgl.TRIANGLE_STRIP, 4)]

    backend.release_geometry(geometry)
    assert geometry.vao.released and geometry.vbo.released


def test_uniform_writes_and_missing_uniform_skipped() -> None:
    backend = ModernGLBackend(DummyCtx())
    program = backend.compile_program("v", "f")
    flat = np.arange(16, dtype=np.float32)

    backend.set_uniform_mat4(program, "model", flat)
    backend.set_uniform_float(program, "continuous_cycle", 3.0)
    # 最適化で消えた uniform は例外にしない
    backend.set_uniform_vec2(program, "julia_constant", (0.1, 0.2))

    assert program["model"].written == flat.tobytes()
    assert program["continuous_cycle"].value == 3.0
    assert "julia_constant" not in program


def test_frame_state_and_release() -> None:
    ctx = DummyCtx()
    backend = ModernGLBackend(ctx)
    program = backend.compile_program("v", "f")
    backend.use_program(program)
    assert backend.active_program is program

    backend.set_viewport(640, 480)
    backend.clear((0.0, 0.0, 0.0, 1.0))
    assert ctx.viewport == (0, 0, 640, 480)
    assert ctx.cleared == [(0.0, 0.0, 0.0, 1.0)]

    backend.release()
    assert program.released is True
    assert backend.active_program is None


def test_bundled_shader_sources_load() -> None:
    sources = load_sources()
    assert sources.vertex.lstrip().startswith("#version 330")
    assert "view_projection" in sources.vertex
    assert "julia_constant" in sources.fragment
    assert "continuous_cycle" in sources.fragment


def test_load_sources_from_paths(tmp_path) -> None:
    v = tmp_path / "v.glsl"
    f = tmp_path / "f.glsl"
    v.write_text("// vertex", encoding="utf-8")
    f.write_text("// fragment", encoding="utf-8")
    sources = load_sources(vertex_path=v, fragment_path=f)
    assert sources == ShaderSources("// vertex", "// fragment")


def test_create_program_logs_source_when_debugging(monkeypatch, caplog, make_backend) -> None:
    from common.settings import reload_from_env

    monkeypatch.setenv("FV_SHADER_DEBUG", "1")
    reload_from_env()
    backend = make_backend(fail_stage="fragment")
    with caplog.at_level("ERROR", logger="engine.render.shader"):
        with pytest.raises(ShaderError):
            create_program(backend, ShaderSources("void main() {}", "broken fragment body"))
    assert any("broken fragment body" in r.getMessage() for r in caplog.records)
