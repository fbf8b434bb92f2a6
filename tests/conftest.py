"""共通フィクスチャ。

- GPU を使わない記録用バックエンド（`FakeBackend`）
- 設定（環境変数）を既定に戻す
- 800x600 にリサイズ済みのカメラ
"""

from __future__ import annotations

from typing import Any, Iterator, Sequence

import numpy as np
import pytest

from common.settings import reload_from_env
from engine.camera.controller import CameraController
from engine.core.errors import ShaderError


class FakeProgram:
    def __init__(self, vertex_src: str, fragment_src: str) -> None:
        self.vertex_src = vertex_src
        self.fragment_src = fragment_src


class FakeGeometry:
    def __init__(self, program: Any) -> None:
        self.program = program
        self.released = False


class FakeBackend:
    """呼び出しを `calls` に記録するだけの GPU 協調者。"""

    def __init__(self, fail_stage: str | None = None) -> None:
        self.fail_stage = fail_stage
        self.calls: list[tuple] = []
        self.uniforms: dict[str, Any] = {}
        self._program: Any = None
        self.geometries: list[FakeGeometry] = []
        self.released = False

    @property
    def active_program(self) -> Any:
        return self._program

    def compile_program(self, vertex_src: str, fragment_src: str) -> Any:
        if self.fail_stage is not None:
            raise ShaderError(self.fail_stage, "0:1(1): error: syntax error")
        return FakeProgram(vertex_src, fragment_src)

    def use_program(self, program: Any) -> None:
        self._program = program
        self.calls.append(("use_program", program))

    def create_quad_geometry(self, program: Any) -> FakeGeometry:
        geometry = FakeGeometry(program)
        self.geometries.append(geometry)
        return geometry

    def release_geometry(self, geometry: FakeGeometry) -> None:
        geometry.released = True

    def set_uniform_mat4(self, program: Any, name: str, value: np.ndarray) -> None:
        arr = np.asarray(value, dtype=np.float32).copy()
        self.uniforms[name] = arr
        self.calls.append(("mat4", name, arr))

    def set_uniform_vec2(self, program: Any, name: str, value: Sequence[float]) -> None:
        self.uniforms[name] = tuple(value)
        self.calls.append(("vec2", name, tuple(value)))

    def set_uniform_float(self, program: Any, name: str, value: float) -> None:
        self.uniforms[name] = float(value)
        self.calls.append(("float", name, float(value)))

    def bind_and_draw(self, geometry: Any) -> None:
        self.calls.append(("draw", geometry))

    def clear(self, color: Sequence[float]) -> None:
        self.calls.append(("clear", tuple(color)))

    def set_viewport(self, width: int, height: int) -> None:
        self.calls.append(("viewport", width, height))

    def release(self) -> None:
        self.released = True

    def names(self) -> list[str]:
        """記録された呼び出しの種別だけを返す。"""
        return [c[0] for c in self.calls]


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def make_backend() -> type[FakeBackend]:
    """失敗段階などを指定して生成するためのクラスそのもの。"""
    return FakeBackend


@pytest.fixture(autouse=True)
def default_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """FV_* 環境変数を外し、設定を既定値で読み直す。"""
    for name in (
        "FV_ZOOM_LEVEL_MIN",
        "FV_ZOOM_LEVEL_MAX",
        "FV_ZOOM_SPEED_EPSILON",
        "FV_DEBUG_SCHEDULER",
        "FV_SHADER_DEBUG",
    ):
        monkeypatch.delenv(name, raising=False)
    reload_from_env()
    yield
    reload_from_env()


@pytest.fixture()
def camera() -> CameraController:
    cam = CameraController()
    cam.resize(800, 600)
    return cam
