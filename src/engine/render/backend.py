"""
どこで: `engine.render.backend`
何を: GPU 描画協調者の Protocol `GpuBackend` と ModernGL 実装 `ModernGLBackend`。
なぜ: シーン/スケジューラからは不透明なシンクとして扱い、テストでは記録用の偽実装へ差し替えるため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

import moderngl as mgl
import numpy as np

from ..core.errors import ShaderError

logger = logging.getLogger(__name__)

# 単位四角形（TRIANGLE_STRIP 順）
QUAD_VERTICES = np.array(
    [
        0.0, 0.0,
        0.0, 1.0,
        1.0, 0.0,
        1.0, 1.0,
    ],
    dtype=np.float32,
)


class GpuBackend(Protocol):
    @property
    def active_program(self) -> Any: ...

    def compile_program(self, vertex_src: str, fragment_src: str) -> Any: ...

    def use_program(self, program: Any) -> None: ...

    def create_quad_geometry(self, program: Any) -> Any: ...

    def release_geometry(self, geometry: Any) -> None: ...

    def set_uniform_mat4(self, program: Any, name: str, value: np.ndarray) -> None: ...

    def set_uniform_vec2(self, program: Any, name: str, value: Sequence[float]) -> None: ...

    def set_uniform_float(self, program: Any, name: str, value: float) -> None: ...

    def bind_and_draw(self, geometry: Any) -> None: ...

    def clear(self, color: Sequence[float]) -> None: ...

    def set_viewport(self, width: int, height: int) -> None: ...

    def release(self) -> None: ...


@dataclass
class QuadGeometry:
    """VBO とそれを参照する VAO の組。"""

    vbo: Any
    vao: Any
    vertex_count: int = 4


def classify_shader_error(message: str) -> str:
    """ModernGL のエラーメッセージから失敗段階を推定する。"""
    lowered = message.lower()
    if "linker" in lowered:
        return "link"
    if "fragment_shader" in lowered or "fragment shader" in lowered:
        return "fragment"
    if "vertex_shader" in lowered or "vertex shader" in lowered:
        return "vertex"
    return "link"


class ModernGLBackend:
    """ModernGL コンテキストの薄いラッパ。"""

    def __init__(self, ctx: Any) -> None:
        self.ctx = ctx
        self._program: Any = None
        self._programs: list[Any] = []

    @property
    def active_program(self) -> Any:
        return self._program

    # ---- プログラム -----------------------------------------------------
    def compile_program(self, vertex_src: str, fragment_src: str) -> Any:
        """シェーダをコンパイル/リンクする。失敗は `ShaderError` に変換して送出。"""
        try:
            program = self.ctx.program(vertex_shader=vertex_src, fragment_shader=fragment_src)
        except mgl.Error as exc:
            log = str(exc)
            stage = classify_shader_error(log)
            logger.error("%s shader failed to build: %s", stage, log)
            raise ShaderError(stage, log) from exc
        self._programs.append(program)
        return program

    def use_program(self, program: Any) -> None:
        # ModernGL は描画時にプログラムを自動バインドするため、ここでは記録のみ
        self._program = program

    # ---- ジオメトリ -----------------------------------------------------
    def create_quad_geometry(self, program: Any) -> QuadGeometry:
        vbo = self.ctx.buffer(QUAD_VERTICES.tobytes())
        vao = self.ctx.vertex_array(program, [(vbo, "2f", "position")])
        return QuadGeometry(vbo=vbo, vao=vao)

    def release_geometry(self, geometry: QuadGeometry) -> None:
        geometry.vao.release()
        geometry.vbo.release()

    def bind_and_draw(self, geometry: QuadGeometry) -> None:
        geometry.vao.render(mgl.TRIANGLE_STRIP, vertices=geometry.vertex_count)

    # ---- uniform -------------------------------------------------------
    def _member(self, program: Any, name: str) -> Any:
        member = program.get(name, None)
        if member is None:
            # 最適化で削除された uniform は書き込みを省略
            logger.debug("uniform %r not active in program; skipped", name)
        return member

    def set_uniform_mat4(self, program: Any, name: str, value: np.ndarray) -> None:
        member = self._member(program, name)
        if member is not None:
            member.write(np.asarray(value, dtype=np.float32).tobytes())

    def set_uniform_vec2(self, program: Any, name: str, value: Sequence[float]) -> None:
        member = self._member(program, name)
        if member is not None:
            member.value = (float(value[0]), float(value[1]))

    def set_uniform_float(self, program: Any, name: str, value: float) -> None:
        member = self._member(program, name)
        if member is not None:
            member.value = float(value)

    # ---- フレーム ------------------------------------------------------
    def clear(self, color: Sequence[float]) -> None:
        """画面を指定色でクリア"""
        self.ctx.clear(*color)

    def set_viewport(self, width: int, height: int) -> None:
        self.ctx.viewport = (0, 0, int(width), int(height))

    def release(self) -> None:
        """GPU のプログラムを解放する（終了時に使う）"""
        for program in self._programs:
            program.release()
        self._programs.clear()
        self._program = None


__all__ = ["GpuBackend", "ModernGLBackend", "QuadGeometry", "QUAD_VERTICES", "classify_shader_error"]
