"""
どこで: `engine.render` の高レベル描画。
何を: シーングラフの所有と 1 回分の描画パス（viewport → clear → program → view_projection → 木の走査）。
なぜ: 行列の転置転送・共有ジオメトリ解決・ルートノード管理を一箇所に集約し、ノード側へ必要な操作だけ注入するため。
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from ..camera.controller import CameraController
from ..core.errors import NoActiveProgramError
from ..core.matrix import Matrix4
from ..scene.node import Group, Primitive, SceneNode
from ..scene.registry import GeometryRef, GeometryRegistry
from .backend import GpuBackend

logger = logging.getLogger(__name__)


class SceneRenderer:
    def __init__(
        self,
        backend: GpuBackend,
        camera: CameraController,
        *,
        background: Sequence[float] = (0.0, 0.0, 0.0, 0.0),
    ) -> None:
        self.backend = backend
        self.camera = camera
        self.background = tuple(float(c) for c in background)
        self.registry = GeometryRegistry(backend)
        self._roots: list[SceneNode] = []

    # ---- プログラム ----------------------------------------------------
    @property
    def program(self) -> Any:
        return self.backend.active_program

    def set_program(self, program: Any) -> None:
        """描画に使うプログラムを切り替え、共有ジオメトリの頂点レイアウトを張り直す。"""
        changed = program is not self.backend.active_program
        self.backend.use_program(program)
        if changed and len(self.registry) > 0:
            self.registry.rebuild()

    # ---- シーン構築 ----------------------------------------------------
    def create_quad(self, x: float, y: float, width: float, height: float) -> Primitive:
        """ワールド矩形を覆う四角形。スケール → 平行移動の順でローカル変換を組む。"""
        ref = self.registry.quad()
        quad = Primitive(ref, upload_model=self.upload_model_matrix, draw=self.draw_geometry)
        quad.transform = quad.transform.scale(width, height, 1.0)
        quad.transform = quad.transform.translate(x, y, 0.0)
        return quad

    def create_group(self, children: Iterable[SceneNode] = ()) -> Group:
        return Group(children)

    def add_to_scene(self, node: SceneNode) -> None:
        self._roots.append(node)

    def remove_from_scene(self, node: SceneNode) -> bool:
        for i, n in enumerate(self._roots):
            if n is node:
                del self._roots[i]
                return True
        return False

    @property
    def roots(self) -> tuple[SceneNode, ...]:
        return tuple(self._roots)

    # ---- 転送/描画 -----------------------------------------------------
    def _require_program(self) -> Any:
        program = self.backend.active_program
        if program is None:
            raise NoActiveProgramError("cannot render without an active shader program")
        return program

    def upload_model_matrix(self, model: Matrix4) -> None:
        self.backend.set_uniform_mat4(
            self._require_program(), "model", model.transpose().as_flat_array()
        )

    def upload_view_projection_matrix(self) -> None:
        self.backend.set_uniform_mat4(
            self._require_program(),
            "view_projection",
            self.camera.view_projection().transpose().as_flat_array(),
        )

    def set_uniform_float(self, name: str, value: float) -> None:
        self.backend.set_uniform_float(self._require_program(), name, value)

    def set_uniform_vec2(self, name: str, value: Sequence[float]) -> None:
        self.backend.set_uniform_vec2(self._require_program(), name, value)

    def draw_geometry(self, ref: GeometryRef) -> None:
        self.backend.bind_and_draw(self.registry.resolve(ref))

    def render(self, viewport_size: tuple[int, int]) -> None:
        """1 回分の描画パス。"""
        program = self._require_program()
        self.backend.set_viewport(*viewport_size)
        self.backend.clear(self.background)
        self.backend.use_program(program)
        self.upload_view_projection_matrix()
        identity = Matrix4.identity()
        for node in tuple(self._roots):
            node.render(identity)

    def release(self) -> None:
        """GPU リソースを解放。"""
        self.registry.release()
        self.backend.release()


__all__ = ["SceneRenderer"]
