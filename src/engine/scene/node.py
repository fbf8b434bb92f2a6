"""
どこで: `engine.scene.node`
何を: 描画可能ノード（葉 `Primitive` / 合成 `Group`）とローカル変換の合成。
なぜ: 祖先の model 行列とローカル変換を掛け合わせながら木を下る描画を、GPU 実装から切り離して表現するため。

- ローカル変換は生成時または明示 API（`scale`/`translate`/`apply_transform`）でのみ変わる。
- `render()` は変換を読むだけで、副作用は GPU 側への uniform 転送と描画命令に限る。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Iterable

from ..core.matrix import Matrix4


class SceneNode(ABC):
    def __init__(self) -> None:
        self.transform = Matrix4.identity()

    def apply_transform(self, matrix: Matrix4) -> None:
        """ローカル変換の後ろに `matrix` を合成する。"""
        self.transform = self.transform.multiply(matrix)

    def scale(self, x: float, y: float, z: float) -> None:
        self.transform = self.transform.scale(x, y, z)

    def translate(self, x: float, y: float, z: float) -> None:
        self.transform = self.transform.translate(x, y, z)

    @abstractmethod
    def render(self, ancestor_model: Matrix4) -> None:
        """祖先の model 行列を受け取って描画する。"""


class Primitive(SceneNode):
    """共有ジオメトリへの参照を持つ葉ノード。

    `upload_model` と `draw` は所有者（SceneRenderer）から生成時に注入される。
    """

    def __init__(
        self,
        geometry: Any,
        upload_model: Callable[[Matrix4], None],
        draw: Callable[[Any], None],
    ) -> None:
        super().__init__()
        self.geometry = geometry
        self._upload_model = upload_model
        self._draw = draw

    def render(self, ancestor_model: Matrix4) -> None:
        self._upload_model(ancestor_model.multiply(self.transform))
        self._draw(self.geometry)


class Group(SceneNode):
    """子ノードを登録順に描画する合成ノード（自前のジオメトリは持たない）。"""

    def __init__(self, children: Iterable[SceneNode] = ()) -> None:
        super().__init__()
        self._children: list[SceneNode] = list(children)

    @property
    def children(self) -> tuple[SceneNode, ...]:
        return tuple(self._children)

    def add(self, child: SceneNode) -> None:
        self._children.append(child)

    def remove(self, child: SceneNode) -> bool:
        for i, c in enumerate(self._children):
            if c is child:
                del self._children[i]
                return True
        return False

    def render(self, ancestor_model: Matrix4) -> None:
        combined = ancestor_model.multiply(self.transform)
        for child in tuple(self._children):
            child.render(combined)


__all__ = ["Group", "Primitive", "SceneNode"]
