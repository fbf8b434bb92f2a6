"""
どこで: `engine.scene.registry`
何を: 複数の Primitive が共有する GPU ジオメトリ（単位四角形など）の所有者。
なぜ: 形状ごとに VBO を確保せず、プロセス内で 1 つのバッファを遅延生成して使い回すため。

Primitive は実体ではなく軽量ハンドル `GeometryRef` を保持し、描画時に `resolve()` で引く。
これによりプログラム切替時の VAO 張り直し（`rebuild`）でもハンドルは無効化されない。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from ..core.errors import NoActiveProgramError

logger = logging.getLogger(__name__)

QUAD = "quad"

# 名前 → ファクトリの生成メソッド名
_BUILDERS = {QUAD: "create_quad_geometry"}


class GeometryFactory(Protocol):
    @property
    def active_program(self) -> Any: ...

    def create_quad_geometry(self, program: Any) -> Any: ...

    def release_geometry(self, geometry: Any) -> None: ...


@dataclass(frozen=True)
class GeometryRef:
    """共有ジオメトリへの名前付き参照。"""

    name: str


class GeometryRegistry:
    def __init__(self, factory: GeometryFactory) -> None:
        self._factory = factory
        self._geometries: dict[str, Any] = {}
        self.created_count: int = 0

    def _require_program(self) -> Any:
        program = self._factory.active_program
        if program is None:
            raise NoActiveProgramError()
        return program

    def quad(self) -> GeometryRef:
        """単位四角形 (0,0)-(1,1) への参照を返す。初回のみ生成する。"""
        if QUAD not in self._geometries:
            program = self._require_program()
            self._geometries[QUAD] = self._factory.create_quad_geometry(program)
            self.created_count += 1
            logger.debug("created shared quad geometry")
        return GeometryRef(QUAD)

    def resolve(self, ref: GeometryRef) -> Any:
        return self._geometries[ref.name]

    def __contains__(self, name: str) -> bool:
        return name in self._geometries

    def __len__(self) -> int:
        return len(self._geometries)

    def rebuild(self) -> None:
        """現在のプログラムに対して頂点レイアウトを張り直す（プログラム切替時）。"""
        program = self._require_program()
        for name in list(self._geometries):
            self._factory.release_geometry(self._geometries[name])
            self._geometries[name] = getattr(self._factory, _BUILDERS[name])(program)
            self.created_count += 1

    def release(self) -> None:
        for geometry in self._geometries.values():
            self._factory.release_geometry(geometry)
        self._geometries.clear()


__all__ = ["GeometryRef", "GeometryRegistry", "QUAD"]
