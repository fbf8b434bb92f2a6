"""
どこで: `engine.scene` サブパッケージ。
何を: シーングラフ（Primitive/Group）と共有ジオメトリのレジストリ。
"""

from .node import Group, Primitive, SceneNode
from .registry import GeometryRef, GeometryRegistry

__all__ = ["GeometryRef", "GeometryRegistry", "Group", "Primitive", "SceneNode"]
