from __future__ import annotations

import pytest

from engine.core.matrix import Matrix4
from engine.core.vector import Vector4
from engine.scene.node import Group, Primitive


class Recorder:
    def __init__(self) -> None:
        self.models: list[Matrix4] = []
        self.draws: list[object] = []

    def primitive(self, name: str) -> Primitive:
        return Primitive(name, upload_model=self.models.append, draw=self.draws.append)


def _origin(m: Matrix4) -> tuple[float, float]:
    p = m.multiply_vector(Vector4.point(0.0, 0.0))
    return p.x, p.y


def test_primitive_uploads_combined_model_then_draws() -> None:
    rec = Recorder()
    prim = rec.primitive("quad")
    prim.translate(1.0, 2.0, 0.0)
    prim.render(Matrix4.identity().translate(10.0, 0.0, 0.0))
    assert _origin(rec.models[0]) == pytest.approx((11.0, 2.0))
    assert rec.draws == ["quad"]


def test_group_composes_ancestor_transforms() -> None:
    rec = Recorder()
    a, b = rec.primitive("a"), rec.primitive("b")
    b.translate(0.0, 1.0, 0.0)
    group = Group([a, b])
    group.scale(2.0, 2.0, 1.0)
    group.render(Matrix4.identity())

    assert rec.draws == ["a", "b"]
    assert _origin(rec.models[0]) == pytest.approx((0.0, 0.0))
    # 子のローカル変換の後に親のスケールが掛かる
    assert _origin(rec.models[1]) == pytest.approx((0.0, 2.0))


def test_nested_groups() -> None:
    rec = Recorder()
    leaf = rec.primitive("leaf")
    inner = Group([leaf])
    inner.translate(1.0, 0.0, 0.0)
    outer = Group([inner])
    outer.translate(0.0, 5.0, 0.0)
    outer.render(Matrix4.identity())
    assert _origin(rec.models[0]) == pytest.approx((1.0, 5.0))


def test_apply_transform_post_multiplies() -> None:
    rec = Recorder()
    prim = rec.primitive("p")
    prim.translate(1.0, 0.0, 0.0)
    prim.apply_transform(Matrix4.identity().scale(3.0, 3.0, 1.0))
    # scale が先に作用し、その後 translate
    p = prim.transform.multiply_vector(Vector4.point(1.0, 0.0))
    assert (p.x, p.y) == pytest.approx((4.0, 0.0))


def test_group_add_remove() -> None:
    rec = Recorder()
    a, b = rec.primitive("a"), rec.primitive("b")
    group = Group()
    group.add(a)
    group.add(b)
    assert group.children == (a, b)
    assert group.remove(a) is True
    assert group.remove(a) is False
    group.render(Matrix4.identity())
    assert rec.draws == ["b"]


def test_render_does_not_mutate_transforms() -> None:
    rec = Recorder()
    prim = rec.primitive("p")
    prim.scale(2.0, 2.0, 1.0)
    before = prim.transform
    Group([prim]).render(Matrix4.identity().translate(3.0, 3.0, 0.0))
    assert prim.transform == before
