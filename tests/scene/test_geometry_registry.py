from __future__ import annotations

import pytest

from engine.core.errors import NoActiveProgramError
from engine.scene.registry import QUAD, GeometryRef, GeometryRegistry


def test_quad_requires_active_program(fake_backend) -> None:
    reg = GeometryRegistry(fake_backend)
    with pytest.raises(NoActiveProgramError):
        reg.quad()
    assert len(reg) == 0


def test_quad_is_created_once(fake_backend) -> None:
    fake_backend.use_program(object())
    reg = GeometryRegistry(fake_backend)
    r1 = reg.quad()
    r2 = reg.quad()
    assert r1 == r2 == GeometryRef(QUAD)
    assert reg.created_count == 1
    assert len(fake_backend.geometries) == 1
    assert reg.resolve(r1) is fake_backend.geometries[0]
    assert QUAD in reg


def test_rebuild_recreates_against_new_program(fake_backend) -> None:
    first, second = object(), object()
    fake_backend.use_program(first)
    reg = GeometryRegistry(fake_backend)
    ref = reg.quad()
    old = reg.resolve(ref)

    fake_backend.use_program(second)
    reg.rebuild()
    assert old.released is True
    assert reg.resolve(ref).program is second
    assert reg.created_count == 2


def test_release_frees_everything(fake_backend) -> None:
    fake_backend.use_program(object())
    reg = GeometryRegistry(fake_backend)
    geometry = reg.resolve(reg.quad())
    reg.release()
    assert geometry.released is True
    assert len(reg) == 0
