from __future__ import annotations

import pytest

from engine.camera.controller import CameraController
from engine.camera.navigation import Navigator
from engine.input.events import (
    InputQueue,
    KeyPress,
    PointerDown,
    PointerMove,
    PointerUp,
    Resize,
    Wheel,
)


@pytest.fixture()
def queue() -> InputQueue:
    return InputQueue()


def test_queue_drains_in_arrival_order(queue: InputQueue) -> None:
    queue.push(PointerDown(1, 2))
    queue.push(PointerUp())
    assert len(queue) == 2
    assert queue.drain() == [PointerDown(1, 2), PointerUp()]
    assert len(queue) == 0


def test_empty_queue_is_not_dirty(camera: CameraController, queue: InputQueue) -> None:
    assert Navigator(camera, queue)(16) is False


def test_drag_pans_and_stays_dirty(camera: CameraController, queue: InputQueue) -> None:
    nav = Navigator(camera, queue)
    queue.push(PointerDown(400, 300))
    queue.push(PointerMove(600, 300))
    assert nav(16) is True
    assert camera.camera_position.x == pytest.approx(-2.0 / 3.0)
    # ドラッグ中はイベントが無くても再描画を要求する
    assert nav(16) is True
    queue.push(PointerUp())
    assert nav(16) is False
    assert nav(16) is False


def test_wheel_starts_zoom_towards_pointer(camera: CameraController, queue: InputQueue) -> None:
    nav = Navigator(camera, queue)
    queue.push(Wheel(800, 300, delta_y=-1.0))
    assert nav(16) is True
    assert camera.zoom_speed == -1.0
    assert camera.zoom_target.as_tuple()[:2] == pytest.approx((1.0, 0.0))
    assert nav.pointer_world.x == pytest.approx(4.0 / 3.0)

    queue.push(Wheel(400, 300, delta_y=3.0))
    nav(16)
    assert camera.zoom_speed == 1.0


def test_wheel_ignored_while_panning(camera: CameraController, queue: InputQueue) -> None:
    nav = Navigator(camera, queue)
    queue.push(PointerDown(400, 300))
    queue.push(Wheel(400, 300, delta_y=-1.0))
    nav(16)
    assert camera.zoom_speed == 0.0


def test_pointer_move_tracks_world_position(camera: CameraController, queue: InputQueue) -> None:
    nav = Navigator(camera, queue)
    queue.push(PointerMove(400, 600))
    assert nav(16) is False
    assert nav.pointer_world.as_tuple()[:2] == pytest.approx((0.0, 1.0))


def test_key_handlers_receive_keys(camera: CameraController, queue: InputQueue) -> None:
    nav = Navigator(camera, queue)
    seen: list[str] = []

    def handler(key: str) -> bool:
        seen.append(key)
        return key == "c"

    nav.add_key_handler(handler)
    queue.push(KeyPress("z"))
    assert nav(16) is False
    queue.push(KeyPress("c"))
    assert nav(16) is True
    assert seen == ["z", "c"]

    nav.remove_key_handler(handler)
    queue.push(KeyPress("c"))
    assert nav(16) is False
    assert seen == ["z", "c"]


def test_resize_event_is_forwarded(camera: CameraController, queue: InputQueue) -> None:
    sizes: list[tuple[int, int]] = []
    nav = Navigator(camera, queue, on_resize=lambda w, h: sizes.append((w, h)))
    queue.push(Resize(1024, 768))
    assert nav(16) is False
    assert sizes == [(1024, 768)]
