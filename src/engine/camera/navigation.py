"""
どこで: `engine.camera.navigation`
何を: InputQueue を毎 tick 消費し、ドラッグ/ホイール/キー入力をカメラ操作へ変換する更新フック。
なぜ: 入力の到着タイミングとフレーム内の状態更新を分離し、カメラ以外（フラクタル切替等）へのキー委譲も一元化するため。
"""

from __future__ import annotations

import logging
from typing import Callable

from ..core.vector import Vector4
from ..input.events import (
    InputQueue,
    KeyPress,
    PointerDown,
    PointerMove,
    PointerUp,
    Resize,
    Wheel,
)
from .controller import CameraController

logger = logging.getLogger(__name__)

KeyHandler = Callable[[str], bool]


class Navigator:
    """パン/ズーム入力の更新フック（`scheduler.add_hook(navigator)` で登録）。"""

    def __init__(
        self,
        camera: CameraController,
        queue: InputQueue,
        on_resize: Callable[[int, int], None] | None = None,
    ) -> None:
        self.camera = camera
        self.queue = queue
        self._on_resize = on_resize
        self._key_handlers: list[KeyHandler] = []
        self.pointer_world = camera.camera_position

    def add_key_handler(self, handler: KeyHandler) -> None:
        """KeyPress を受け取るハンドラを追加。戻り値 True でシーン変化とみなす。"""
        self._key_handlers.append(handler)

    def remove_key_handler(self, handler: KeyHandler) -> None:
        self._key_handlers = [h for h in self._key_handlers if h is not handler]

    def __call__(self, frame_delta_ms: float) -> bool:
        changed = False
        for event in self.queue.drain():
            changed = self._apply(event) or changed
        return changed or self.camera.is_panning

    # ---- 内部 ----------------------------------------------------------
    def _track_pointer(self, x: float, y: float) -> Vector4:
        self.pointer_world = self.camera.screen_to_world(x, y)
        return self.pointer_world

    def _apply(self, event: object) -> bool:
        camera = self.camera
        if isinstance(event, PointerDown):
            camera.begin_pan(event.x, event.y)
            return True
        if isinstance(event, PointerUp):
            camera.end_pan()
            return False
        if isinstance(event, PointerMove):
            self._track_pointer(event.x, event.y)
            return camera.pan_to(event.x, event.y)
        if isinstance(event, Wheel):
            # ドラッグ中はズームしない
            if camera.is_panning:
                return False
            target = self._track_pointer(event.x, event.y)
            return camera.begin_zoom(target, zoom_out=event.delta_y > 0)
        if isinstance(event, KeyPress):
            handled = False
            for handler in tuple(self._key_handlers):
                handled = bool(handler(event.key)) or handled
            return handled
        if isinstance(event, Resize):
            if self._on_resize is not None:
                self._on_resize(event.w, event.h)
            return False
        logger.debug("ignoring unknown input event %r", event)
        return False


__all__ = ["KeyHandler", "Navigator"]
