"""
どこで: `fractal.controller`
何を: 色相サイクル・ジュリア定数切替・キー操作（z/x/c/v）を更新フックとして提供する。
なぜ: フラクタル固有の uniform 更新をカメラ/スケジューラから切り離し、必要な操作だけ注入して動かすため。
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol, Sequence

from engine.camera.controller import CameraController
from engine.core.vector import Vector4

from .presets import JULIA_PRESETS, preset

logger = logging.getLogger(__name__)

CYCLE_MODULUS = 1024.0


class UniformSink(Protocol):
    def set_uniform_float(self, name: str, value: float) -> None: ...

    def set_uniform_vec2(self, name: str, value: Sequence[float]) -> None: ...


class FractalController:
    """フラクタル表示の状態（色相/プリセット/エクストリームモード）を持つ。

    `cycle` と `switch` を `FrameScheduler.add_hook` に、`handle_key` を
    `Navigator.add_key_handler` に登録して使う。
    """

    def __init__(
        self,
        uniforms: UniformSink,
        camera: CameraController,
        pointer_world: Callable[[], Vector4],
        *,
        cycle_speed: float = 200.0,
        cycle_speed_extreme: float = 10.0,
    ) -> None:
        self._uniforms = uniforms
        self._camera = camera
        self._pointer_world = pointer_world
        self.cycle_speed = float(cycle_speed)
        self.cycle_speed_extreme = float(cycle_speed_extreme)
        self.color_cycle: float = 0.0
        self.extreme_mode = False
        self.desired_julia = 0
        self.current_julia = -1

    # ---- 更新フック ----------------------------------------------------
    def cycle(self, frame_delta_ms: float) -> bool:
        """色相を進めて uniform `continuous_cycle` に書く。常に再描画を要求する。"""
        speed = self.cycle_speed_extreme if self.extreme_mode else self.cycle_speed
        self.color_cycle = (self.color_cycle + frame_delta_ms / speed) % CYCLE_MODULUS
        self._uniforms.set_uniform_float("continuous_cycle", self.color_cycle)
        return True

    def switch(self, frame_delta_ms: float) -> bool:
        """選択中のプリセットが変わったときだけ `julia_constant` を書く。"""
        if self.current_julia == self.desired_julia:
            return False
        self.current_julia = self.desired_julia
        c = preset(self.current_julia)
        self._uniforms.set_uniform_vec2("julia_constant", c)
        logger.debug("switched to preset %d c=%s", self.current_julia, c)
        return True

    # ---- キー操作 ------------------------------------------------------
    def handle_key(self, key: str) -> bool:
        """z: 次のプリセット / x: エクストリームモード / c: ズームアウト / v: ズームイン。"""
        if key == "z":
            self.desired_julia = (self.desired_julia + 1) % len(JULIA_PRESETS)
            return False  # 反映は switch() が行う
        if key == "x":
            self.extreme_mode = not self.extreme_mode
            return False
        if key == "c":
            return self._camera.begin_zoom(self._pointer_world(), zoom_out=True)
        if key == "v":
            return self._camera.begin_zoom(self._pointer_world(), zoom_out=False)
        return False


__all__ = ["CYCLE_MODULUS", "FractalController", "UniformSink"]
