"""
どこで: `engine.camera.controller`
何を: 2D 正射影カメラ。投影/ビュー行列・パン範囲のクランプ・慣性ズーム状態機械・画面⇔ワールド変換。
なぜ: 入力デバイス座標からワールド座標への唯一の経路と、フレーム時間に比例するズーム則を一箇所に閉じ込めるため。

状態:
- `idle` / `panning` / `zooming`（パンとズームは排他。パン開始は進行中のズームを打ち切る）。
- ズーム速度は符号付き。正 = ズームアウト、負 = ズームイン。
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from common.settings import get as get_settings

from ..core.errors import ViewportNotSizedError
from ..core.matrix import Matrix4
from ..core.vector import Vector4

logger = logging.getLogger(__name__)


class CameraState(enum.Enum):
    IDLE = "idle"
    PANNING = "panning"
    ZOOMING = "zooming"


@dataclass(frozen=True)
class PanBounds:
    """カメラ位置/ズーム目標を収めるワールド座標の矩形。"""

    x_min: float = -2.0
    x_max: float = 1.0
    y_min: float = -1.0
    y_max: float = 1.0

    def clamp(self, x: float, y: float) -> tuple[float, float]:
        cx = min(max(float(x), self.x_min), self.x_max)
        cy = min(max(float(y), self.y_min), self.y_max)
        return cx, cy


class CameraController:
    def __init__(
        self,
        bounds: PanBounds | None = None,
        position: tuple[float, float, float] = (0.0, 0.0, 0.0),
    ) -> None:
        self.bounds = bounds if bounds is not None else PanBounds()
        self.projection_matrix = Matrix4.identity()
        self.view_matrix = Matrix4.identity()
        self.camera_position = Vector4.point(0.0, 0.0, 0.0)
        self.zoom_level: float = 1.0
        self.zoom_speed: float = 0.0
        self.zoom_target = Vector4.point(0.0, 0.0, 0.0)
        self._viewport: tuple[int, int] | None = None
        self._panning = False
        self._drag_point = Vector4.point(0.0, 0.0, 0.0)
        self._drag_camera_start = self.camera_position
        self.set_camera_position(*position)

    # ---- 状態 ----------------------------------------------------------
    @property
    def state(self) -> CameraState:
        if self._panning:
            return CameraState.PANNING
        if self.zoom_speed != 0:
            return CameraState.ZOOMING
        return CameraState.IDLE

    @property
    def is_panning(self) -> bool:
        return self._panning

    @property
    def viewport_size(self) -> tuple[int, int] | None:
        return self._viewport

    # ---- 位置 ----------------------------------------------------------
    def set_camera_position(self, x: float, y: float, z: float) -> None:
        """位置を設定する。範囲外の (x, y) は黙ってクランプされる。"""
        cx, cy = self.bounds.clamp(x, y)
        if (cx, cy) != (x, y):
            logger.debug("camera position (%.6g, %.6g) clamped to (%.6g, %.6g)", x, y, cx, cy)
        self.camera_position = Vector4.point(cx, cy, float(z))
        self.view_matrix = Matrix4.identity().translate(-cx, -cy, -float(z))

    def translate_camera_position(self, dx: float, dy: float, dz: float) -> None:
        p = self.camera_position
        self.set_camera_position(p.x + dx, p.y + dy, p.z + dz)

    # ---- 座標変換 ------------------------------------------------------
    def unproject(self, screen_x: float, screen_y: float, depth: float) -> Vector4:
        """画面ピクセル座標 + 正規化深度 [0, 1] をビュー空間へ逆射影する。

        Raises
        ------
        ViewportNotSizedError
            まだ一度も `resize` されていない場合。
        """
        if self._viewport is None:
            raise ViewportNotSizedError("unproject requires a prior resize()")
        w, h = self._viewport
        ndc = Vector4(
            (2.0 * screen_x) / w - 1.0,
            (2.0 * screen_y) / h - 1.0,
            2.0 * depth - 1.0,
            1.0,
        )
        return self.projection_matrix.inverse().multiply_vector(ndc)

    def project(self, v: Vector4) -> Vector4:
        """ビュー空間の点を NDC へ写す（`unproject` の逆）。"""
        return self.projection_matrix.multiply_vector(v)

    def screen_to_world(self, screen_x: float, screen_y: float) -> Vector4:
        """画面座標をワールド座標の点へ（中間深度 0.5 を使う）。"""
        return self.view_matrix.inverse().multiply_vector(self.unproject(screen_x, screen_y, 0.5))

    def view_projection(self) -> Matrix4:
        return self.projection_matrix.multiply(self.view_matrix)

    # ---- リサイズ ------------------------------------------------------
    def resize(self, viewport_w: int, viewport_h: int) -> bool:
        """寸法が変わっていれば正射影を再計算し True を返す。

        短辺を [-1, 1] に正規化し、長辺をアスペクト比ぶん広げる。
        ズーム状態（目標/速度/倍率）はリセットされる。
        """
        size = (int(viewport_w), int(viewport_h))
        if size == self._viewport:
            return False
        if size[0] <= 0 or size[1] <= 0:
            # 最小化中など。前回の投影を保持する
            return False
        self._viewport = size

        aspect = size[0] / size[1]
        if aspect > 1:
            left, right, top, bottom = -aspect, aspect, 1.0, -1.0
        else:
            left, right, top, bottom = -1.0, 1.0, 1.0 / aspect, -1.0 / aspect
        self.projection_matrix = Matrix4.orthographic(left, right, bottom, top)

        self.zoom_target = self.camera_position
        self.zoom_speed = 0.0
        self.zoom_level = 1.0
        logger.debug("resize to %dx%d (aspect %.4f)", size[0], size[1], aspect)
        return True

    # ---- パン ----------------------------------------------------------
    def begin_pan(self, screen_x: float, screen_y: float) -> None:
        """ドラッグ開始。クリック位置とカメラ位置を記録し、ズームを止める。"""
        self.zoom_speed = 0.0
        self._panning = True
        self._drag_point = self.unproject(screen_x, screen_y, 0.0)
        self._drag_camera_start = self.camera_position

    def pan_to(self, screen_x: float, screen_y: float) -> bool:
        """ドラッグ中ならカメラを `開始位置 + クリック位置 - 現在位置` へ動かす。"""
        if not self._panning:
            return False
        self.zoom_speed = 0.0
        p = self.unproject(screen_x, screen_y, 0.0)
        start = self._drag_camera_start
        self.set_camera_position(
            start.x + self._drag_point.x - p.x,
            start.y + self._drag_point.y - p.y,
            start.z,
        )
        return True

    def end_pan(self) -> None:
        self._panning = False

    # ---- ズーム --------------------------------------------------------
    def begin_zoom(self, target: Vector4, zoom_out: bool) -> bool:
        """ズーム目標を設定し、同方向なら加速・逆方向なら単位速度で開始する。

        パン中は無視して False を返す。
        """
        if self._panning:
            return False
        tx, ty = self.bounds.clamp(target.x, target.y)
        self.zoom_target = Vector4.point(tx, ty, target.z)
        if zoom_out:
            self.zoom_speed = self.zoom_speed + 1.0 if self.zoom_speed > 0 else 1.0
        else:
            self.zoom_speed = self.zoom_speed - 1.0 if self.zoom_speed < 0 else -1.0
        return True

    def tick_zoom(self, frame_delta_ms: float) -> bool:
        """慣性ズームを 1 フレーム進める（フレーム時間比例）。速度 0 なら何もしない。"""
        if self.zoom_speed == 0:
            return False

        settings = get_settings()
        lo, hi = settings.ZOOM_LEVEL_MIN, settings.ZOOM_LEVEL_MAX
        zooming_out = self.zoom_speed > 0

        # (1) 投影のスケーリング。境界では速度を 0 にして即停止（反発なし）
        within = self.zoom_level > lo if zooming_out else self.zoom_level < hi
        if within:
            scale_factor = 1.0 - frame_delta_ms * self.zoom_speed / 1000.0
            new_level = self.zoom_level * scale_factor
            # 境界を跨ぐ 1 歩は境界ちょうどで止める
            if new_level <= lo:
                scale_factor, new_level = lo / self.zoom_level, lo
            elif new_level >= hi:
                scale_factor, new_level = hi / self.zoom_level, hi
            self.projection_matrix = self.projection_matrix.scale(scale_factor, scale_factor, 1.0)
            self.zoom_level = new_level
        else:
            logger.debug("zoom stopped at level %.6g", self.zoom_level)
            self.zoom_speed = 0.0

        # (2)(3) 目標へ向かう移動。ズームアウト時は目標から離れる
        p = self.camera_position
        movement = Vector4.direction(self.zoom_target.x - p.x, self.zoom_target.y - p.y).multiply(
            frame_delta_ms * abs(self.zoom_speed) / 1000.0
        )
        sign = -1.0 if zooming_out else 1.0
        self.translate_camera_position(sign * movement.x, sign * movement.y, 0.0)

        # (4) 速度の減衰
        self.zoom_speed *= max(0.0, 1.0 - frame_delta_ms / 1000.0)
        if abs(self.zoom_speed) < settings.ZOOM_SPEED_EPSILON:
            self.zoom_speed = 0.0
        return True


__all__ = ["CameraController", "CameraState", "PanBounds"]
