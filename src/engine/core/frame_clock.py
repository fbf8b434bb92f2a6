"""
どこで: `engine.core` のフレームスケジューラ。
何を: dirty フラグ駆動の 1 tick（resize 判定 → 更新フック全実行 → 必要時のみ描画）を行う `FrameScheduler`。
なぜ: 変化の無いフレームの再描画を省き、プラットフォームのフレームコールバックを薄いドライバに留めるため。

駆動モデル:
- 単一スレッド・協調的。`advance(frame_delta_ms)` が唯一の入口で、テストからも直接呼べる。
- pyglet 等のタイマからは `tick(dt)` を登録する（dt は秒）。
- ループの停止は外部（ウィンドウ/プロセス終了）が担う。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Hashable, Iterable, Protocol

from common.settings import get as get_settings

from .tickable import UpdateHook

logger = logging.getLogger(__name__)


class ResizableCamera(Protocol):
    def resize(self, width: int, height: int) -> bool: ...


class ScenePass(Protocol):
    def render(self, viewport_size: tuple[int, int]) -> None: ...


@dataclass(frozen=True, eq=False)
class HookHandle:
    """登録済みフックへの参照（同一性で比較する）。"""

    hook: UpdateHook
    tag: Hashable | None = field(default=None)


class FrameScheduler:
    """更新フックを登録順に実行し、dirty なフレームだけ描画する。"""

    def __init__(
        self,
        camera: ResizableCamera,
        renderer: ScenePass,
        viewport_size: tuple[int, int],
        hooks: Iterable[UpdateHook] = (),
    ) -> None:
        self._camera = camera
        self._renderer = renderer
        self._viewport_size = (int(viewport_size[0]), int(viewport_size[1]))
        self._hooks: list[HookHandle] = []
        self._last_frame_time: float | None = None
        self.render_count: int = 0
        for h in hooks:
            self.add_hook(h)

    # ---- フック登録 ----------------------------------------------------
    def add_hook(self, hook: UpdateHook, tag: Hashable | None = None) -> HookHandle:
        """フックを末尾に追加し、削除用のハンドルを返す。"""
        handle = HookHandle(hook=hook, tag=tag)
        self._hooks.append(handle)
        return handle

    def remove_hook(self, handle_or_tag: HookHandle | Hashable) -> bool:
        """ハンドル（同一性）またはタグでフックを外す。見つからなければ False。"""
        before = len(self._hooks)
        if isinstance(handle_or_tag, HookHandle):
            self._hooks = [h for h in self._hooks if h is not handle_or_tag]
        else:
            self._hooks = [h for h in self._hooks if h.tag is None or h.tag != handle_or_tag]
        return len(self._hooks) != before

    @property
    def hooks(self) -> tuple[HookHandle, ...]:
        return tuple(self._hooks)

    # ---- viewport -----------------------------------------------------
    @property
    def viewport_size(self) -> tuple[int, int]:
        return self._viewport_size

    def set_viewport_size(self, width: int, height: int) -> None:
        """次の tick の resize 判定で使うビューポート寸法を記録する。"""
        self._viewport_size = (int(width), int(height))

    # ---- 駆動 ---------------------------------------------------------
    def advance(self, frame_delta_ms: float) -> bool:
        """1 tick 進め、描画を行ったかを返す。

        フックは短絡評価せず全て呼ぶ（戻り値以外にカメラ/uniform の副作用を持つため）。
        """
        # フック内で変わった寸法は次の tick で反映する
        size = self._viewport_size
        dirty = bool(self._camera.resize(*size))
        for handle in tuple(self._hooks):
            changed = handle.hook(frame_delta_ms)
            dirty = bool(changed) or dirty

        if dirty:
            self._renderer.render(size)
            self.render_count += 1
        if get_settings().DEBUG_SCHEDULER:
            logger.debug(
                "tick dt=%.3fms dirty=%s renders=%d", frame_delta_ms, dirty, self.render_count
            )
        return dirty

    # GUI フレームワークから schedule_interval で呼ばせる
    def tick(self, dt: float | None = None) -> None:
        if dt is None:  # pyglet は dt（秒）を渡してくれる
            now = time.perf_counter() * 1000.0  # 他フレームワーク用
            if self._last_frame_time is None:
                self._last_frame_time = now
            frame_delta_ms = now - self._last_frame_time
            self._last_frame_time = now
        else:
            frame_delta_ms = float(dt) * 1000.0
        self.advance(frame_delta_ms)


__all__ = ["FrameScheduler", "HookHandle"]
