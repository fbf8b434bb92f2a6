"""
どこで: `engine.core` の描画ウィンドウ薄ラッパ。
何を: Pyglet Window（リサイズ可・vsync）と、描画が行われたフレームだけバッファを入れ替える flip 制御。
なぜ: スケジューラが描画を省いたフレームで未描画のバックバッファを表示しないため。

使用例:
    win = RenderWindow(1280, 720, frame_counter=lambda: scheduler.render_count)
    pyglet.clock.schedule_interval(scheduler.tick, 1 / 60)
    pyglet.app.run()
"""

from typing import Callable

import pyglet
from pyglet.gl import Config


class RenderWindow(pyglet.window.Window):
    def __init__(
        self,
        width: int,
        height: int,
        *,
        frame_counter: Callable[[], int],
        caption: str = "fractalview",
    ):
        """ウィンドウを生成する。

        引数:
            width: ウィンドウ幅（ピクセル）。
            height: ウィンドウ高さ（ピクセル）。
            frame_counter: 描画済みフレーム数を返す関数。値が変わったときだけ flip する。
        """
        config = Config(double_buffer=True, vsync=True)
        super().__init__(
            width=width, height=height, caption=caption, resizable=True, config=config
        )
        self._frame_counter = frame_counter
        self._last_flipped = -1

    def on_draw(self):  # Pyglet 既定のイベント名
        """描画は FrameScheduler が tick 内で行うため、ここでは何もしない。"""

    def on_resize(self, width, height):
        """既定の glViewport/投影設定を抑止（ビューポートは描画パスが設定する）。"""
        return pyglet.event.EVENT_HANDLED

    def flip(self):
        n = self._frame_counter()
        if n == self._last_flipped:
            return
        self._last_flipped = n
        super().flip()
