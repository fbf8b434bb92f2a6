"""
どこで: `api.viewer`（実行ランナー）。
何を: 設定解決 → ウィンドウ/ModernGL 生成 → シーン/カメラ/フック結線 → pyglet ループ駆動。
なぜ: コア（行列/カメラ/スケジューラ）をプラットフォームから切り離し、フレームコールバックを薄いドライバに留めるため。

実行フロー（概要）:
1) 設定解決: 明示引数 > `config.yaml` > `configs/default.yaml` > 組み込み既定値。
2) ウィンドウ/GL: `RenderWindow` と ModernGL コンテキストを生成し、`ModernGLBackend` で包む。
3) シェーダ: `fractal/shaders` をコンパイル。失敗時は内容をログに出して中断（`ShaderError`）。
4) シーン: ワールド矩形を覆う四角形 1 枚を Group に入れてルートへ登録。
5) フック: Navigator（入力→カメラ）・ズーム・色相サイクル・プリセット切替を登録順に追加。
6) フレーム駆動: `pyglet.clock.schedule_interval(scheduler.tick, 1 / fps)`。
   `ESC` でウィンドウを閉じ、GPU リソースを解放する。

操作:
- ドラッグ: パン / ホイール: ズーム / z: プリセット切替 / x: エクストリームモード
- c / v: ポインタ位置へ向けてズームアウト / ズームイン
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Any, Sequence

from common.logging import setup_default_logging
from engine.camera.controller import CameraController, PanBounds
from engine.camera.navigation import Navigator
from engine.core.errors import ShaderError
from engine.core.frame_clock import FrameScheduler
from engine.input.events import (
    InputQueue,
    KeyPress,
    PointerDown,
    PointerMove,
    PointerUp,
    Resize,
    Wheel,
)
from engine.render.backend import GpuBackend
from engine.render.renderer import SceneRenderer
from engine.render.shader import ShaderSources, create_program, load_sources
from engine.scene.node import Group
from fractal.controller import FractalController
from util.utils import ViewerConfig, resolve_viewer_config

logger = logging.getLogger(__name__)


@dataclass
class Viewer:
    """結線済みのビューア一式（ウィンドウ非依存）。"""

    config: ViewerConfig
    camera: CameraController
    renderer: SceneRenderer
    scheduler: FrameScheduler
    queue: InputQueue
    navigator: Navigator
    fractal: FractalController
    scene: Group

    def release(self) -> None:
        self.renderer.release()


def build_viewer(
    backend: GpuBackend,
    config: ViewerConfig,
    *,
    viewport_size: tuple[int, int] | None = None,
    sources: ShaderSources | None = None,
) -> Viewer:
    """バックエンドを受け取り、シーン/カメラ/フックを結線して返す。"""
    program = create_program(backend, sources if sources is not None else load_sources())

    x_min, x_max, y_min, y_max = config.pan_bounds
    camera = CameraController(
        bounds=PanBounds(x_min, x_max, y_min, y_max),
        position=config.camera_position,
    )
    renderer = SceneRenderer(backend, camera, background=config.background)
    renderer.set_program(program)

    qx, qy, qw, qh = config.quad
    scene = renderer.create_group([renderer.create_quad(qx, qy, qw, qh)])
    renderer.add_to_scene(scene)

    size = viewport_size if viewport_size is not None else (config.width, config.height)
    scheduler = FrameScheduler(camera, renderer, size)

    queue = InputQueue()
    navigator = Navigator(camera, queue, on_resize=scheduler.set_viewport_size)
    fractal = FractalController(
        renderer,
        camera,
        lambda: navigator.pointer_world,
        cycle_speed=config.cycle_speed,
        cycle_speed_extreme=config.cycle_speed_extreme,
    )
    navigator.add_key_handler(fractal.handle_key)

    scheduler.add_hook(navigator, tag="navigation")
    scheduler.add_hook(camera.tick_zoom, tag="zoom")
    scheduler.add_hook(fractal.cycle, tag="cycle")
    scheduler.add_hook(fractal.switch, tag="switch")

    return Viewer(
        config=config,
        camera=camera,
        renderer=renderer,
        scheduler=scheduler,
        queue=queue,
        navigator=navigator,
        fractal=fractal,
        scene=scene,
    )


def _wire_window_events(window: Any, viewer: Viewer, pyglet_mod: Any) -> None:
    from pyglet.window import key

    queue = viewer.queue

    @window.event
    def on_mouse_press(x, y, button, modifiers):  # noqa: ANN001
        queue.push(PointerDown(x, y))

    @window.event
    def on_mouse_release(x, y, button, modifiers):  # noqa: ANN001
        queue.push(PointerUp())

    @window.event
    def on_mouse_motion(x, y, dx, dy):  # noqa: ANN001
        queue.push(PointerMove(x, y))

    @window.event
    def on_mouse_drag(x, y, dx, dy, buttons, modifiers):  # noqa: ANN001
        queue.push(PointerMove(x, y))

    @window.event
    def on_mouse_scroll(x, y, scroll_x, scroll_y):  # noqa: ANN001
        # pyglet は手前回しが負。ブラウザの deltaY と符号を揃える
        queue.push(Wheel(x, y, delta_y=-scroll_y))

    @window.event
    def on_resize(width, height):  # noqa: ANN001
        queue.push(Resize(width, height))

    def _shutdown() -> None:
        if getattr(_shutdown, "_closed", False):
            return
        setattr(_shutdown, "_closed", True)
        pyglet_mod.clock.unschedule(viewer.scheduler.tick)
        viewer.release()
        window.close()
        pyglet_mod.app.exit()

    @window.event
    def on_key_press(symbol, modifiers):  # noqa: ANN001
        if symbol == key.ESCAPE:
            _shutdown()
            return pyglet_mod.event.EVENT_HANDLED
        queue.push(KeyPress(key.symbol_string(symbol).lower()))
        return pyglet_mod.event.EVENT_HANDLED

    @window.event
    def on_close():
        _shutdown()
        return pyglet_mod.event.EVENT_HANDLED


def run_viewer(
    *,
    width: int | None = None,
    height: int | None = None,
    fps: int | None = None,
    background: Sequence[float] | None = None,
    init_only: bool = False,
) -> ViewerConfig:
    """ビューアを起動する。`init_only=True` なら設定解決のみで戻る（GL/ウィンドウ不要）。"""
    config = resolve_viewer_config(
        width=width, height=height, fps=fps, background=background
    )
    logger.info(
        "viewer %dx%d @%dfps quad=%s camera=%s",
        config.width,
        config.height,
        config.fps,
        config.quad,
        config.camera_position,
    )
    if init_only:
        return config

    import moderngl
    import pyglet

    from engine.core.render_window import RenderWindow
    from engine.render.backend import ModernGLBackend

    holder: dict[str, Viewer] = {}
    window = RenderWindow(
        config.width,
        config.height,
        frame_counter=lambda: holder["viewer"].scheduler.render_count if holder else 0,
    )
    ctx = moderngl.create_context()
    backend = ModernGLBackend(ctx)
    try:
        viewer = build_viewer(backend, config, viewport_size=(window.width, window.height))
    except ShaderError as exc:
        logger.error("aborting start-up: %s shader did not build", exc.stage)
        window.close()
        raise
    holder["viewer"] = viewer

    _wire_window_events(window, viewer, pyglet)
    pyglet.clock.schedule_interval(viewer.scheduler.tick, 1 / config.fps)
    pyglet.app.run()
    return config


def main(argv: Sequence[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="fractalview",
        description="Interactive Mandelbrot/Julia viewer",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--width", type=int, default=None, help="window width in pixels")
    parser.add_argument("--height", type=int, default=None, help="window height in pixels")
    parser.add_argument("--fps", type=int, default=None, help="frame callback rate")
    parser.add_argument("--log-level", default="INFO", help="logging level")
    parser.add_argument(
        "--init-only",
        action="store_true",
        help="resolve configuration and exit without opening a window",
    )
    args = parser.parse_args(argv)

    setup_default_logging(args.log_level)
    try:
        run_viewer(width=args.width, height=args.height, fps=args.fps, init_only=args.init_only)
    except ShaderError as exc:
        logger.error("shader build failed (%s): %s", exc.stage, exc.log)
        return 1
    return 0


__all__ = ["Viewer", "build_viewer", "main", "run_viewer"]
