"""
どこで: `api` 入口（高レベル公開 API）。
何を: ビューアの起動関数とウィンドウ非依存の結線関数を再輸出。

Usage:
    from api import run_viewer

    run_viewer(width=1280, height=720, fps=60)
"""

from .viewer import Viewer, build_viewer, main, run_viewer

__all__ = ["Viewer", "build_viewer", "main", "run_viewer"]
