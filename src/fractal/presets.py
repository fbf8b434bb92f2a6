"""
どこで: `fractal.presets`
何を: `z` キーで巡回する複素定数の一覧（先頭はマンデルブロ集合）。
"""

from __future__ import annotations

# (0, 0) はシェーダ側でマンデルブロ集合として扱う
JULIA_PRESETS: tuple[tuple[float, float], ...] = (
    (0.0, 0.0),
    (-0.4, 0.6),
    (0.285, 0.0),
    (0.285, 0.01),
    (0.45, 0.1428),
    (-0.70176, -0.3842),
    (-0.835, -0.2321),
    (-0.8, 0.156),
    (-0.7269, 0.1889),
    (0.0, -0.8),
)

MANDELBROT_INDEX = 0


def preset(index: int) -> tuple[float, float]:
    """範囲外の index は末尾のプリセットに丸める。"""
    if 0 <= index < len(JULIA_PRESETS):
        return JULIA_PRESETS[index]
    return JULIA_PRESETS[-1]


__all__ = ["JULIA_PRESETS", "MANDELBROT_INDEX", "preset"]
