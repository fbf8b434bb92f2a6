"""
どこで: `fractal` パッケージ。
何を: マンデルブロ/ジュリア集合ビューア固有の状態・プリセット・シェーダ。
なぜ: 汎用の `engine`（行列/カメラ/シーン/スケジューラ）とアプリ固有の表示ロジックを分けるため。
"""

from .controller import FractalController
from .presets import JULIA_PRESETS

__all__ = ["FractalController", "JULIA_PRESETS"]
