"""
どこで: `engine.core` の更新インターフェース。
何を: 1 フレーム更新フック `UpdateHook` と、プラットフォームから駆動される `Tickable` Protocol を定義。
なぜ: カメラ/色相サイクル/入力処理などフレーム駆動の処理を一様に扱い、変化の有無（dirty）を集約するため。
"""

from typing import Protocol


class UpdateHook(Protocol):
    """1 フレーム分の更新を行い、シーンが変化したかを返す。"""

    def __call__(self, frame_delta_ms: float) -> bool:
        """内部状態を `frame_delta_ms` ミリ秒ぶん進め、再描画が必要なら True。"""
        ...


class Tickable(Protocol):
    """GUI フレームワークのタイマから呼ばれるインターフェース。"""

    def tick(self, dt: float | None = None) -> None:
        """`dt` 秒ぶん進める（None なら自前で計測）。"""
        ...
