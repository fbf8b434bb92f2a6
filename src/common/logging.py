"""
どこで: `common.logging`
何を: ランナー/CLI 用のロギング初期化ヘルパ。
なぜ: ライブラリ側は `logging.getLogger(__name__)` のみを使い、設定はエントリポイントへ集約するため。
"""

from __future__ import annotations

import logging

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_default_logging(level: int | str = "INFO") -> None:
    """最小限のロギング設定を 1 度だけ適用する。

    - ルートロガーにハンドラが既にあれば何もしない（no-op）
    - 上位のランナー/CLI から呼び出す想定
    """
    if isinstance(level, str):
        lvl = getattr(logging, level.upper(), logging.INFO)
    else:
        lvl = int(level)

    root = logging.getLogger()
    if root.handlers:
        # アプリ側で設定済み
        return
    logging.basicConfig(level=lvl, format=_FORMAT)


__all__ = ["setup_default_logging"]
