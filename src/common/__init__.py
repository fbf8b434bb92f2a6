"""
どこで: `common` パッケージ。
何を: 環境変数パース・型付き設定・ロギング初期化の軽量ユーティリティ。
なぜ: engine/fractal/api から再利用する共通基盤を分離し、依存の向きを単純化するため。
"""

from .logging import setup_default_logging
from .settings import get as get_settings
from .settings import reload_from_env

__all__ = [
    "get_settings",
    "reload_from_env",
    "setup_default_logging",
]
