"""
どこで: `common.settings`
何を: ビューアの環境変数を型付きで一元管理し、起動時に読み込む。
なぜ: ズーム境界や減衰閾値などの定数を一箇所に集め、テストから差し替え可能にするため。
"""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_bool, env_float


@dataclass
class _Settings:
    # ズーム状態機械
    ZOOM_LEVEL_MIN: float = 1.0
    ZOOM_LEVEL_MAX: float = 30000.0
    ZOOM_SPEED_EPSILON: float = 0.005

    # Debug
    DEBUG_SCHEDULER: bool = False
    SHADER_DEBUG: bool = False


_settings = _Settings()


def reload_from_env() -> None:
    """環境変数から設定を再読込。

    - float は `env_float`、bool は `env_bool` を使用。
    - ズーム境界は MIN <= MAX を満たさない場合に既定値へ戻す。
    """
    _settings.ZOOM_LEVEL_MIN = env_float("FV_ZOOM_LEVEL_MIN", 1.0, min_value=1e-9)
    _settings.ZOOM_LEVEL_MAX = env_float("FV_ZOOM_LEVEL_MAX", 30000.0, min_value=1e-9)
    if _settings.ZOOM_LEVEL_MIN > _settings.ZOOM_LEVEL_MAX:
        _settings.ZOOM_LEVEL_MIN = 1.0
        _settings.ZOOM_LEVEL_MAX = 30000.0
    _settings.ZOOM_SPEED_EPSILON = env_float("FV_ZOOM_SPEED_EPSILON", 0.005, min_value=0.0)

    _settings.DEBUG_SCHEDULER = env_bool("FV_DEBUG_SCHEDULER", False)
    _settings.SHADER_DEBUG = env_bool("FV_SHADER_DEBUG", False)


def get() -> _Settings:
    """現在の設定スナップショットを返す。"""
    return _settings


# 初期ロード
reload_from_env()


__all__ = ["get", "reload_from_env", "_Settings"]
