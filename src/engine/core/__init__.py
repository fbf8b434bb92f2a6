"""
どこで: `engine.core` サブパッケージ。
何を: 同次座標ベクトル/4x4 行列・例外・更新フック Protocol・フレームスケジューラを提供。
なぜ: カメラ/シーン/描画の各層が共有する計算基盤を、GPU やウィンドウに依存させずに置くため。
"""

from .errors import (
    NoActiveProgramError,
    ShaderError,
    SingularMatrixError,
    ViewportNotSizedError,
)
from .frame_clock import FrameScheduler, HookHandle
from .matrix import Matrix4
from .tickable import Tickable, UpdateHook
from .vector import Vector4

__all__ = [
    "FrameScheduler",
    "HookHandle",
    "Matrix4",
    "NoActiveProgramError",
    "ShaderError",
    "SingularMatrixError",
    "Tickable",
    "UpdateHook",
    "Vector4",
    "ViewportNotSizedError",
]
