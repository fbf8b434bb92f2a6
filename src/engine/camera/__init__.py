"""
どこで: `engine.camera` サブパッケージ。
何を: 2D 正射影カメラ（パン範囲/慣性ズーム/逆射影）と入力→カメラ操作の Navigator。
"""

from .controller import CameraController, CameraState, PanBounds
from .navigation import KeyHandler, Navigator

__all__ = ["CameraController", "CameraState", "KeyHandler", "Navigator", "PanBounds"]
