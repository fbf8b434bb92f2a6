"""
どこで: `engine.input` サブパッケージ。
何を: 入力イベント型と InputQueue。
"""

from .events import (
    InputEvent,
    InputQueue,
    KeyPress,
    PointerDown,
    PointerMove,
    PointerUp,
    Resize,
    Wheel,
)

__all__ = [
    "InputEvent",
    "InputQueue",
    "KeyPress",
    "PointerDown",
    "PointerMove",
    "PointerUp",
    "Resize",
    "Wheel",
]
