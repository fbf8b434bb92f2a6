"""
どこで: `engine.input.events`
何を: 正規化済み入力イベント（ポインタ/ホイール/キー/リサイズ）とフレーム境界で消費するステージングキュー。
なぜ: 非同期に届く入力を状態変化の「予約」に留め、次の tick の中で同期的に適用するため。

座標はピクセル単位・原点左下（pyglet の規約）。
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class Wheel:
    x: float
    y: float
    delta_y: float  # 正 = 手前へ回す（ズームアウト）


@dataclass(frozen=True)
class KeyPress:
    key: str


@dataclass(frozen=True)
class Resize:
    w: int
    h: int


InputEvent = Union[PointerDown, PointerUp, PointerMove, Wheel, KeyPress, Resize]


class InputQueue:
    """到着順にイベントを溜め、tick ごとにまとめて取り出す。"""

    def __init__(self) -> None:
        self._events: deque[InputEvent] = deque()

    def push(self, event: InputEvent) -> None:
        self._events.append(event)

    def drain(self) -> list[InputEvent]:
        """溜まったイベントを到着順で返し、キューを空にする。"""
        out = list(self._events)
        self._events.clear()
        return out

    def __len__(self) -> int:
        return len(self._events)


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
