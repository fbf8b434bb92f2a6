"""
どこで: `engine.core.vector`
何を: 同次座標 4 成分ベクトル `Vector4`（不変値型）。
なぜ: 行列の行表現と点/方向の両方を同じ型で扱い、カメラ/逆射影の計算を単純化するため。

注意:
- `w` は同次座標（1 = 点, 0 = 方向）だが自動正規化はしない。正しい `w` は呼び出し側の責務。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class Vector4:
    x: float
    y: float
    z: float
    w: float

    @classmethod
    def point(cls, x: float, y: float, z: float = 0.0) -> "Vector4":
        """`w=1` の点を生成。"""
        return cls(float(x), float(y), float(z), 1.0)

    @classmethod
    def direction(cls, x: float, y: float, z: float = 0.0) -> "Vector4":
        """`w=0` の方向ベクトルを生成。"""
        return cls(float(x), float(y), float(z), 0.0)

    def dot(self, other: "Vector4") -> float:
        """`w` を含む 4 成分の内積。"""
        return self.x * other.x + self.y * other.y + self.z * other.z + self.w * other.w

    def multiply(self, s: float) -> "Vector4":
        """全成分をスカラー倍した新しいベクトルを返す。"""
        return Vector4(self.x * s, self.y * s, self.z * s, self.w * s)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z
        yield self.w

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.x, self.y, self.z, self.w)


__all__ = ["Vector4"]
