"""
どこで: `engine.core.matrix`
何を: 行優先 4x4 同次変換行列 `Matrix4`（不変値型）と合成/転置/逆行列/GPU 転送用配列化。
なぜ: カメラ・投影・モデル変換を 1 つの規約で合成し、画面座標⇔ワールド座標の往復を保証するため。

規約（重要）:
- 行列は 4 本の行ベクトル `r1..r4`。`a.multiply(b)` は `a` の各行と `b` の各列の内積（= a × b）。
  実装上は `b` を転置し、行どうしの内積で計算する。
- `scale()` / `translate()` は新しい変換行列を **受け手の前** に掛ける（`S.multiply(self)`）。
  したがって `identity().scale(...).translate(...)` は「スケール → 平行移動」の順に作用する。
- `multiply_vector(v)` は各行と `v` の内積を取る。行列がベクトルに作用する箇所
  （逆射影・MVP 転送）はすべてこの規約で統一すること。
- GPU は列優先を期待するため、転送箇所では必ず `transpose().as_flat_array()` とする。
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from .errors import SingularMatrixError
from .vector import Vector4


@dataclass(frozen=True)
class Matrix4:
    r1: Vector4
    r2: Vector4
    r3: Vector4
    r4: Vector4

    def __post_init__(self) -> None:
        for row in (self.r1, self.r2, self.r3, self.r4):
            if not all(math.isfinite(v) for v in row):
                raise ValueError(f"Matrix4 requires finite entries, got row {row!r}")

    # ---- 生成 ----------------------------------------------------------
    @classmethod
    def identity(cls) -> "Matrix4":
        return cls(
            Vector4(1.0, 0.0, 0.0, 0.0),
            Vector4(0.0, 1.0, 0.0, 0.0),
            Vector4(0.0, 0.0, 1.0, 0.0),
            Vector4(0.0, 0.0, 0.0, 1.0),
        )

    @classmethod
    def from_rows(cls, rows) -> "Matrix4":
        """4x4 の入れ子シーケンス（行優先）から生成。"""
        r = [Vector4(*(float(v) for v in row)) for row in rows]
        if len(r) != 4:
            raise ValueError("Matrix4.from_rows expects exactly 4 rows")
        return cls(r[0], r[1], r[2], r[3])

    @classmethod
    def orthographic(cls, left: float, right: float, bottom: float, top: float) -> "Matrix4":
        """2D 正射影行列（z はそのまま通す）。"""
        return cls(
            Vector4(2.0 / (right - left), 0.0, 0.0, -(right + left) / (right - left)),
            Vector4(0.0, 2.0 / (top - bottom), 0.0, -(top + bottom) / (top - bottom)),
            Vector4(0.0, 0.0, 1.0, 0.0),
            Vector4(0.0, 0.0, 0.0, 1.0),
        )

    # ---- 基本演算 ------------------------------------------------------
    def transpose(self) -> "Matrix4":
        r1, r2, r3, r4 = self.r1, self.r2, self.r3, self.r4
        return Matrix4(
            Vector4(r1.x, r2.x, r3.x, r4.x),
            Vector4(r1.y, r2.y, r3.y, r4.y),
            Vector4(r1.z, r2.z, r3.z, r4.z),
            Vector4(r1.w, r2.w, r3.w, r4.w),
        )

    def multiply(self, operand: "Matrix4") -> "Matrix4":
        """行列積 `self × operand`（非可換）。"""
        b = operand.transpose()
        cols = (b.r1, b.r2, b.r3, b.r4)
        return Matrix4(
            *(Vector4(*(row.dot(c) for c in cols)) for row in (self.r1, self.r2, self.r3, self.r4))
        )

    def multiply_vector(self, v: Vector4) -> Vector4:
        """各行と `v` の内積からなるベクトルを返す。"""
        return Vector4(v.dot(self.r1), v.dot(self.r2), v.dot(self.r3), v.dot(self.r4))

    def multiply_scalar(self, s: float) -> "Matrix4":
        return Matrix4(
            self.r1.multiply(s),
            self.r2.multiply(s),
            self.r3.multiply(s),
            self.r4.multiply(s),
        )

    def inverse(self) -> "Matrix4":
        """余因子（随伴行列）による閉形式の逆行列。

        Raises
        ------
        SingularMatrixError
            行列式がちょうど 0 の場合（イプシロン比較はしない）。
        """
        a0, a1, a2, a3 = self.r1
        b0, b1, b2, b3 = self.r2
        c0, c1, c2, c3 = self.r3
        d0, d1, d2, d3 = self.r4

        i00 = b1 * c2 * d3 - b1 * d2 * c3 - b2 * c1 * d3 + b2 * d1 * c3 + b3 * c1 * d2 - b3 * d1 * c2
        i01 = -a1 * c2 * d3 + a1 * d2 * c3 + a2 * c1 * d3 - a2 * d1 * c3 - a3 * c1 * d2 + a3 * d1 * c2
        i02 = a1 * b2 * d3 - a1 * d2 * b3 - a2 * b1 * d3 + a2 * d1 * b3 + a3 * b1 * d2 - a3 * d1 * b2
        i03 = -a1 * b2 * c3 + a1 * c2 * b3 + a2 * b1 * c3 - a2 * c1 * b3 - a3 * b1 * c2 + a3 * c1 * b2

        i10 = -b0 * c2 * d3 + b0 * d2 * c3 + b2 * c0 * d3 - b2 * d0 * c3 - b3 * c0 * d2 + b3 * d0 * c2
        i11 = a0 * c2 * d3 - a0 * d2 * c3 - a2 * c0 * d3 + a2 * d0 * c3 + a3 * c0 * d2 - a3 * d0 * c2
        i12 = -a0 * b2 * d3 + a0 * d2 * b3 + a2 * b0 * d3 - a2 * d0 * b3 - a3 * b0 * d2 + a3 * d0 * b2
        i13 = a0 * b2 * c3 - a0 * c2 * b3 - a2 * b0 * c3 + a2 * c0 * b3 + a3 * b0 * c2 - a3 * c0 * b2

        i20 = b0 * c1 * d3 - b0 * d1 * c3 - b1 * c0 * d3 + b1 * d0 * c3 + b3 * c0 * d1 - b3 * d0 * c1
        i21 = -a0 * c1 * d3 + a0 * d1 * c3 + a1 * c0 * d3 - a1 * d0 * c3 - a3 * c0 * d1 + a3 * d0 * c1
        i22 = a0 * b1 * d3 - a0 * d1 * b3 - a1 * b0 * d3 + a1 * d0 * b3 + a3 * b0 * d1 - a3 * d0 * b1
        i23 = -a0 * b1 * c3 + a0 * c1 * b3 + a1 * b0 * c3 - a1 * c0 * b3 - a3 * b0 * c1 + a3 * c0 * b1

        i30 = -b0 * c1 * d2 + b0 * d1 * c2 + b1 * c0 * d2 - b1 * d0 * c2 - b2 * c0 * d1 + b2 * d0 * c1
        i31 = a0 * c1 * d2 - a0 * d1 * c2 - a1 * c0 * d2 + a1 * d0 * c2 + a2 * c0 * d1 - a2 * d0 * c1
        i32 = -a0 * b1 * d2 + a0 * d1 * b2 + a1 * b0 * d2 - a1 * d0 * b2 - a2 * b0 * d1 + a2 * d0 * b1
        i33 = a0 * b1 * c2 - a0 * c1 * b2 - a1 * b0 * c2 + a1 * c0 * b2 + a2 * b0 * c1 - a2 * c0 * b1

        det = a0 * i00 + b0 * i01 + c0 * i02 + d0 * i03
        if det == 0:
            raise SingularMatrixError(self)

        adjugate = Matrix4(
            Vector4(i00, i01, i02, i03),
            Vector4(i10, i11, i12, i13),
            Vector4(i20, i21, i22, i23),
            Vector4(i30, i31, i32, i33),
        )
        return adjugate.multiply_scalar(1.0 / det)

    # ---- 変換の前置合成 ------------------------------------------------
    def scale(self, x: float, y: float, z: float) -> "Matrix4":
        return Matrix4(
            Vector4(x, 0.0, 0.0, 0.0),
            Vector4(0.0, y, 0.0, 0.0),
            Vector4(0.0, 0.0, z, 0.0),
            Vector4(0.0, 0.0, 0.0, 1.0),
        ).multiply(self)

    def translate(self, x: float, y: float, z: float) -> "Matrix4":
        return Matrix4(
            Vector4(1.0, 0.0, 0.0, x),
            Vector4(0.0, 1.0, 0.0, y),
            Vector4(0.0, 0.0, 1.0, z),
            Vector4(0.0, 0.0, 0.0, 1.0),
        ).multiply(self)

    # ---- 出力 ----------------------------------------------------------
    def as_rows(self) -> tuple[tuple[float, float, float, float], ...]:
        return tuple(row.as_tuple() for row in (self.r1, self.r2, self.r3, self.r4))

    def as_flat_array(self) -> np.ndarray:
        """行優先で平坦化した float32 配列（長さ 16）。

        GPU へ送る前には必ず `transpose()` を挟むこと（列優先で解釈されるため）。
        """
        return np.asarray(self.as_rows(), dtype=np.float32).reshape(16)


__all__ = ["Matrix4"]
