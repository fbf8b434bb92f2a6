"""
どこで: `engine.core.errors`
何を: 行列演算/シーン構築/シェーダ/カメラで送出する型付き例外。
なぜ: 退化した行列や未バインドのプログラムを黙って補正せず、呼び出し側へ明示的に伝えるため。
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from .matrix import Matrix4


class SingularMatrixError(ArithmeticError):
    """行列式がちょうど 0 の行列を逆行列化しようとした場合に送出される例外。"""

    def __init__(self, matrix: "Matrix4 | None" = None) -> None:
        super().__init__("unable to compute matrix inverse (determinant is 0)")
        self.matrix = matrix


class NoActiveProgramError(RuntimeError):
    """シェーダプログラム未バインドのままジオメトリを生成しようとした場合の例外。

    頂点レイアウトの記述にはバインド中プログラムの属性ロケーションが必要。
    """

    def __init__(self, message: str = "cannot create geometry without an active shader program") -> None:
        super().__init__(message)


class ShaderError(RuntimeError):
    """シェーダのコンパイル/リンク失敗。

    Attributes
    ----------
    stage : str
        `"vertex"` / `"fragment"` / `"link"` のいずれか。
    log : str
        ドライバが返した情報ログ。
    """

    def __init__(self, stage: str, log: str) -> None:
        super().__init__(f"{stage} shader failed: {log}")
        self.stage = stage
        self.log = log


class ViewportNotSizedError(RuntimeError):
    """最初の resize 前に画面座標の逆射影を要求した場合の例外。"""


__all__ = [
    "NoActiveProgramError",
    "ShaderError",
    "SingularMatrixError",
    "ViewportNotSizedError",
]
