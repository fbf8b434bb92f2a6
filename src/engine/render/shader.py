"""
どこで: `engine.render.shader`
何を: GLSL ソースの読み込み（同梱リソース or 任意パス）と、バックエンドでのプログラム生成。
なぜ: ソース取得とコンパイル失敗時の診断ログを一箇所にまとめ、起動処理を単純化するため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from common.settings import get as get_settings

from ..core.errors import ShaderError
from .backend import GpuBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShaderSources:
    vertex: str
    fragment: str


def load_sources(
    package: str = "fractal",
    *,
    vertex_path: str | Path | None = None,
    fragment_path: str | Path | None = None,
) -> ShaderSources:
    """`<package>/shaders/{vertex,fragment}.glsl` を読む。パス指定があればそちらを優先。"""
    base = resources.files(package).joinpath("shaders")
    if vertex_path is not None:
        vertex = Path(vertex_path).read_text(encoding="utf-8")
    else:
        vertex = base.joinpath("vertex.glsl").read_text(encoding="utf-8")
    if fragment_path is not None:
        fragment = Path(fragment_path).read_text(encoding="utf-8")
    else:
        fragment = base.joinpath("fragment.glsl").read_text(encoding="utf-8")
    return ShaderSources(vertex=vertex, fragment=fragment)


def create_program(backend: GpuBackend, sources: ShaderSources) -> Any:
    """プログラムを生成する。失敗時は `ShaderError` をそのまま送出する。"""
    try:
        return backend.compile_program(sources.vertex, sources.fragment)
    except ShaderError as exc:
        if get_settings().SHADER_DEBUG:
            src = sources.fragment if exc.stage == "fragment" else sources.vertex
            logger.error("failing %s shader source:\n%s", exc.stage, src)
        raise


__all__ = ["ShaderSources", "create_program", "load_sources"]
