"""
どこで: `util.utils`
何を: YAML 構成の読み込み（フェイルソフト）と、ビューア設定セクションの解決。
なぜ: 既定値/設定ファイル/明示引数の優先順を一箇所で決め、ランナーを薄く保つため。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

import yaml


def _safe_load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError):
        return {}
    return data if isinstance(data, dict) else {}


def _find_project_root(start: Path) -> Path:
    """プロジェクトルートを推定して返す。

    - `src/` 配下から呼ばれることを想定し、上位に `.git` や `pyproject.toml`、`configs/` がある
      もっとも近いディレクトリを返す。
    - 見つからない場合は `start.parent.parent` をフォールバックとして返す。
    """
    cur = start.resolve()
    for parent in [cur] + list(cur.parents):
        if (
            (parent / ".git").exists()
            or (parent / "pyproject.toml").exists()
            or (parent / "configs").exists()
        ):
            return parent
    # 典型: <repo>/src/util/utils.py -> <repo>
    return cur.parent.parent


def load_config(project_root: Path | None = None) -> Dict[str, Any]:
    """構成を読み込んで辞書で返す（フェイルソフト）。

    優先順:
    1) `configs/default.yaml`（ベース）
    2) ルート `config.yaml`（ベースに上書き）

    - いずれも存在しない/不正な場合は空辞書を返す。
    - ネストした辞書のディープマージは行わず、トップレベルのみ上書き。
    """
    root = project_root if project_root is not None else _find_project_root(Path(__file__).parent)
    base: Dict[str, Any] = {}

    default_path = root / "configs" / "default.yaml"
    if default_path.exists():
        base.update(_safe_load_yaml(default_path))

    root_config_path = root / "config.yaml"
    if root_config_path.exists():
        base.update(_safe_load_yaml(root_config_path))

    return base


@dataclass(frozen=True)
class ViewerConfig:
    """ランナーが参照する解決済みのビューア設定。"""

    width: int = 1280
    height: int = 720
    fps: int = 60
    background: tuple[float, float, float, float] = (0.0, 0.0, 0.0, 0.0)
    quad: tuple[float, float, float, float] = (-5.0, -3.0, 10.0, 6.0)
    camera_position: tuple[float, float, float] = (-0.5, 0.0, 0.0)
    pan_bounds: tuple[float, float, float, float] = (-2.0, 1.0, -1.0, 1.0)
    cycle_speed: float = 200.0
    cycle_speed_extreme: float = 10.0


def _floats(value: Any, n: int, fallback: Sequence[float]) -> tuple[float, ...]:
    try:
        out = tuple(float(v) for v in value)
    except (TypeError, ValueError):
        return tuple(fallback)
    return out if len(out) == n else tuple(fallback)


def _positive(value: Any, fallback: float) -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        return fallback
    return v if v > 0 else fallback


def resolve_viewer_config(
    cfg: Mapping[str, Any] | None = None, **overrides: Any
) -> ViewerConfig:
    """`viewer` セクションと明示引数から `ViewerConfig` を組み立てる。

    優先順は 明示引数（None 以外） > 設定ファイル > 組み込み既定値。
    不正な値は黙って既定値へ戻す。
    """
    if cfg is None:
        cfg = load_config()
    section = cfg.get("viewer", {}) if isinstance(cfg, Mapping) else {}
    if not isinstance(section, Mapping):
        section = {}
    merged: Dict[str, Any] = dict(section)
    merged.update({k: v for k, v in overrides.items() if v is not None})

    d = ViewerConfig()
    return ViewerConfig(
        width=int(_positive(merged.get("width"), d.width)),
        height=int(_positive(merged.get("height"), d.height)),
        fps=int(_positive(merged.get("fps"), d.fps)),
        background=_floats(merged.get("background"), 4, d.background),  # type: ignore[arg-type]
        quad=_floats(merged.get("quad"), 4, d.quad),  # type: ignore[arg-type]
        camera_position=_floats(merged.get("camera_position"), 3, d.camera_position),  # type: ignore[arg-type]
        pan_bounds=_floats(merged.get("pan_bounds"), 4, d.pan_bounds),  # type: ignore[arg-type]
        cycle_speed=_positive(merged.get("cycle_speed"), d.cycle_speed),
        cycle_speed_extreme=_positive(merged.get("cycle_speed_extreme"), d.cycle_speed_extreme),
    )


__all__ = ["ViewerConfig", "load_config", "resolve_viewer_config"]
