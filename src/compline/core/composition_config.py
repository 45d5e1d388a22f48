"""
どこで: `src/compline/core/composition_config.py`。
何を: 1 回の描画に使う構図パラメータ CompositionConfig と、その入力境界処理（クランプ・検証）を定義する。
なぜ: UI から渡る値をここで整え、生成アルゴリズム側は有効な値だけを前提にできるようにするため。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields, replace
from typing import Any, Mapping

from compline.core.parameters.meta import ParamMeta


class InvalidConfiguration(ValueError):
    """生成を開始できない構図パラメータが渡されたことを表す例外。"""


@dataclass(frozen=True, slots=True)
class CompositionConfig:
    """構図パラメータのスナップショット。

    Parameters
    ----------
    grid_width, grid_height : int
        点グリッドの列数・行数（2 以上）。
    jitter : float
        各点の揺らぎ幅（グリッド 1 セルに対する比率）。
    max_line_length : float
        線分長の上限（グリッド全幅に対する 0..1 の比率）。
    obliquity : float
        水平/垂直からの角度のずれ幅（0 で軸平行のみ、1 で最大 90°）。
    length_skew_exponent : float
        一様乱数に掛ける指数。1 より大きいと短い線、1 より小さいと長い線に偏る。
    line_count : int
        描画を目指す線分数。
    stroke_width : int
        線分の線幅（キャンバス座標単位）。
    seed : int
        乱数 seed。
    show_grid, mask_to_circle, show_circle_outline, apply_grain : bool
        グリッド点の表示、円マスクの適用、円の輪郭表示、グレインの付与。
    """

    grid_width: int = 256
    grid_height: int = 256
    jitter: float = 0.05
    max_line_length: float = 0.1
    obliquity: float = 0.0
    length_skew_exponent: float = 4.0
    line_count: int = 256
    stroke_width: int = 8
    seed: int = 42
    show_grid: bool = False
    mask_to_circle: bool = True
    show_circle_outline: bool = True
    apply_grain: bool = True

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CompositionConfig":
        """dict から CompositionConfig を構築する（未指定キーは既定値）。

        Raises
        ------
        InvalidConfiguration
            未知のキーが含まれる場合。
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(str(k) for k in values.keys() if k not in known)
        if unknown:
            raise InvalidConfiguration(f"未知の構図パラメータ: {unknown}")
        return cls(**{str(k): v for k, v in values.items()})

    def to_dict(self) -> dict[str, Any]:
        """フィールド名をキーとする dict を返す。"""
        return {f.name: getattr(self, f.name) for f in fields(self)}


COMPOSITION_META: dict[str, ParamMeta] = {
    "grid_width": ParamMeta(kind="int", ui_min=2, ui_max=512),
    "grid_height": ParamMeta(kind="int", ui_min=2, ui_max=512),
    "jitter": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "max_line_length": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "obliquity": ParamMeta(kind="float", ui_min=0.0, ui_max=1.0),
    "length_skew_exponent": ParamMeta(kind="float", ui_min=0.1, ui_max=10.0),
    "line_count": ParamMeta(kind="int", ui_min=1, ui_max=512),
    "stroke_width": ParamMeta(kind="int", ui_min=1, ui_max=16),
    # seed は UI 上のレンジのみ。クランプ対象外。
    "seed": ParamMeta(kind="int", ui_min=0, ui_max=100_000),
    "show_grid": ParamMeta(kind="bool"),
    "mask_to_circle": ParamMeta(kind="bool"),
    "show_circle_outline": ParamMeta(kind="bool"),
    "apply_grain": ParamMeta(kind="bool"),
}

_UNCLAMPED_FIELDS = frozenset({"seed"})
_FLOAT_FIELDS = ("jitter", "max_line_length", "obliquity", "length_skew_exponent")


def clamp_composition_config(config: CompositionConfig) -> CompositionConfig:
    """各フィールドを型変換し、COMPOSITION_META のレンジへクランプした config を返す。

    Notes
    -----
    seed は int 化のみ行い、レンジは制限しない。
    """
    updates: dict[str, Any] = {}
    for name, meta in COMPOSITION_META.items():
        value = getattr(config, name)
        if name in _UNCLAMPED_FIELDS:
            updates[name] = int(value)
            continue
        try:
            updates[name] = meta.clamp(value)
        except (TypeError, ValueError) as exc:
            raise InvalidConfiguration(
                f"{name} を {meta.kind} に変換できない: got={value!r}"
            ) from exc
    return replace(config, **updates)


def validate_composition_config(config: CompositionConfig) -> None:
    """生成前に config を検証する。

    Raises
    ------
    InvalidConfiguration
        grid_width/grid_height が 2 未満、line_count が負、または float パラメータが NaN/inf の場合。
    """
    if int(config.grid_width) < 2 or int(config.grid_height) < 2:
        raise InvalidConfiguration(
            "grid_width/grid_height は 2 以上である必要がある: "
            f"got=({config.grid_width}, {config.grid_height})"
        )
    if int(config.line_count) < 0:
        raise InvalidConfiguration(
            f"line_count は 0 以上である必要がある: got={config.line_count}"
        )
    for name in _FLOAT_FIELDS:
        value = float(getattr(config, name))
        if not math.isfinite(value):
            raise InvalidConfiguration(f"{name} は有限の数値である必要がある: got={value!r}")


__all__ = [
    "COMPOSITION_META",
    "CompositionConfig",
    "InvalidConfiguration",
    "clamp_composition_config",
    "validate_composition_config",
]
