"""
どこで: `src/compline/core/style.py`。
何を: 描画スタイル（各要素の色・線幅）RenderStyle と色変換ユーティリティを定義する。
なぜ: 生成結果（RenderOutput）と見た目の指定を分け、export 側が同じ既定値を共有するため。
"""

from __future__ import annotations

from dataclasses import dataclass

ColorRGB = tuple[float, float, float]


def rgb255_to_rgb01(rgb: tuple[int, int, int]) -> ColorRGB:
    """0..255 int の RGB を 0..1 float の RGB に変換して返す。"""

    r, g, b = rgb
    return float(r) / 255.0, float(g) / 255.0, float(b) / 255.0


def rgb01_to_rgb255(rgb: ColorRGB) -> tuple[int, int, int]:
    """0..1 float の RGB を 0..255 int の RGB に変換して返す（範囲外はクランプ）。"""

    out: list[int] = []
    for v in rgb:
        fv = float(v)
        fv = 0.0 if fv < 0.0 else 1.0 if fv > 1.0 else fv
        out.append(int(round(fv * 255.0)))
    return out[0], out[1], out[2]


def rgb01_to_hex(rgb: ColorRGB) -> str:
    """0..1 float RGB を #RRGGBB に変換して返す。"""
    r, g, b = rgb01_to_rgb255(rgb)
    return f"#{r:02X}{g:02X}{b:02X}"


@dataclass(frozen=True, slots=True)
class RenderStyle:
    """RenderOutput を描く際の色・線幅。

    線分の線幅は CompositionConfig.stroke_width を使うため、ここには持たない。
    background_color が None の場合は背景を塗らない（透明）。
    """

    background_color: ColorRGB | None = (1.0, 1.0, 1.0)
    line_color: ColorRGB = rgb255_to_rgb01((0x28, 0x28, 0x28))
    grid_color: ColorRGB = rgb255_to_rgb01((0xAA, 0xAA, 0xAA))
    grid_point_width: float = 1.5
    circle_color: ColorRGB = rgb255_to_rgb01((0xCC, 0xCC, 0xCC))
    circle_width: float = 0.5
    grain_color: ColorRGB = rgb255_to_rgb01((229, 229, 229))
    grain_width: float = 2.0


__all__ = [
    "ColorRGB",
    "RenderStyle",
    "rgb01_to_hex",
    "rgb01_to_rgb255",
    "rgb255_to_rgb01",
]
