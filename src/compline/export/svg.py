"""
どこで: `src/compline/export/svg.py`。
何を: RenderOutput を SVG として保存する関数を提供する。
なぜ: 生成結果を点・線分・円の描画プリミティブへそのまま写すレンダラを、GUI なしで用意するため。
"""

from __future__ import annotations

from pathlib import Path

from compline.core.pipeline import RenderOutput
from compline.core.style import RenderStyle, rgb01_to_hex

_SVG_NS = "http://www.w3.org/2000/svg"
_FLOAT_DECIMALS = 3


def _fmt(value: float, *, decimals: int = _FLOAT_DECIMALS) -> str:
    """SVG 出力向けに float を決定的な文字列へ変換して返す。"""
    text = f"{float(value):.{int(decimals)}f}"
    if text.startswith("-0") and float(text) == 0.0:
        return text[1:]
    return text


def _point_element(x: float, y: float, *, width: float, fill: str, opacity: float | None = None) -> str:
    """幅 width の点を、直径 width の circle 要素として返す。"""
    attrs = f'cx="{_fmt(x)}" cy="{_fmt(y)}" r="{_fmt(width / 2.0)}" fill="{fill}"'
    if opacity is not None:
        attrs += f' fill-opacity="{_fmt(opacity)}"'
    return f"    <circle {attrs} />"


def render_svg_text(output: RenderOutput, *, style: RenderStyle | None = None) -> str:
    """RenderOutput を SVG 文字列へ変換して返す。

    Notes
    -----
    描画順は背景（style.background_color が None なら省略）→グリッド点→円の輪郭→線分→グレイン。
    線分は stroke-linecap="square"（端点を線幅の半分だけ延長）で描く。
    """
    st = style if style is not None else RenderStyle()
    canvas_w, canvas_h = output.canvas_size

    lines: list[str] = []
    lines.append('<?xml version="1.0" encoding="UTF-8"?>')
    lines.append(
        (
            f'<svg xmlns="{_SVG_NS}" viewBox="0 0 {int(canvas_w)} {int(canvas_h)}" '
            f'width="{int(canvas_w)}" height="{int(canvas_h)}">'
        )
    )
    if st.background_color is not None:
        lines.append(
            f'  <rect id="background" x="0" y="0" width="{int(canvas_w)}" '
            f'height="{int(canvas_h)}" fill="{rgb01_to_hex(st.background_color)}" />'
        )

    if output.grid_points is not None:
        fill = rgb01_to_hex(st.grid_color)
        lines.append('  <g id="grid">')
        for x, y in output.grid_points.tolist():
            lines.append(_point_element(x, y, width=st.grid_point_width, fill=fill))
        lines.append("  </g>")

    if output.circle is not None:
        c = output.circle
        lines.append(
            (
                f'  <circle id="circle" cx="{_fmt(c.cx)}" cy="{_fmt(c.cy)}" r="{_fmt(c.radius)}" '
                f'fill="none" stroke="{rgb01_to_hex(st.circle_color)}" '
                f'stroke-width="{_fmt(st.circle_width)}" />'
            )
        )

    stroke = rgb01_to_hex(st.line_color)
    stroke_width = _fmt(float(output.config.stroke_width))
    lines.append(
        (
            f'  <g id="lines" fill="none" stroke="{stroke}" stroke-width="{stroke_width}" '
            f'stroke-linecap="square">'
        )
    )
    for (x1, y1), (x2, y2) in output.line_coords().tolist():
        lines.append(
            f'    <line x1="{_fmt(x1)}" y1="{_fmt(y1)}" x2="{_fmt(x2)}" y2="{_fmt(y2)}" />'
        )
    lines.append("  </g>")

    if output.grain:
        fill = rgb01_to_hex(st.grain_color)
        lines.append('  <g id="grain">')
        for speckle in output.grain:
            lines.append(
                _point_element(
                    speckle.x,
                    speckle.y,
                    width=st.grain_width,
                    fill=fill,
                    opacity=speckle.alpha / 255.0,
                )
            )
        lines.append("  </g>")

    lines.append("</svg>")
    return "\n".join(lines) + "\n"


def export_svg(
    output: RenderOutput,
    path: str | Path,
    *,
    style: RenderStyle | None = None,
) -> Path:
    """RenderOutput を SVG として保存する。

    Parameters
    ----------
    output : RenderOutput
        描画結果。
    path : str or Path
        出力先パス。親ディレクトリは必要に応じて作成する。
    style : RenderStyle or None, optional
        色・線幅。None なら既定スタイル。

    Returns
    -------
    Path
        保存先パス。同じ output/style なら内容はバイト単位で一致する。
    """
    _path = Path(path)
    text = render_svg_text(output, style=style)
    _path.parent.mkdir(parents=True, exist_ok=True)
    with _path.open("w", encoding="utf-8", newline="\n") as f:
        f.write(text)
    return _path


__all__ = ["export_svg", "render_svg_text"]
