"""
どこで: `src/compline/export/image.py`。
何を: RenderOutput を SVG または PNG（外部ラスタライザ resvg 経由）で保存する関数を提供する。
なぜ: SVG を正（ソース）として保存し、PNG は任意の解像度で再生成できるようにするため。
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from compline.core.pipeline import RenderOutput
from compline.core.style import ColorRGB, RenderStyle, rgb01_to_hex
from compline.export.svg import export_svg


def png_output_size(canvas_size: tuple[int, int], scale: float) -> tuple[int, int]:
    """canvas_size × scale の PNG 出力ピクセルサイズを返す。"""

    canvas_w, canvas_h = canvas_size
    if int(canvas_w) <= 0 or int(canvas_h) <= 0:
        raise ValueError("canvas_size は正の (width, height) である必要がある")
    if float(scale) <= 0.0:
        raise ValueError(f"scale は正の値である必要がある: got={scale}")
    return int(int(canvas_w) * float(scale)), int(int(canvas_h) * float(scale))


def export_image(
    output: RenderOutput,
    path: str | Path,
    *,
    style: RenderStyle | None = None,
    png_scale: float = 1.0,
) -> Path:
    """RenderOutput を拡張子に応じて SVG または PNG で保存する。

    Raises
    ------
    ValueError
        拡張子が .svg/.png 以外の場合。
    RuntimeError
        PNG のラスタライズに失敗した場合。
    """
    _path = Path(path)
    suffix = _path.suffix.lower()
    st = style if style is not None else RenderStyle()

    if suffix == ".svg":
        return export_svg(output, _path, style=st)

    if suffix == ".png":
        svg_path = _path.with_suffix(".svg")
        export_svg(output, svg_path, style=st)
        return rasterize_svg_to_png(
            svg_path,
            _path,
            output_size=png_output_size(output.canvas_size, png_scale),
            background_color_rgb01=st.background_color,
        )

    raise ValueError(f"未対応の画像フォーマット: {suffix!r}")


def _resvg_command(
    *,
    input_svg: Path,
    output_png: Path,
    output_size: tuple[int, int],
    background_color_rgb01: ColorRGB | None,
) -> list[str]:
    out_w, out_h = output_size
    if int(out_w) <= 0 or int(out_h) <= 0:
        raise ValueError("output_size は正の (width, height) である必要がある")
    cmd = ["resvg", "--width", str(int(out_w)), "--height", str(int(out_h))]
    if background_color_rgb01 is not None:
        cmd += ["--background", rgb01_to_hex(background_color_rgb01)]
    return [*cmd, str(input_svg), str(output_png)]


def rasterize_svg_to_png(
    svg_path: str | Path,
    png_path: str | Path,
    *,
    output_size: tuple[int, int],
    background_color_rgb01: ColorRGB | None = (1.0, 1.0, 1.0),
) -> Path:
    """SVG を PNG として保存する。

    Parameters
    ----------
    svg_path : str or Path
        入力 SVG パス。
    png_path : str or Path
        出力 PNG パス。
    output_size : tuple[int, int]
        出力 PNG の (width, height) ピクセルサイズ。
    background_color_rgb01 : tuple[float, float, float] or None
        背景色 RGB（0..1）。既定は白。None なら背景を塗らない（透明）。

    Returns
    -------
    Path
        出力 PNG パス。

    Raises
    ------
    RuntimeError
        resvg が見つからない、またはラスタライズに失敗した場合。
    """

    _svg_path = Path(svg_path)
    _png_path = Path(png_path)
    _png_path.parent.mkdir(parents=True, exist_ok=True)

    cmd = _resvg_command(
        input_svg=_svg_path,
        output_png=_png_path,
        output_size=output_size,
        background_color_rgb01=background_color_rgb01,
    )
    try:
        proc = subprocess.run(cmd, capture_output=True, text=True, check=False)
    except FileNotFoundError as e:
        raise RuntimeError(
            "resvg が見つかりません（`resvg` をインストールして PATH を通してください）"
        ) from e

    if proc.returncode != 0:
        details = (proc.stderr or proc.stdout or "").strip()
        raise RuntimeError(f"resvg が失敗しました (code={proc.returncode}). {details}".strip())

    return _png_path


__all__ = ["export_image", "png_output_size", "rasterize_svg_to_png"]
