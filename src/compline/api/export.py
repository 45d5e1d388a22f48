"""
どこで: `src/compline/api/export.py`。
何を: 構図パラメータから 1 枚を生成してファイルへ書き出す公開導線 `Export` を提供する。
なぜ: render と export の呼び分けを利用側に意識させず、実行時設定（キャンバス寸法など）を 1 か所で解決するため。
"""

from __future__ import annotations

import logging
from hashlib import blake2b
from pathlib import Path

from compline.core.composition_config import CompositionConfig, clamp_composition_config
from compline.core.pipeline import RenderOutput, render
from compline.core.runtime_config import output_root_dir, runtime_config
from compline.core.style import RenderStyle
from compline.export.image import export_image
from compline.export.svg import export_svg

_logger = logging.getLogger(__name__)


def config_digest(config: CompositionConfig) -> str:
    """config の全フィールドから決まる 8 桁の16進ダイジェストを返す。"""

    h = blake2b(digest_size=4)
    for key, value in sorted(config.to_dict().items()):
        h.update(f"{key}={value!r};".encode("utf-8"))
    return h.hexdigest()


def default_output_path(config: CompositionConfig, fmt: str) -> Path:
    """`{output_root}/{ext}/composition_{seed}_{digest}.{ext}` を返す。

    digest は `config_digest`。seed が同じでも他のパラメータが違えば別ファイルになる。
    """

    ext = "png" if fmt in {"image", "png"} else "svg"
    name = f"composition_{int(config.seed)}_{config_digest(config)}.{ext}"
    return output_root_dir() / ext / name


class Export:
    """config の 1 枚分を生成してファイルへ書き出す。

    Attributes
    ----------
    output : RenderOutput
        生成結果。
    path : Path
        書き出し先。
    """

    def __init__(
        self,
        config: CompositionConfig,
        fmt: str = "svg",
        path: str | Path | None = None,
        *,
        canvas_size: tuple[int, int] | None = None,
        style: RenderStyle | None = None,
        clamp: bool = True,
    ) -> None:
        """export を実行する。

        Parameters
        ----------
        config : CompositionConfig
            構図パラメータ。
        fmt : str
            出力フォーマット。`"svg"` または `"image"`/`"png"`。
        path : str or Path or None
            出力先パス。None なら `default_output_path` を使う。
        canvas_size : tuple[int, int] or None
            キャンバス寸法。None なら実行時設定の canvas.size。
        style : RenderStyle or None
            描画スタイル。
        clamp : bool
            True なら生成前に `clamp_composition_config` でレンジへ収める。
        """
        self.fmt = str(fmt).lower().strip()
        if self.fmt not in {"svg", "image", "png"}:
            raise ValueError(f"未対応の export fmt: {fmt!r}")

        cfg = runtime_config()
        composition = clamp_composition_config(config) if clamp else config
        self.path = Path(path) if path is not None else default_output_path(composition, self.fmt)
        self.output: RenderOutput = render(
            composition,
            canvas_size=canvas_size if canvas_size is not None else cfg.canvas_size,
            grain_count=cfg.grain_count,
        )

        if self.fmt == "svg":
            export_svg(self.output, self.path, style=style)
            return

        png_path = self.path if self.path.suffix.lower() == ".png" else self.path.with_suffix(".png")
        try:
            self.path = export_image(self.output, png_path, style=style, png_scale=cfg.png_scale)
        except RuntimeError:
            _logger.exception("Failed to save PNG: %s", png_path)
            raise


__all__ = ["Export", "config_digest", "default_output_path"]
