"""
どこで: `src/compline/core/pipeline.py`。
何を: CompositionConfig 1 つから、グリッド→円→線分→グレインの順に生成した RenderOutput を返す。
なぜ: 全工程が 1 本の乱数列を共有するため、呼び出し順を 1 か所に固定して再現性を保証するため。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from compline.core.circle_mask import CircleMask, CircleRegion
from compline.core.composition_config import CompositionConfig, validate_composition_config
from compline.core.grain import DEFAULT_GRAIN_COUNT, GrainSpeckle, generate_grain
from compline.core.grid import PointGrid, build_point_grid
from compline.core.line_sampler import LineSegment, sample_lines, segment_coords
from compline.core.random_source import DeterministicRandom

_logger = logging.getLogger(__name__)

DEFAULT_CANVAS_SIZE = (600, 600)


@dataclass(frozen=True, slots=True)
class RenderOutput:
    """1 回の描画結果。レンダラはこの値だけを受け取って描く。

    Parameters
    ----------
    config : CompositionConfig
        生成に使った構図パラメータ。
    canvas_size : tuple[int, int]
        キャンバス寸法。
    grid : PointGrid
        点グリッド（常に保持）。
    lines : tuple[LineSegment, ...]
        採択順の線分列。
    attempts : int
        線分サンプリングの試行回数。
    circle : CircleRegion | None
        輪郭として描く円（mask_to_circle かつ show_circle_outline のときのみ）。
    grid_points : np.ndarray | None
        表示するグリッド点 shape (N, 2)（show_grid のときのみ。マスク有効時は円内の点だけ）。
    grain : tuple[GrainSpeckle, ...]
        グレイン列（apply_grain でなければ空）。
    """

    config: CompositionConfig
    canvas_size: tuple[int, int]
    grid: PointGrid
    lines: tuple[LineSegment, ...]
    attempts: int
    circle: CircleRegion | None
    grid_points: np.ndarray | None
    grain: tuple[GrainSpeckle, ...]

    @property
    def complete(self) -> bool:
        """line_count 本すべて描けたかを返す。"""
        return len(self.lines) == int(self.config.line_count)

    def line_coords(self) -> np.ndarray:
        """線分の端点座標を shape (N, 2, 2) で返す。"""
        return segment_coords(self.lines, self.grid)


def render(
    config: CompositionConfig,
    *,
    canvas_size: tuple[int, int] = DEFAULT_CANVAS_SIZE,
    grain_count: int = DEFAULT_GRAIN_COUNT,
    rng: DeterministicRandom | None = None,
) -> RenderOutput:
    """config から RenderOutput を生成する。

    Parameters
    ----------
    config : CompositionConfig
        構図パラメータ（入力境界でクランプ済みを想定）。
    canvas_size : tuple[int, int], optional
        キャンバス寸法。
    grain_count : int, optional
        apply_grain 時のグレイン粒数。
    rng : DeterministicRandom or None, optional
        使用する乱数源。渡された場合も config.seed で再 seed してから使う。

    Returns
    -------
    RenderOutput
        同じ引数なら常に同一の結果。

    Raises
    ------
    InvalidConfiguration
        config が検証に失敗した場合（生成前に送出）。
    ValueError
        canvas_size が正でない場合。
    """
    validate_composition_config(config)
    canvas_w, canvas_h = (int(v) for v in canvas_size)
    region = CircleRegion.from_canvas((canvas_w, canvas_h))

    if rng is None:
        rng = DeterministicRandom(int(config.seed))
    else:
        rng.seed(int(config.seed))

    grid = build_point_grid(
        config.grid_width,
        config.grid_height,
        config.jitter,
        (canvas_w, canvas_h),
        rng,
    )

    mask = CircleMask(region=region, enabled=bool(config.mask_to_circle))
    circle = region if (config.mask_to_circle and config.show_circle_outline) else None

    grid_points: np.ndarray | None = None
    if config.show_grid:
        flat = grid.flat()
        grid_points = flat[mask.contains_many(flat)]
        grid_points.setflags(write=False)

    sampled = sample_lines(
        grid,
        mask,
        max_line_length=config.max_line_length,
        obliquity=config.obliquity,
        length_skew_exponent=config.length_skew_exponent,
        line_count=config.line_count,
        rng=rng,
    )

    grain: tuple[GrainSpeckle, ...] = ()
    if config.apply_grain:
        grain = generate_grain((canvas_w, canvas_h), rng, count=grain_count)

    _logger.debug(
        "Rendered composition seed=%s grid=%dx%d lines=%d/%d attempts=%d grain=%d",
        config.seed,
        grid.width,
        grid.height,
        len(sampled.lines),
        sampled.target,
        sampled.attempts,
        len(grain),
    )

    return RenderOutput(
        config=config,
        canvas_size=(canvas_w, canvas_h),
        grid=grid,
        lines=sampled.lines,
        attempts=sampled.attempts,
        circle=circle,
        grid_points=grid_points,
        grain=grain,
    )


__all__ = ["DEFAULT_CANVAS_SIZE", "RenderOutput", "render"]
