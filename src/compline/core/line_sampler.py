"""
どこで: `src/compline/core/line_sampler.py`。
何を: 点グリッド上の 2 点を結ぶ線分を、長さ・角度を偏らせた棄却サンプリングで選ぶ。
なぜ: 線の本数・長さ分布・傾きを少数のパラメータで制御しつつ、円マスクの内側だけに線を置くため。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from compline.core.circle_mask import CircleMask
from compline.core.composition_config import InvalidConfiguration
from compline.core.grid import PointGrid
from compline.core.random_source import DeterministicRandom

_logger = logging.getLogger(__name__)

ATTEMPTS_PER_LINE = 10_000
_HALF_PI = math.pi / 2.0


@dataclass(frozen=True, slots=True)
class LineSegment:
    """グリッドインデックス (i1, j1) → (i2, j2) の線分。座標はコピーせず PointGrid から引く。"""

    i1: int
    j1: int
    i2: int
    j2: int

    def endpoints(self, grid: PointGrid) -> tuple[tuple[float, float], tuple[float, float]]:
        """grid 上の両端点座標を返す。"""
        return grid.point(self.i1, self.j1), grid.point(self.i2, self.j2)


@dataclass(frozen=True, slots=True)
class LineSampleResult:
    """サンプリング結果。

    Parameters
    ----------
    lines : tuple[LineSegment, ...]
        採択順の線分列（長さは target 以下）。
    attempts : int
        試行回数（target × ATTEMPTS_PER_LINE 以下）。
    target : int
        目標本数。
    """

    lines: tuple[LineSegment, ...]
    attempts: int
    target: int

    @property
    def complete(self) -> bool:
        """目標本数に達したかを返す。"""
        return len(self.lines) == self.target


def sample_length(u: float, *, max_line_length: float, length_skew_exponent: float) -> float:
    """一様乱数 u から正規化長 dr = u**k × max_line_length を返す。

    k > 1 で短い側、k < 1 で長い側に偏る。u ∈ [0, 1) では k について単調非増加。
    """
    return math.pow(u, float(length_skew_exponent)) * float(max_line_length)


def segment_coords(lines: tuple[LineSegment, ...], grid: PointGrid) -> np.ndarray:
    """線分列の端点座標を shape (N, 2, 2) の配列で返す。"""
    if not lines:
        return np.zeros((0, 2, 2), dtype=np.float64)
    idx = np.asarray([(s.i1, s.j1, s.i2, s.j2) for s in lines], dtype=np.intp)
    out = np.empty((idx.shape[0], 2, 2), dtype=np.float64)
    out[:, 0, :] = grid.points[idx[:, 0], idx[:, 1]]
    out[:, 1, :] = grid.points[idx[:, 2], idx[:, 3]]
    return out


def sample_lines(
    grid: PointGrid,
    mask: CircleMask,
    *,
    max_line_length: float,
    obliquity: float,
    length_skew_exponent: float,
    line_count: int,
    rng: DeterministicRandom,
) -> LineSampleResult:
    """棄却サンプリングで線分を最大 line_count 本選ぶ。

    Parameters
    ----------
    grid : PointGrid
        端点候補の点グリッド。
    mask : CircleMask
        両端点に課す円マスク（無効時は全採択）。
    max_line_length : float
        正規化長の上限（0..1）。
    obliquity : float
        軸平行からの角度ずれ幅（1 で ±90°）。
    length_skew_exponent : float
        長さ分布の偏り指数。
    line_count : int
        目標本数。
    rng : DeterministicRandom
        乱数源。1 試行あたり i1, j1, 長さ, 角度ずれ, 軸選択の順に 5 回、
        長さ 0 の補正が必要な場合はさらに 1 回消費する。

    Returns
    -------
    LineSampleResult
        採択された線分列と試行回数。試行上限に達した場合は本数が target 未満になる（エラーではない）。

    Raises
    ------
    InvalidConfiguration
        line_count が負の場合。
    """
    target = int(line_count)
    if target < 0:
        raise InvalidConfiguration(f"line_count は 0 以上である必要がある: got={target}")

    w = grid.width
    h = grid.height
    w_span = w - 1
    h_span = h - 1
    max_len = float(max_line_length)
    skew = float(length_skew_exponent)
    spread = float(obliquity) * _HALF_PI
    points = grid.points

    lines: list[LineSegment] = []
    drawn = 0
    attempts = 0
    max_attempts = target * ATTEMPTS_PER_LINE

    while drawn < target and attempts < max_attempts:
        attempts += 1

        # 始点は [0, W-1) × [0, H-1)。最終列・最終行は始点に選ばれない。
        i1 = math.floor(rng.next() * w_span)
        j1 = math.floor(rng.next() * h_span)

        dr = sample_length(rng.next(), max_line_length=max_len, length_skew_exponent=skew)

        angle_offset = (2.0 * rng.next() - 1.0) * spread
        horizontal = rng.next() < 0.5
        theta = angle_offset if horizontal else _HALF_PI + angle_offset

        di = math.floor(dr * math.cos(theta) * w_span)
        dj = math.floor(dr * math.sin(theta) * h_span)

        if di == 0 and dj == 0:
            if rng.next() < 0.5:
                di = 1
            else:
                dj = 1

        i2 = min(max(i1 + di, 0), w_span)
        j2 = min(max(j1 + dj, 0), h_span)
        if i2 == i1 and j2 == j1:
            # クランプで始点に戻った候補は長さ 0 なので棄却する。
            continue

        if mask.enabled:
            p1 = points[i1, j1]
            p2 = points[i2, j2]
            if not (mask.contains(p1) and mask.contains(p2)):
                continue

        lines.append(LineSegment(i1=i1, j1=j1, i2=i2, j2=j2))
        drawn += 1

    if drawn < target:
        _logger.info(
            "Attempt limit reached: drew %d of %d lines in %d attempts",
            drawn,
            target,
            attempts,
        )

    return LineSampleResult(lines=tuple(lines), attempts=attempts, target=target)


__all__ = [
    "ATTEMPTS_PER_LINE",
    "LineSampleResult",
    "LineSegment",
    "sample_length",
    "sample_lines",
    "segment_coords",
]
