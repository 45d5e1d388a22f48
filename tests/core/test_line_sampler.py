"""線分の棄却サンプリング（sample_lines）に関するテスト群。"""

from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from compline.core.circle_mask import CircleMask, CircleRegion
from compline.core.composition_config import InvalidConfiguration
from compline.core.grid import PointGrid, build_point_grid
from compline.core.line_sampler import (
    ATTEMPTS_PER_LINE,
    LineSegment,
    sample_length,
    sample_lines,
    segment_coords,
)
from compline.core.random_source import DeterministicRandom

CANVAS = (600, 600)


def _grid(w: int, h: int, *, jitter: float = 0.0, seed: int = 0) -> PointGrid:
    return build_point_grid(w, h, jitter, CANVAS, DeterministicRandom(seed))


def _mask(enabled: bool) -> CircleMask:
    return CircleMask(region=CircleRegion.from_canvas(CANVAS), enabled=enabled)


def _sample(grid: PointGrid, mask: CircleMask, **kwargs):
    params = dict(
        max_line_length=0.1,
        obliquity=0.0,
        length_skew_exponent=4.0,
        line_count=10,
        rng=DeterministicRandom(0),
    )
    params.update(kwargs)
    return sample_lines(grid, mask, **params)


def test_two_by_two_grid_draws_one_line_on_first_attempt() -> None:
    grid = _grid(2, 2)
    result = _sample(grid, _mask(False), line_count=1)

    assert result.attempts == 1
    assert len(result.lines) == 1
    assert result.complete
    (p1, p2) = result.lines[0].endpoints(grid)
    corners = {(0.0, 0.0), (600.0, 0.0), (0.0, 600.0), (600.0, 600.0)}
    assert p1 in corners
    assert p2 in corners
    assert p1 != p2


def test_zero_length_forces_single_grid_step() -> None:
    grid = _grid(3, 3)
    result = _sample(grid, _mask(False), max_line_length=0.0, line_count=5)

    assert len(result.lines) == 5
    for seg in result.lines:
        steps = sorted((abs(seg.i2 - seg.i1), abs(seg.j2 - seg.j1)))
        assert steps == [0, 1]


def test_zero_length_consumes_correction_draw_each_attempt() -> None:
    """補正が毎回発生するので 1 試行あたり 6 回消費する。"""
    grid = _grid(3, 3)
    rng = DeterministicRandom(4)
    result = sample_lines(
        grid,
        _mask(False),
        max_line_length=0.0,
        obliquity=0.0,
        length_skew_exponent=1.0,
        line_count=4,
        rng=rng,
    )
    assert result.attempts == 4

    ref = DeterministicRandom(4)
    for _ in range(6 * 4):
        ref.next()
    assert rng.next() == ref.next()


def test_follows_reference_draw_sequence() -> None:
    """逐次乱数から手計算した候補と一致する。"""
    w, h = 9, 7
    grid = _grid(w, h)
    max_len, obliquity, skew = 0.6, 0.4, 1.5

    ref = DeterministicRandom(17)
    expected: list[LineSegment] = []
    attempts = 0
    while len(expected) < 6:
        attempts += 1
        i1 = math.floor(ref.next() * (w - 1))
        j1 = math.floor(ref.next() * (h - 1))
        dr = math.pow(ref.next(), skew) * max_len
        off = (2.0 * ref.next() - 1.0) * (obliquity * (math.pi / 2.0))
        theta = off if ref.next() < 0.5 else math.pi / 2.0 + off
        di = math.floor(dr * math.cos(theta) * (w - 1))
        dj = math.floor(dr * math.sin(theta) * (h - 1))
        if di == 0 and dj == 0:
            if ref.next() < 0.5:
                di = 1
            else:
                dj = 1
        i2 = min(max(i1 + di, 0), w - 1)
        j2 = min(max(j1 + dj, 0), h - 1)
        if (i1, j1) == (i2, j2):
            continue
        expected.append(LineSegment(i1, j1, i2, j2))

    result = sample_lines(
        grid,
        _mask(False),
        max_line_length=max_len,
        obliquity=obliquity,
        length_skew_exponent=skew,
        line_count=6,
        rng=DeterministicRandom(17),
    )
    assert list(result.lines) == expected
    assert result.attempts == attempts


def test_start_indices_exclude_last_row_and_column() -> None:
    grid = _grid(6, 5)
    result = _sample(grid, _mask(False), max_line_length=0.5, obliquity=1.0, line_count=300)
    assert all(0 <= s.i1 < 5 and 0 <= s.j1 < 4 for s in result.lines)
    assert all(0 <= s.i2 <= 5 and 0 <= s.j2 <= 4 for s in result.lines)


def test_no_degenerate_lines() -> None:
    grid = _grid(12, 12, jitter=0.2)
    result = _sample(grid, _mask(False), max_line_length=0.3, obliquity=1.0, line_count=500)
    assert len(result.lines) == 500
    for seg in result.lines:
        assert (seg.i1, seg.j1) != (seg.i2, seg.j2)


def test_masked_lines_have_both_endpoints_in_circle() -> None:
    grid = _grid(40, 40, jitter=0.3, seed=2)
    mask = _mask(True)
    result = _sample(grid, mask, max_line_length=0.4, obliquity=0.5, line_count=200)

    assert len(result.lines) == 200
    region = mask.region
    for p1, p2 in segment_coords(result.lines, grid):
        for x, y in (p1, p2):
            assert (x - region.cx) ** 2 + (y - region.cy) ** 2 <= region.radius**2


def test_obliquity_zero_gives_axis_aligned_lines() -> None:
    grid = _grid(30, 30)
    result = _sample(grid, _mask(False), max_line_length=0.5, obliquity=0.0, line_count=100)
    for seg in result.lines:
        assert seg.i1 == seg.i2 or seg.j1 == seg.j2


def test_attempt_cap_returns_partial_result(caplog: pytest.LogCaptureFixture) -> None:
    """どの点も円に入らない場合は上限まで試行して空を返す（例外にしない）。"""
    grid = _grid(4, 4)
    far = CircleMask(region=CircleRegion(cx=-1000.0, cy=-1000.0, radius=1.0), enabled=True)

    with caplog.at_level(logging.INFO, logger="compline.core.line_sampler"):
        result = _sample(grid, far, line_count=2)

    assert result.lines == ()
    assert result.attempts == 2 * ATTEMPTS_PER_LINE
    assert not result.complete
    assert "Attempt limit reached" in caplog.text


def test_zero_line_count_returns_empty_without_draws() -> None:
    rng = DeterministicRandom(1)
    result = _sample(_grid(3, 3), _mask(False), line_count=0, rng=rng)
    assert result.lines == ()
    assert result.attempts == 0
    assert rng.next() == DeterministicRandom(1).next()


def test_negative_line_count_is_rejected() -> None:
    with pytest.raises(InvalidConfiguration):
        _sample(_grid(3, 3), _mask(False), line_count=-1)


def test_sample_length_is_monotone_in_exponent() -> None:
    rng = np.random.default_rng(0)
    for u in rng.random(200).tolist():
        prev = sample_length(u, max_line_length=0.8, length_skew_exponent=0.1)
        for k in (0.5, 1.0, 2.0, 4.0, 10.0):
            cur = sample_length(u, max_line_length=0.8, length_skew_exponent=k)
            assert cur <= prev
            prev = cur


def test_segment_coords_shape_and_values() -> None:
    grid = _grid(3, 3)
    seg = LineSegment(0, 0, 2, 1)
    coords = segment_coords((seg,), grid)
    assert coords.shape == (1, 2, 2)
    np.testing.assert_allclose(coords[0], [[0.0, 0.0], [600.0, 300.0]])
    assert segment_coords((), grid).shape == (0, 2, 2)
