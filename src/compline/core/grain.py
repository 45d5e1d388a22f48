# どこで: `src/compline/core/grain.py`。
# 何を: キャンバス全面にランダム配置した半透明の点（グレイン）を生成する。

from __future__ import annotations

from dataclasses import dataclass

from compline.core.random_source import DeterministicRandom

DEFAULT_GRAIN_COUNT = 3000
DEFAULT_GRAIN_ALPHA_RANGE = (20.0, 50.0)


@dataclass(frozen=True, slots=True)
class GrainSpeckle:
    """グレイン 1 粒。alpha は 0..255 スケール。"""

    x: float
    y: float
    alpha: float


def generate_grain(
    canvas_size: tuple[float, float],
    rng: DeterministicRandom,
    *,
    count: int = DEFAULT_GRAIN_COUNT,
    alpha_range: tuple[float, float] = DEFAULT_GRAIN_ALPHA_RANGE,
) -> tuple[GrainSpeckle, ...]:
    """グレインを count 粒生成する。

    Parameters
    ----------
    canvas_size : tuple[float, float]
        キャンバス寸法 (width, height)。
    rng : DeterministicRandom
        乱数源。1 粒あたり x, y, alpha の順に 3 回消費する。
    count : int, optional
        粒数。0 以下なら空を返し、乱数を消費しない。
    alpha_range : tuple[float, float], optional
        alpha の一様分布レンジ [lo, hi)。

    Returns
    -------
    tuple[GrainSpeckle, ...]
        生成順のグレイン列。
    """
    n = int(count)
    if n <= 0:
        return ()

    canvas_w, canvas_h = canvas_size
    lo, hi = (float(v) for v in alpha_range)
    u = rng.next_array((n, 3))
    xs = u[:, 0] * float(canvas_w)
    ys = u[:, 1] * float(canvas_h)
    alphas = lo + u[:, 2] * (hi - lo)
    return tuple(
        GrainSpeckle(x=float(x), y=float(y), alpha=float(a))
        for x, y, a in zip(xs.tolist(), ys.tolist(), alphas.tolist())
    )


__all__ = [
    "DEFAULT_GRAIN_ALPHA_RANGE",
    "DEFAULT_GRAIN_COUNT",
    "GrainSpeckle",
    "generate_grain",
]
