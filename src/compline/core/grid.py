"""
どこで: `src/compline/core/grid.py`。
何を: 格子点に揺らぎを加えた点グリッド PointGrid を生成する。
なぜ: 線分の端点候補を (i, j) インデックスで引ける密な配列として用意するため。
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from compline.core.composition_config import InvalidConfiguration
from compline.core.random_source import DeterministicRandom


@dataclass(frozen=True, slots=True)
class PointGrid:
    """grid_width × grid_height の点配列。

    Parameters
    ----------
    points : np.ndarray
        float64 型 shape (W, H, 2) のキャンバス座標配列。`points[i, j]` が (x, y)。

    Notes
    -----
    生成後は並べ替えず、配列は writeable=False で保持する。
    """

    points: np.ndarray

    def __post_init__(self) -> None:
        points = np.asarray(self.points, dtype=np.float64)
        if points.ndim != 3 or points.shape[2] != 2:
            raise ValueError("points は shape (W,H,2) の 3 次元配列である必要がある")
        if points.shape[0] < 2 or points.shape[1] < 2:
            raise ValueError("PointGrid は 2x2 以上である必要がある")
        points.setflags(write=False)
        object.__setattr__(self, "points", points)

    @property
    def width(self) -> int:
        """列数 W を返す。"""
        return int(self.points.shape[0])

    @property
    def height(self) -> int:
        """行数 H を返す。"""
        return int(self.points.shape[1])

    def __len__(self) -> int:
        return self.width * self.height

    def point(self, i: int, j: int) -> tuple[float, float]:
        """インデックス (i, j) の点座標を返す。"""
        x, y = self.points[int(i), int(j)]
        return float(x), float(y)

    def flat(self) -> np.ndarray:
        """全点を i 外側・j 内側の順に並べた shape (W*H, 2) の配列を返す。"""
        return self.points.reshape((-1, 2))


def build_point_grid(
    grid_width: int,
    grid_height: int,
    jitter: float,
    canvas_size: tuple[float, float],
    rng: DeterministicRandom,
) -> PointGrid:
    """揺らぎ付きの点グリッドを生成する。

    Parameters
    ----------
    grid_width, grid_height : int
        列数 W と行数 H（2 以上）。
    jitter : float
        揺らぎ幅（セル比率）。0 で厳密な格子になる。
    canvas_size : tuple[float, float]
        キャンバス寸法 (width, height)。
    rng : DeterministicRandom
        乱数源。1 点あたり x, y の順に 2 回、i 外側・j 内側の順で消費する。

    Returns
    -------
    PointGrid
        点 (i, j) = ((i + jitter·(2u−1)) / (W−1) · width, (j + jitter·(2v−1)) / (H−1) · height)。

    Raises
    ------
    InvalidConfiguration
        W または H が 2 未満の場合。
    """
    w = int(grid_width)
    h = int(grid_height)
    if w < 2 or h < 2:
        raise InvalidConfiguration(
            f"grid_width/grid_height は 2 以上である必要がある: got=({w}, {h})"
        )

    canvas_w, canvas_h = canvas_size
    # (W, H, 2) の C 順は「i 外側 → j 内側 → x, y」で、逐次 next() と同じ消費順になる。
    u = rng.next_array((w, h, 2))
    offsets = float(jitter) * (2.0 * u - 1.0)

    ii = np.arange(w, dtype=np.float64)[:, None]
    jj = np.arange(h, dtype=np.float64)[None, :]

    points = np.empty((w, h, 2), dtype=np.float64)
    points[:, :, 0] = (ii + offsets[:, :, 0]) / float(w - 1) * float(canvas_w)
    points[:, :, 1] = (jj + offsets[:, :, 1]) / float(h - 1) * float(canvas_h)
    return PointGrid(points=points)


__all__ = ["PointGrid", "build_point_grid"]
