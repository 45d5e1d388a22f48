# どこで: `src/compline/core/circle_mask.py`。
# 何を: キャンバス中心の円領域 CircleRegion と、その適用可否を切り替える CircleMask を定義する。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

CIRCLE_RADIUS_RATIO = 0.9


@dataclass(frozen=True, slots=True)
class CircleRegion:
    """円領域（中心 cx, cy と半径 radius）。"""

    cx: float
    cy: float
    radius: float

    @classmethod
    def from_canvas(cls, canvas_size: tuple[float, float]) -> "CircleRegion":
        """キャンバス中心・短辺の半分 × 0.9 を半径とする円を返す。"""
        canvas_w, canvas_h = canvas_size
        w = float(canvas_w)
        h = float(canvas_h)
        if w <= 0.0 or h <= 0.0:
            raise ValueError("canvas_size は正の (width, height) である必要がある")
        return cls(cx=w / 2.0, cy=h / 2.0, radius=min(w, h) / 2.0 * CIRCLE_RADIUS_RATIO)

    def contains(self, x: float, y: float) -> bool:
        """点 (x, y) が円の内側（境界含む）にあるかを返す。"""
        dx = float(x) - self.cx
        dy = float(y) - self.cy
        return dx * dx + dy * dy <= self.radius * self.radius

    def contains_many(self, points: np.ndarray) -> np.ndarray:
        """shape (..., 2) の点配列に対する contains の bool 配列を返す。"""
        p = np.asarray(points, dtype=np.float64)
        dx = p[..., 0] - self.cx
        dy = p[..., 1] - self.cy
        return dx * dx + dy * dy <= self.radius * self.radius


@dataclass(frozen=True, slots=True)
class CircleMask:
    """CircleRegion の判定を適用するかどうかを束ねた述語。

    enabled=False のときは常に True を返す。円の幾何（region）は enabled に依らず保持する。
    """

    region: CircleRegion
    enabled: bool = True

    def contains(self, point: tuple[float, float]) -> bool:
        if not self.enabled:
            return True
        x, y = point
        return self.region.contains(x, y)

    def contains_many(self, points: np.ndarray) -> np.ndarray:
        p = np.asarray(points, dtype=np.float64)
        if not self.enabled:
            return np.ones(p.shape[:-1], dtype=bool)
        return self.region.contains_many(p)


__all__ = ["CIRCLE_RADIUS_RATIO", "CircleMask", "CircleRegion"]
