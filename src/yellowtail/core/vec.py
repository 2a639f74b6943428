# どこで: `src/yellowtail/core/vec.py`。
# 何を: リボン生成で使う 2D 点/ベクトル演算（距離・法線オフセット）を提供する。
# なぜ: Path Buffer と Ribbon Compiler で同じ幾何計算を共有し、退化ケースの扱いを一箇所に集約するため。

from __future__ import annotations

import math

from numba import njit  # type: ignore[attr-defined]


def distance(x0: float, y0: float, x1: float, y1: float) -> float:
    """2 点間のユークリッド距離を返す。"""
    return math.hypot(float(x1) - float(x0), float(y1) - float(y0))


@njit(cache=True)  # type: ignore[misc]
def unit_perpendicular(dx: float, dy: float) -> tuple[float, float]:
    """(dx, dy) を正規化して 90° 回転した単位法線を返す。

    長さ 0 の場合は法線が定義できないため (0, 0) を返す（NaN を伝播させない）。
    """
    length = math.sqrt(dx * dx + dy * dy)
    if length == 0.0:
        return 0.0, 0.0
    return -dy / length, dx / length


@njit(cache=True)  # type: ignore[misc]
def perpendicular_offset(dx: float, dy: float, half_width: float) -> tuple[float, float]:
    """方向 (dx, dy) に直交する、長さ half_width のオフセットベクトルを返す。"""
    px, py = unit_perpendicular(dx, dy)
    return px * half_width, py * half_width


__all__ = ["distance", "perpendicular_offset", "unit_perpendicular"]
