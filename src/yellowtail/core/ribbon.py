# どこで: `src/yellowtail/core/ribbon.py`。
# 何を: ストロークの点列と太さから、向き付き四角形（quad）の列＝リボンを生成する。
# なぜ: 描画側が「4 頂点の塗りつぶし」だけで太さのある線を描けるようにするため。

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from yellowtail.core.vec import perpendicular_offset


@dataclass(frozen=True, slots=True)
class Ribbon:
    """コンパイル済みリボン（quad 列）を表す不変値。

    Parameters
    ----------
    quads : np.ndarray
        float64 型 shape (M, 4, 2) の頂点配列。
        quad i の頂点順は ``[p_i + o_i, p_{i+1} + o_{i+1}, p_{i+1} - o_{i+1}, p_i - o_i]``。

    Notes
    -----
    配列は writeable=False に固定する。描画側はこの配列だけを読み、
    Path Buffer を直接参照しない。
    """

    quads: np.ndarray

    def __post_init__(self) -> None:
        quads = np.asarray(self.quads)
        if quads.ndim != 3 or quads.shape[1:] != (4, 2):
            raise ValueError("quads は shape (M,4,2) の配列である必要がある")
        if quads.dtype != np.float64:
            quads = quads.astype(np.float64, copy=False)
        quads.setflags(write=False)
        object.__setattr__(self, "quads", quads)

    @classmethod
    def empty(cls) -> "Ribbon":
        return cls(quads=np.zeros((0, 4, 2), dtype=np.float64))

    def __len__(self) -> int:
        return int(self.quads.shape[0])


def compile_ribbon(points: np.ndarray, thickness: float) -> Ribbon:
    """点列をリボン（quad 列）へ変換する。

    Parameters
    ----------
    points : np.ndarray
        shape (n, 2) の点列。
    thickness : float
        リボンの太さ。各点で法線方向へ ±thickness/2 だけ広げる。

    Returns
    -------
    Ribbon
        ``max(n - 1, 0)`` 個の quad を持つリボン。

    Notes
    -----
    - 点 i の法線は ``p[i+1] - p[i-1]`` の向き（両端は片側差分）から作る。
      隣り合う quad は共有辺の 2 頂点が完全一致するため、隙間なく描ける。
    - 長さ 0 の方向では法線が定義できないため、オフセット 0 に置き換える。
    """
    pts = np.ascontiguousarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError("points は shape (n,2) の配列である必要がある")
    n = int(pts.shape[0])
    if n < 2:
        return Ribbon.empty()

    return Ribbon(quads=_compile_quads_numba(pts, 0.5 * float(thickness)))


@njit(cache=True)  # type: ignore[misc]
def _compile_quads_numba(points: np.ndarray, half_width: float) -> np.ndarray:
    """点ごとの法線オフセットを求め、隣接点ペアごとに quad を組み立てる（Numba 版）。"""
    n = points.shape[0]
    offsets = np.empty((n, 2), dtype=np.float64)
    for i in range(n):
        lo = i - 1 if i > 0 else 0
        hi = i + 1 if i < n - 1 else n - 1
        dx = points[hi, 0] - points[lo, 0]
        dy = points[hi, 1] - points[lo, 1]
        ox, oy = perpendicular_offset(dx, dy, half_width)
        offsets[i, 0] = ox
        offsets[i, 1] = oy

    quads = np.empty((n - 1, 4, 2), dtype=np.float64)
    for i in range(n - 1):
        j = i + 1
        quads[i, 0, 0] = points[i, 0] + offsets[i, 0]
        quads[i, 0, 1] = points[i, 1] + offsets[i, 1]
        quads[i, 1, 0] = points[j, 0] + offsets[j, 0]
        quads[i, 1, 1] = points[j, 1] + offsets[j, 1]
        quads[i, 2, 0] = points[j, 0] - offsets[j, 0]
        quads[i, 2, 1] = points[j, 1] - offsets[j, 1]
        quads[i, 3, 0] = points[i, 0] - offsets[i, 0]
        quads[i, 3, 1] = points[i, 1] - offsets[i, 1]
    return quads


__all__ = ["Ribbon", "compile_ribbon"]
