# どこで: `src/yellowtail/interactive/gl/quad_indices.py`。
# 何を: quad 数から GL_TRIANGLES 用インデックス配列（quad あたり 2 三角形）を生成する。
# なぜ: インデックス生成を純粋関数として切り出し、テストしやすくするため。

from __future__ import annotations

from functools import lru_cache

import numpy as np
from numba import njit  # type: ignore[attr-defined]

INDICES_PER_QUAD = 6


def build_quad_indices(n_quads: int) -> np.ndarray:
    """n_quads 個の quad を三角形 2 枚ずつで描くためのインデックス配列を返す。

    Notes
    -----
    - quad k の頂点 ``4k..4k+3`` を ``(0,1,2)`` と ``(0,2,3)`` に分割する。
    - 結果は quad 数だけで決まるため LRU キャッシュし、読み取り専用で返す。
    """
    n = int(n_quads)
    if n <= 0:
        return np.zeros((0,), dtype=np.uint32)
    return _build_quad_indices_cached(n)


@lru_cache(maxsize=64)
def _build_quad_indices_cached(n_quads: int) -> np.ndarray:
    out = _build_quad_indices_numba(n_quads)
    out.setflags(write=False)
    return out


@njit(cache=True)  # type: ignore[misc]
def _build_quad_indices_numba(n_quads: int) -> np.ndarray:
    """GL_TRIANGLES 用の indices を生成する（Numba 版）。"""
    out = np.empty((n_quads * 6,), dtype=np.uint32)
    for k in range(n_quads):
        base = np.uint32(4 * k)
        j = 6 * k
        out[j] = base
        out[j + 1] = base + 1
        out[j + 2] = base + 2
        out[j + 3] = base
        out[j + 4] = base + 2
        out[j + 5] = base + 3
    return out


__all__ = ["INDICES_PER_QUAD", "build_quad_indices"]
