# どこで: `src/yellowtail/core/cross_flags.py`。
# 何を: quad を画面矩形へ折り返し、どの画面端をまたぐかのビットマスク（cross flags）を求める。
# なぜ: ウィンドウサイズが毎フレーム変わり得るため、描画時点の width/height で判定するため。

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[attr-defined]

CROSS_LEFT = 1
CROSS_RIGHT = 2
CROSS_TOP = 4
CROSS_BOTTOM = 8

CROSS_HORIZONTAL = CROSS_LEFT | CROSS_RIGHT
CROSS_VERTICAL = CROSS_TOP | CROSS_BOTTOM


def _as_quads(quads: np.ndarray) -> np.ndarray:
    arr = np.ascontiguousarray(quads, dtype=np.float64)
    if arr.ndim != 3 or arr.shape[1:] != (4, 2):
        raise ValueError("quads は shape (M,4,2) の配列である必要がある")
    return arr


def _check_canvas(width: float, height: float) -> tuple[float, float]:
    w = float(width)
    h = float(height)
    if not (w > 0.0 and h > 0.0):
        raise ValueError(f"width/height は正の値である必要がある: got={(width, height)!r}")
    return w, h


def compute_cross_flags(quads: np.ndarray, width: float, height: float) -> np.ndarray:
    """各 quad が画面 ``[0, width) x [0, height)`` のどの端をはみ出すかを返す。

    Returns
    -------
    np.ndarray
        uint8 型 shape (M,)。bit0=左, bit1=右, bit2=上, bit3=下。
    """
    arr = _as_quads(quads)
    w, h = _check_canvas(width, height)
    return _cross_flags_numba(arr, w, h)


def wrap_quads(quads: np.ndarray, width: float, height: float) -> tuple[np.ndarray, np.ndarray]:
    """quad を画面矩形へ折り返し、折り返し後の cross flags と合わせて返す。

    各 quad は (width, height) の整数倍だけ平行移動し、頂点 0 が画面内に来るようにする。
    quad 同士の位置関係は崩れるが、トーラス上では同じ見た目になる。

    Returns
    -------
    tuple[np.ndarray, np.ndarray]
        (折り返し後の quads shape (M,4,2), flags uint8 shape (M,))。
    """
    arr = _as_quads(quads)
    w, h = _check_canvas(width, height)
    out = np.empty_like(arr)
    _wrap_quads_numba(arr, w, h, out)
    return out, compute_cross_flags(out, w, h)


@njit(cache=True)  # type: ignore[misc]
def _flags_for_quad(quads: np.ndarray, i: int, w: float, h: float) -> np.uint8:
    f = 0
    for k in range(4):
        x = quads[i, k, 0]
        y = quads[i, k, 1]
        if x < 0.0:
            f |= 1
        elif x >= w:
            f |= 2
        if y < 0.0:
            f |= 4
        elif y >= h:
            f |= 8
    return np.uint8(f)


@njit(cache=True)  # type: ignore[misc]
def _cross_flags_numba(quads: np.ndarray, w: float, h: float) -> np.ndarray:
    m = quads.shape[0]
    flags = np.zeros((m,), dtype=np.uint8)
    for i in range(m):
        flags[i] = _flags_for_quad(quads, i, w, h)
    return flags


@njit(cache=True)  # type: ignore[misc]
def _wrap_quads_numba(quads: np.ndarray, w: float, h: float, out: np.ndarray) -> None:
    m = quads.shape[0]
    for i in range(m):
        sx = math.floor(quads[i, 0, 0] / w) * w
        sy = math.floor(quads[i, 0, 1] / h) * h
        for k in range(4):
            out[i, k, 0] = quads[i, k, 0] - sx
            out[i, k, 1] = quads[i, k, 1] - sy


__all__ = [
    "CROSS_BOTTOM",
    "CROSS_HORIZONTAL",
    "CROSS_LEFT",
    "CROSS_RIGHT",
    "CROSS_TOP",
    "CROSS_VERTICAL",
    "compute_cross_flags",
    "wrap_quads",
]
