# どこで: `src/yellowtail/core/path_buffer.py`。
# 何を: 1 ストローク分のサンプル点を保持する固定容量バッファ（追加・平滑化・前進シフト）を提供する。
# なぜ: 毎フレームの前進処理で配列を再確保せず、確保済み領域をその場で書き換えるため。

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from yellowtail.core.vec import distance

DEFAULT_CAPACITY = 600
DEFAULT_SMOOTHING_WEIGHT = 18.0


class PathBuffer:
    """固定容量のストローク点履歴。

    Parameters
    ----------
    capacity : int, default 600
        保持できる点の最大数。1 以上。

    Notes
    -----
    - 最新の点が index 0、最古の点が index ``count - 1`` に並ぶ。
    - ``count == capacity`` に達した後の追加は末尾（最古）を捨ててシフトする。
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        cap = int(capacity)
        if cap <= 0:
            raise ValueError(f"capacity は正の整数である必要がある: got={capacity!r}")
        self._capacity = cap
        self._points = np.zeros((cap, 2), dtype=np.float64)
        self._count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def count(self) -> int:
        return self._count

    @property
    def is_full(self) -> bool:
        return self._count == self._capacity

    def __len__(self) -> int:
        return self._count

    @property
    def points(self) -> np.ndarray:
        """有効な点の読み取り専用ビュー（shape (count, 2)、最新が先頭）。"""
        view = self._points[: self._count]
        view.flags.writeable = False
        return view

    def add_point(self, x: float, y: float) -> None:
        """点を先頭へ追加する。

        既存の点は 1 スロットずつ末尾側へずれる。満杯なら最古の点が押し出される。
        最小移動量による間引きは呼び出し側の責務とする。
        """
        n = self._count
        if n < self._capacity:
            # 重なりのあるスライス代入は numpy が内部でコピーを挟むので安全。
            self._points[1 : n + 1] = self._points[:n]
            self._count = n + 1
        else:
            self._points[1:n] = self._points[: n - 1]
        self._points[0, 0] = float(x)
        self._points[0, 1] = float(y)

    def smooth(self, weight: float = DEFAULT_SMOOTHING_WEIGHT) -> None:
        """隣接点との加重平均で内部点を軽く平滑化する（点数と順序は不変）。"""
        if self._count < 3:
            return
        _smooth_numba(self._points, self._count, float(weight))

    def advance(self, jump_dx: float, jump_dy: float) -> None:
        """ストロークを 1 ステップ前進させる。

        全点を 1 スロット末尾側へずらし、空いた先頭へ「シフト後の末尾点 - jump」を書く。
        ジャンプベクトルが ``points[-1] - points[0]`` なら、形を保ったまま
        1 サンプル分だけ進む平行移動になる。空なら no-op。
        """
        n = self._count
        if n == 0:
            return
        if n > 1:
            self._points[1:n] = self._points[: n - 1]
        self._points[0, 0] = self._points[n - 1, 0] - float(jump_dx)
        self._points[0, 1] = self._points[n - 1, 1] - float(jump_dy)

    def clear(self) -> None:
        """点数を 0 に戻す（確保済み領域はそのまま再利用する）。"""
        self._count = 0

    def distance_to_last(self, x: float, y: float) -> float:
        """(x, y) から最後に追加した点までの距離を返す。空なら inf。"""
        if self._count == 0:
            return math.inf
        return distance(self._points[0, 0], self._points[0, 1], x, y)

    def span(self) -> tuple[float, float]:
        """先頭スロットから末尾スロットへの変位 ``points[-1] - points[0]`` を返す。"""
        n = self._count
        if n < 2:
            return 0.0, 0.0
        return (
            float(self._points[n - 1, 0] - self._points[0, 0]),
            float(self._points[n - 1, 1] - self._points[0, 1]),
        )


@njit(cache=True)  # type: ignore[misc]
def _smooth_numba(points: np.ndarray, count: int, weight: float) -> None:
    """内部点を (前 + weight*自身 + 次) / (weight + 2) で置き換える（in-place, Numba 版）。

    先頭側から順に更新するため、前の点は更新済みの値を参照する。
    """
    scale = 1.0 / (weight + 2.0)
    for i in range(1, count - 1):
        points[i, 0] = (points[i - 1, 0] + weight * points[i, 0] + points[i + 1, 0]) * scale
        points[i, 1] = (points[i - 1, 1] + weight * points[i, 1] + points[i + 1, 1]) * scale


__all__ = ["DEFAULT_CAPACITY", "DEFAULT_SMOOTHING_WEIGHT", "PathBuffer"]
