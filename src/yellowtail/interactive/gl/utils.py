from __future__ import annotations

# どこで: `src/yellowtail/interactive/gl/utils.py`。
# 何を: 描画で使う小さなユーティリティ（投影行列生成・quad 配列の頂点化）を提供する。
# なぜ: renderer で共有し、座標系と頂点レイアウトの定義を一箇所に集約するため。

import numpy as np


def build_projection(width: float, height: float) -> "np.ndarray":
    """画面ピクセル座標（左上原点・y 下向き）から NDC への正射影行列を返す。

    ModernGL の uniform へそのまま書けるよう転置済み（列優先）で返す。
    """
    w = float(width)
    h = float(height)
    if w <= 0.0 or h <= 0.0:
        raise ValueError(f"width/height は正の値である必要がある: got={(width, height)!r}")
    proj = np.array(
        [
            [2.0 / w, 0.0, 0.0, -1.0],
            [0.0, -2.0 / h, 0.0, 1.0],
            [0.0, 0.0, -1.0, 0.0],
            [0.0, 0.0, 0.0, 1.0],
        ],
        dtype="f4",
    ).T
    return np.ascontiguousarray(proj)


def quads_to_vertices(quads: np.ndarray) -> np.ndarray:
    """shape (K,4,2) の quad 配列を VBO 用の float32 (K*4, 2) 配列へ平坦化する。"""
    arr = np.asarray(quads)
    if arr.ndim != 3 or arr.shape[1:] != (4, 2):
        raise ValueError("quads は shape (K,4,2) の配列である必要がある")
    return np.ascontiguousarray(arr.reshape(-1, 2), dtype=np.float32)


def window_to_screen(x: float, y: float, height: int) -> tuple[float, float]:
    """pyglet のイベント座標（左下原点・y 上向き）を画面座標（左上原点・y 下向き）へ変換する。

    ピクセル行 ``0..height-1`` は ``height-1..0`` へ対応する。
    """
    return float(x), float(int(height) - 1 - y)
