# どこで: `src/yellowtail/core/toroidal.py`。
# 何を: Gesture のリボンを、画面端で反対側へ回り込む（トーラス状の）描画として DrawContext へ流す。
# なぜ: 塗り色や画面サイズといった描画状態をグローバルに持たず、明示的な DrawContext 経由で扱うため。

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Protocol

import numpy as np

from yellowtail.core.cross_flags import CROSS_HORIZONTAL, CROSS_VERTICAL, wrap_quads

if TYPE_CHECKING:
    from yellowtail.core.gesture import Gesture

DEFAULT_BACKGROUND_COLOR = (0.0, 0.0, 0.0)


class DrawContext(Protocol):
    """コアが要求する描画面。

    Notes
    -----
    `width` / `height` はウィンドウのリサイズに追従するため、毎フレーム参照し直す。
    実装が `draw_filled_quads(quads)`（shape (K,4,2)）を持つ場合はそちらでまとめて渡す。
    """

    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    def clear_screen(self, color: tuple[float, float, float]) -> None: ...

    def draw_filled_quad(self, vertices: np.ndarray) -> None: ...


def expand_toroidal_copies(
    quads: np.ndarray,
    flags: np.ndarray,
    width: float,
    height: float,
) -> np.ndarray:
    """折り返し済み quad に、端をまたぐ分の平行移動コピーを加えた配列を返す。

    横方向のフラグを持つ quad は (+width, 0) と (-width, 0) に、
    縦方向のフラグを持つ quad は (0, +height) と (0, -height) に複製する。

    Notes
    -----
    縦横両方をまたぐ角の quad も 4 コピーまでしか作らない（斜めのコピーは描かない）。
    角でわずかに欠ける見た目は許容している。
    """
    horizontal = quads[(flags & CROSS_HORIZONTAL) != 0]
    vertical = quads[(flags & CROSS_VERTICAL) != 0]
    if horizontal.shape[0] == 0 and vertical.shape[0] == 0:
        return quads

    dx = np.array([float(width), 0.0], dtype=np.float64)
    dy = np.array([0.0, float(height)], dtype=np.float64)
    parts = [quads]
    if horizontal.shape[0] > 0:
        parts.append(horizontal + dx)
        parts.append(horizontal - dx)
    if vertical.shape[0] > 0:
        parts.append(vertical + dy)
        parts.append(vertical - dy)
    return np.concatenate(parts, axis=0)


class ToroidalRenderer:
    """全 Gesture のリボンを画面端で回り込ませて描く。"""

    def __init__(
        self,
        *,
        background_color: tuple[float, float, float] = DEFAULT_BACKGROUND_COLOR,
    ) -> None:
        self._background_color = tuple(float(c) for c in background_color)

    @property
    def background_color(self) -> tuple[float, float, float]:
        return self._background_color  # type: ignore[return-value]

    def render(self, gestures: Iterable["Gesture"], ctx: DrawContext) -> int:
        """1 フレーム分を描画し、描いた quad 数（コピー含む）を返す。"""
        ctx.clear_screen(self.background_color)

        width = int(ctx.width)
        height = int(ctx.height)
        if width <= 0 or height <= 0:
            # 最小化中などは描く場所がない。
            return 0

        draw_many = getattr(ctx, "draw_filled_quads", None)
        drawn = 0
        for gesture in gestures:
            if not gesture.exists:
                continue
            quads = gesture.quads
            if quads.shape[0] == 0:
                continue
            wrapped, flags = wrap_quads(quads, width, height)
            expanded = expand_toroidal_copies(wrapped, flags, width, height)
            if callable(draw_many):
                draw_many(expanded)
            else:
                for quad in expanded:
                    ctx.draw_filled_quad(quad)
            drawn += int(expanded.shape[0])
        return drawn


__all__ = [
    "DEFAULT_BACKGROUND_COLOR",
    "DrawContext",
    "ToroidalRenderer",
    "expand_toroidal_copies",
]
