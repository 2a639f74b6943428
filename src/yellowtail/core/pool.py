# どこで: `src/yellowtail/core/pool.py`。
# 何を: 固定数の Gesture を保持するプールと、毎フレームの前進/凍結を決めるスケジューラを提供する。
# なぜ: 入力イベント・tick・render が参照する状態を 1 つのオブジェクトに閉じ込め、明示的に受け渡すため。

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from yellowtail.core.gesture import Gesture, GestureConfig, GestureState
from yellowtail.core.toroidal import DrawContext, ToroidalRenderer

_logger = logging.getLogger(__name__)

DEFAULT_N_GESTURES = 36
DEFAULT_MIN_MOVE = 3.0


@dataclass(frozen=True, slots=True)
class PoolConfig:
    """GesturePool の設定値。"""

    n_gestures: int = DEFAULT_N_GESTURES
    min_move: float = DEFAULT_MIN_MOVE
    gesture: GestureConfig = field(default_factory=GestureConfig)

    def __post_init__(self) -> None:
        if int(self.n_gestures) <= 0:
            raise ValueError(f"n_gestures は正の整数である必要がある: got={self.n_gestures!r}")
        if float(self.min_move) < 0.0:
            raise ValueError(f"min_move は 0 以上である必要がある: got={self.min_move!r}")


class GesturePool:
    """固定長の Gesture リングと round-robin カーソル。

    Notes
    -----
    - 新しいストロークはカーソルを 1 つ進めた位置のスロットを再利用する（最古を上書き）。
    - カーソル位置の Gesture を「アクティブ」とみなし、太さ変更の対象にする。
    """

    def __init__(
        self,
        config: PoolConfig | None = None,
        *,
        renderer: ToroidalRenderer | None = None,
    ) -> None:
        cfg = config if config is not None else PoolConfig()
        self._config = cfg
        self._gestures = tuple(Gesture(cfg.gesture) for _ in range(int(cfg.n_gestures)))
        self._cursor = -1
        self._renderer = renderer if renderer is not None else ToroidalRenderer()

    @property
    def config(self) -> PoolConfig:
        return self._config

    @property
    def gestures(self) -> tuple[Gesture, ...]:
        return self._gestures

    @property
    def cursor(self) -> int:
        """直近のストロークに割り当てたスロット番号。未使用なら -1。"""
        return self._cursor

    @property
    def active_gesture(self) -> Gesture | None:
        if self._cursor < 0:
            return None
        return self._gestures[self._cursor]

    def __len__(self) -> int:
        return len(self._gestures)

    def __iter__(self) -> Iterator[Gesture]:
        return iter(self._gestures)

    def __getitem__(self, index: int) -> Gesture:
        return self._gestures[index]

    # ---------- スケジューラ ----------
    def select_slot_for_new_stroke(self) -> Gesture:
        """カーソルを 1 つ進め、そのスロットの Gesture をクリアして返す。"""
        self._cursor = (self._cursor + 1) % len(self._gestures)
        gesture = self._gestures[self._cursor]
        gesture.clear()
        _logger.debug("stroke slot selected: %d", self._cursor)
        return gesture

    def tick(self, *, pointer_held: bool) -> None:
        """1 フレーム分、ループ再生中の Gesture を前進させる。

        描画中（AUTHORING）の Gesture はポインタが押されている間は動かさない。
        ポインタが離れているのに AUTHORING のままの Gesture（リリース取りこぼし）は
        ここで確定させ、同じフレームから前進させる。
        """
        for gesture in self._gestures:
            state = gesture.state
            if state is GestureState.AUTHORING:
                if pointer_held:
                    continue
                gesture.release()
                gesture.step()
            elif state is GestureState.LOOPING:
                gesture.step()

    def render(self, ctx: DrawContext) -> int:
        """全 Gesture を描画し、描いた quad 数を返す。"""
        return self._renderer.render(self._gestures, ctx)

    # ---------- 入力イベント ----------
    def on_stroke_start(self, x: float, y: float) -> Gesture:
        """新しいストロークを始める。描画中だった Gesture は確定させてから次のスロットへ移る。"""
        previous = self.active_gesture
        if previous is not None:
            previous.release()
        gesture = self.select_slot_for_new_stroke()
        gesture.add_point(x, y)
        return gesture

    def on_stroke_move(self, x: float, y: float) -> bool:
        """描画中の Gesture へ点を追加する。追加した場合 True。"""
        gesture = self.active_gesture
        if gesture is None or gesture.state is not GestureState.AUTHORING:
            return False
        if gesture.distance_to_last(x, y) <= float(self._config.min_move):
            return False
        gesture.add_point(x, y)
        gesture.smooth()
        gesture.compile()
        return True

    def on_stroke_end(self) -> None:
        gesture = self.active_gesture
        if gesture is not None:
            gesture.release()

    def on_thickness_increase(self) -> None:
        gesture = self.active_gesture
        if gesture is not None:
            gesture.adjust_thickness(+1)

    def on_thickness_decrease(self) -> None:
        gesture = self.active_gesture
        if gesture is not None:
            gesture.adjust_thickness(-1)

    def on_clear_all(self) -> None:
        for gesture in self._gestures:
            gesture.clear()
        _logger.debug("all gestures cleared")


__all__ = ["DEFAULT_MIN_MOVE", "DEFAULT_N_GESTURES", "GesturePool", "PoolConfig"]
