# どこで: `src/yellowtail/core/gesture.py`。
# 何を: 1 本のストローク（Path Buffer・コンパイル済みリボン・太さ・状態・ジャンプベクトル）を表す Gesture を定義する。
# なぜ: 「描いている最中」と「ループ再生中」の違いを明示的な状態として持ち、スケジューラ側の分岐を単純にするため。

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np

from yellowtail.core.path_buffer import (
    DEFAULT_CAPACITY,
    DEFAULT_SMOOTHING_WEIGHT,
    PathBuffer,
)
from yellowtail.core.ribbon import Ribbon, compile_ribbon


class GestureState(Enum):
    """Gesture のライフサイクル状態。"""

    EMPTY = "empty"
    AUTHORING = "authoring"
    LOOPING = "looping"


@dataclass(frozen=True, slots=True)
class GestureConfig:
    """Gesture 生成時の設定値。"""

    capacity: int = DEFAULT_CAPACITY
    thickness_min: int = 2
    thickness_max: int = 96
    initial_thickness: int = 14
    smoothing_weight: float = DEFAULT_SMOOTHING_WEIGHT

    def __post_init__(self) -> None:
        if int(self.capacity) <= 0:
            raise ValueError(f"capacity は正の整数である必要がある: got={self.capacity!r}")
        if int(self.thickness_min) > int(self.thickness_max):
            raise ValueError(
                "thickness_min は thickness_max 以下である必要がある: "
                f"got=({self.thickness_min}, {self.thickness_max})"
            )
        if not int(self.thickness_min) <= int(self.initial_thickness) <= int(self.thickness_max):
            raise ValueError(
                "initial_thickness は [thickness_min, thickness_max] の範囲である必要がある: "
                f"got={self.initial_thickness!r}"
            )


def clamp_thickness(value: float, lo: int, hi: int) -> int:
    """太さを [lo, hi] の整数へ丸める。範囲外は飽和させる。"""
    return int(min(hi, max(lo, int(round(float(value))))))


class Gesture:
    """1 本のストロークとそのループ再生状態。

    Notes
    -----
    状態遷移は ``EMPTY → AUTHORING → LOOPING`` の一方向のみ。
    LOOPING の Gesture を描き直す場合は `clear()` で EMPTY に戻してから点を足す。
    """

    def __init__(self, config: GestureConfig | None = None) -> None:
        cfg = config if config is not None else GestureConfig()
        self._config = cfg
        self._buffer = PathBuffer(cfg.capacity)
        self._ribbon = Ribbon.empty()
        self._thickness = int(cfg.initial_thickness)
        self._state = GestureState.EMPTY
        self._jump_dx = 0.0
        self._jump_dy = 0.0
        self._jump_frozen = False

    # ---------- 参照 ----------
    @property
    def config(self) -> GestureConfig:
        return self._config

    @property
    def buffer(self) -> PathBuffer:
        return self._buffer

    @property
    def ribbon(self) -> Ribbon:
        return self._ribbon

    @property
    def quads(self) -> np.ndarray:
        return self._ribbon.quads

    @property
    def thickness(self) -> int:
        return self._thickness

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def exists(self) -> bool:
        return self._state is not GestureState.EMPTY

    @property
    def active(self) -> bool:
        return self._state is GestureState.AUTHORING

    @property
    def jump(self) -> tuple[float, float]:
        return self._jump_dx, self._jump_dy

    @property
    def jump_frozen(self) -> bool:
        return self._jump_frozen

    # ---------- 操作 ----------
    def clear(self) -> None:
        """点・リボン・ジャンプベクトルを捨て、太さを初期値へ戻して EMPTY にする。"""
        self._buffer.clear()
        self._ribbon = Ribbon.empty()
        self._thickness = int(self._config.initial_thickness)
        self._state = GestureState.EMPTY
        self._jump_dx = 0.0
        self._jump_dy = 0.0
        self._jump_frozen = False

    def add_point(self, x: float, y: float) -> None:
        """サンプル点を追加する。EMPTY なら AUTHORING へ遷移する。"""
        self._buffer.add_point(x, y)
        if self._state is GestureState.EMPTY:
            self._state = GestureState.AUTHORING

    def smooth(self) -> None:
        self._buffer.smooth(self._config.smoothing_weight)

    def distance_to_last(self, x: float, y: float) -> float:
        return self._buffer.distance_to_last(x, y)

    def compile(self) -> Ribbon:
        """ジャンプベクトルを更新し、リボンを作り直す。

        ジャンプベクトルは描画中（AUTHORING）のみ再計算し、
        バッファが満杯になった時点、またはリリース時に凍結する。
        """
        buf = self._buffer
        if self._state is GestureState.AUTHORING and not self._jump_frozen:
            self._jump_dx, self._jump_dy = buf.span()
            if buf.is_full:
                self._jump_frozen = True

        self._ribbon = compile_ribbon(buf.points, self._thickness)
        return self._ribbon

    def release(self) -> None:
        """描画中のストロークを確定し、ループ再生（LOOPING）へ移す。"""
        if self._state is not GestureState.AUTHORING:
            return
        if not self._jump_frozen:
            self._jump_dx, self._jump_dy = self._buffer.span()
        self._jump_frozen = True
        self._state = GestureState.LOOPING

    def set_thickness(self, thickness: float) -> None:
        """太さを設定する（範囲外は飽和）。設定後にリボンを作り直す。"""
        cfg = self._config
        self._thickness = clamp_thickness(thickness, cfg.thickness_min, cfg.thickness_max)
        self.compile()

    def adjust_thickness(self, delta: int) -> None:
        self.set_thickness(self._thickness + int(delta))

    def step(self) -> None:
        """ジャンプベクトルで 1 ステップ前進し、リボンを作り直す。EMPTY なら no-op。"""
        if not self.exists:
            return
        self._buffer.advance(self._jump_dx, self._jump_dy)
        self.compile()

    def __repr__(self) -> str:
        return (
            f"Gesture(state={self._state.value}, points={self._buffer.count}, "
            f"quads={len(self._ribbon)}, thickness={self._thickness})"
        )


__all__ = [
    "Gesture",
    "GestureConfig",
    "GestureState",
    "clamp_thickness",
]
