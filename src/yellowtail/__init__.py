# どこで: `src/yellowtail/__init__.py`。
# 何を: ルート `yellowtail` パッケージを定義し、コアの主要型と run を公開する。
# なぜ: import 起点を `yellowtail` に統一するため。

from __future__ import annotations

from yellowtail.api import run
from yellowtail.core.gesture import Gesture, GestureConfig, GestureState
from yellowtail.core.path_buffer import PathBuffer
from yellowtail.core.pool import GesturePool, PoolConfig
from yellowtail.core.ribbon import Ribbon, compile_ribbon
from yellowtail.core.toroidal import DrawContext, ToroidalRenderer

__all__ = [
    "DrawContext",
    "Gesture",
    "GestureConfig",
    "GesturePool",
    "GestureState",
    "PathBuffer",
    "PoolConfig",
    "Ribbon",
    "ToroidalRenderer",
    "compile_ribbon",
    "run",
]
