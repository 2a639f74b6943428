# どこで: `src/yellowtail/interactive/runtime/draw_window_system.py`。
# 何を: 描画ウィンドウ・レンダラー・GesturePool を束ね、入力イベントとフレーム処理を配線するサブシステムを提供する。
# なぜ: `src/yellowtail/api/runner.py` の `run()` を「配線」に寄せ、描画と入力の責務を独立させるため。

from __future__ import annotations

import logging

from pyglet.window import key

from yellowtail.core.pool import GesturePool
from yellowtail.interactive.draw_window import create_draw_window
from yellowtail.interactive.gl.draw_renderer import DrawRenderer
from yellowtail.interactive.gl.utils import window_to_screen
from yellowtail.interactive.render_settings import RenderSettings

_logger = logging.getLogger(__name__)

_THICKER_KEYS = frozenset({key.PLUS, key.EQUAL, key.NUM_ADD})
_THINNER_KEYS = frozenset({key.MINUS, key.NUM_SUBTRACT})


class DrawWindowSystem:
    """描画（メインウィンドウ）のサブシステム。"""

    def __init__(self, pool: GesturePool, *, settings: RenderSettings) -> None:
        """描画用の window/renderer を初期化し、入力ハンドラを登録する。"""

        self._pool = pool
        self._settings = settings
        self._pointer_held = False

        # 描画用の pyglet window を作成し、その window の OpenGL コンテキストに紐づく renderer を作る。
        self.window = create_draw_window(settings)
        self._renderer = DrawRenderer(self.window, settings)

        self.window.push_handlers(
            on_mouse_press=self._on_mouse_press,
            on_mouse_drag=self._on_mouse_drag,
            on_mouse_release=self._on_mouse_release,
            on_key_press=self._on_key_press,
        )

    @property
    def pool(self) -> GesturePool:
        return self._pool

    def _to_screen(self, x: int, y: int) -> tuple[float, float]:
        return window_to_screen(x, y, self.window.height)

    def _on_mouse_press(self, x: int, y: int, _button: int, _modifiers: int) -> None:
        self._pointer_held = True
        sx, sy = self._to_screen(x, y)
        self._pool.on_stroke_start(sx, sy)

    def _on_mouse_drag(
        self,
        x: int,
        y: int,
        _dx: int,
        _dy: int,
        _buttons: int,
        _modifiers: int,
    ) -> None:
        sx, sy = self._to_screen(x, y)
        self._pool.on_stroke_move(sx, sy)

    def _on_mouse_release(self, _x: int, _y: int, _button: int, _modifiers: int) -> None:
        self._pointer_held = False
        self._pool.on_stroke_end()

    def _on_key_press(self, symbol: int, _modifiers: int) -> None:
        if symbol in _THICKER_KEYS:
            self._pool.on_thickness_increase()
            return
        if symbol in _THINNER_KEYS:
            self._pool.on_thickness_decrease()
            return
        if symbol == key.SPACE:
            self._pool.on_clear_all()

    def draw_frame(self) -> None:
        """1 フレーム分の処理を行う（`flip()` は呼ばない）。

        入力イベントは pyglet がこの呼び出しの前に配送済みである前提。
        """

        # --- 1) 前進 ---
        #
        # 描画中（ポインタ押下中）のストロークだけは動かさない。
        self._pool.tick(pointer_held=self._pointer_held)

        # --- 2) 描画 ---
        #
        # 画面サイズはリサイズに追従するため、毎フレーム renderer から参照し直す。
        self._renderer.begin_frame()
        self._pool.render(self._renderer)
        self._renderer.flush()

    def close(self) -> None:
        """GPU / window 資源を解放する。"""

        try:
            # renderer が保持している GPU リソースを破棄してから window を閉じる。
            self._renderer.release()
        except Exception:
            _logger.exception("Failed to release renderer")
        finally:
            self.window.close()
