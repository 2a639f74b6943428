# どこで: `src/yellowtail/interactive/runtime/window_loop.py`。
# 何を: pyglet のウィンドウを app loop（`pyglet.app.run()`）で回す最小ランナーを提供する。
# なぜ: OS 依存のイベント配送を pyglet に任せ、入力イベント → tick → render の順序を 1 本のループに揃えるため。

from __future__ import annotations

from typing import Any, Callable

import pyglet


class WindowLoop:
    """1 つのウィンドウを目標 fps で描画し続ける。

    `draw_frame()` は back buffer へ描画するだけにし、`flip()` は pyglet が行う。
    入力イベントは pyglet がフレームの合間に同期的に配送する。
    """

    def __init__(
        self,
        window: Any,
        draw_frame: Callable[[], None],
        *,
        fps: float,
    ) -> None:
        """ループを初期化する。

        Parameters
        ----------
        window : Any
            pyglet の Window（環境/バージョン差があるため Any に寄せる）。
        draw_frame : Callable[[], None]
            1 フレーム分の処理（tick と描画）。
        fps : float
            目標フレームレート。`<=0` の場合はスロットリングしない。
        """

        self._window = window
        self._draw_frame = draw_frame
        self._fps = float(fps)

    def run(self) -> None:
        """ウィンドウが閉じられるまでループを実行する。"""

        window = self._window

        def request_exit(*_: object) -> None:
            # on_close から呼ばれるコールバックは引数が来る場合があるため *args を受ける。
            pyglet.app.exit()

        window.push_handlers(on_close=request_exit)
        window.push_handlers(on_draw=self._draw_frame)

        def draw(dt: float) -> None:
            # 閉じられたウィンドウへ draw すると例外になり得るため、開いている時だけ描く。
            if window not in pyglet.app.windows:
                return
            window.draw(dt)

        if self._fps <= 0:
            pyglet.clock.schedule(draw)
        else:
            pyglet.clock.schedule_interval(draw, 1.0 / float(self._fps))

        try:
            pyglet.app.run(interval=None)
        finally:
            pyglet.clock.unschedule(draw)
