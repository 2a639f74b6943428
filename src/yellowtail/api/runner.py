"""
どこで: `src/yellowtail/api/runner.py`。公開 API のランナー実装。
何を: pyglet + ModernGL のウィンドウを開き、マウスで描いたストロークをループ再生し続ける。
なぜ: `main.py` を実行して実際にストロークを描いて動かせる経路を用意するため。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

import pyglet

from yellowtail.core.pool import GesturePool
from yellowtail.core.runtime_config import runtime_config, set_config_path
from yellowtail.core.toroidal import ToroidalRenderer
from yellowtail.interactive.render_settings import RenderSettings
from yellowtail.interactive.runtime.draw_window_system import DrawWindowSystem
from yellowtail.interactive.runtime.window_loop import WindowLoop

_logger = logging.getLogger(__name__)


def run(
    *,
    config_path: str | Path | None = None,
    fps: float | None = None,
) -> None:
    """pyglet ウィンドウを生成し、ストロークの描画とループ再生を行う。

    Parameters
    ----------
    config_path : str | Path | None
        設定ファイル（config.yaml）のパス。指定した場合は探索より優先する。
    fps : float | None
        目標フレームレート。None の場合は config の `ui.fps` を使う。
        `<=0` の場合はスロットリングせず、可能な限り速く回す。

    Returns
    -------
    None
        ウィンドウを閉じると制御を返す。

    Notes
    -----
    操作: ドラッグで描画、`+`/`=` で太く、`-` で細く、スペースで全消去。
    """

    set_config_path(config_path)
    cfg = runtime_config()
    _logger.debug("runtime config loaded: path=%s", cfg.config_path)

    # vsync はウィンドウ作成時に参照されるため、ここで固定しておく。
    pyglet.options["vsync"] = True

    target_fps = float(cfg.fps if fps is None else fps)
    settings = RenderSettings(
        background_color=cfg.background_color,
        fill_color=cfg.fill_color,
        window_size=cfg.window_size,
        fps=target_fps,
    )

    pool = GesturePool(
        cfg.pool_config(),
        renderer=ToroidalRenderer(background_color=settings.background_color),
    )

    # --- サブシステムの組み立て ---
    draw_window = DrawWindowSystem(pool, settings=settings)
    draw_window.window.set_location(*cfg.window_position)

    # `closers` は teardown 用（close 順もここで管理する）。
    closers: list[Callable[[], None]] = [draw_window.close]

    # --- ループの実行 ---
    loop = WindowLoop(draw_window.window, draw_window.draw_frame, fps=target_fps)
    try:
        loop.run()
    finally:
        # 例外でも確実に後始末する。作成順の逆で閉じる。
        for close in reversed(closers):
            close()
