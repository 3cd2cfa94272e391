# どこで: `src/trilattice/interactive/runtime/window_loop.py`。
# 何を: プレビューウィンドウ 1 枚を `pyglet.app.run()` で回す。
# なぜ: イベント配送と flip を pyglet に任せ、描画側は back buffer へ描くだけにするため。

from __future__ import annotations

from typing import Any, Callable

import pyglet


def run_window_loop(window: Any, draw_frame: Callable[[], None], *, fps: float) -> None:
    """ウィンドウが閉じられるまで `draw_frame` を毎フレーム呼ぶ。

    Parameters
    ----------
    window : pyglet.window.Window
        描画先。閉じるとループを抜ける。
    draw_frame : Callable[[], None]
        `on_draw` として登録する描画関数（`flip()` は呼ばない）。
    fps : float
        目標フレームレート。`<=0` の場合はスロットリングしない。
    """

    window.push_handlers(on_draw=draw_frame, on_close=lambda: pyglet.app.exit())

    def redraw(dt: float) -> None:
        # on_close の後に同じ tick で呼ばれることがある。
        if window in pyglet.app.windows:
            window.draw(dt)

    if fps <= 0:
        pyglet.clock.schedule(redraw)
    else:
        pyglet.clock.schedule_interval(redraw, 1.0 / float(fps))

    try:
        pyglet.app.run(interval=None)
    finally:
        pyglet.clock.unschedule(redraw)
