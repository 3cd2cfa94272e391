"""
どこで: `src/trilattice/api/run.py`。公開 API のランナー実装。
何を: pyglet + ModernGL を使い、シルエットを埋める三角格子の回転アニメーションをウィンドウに描画する。
なぜ: `main.py` を実行して実際の見た目をプレビューできる経路を用意するため。
"""

from __future__ import annotations

from pathlib import Path

import pyglet

from trilattice.core.figure import load_figure
from trilattice.core.frame import FrameComposer
from trilattice.core.runtime_config import runtime_config, set_config_path
from trilattice.interactive.render_settings import RenderSettings
from trilattice.interactive.runtime.draw_window_system import DrawWindowSystem
from trilattice.interactive.runtime.window_loop import run_window_loop


def run(
    *,
    config_path: str | Path | None = None,
    figure_path: str | Path | None = None,
    render_scale: float = 1.0,
    fps: float = 60.0,
) -> None:
    """pyglet ウィンドウを生成し、回転する三角格子をリアルタイム描画する。

    Parameters
    ----------
    config_path : str | Path | None
        明示 config.yaml。None なら既定の探索順に従う。
    figure_path : str | Path | None
        フィギュア YAML。None なら config の `paths.figure`、それも無ければ同梱データ。
    render_scale : float
        キャンバス寸法に掛けるピクセル倍率。高精細プレビュー用。
    fps : float
        目標フレームレート。`<=0` でスロットリングしない。

    Returns
    -------
    None
        ウィンドウを閉じると制御を返す。
    """

    if config_path is not None:
        set_config_path(config_path)
    cfg = runtime_config()

    figure = load_figure(figure_path if figure_path is not None else cfg.figure_path)
    composer = FrameComposer(figure, cfg)

    # vsync はウィンドウ作成時に参照されるため、ここで固定しておく。
    pyglet.options["vsync"] = True

    settings = RenderSettings(
        background_color=cfg.background_color,
        render_scale=float(render_scale),
        canvas_size=cfg.canvas_size,
        fps=float(fps),
    )
    draw_system = DrawWindowSystem(
        composer,
        settings=settings,
        rotation_rate=cfg.rotation_rate,
    )

    try:
        run_window_loop(draw_system.window, draw_system.draw_frame, fps=settings.fps)
    finally:
        draw_system.close()
