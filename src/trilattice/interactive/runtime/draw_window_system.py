# どこで: `src/trilattice/interactive/runtime/draw_window_system.py`。
# 何を: 回転アニメーションのフレームを描画ウィンドウへ描くサブシステムを提供する。
# なぜ: `src/trilattice/api/run.py` の `run()` を「配線」に寄せ、描画責務を独立させるため。

from __future__ import annotations

import logging
import time
from pathlib import Path

from pyglet.window import key

from trilattice.core.frame import FrameComposer, FrameRunner, TriangleLayer
from trilattice.core.frame_clock import RealTimeClock
from trilattice.core.rotation import RotationAnimator
from trilattice.export.image import default_output_path, png_output_size, rasterize_svg_to_png
from trilattice.export.svg import export_svg
from trilattice.interactive.draw_window import create_draw_window
from trilattice.interactive.gl.draw_renderer import DrawRenderer
from trilattice.interactive.render_settings import RenderSettings

_logger = logging.getLogger(__name__)


class DrawWindowSystem:
    """描画（メインウィンドウ）のサブシステム。"""

    def __init__(
        self,
        composer: FrameComposer,
        *,
        settings: RenderSettings,
        rotation_rate: float,
        output_stem: str = "trilattice",
    ) -> None:
        """描画用の window/renderer を初期化する。"""

        self._settings = settings
        self._composer = composer

        self.window = create_draw_window(settings)
        self._renderer = DrawRenderer(self.window, settings)

        self._svg_output_path = default_output_path(output_stem, "svg")
        self._png_output_path = default_output_path(output_stem, "png")
        self._pending_png_save = False
        self.window.push_handlers(on_key_press=self._on_key_press)

        start_time = time.perf_counter()
        clock = RealTimeClock(start_time=start_time)
        self._runner = FrameRunner(composer, RotationAnimator(rotation_rate), clock)

    def _on_key_press(self, symbol: int, _modifiers: int) -> None:
        if symbol == key.S:
            try:
                path = self.save_svg()
            except Exception:
                _logger.exception("Failed to save SVG")
                return
            _logger.info("Saved SVG: %s", path)
            return
        if symbol == key.P:
            self._pending_png_save = True

    def save_svg(self, path: Path | None = None) -> Path:
        """最後に描画したフレームを SVG として保存し、保存先パスを返す。"""
        return export_svg(
            self._last_layers(),
            path if path is not None else self._svg_output_path,
            canvas_size=self._settings.canvas_size,
            background_color=self._settings.background_color,
        )

    def _last_layers(self) -> list[TriangleLayer]:
        return self._runner.layers

    def _framebuffer_size(self) -> tuple[int, int]:
        getter = getattr(self.window, "get_framebuffer_size", None)
        if callable(getter):
            w, h = getter()
            return int(w), int(h)
        return int(self.window.width), int(self.window.height)

    def draw_frame(self) -> None:
        """1 フレーム分の描画を行う（`flip()` は呼ばない）。"""

        # 呼び出し側（pyglet.window.Window.draw）が事前に self.window.switch_to() 済みである前提。
        self._renderer.ctx.screen.use()

        fb_w, fb_h = self._framebuffer_size()
        self._renderer.viewport(fb_w, fb_h)

        layers, changed = self._runner.advance()
        if changed:
            self._renderer.upload_layers(layers)

        self._renderer.clear(self._settings.background_color)
        self._renderer.render_layers(layers)

        if self._pending_png_save:
            self._pending_png_save = False
            try:
                svg_path = self.save_svg(self._png_output_path.with_suffix(".svg"))
                png_path = rasterize_svg_to_png(
                    svg_path,
                    self._png_output_path,
                    output_size=png_output_size(self._settings.canvas_size),
                    background_color_rgb01=self._settings.background_color,
                )
            except Exception:
                _logger.exception("Failed to save PNG")
            else:
                _logger.info("Saved PNG: %s", png_path)

    def close(self) -> None:
        """GPU リソースとウィンドウを解放する。"""

        self._renderer.release()
        self.window.close()
