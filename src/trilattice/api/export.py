"""
どこで: `src/trilattice/api/export.py`。
何を: ヘッドレス export の公開導線（1 フレーム / 固定 fps のフレーム列）を提供する。
なぜ: 対話ウィンドウを立ち上げずに、回転ステップごとの見た目をファイルへ書き出せるようにするため。
"""

from __future__ import annotations

from pathlib import Path

from trilattice.core.figure import load_figure
from trilattice.core.frame import FrameComposer, FrameRunner
from trilattice.core.frame_clock import FixedStepClock
from trilattice.core.rotation import RotationAnimator, angle_for_step
from trilattice.core.runtime_config import runtime_config, set_config_path
from trilattice.export.image import export_image


def _composer(
    config_path: str | Path | None,
    figure_path: str | Path | None,
) -> FrameComposer:
    if config_path is not None:
        set_config_path(config_path)
    cfg = runtime_config()
    figure = load_figure(figure_path if figure_path is not None else cfg.figure_path)
    return FrameComposer(figure, cfg)


def export_frame(
    path: str | Path,
    *,
    step_index: int = 0,
    config_path: str | Path | None = None,
    figure_path: str | Path | None = None,
) -> Path:
    """回転ステップ `step_index` のフレームを SVG / PNG として保存する。

    Notes
    -----
    形式は拡張子（`.svg` / `.png`）で決まる。PNG は resvg を使う。
    """

    composer = _composer(config_path, figure_path)
    layers = composer.compose(angle_for_step(step_index))
    return export_image(
        layers,
        path,
        canvas_size=composer.canvas_size,
        background_color=composer.background_color,
    )


def export_frames(
    out_dir: str | Path,
    *,
    frames: int,
    fps: float = 30.0,
    ext: str = "svg",
    config_path: str | Path | None = None,
    figure_path: str | Path | None = None,
) -> list[Path]:
    """固定 fps のタイムラインで回転を進め、`frames` 枚を連番で保存する。"""

    n = int(frames)
    if n < 0:
        raise ValueError("frames は 0 以上である必要がある")

    composer = _composer(config_path, figure_path)
    cfg = runtime_config()
    runner = FrameRunner(
        composer,
        RotationAnimator(cfg.rotation_rate),
        FixedStepClock(fps=float(fps)),
    )

    _out_dir = Path(out_dir)
    _ext = str(ext).lstrip(".").lower()
    out: list[Path] = []
    for i in range(n):
        layers, _ = runner.advance()
        out.append(
            export_image(
                layers,
                _out_dir / f"frame_{i:05d}.{_ext}",
                canvas_size=composer.canvas_size,
                background_color=composer.background_color,
            )
        )
    return out


__all__ = ["export_frame", "export_frames"]
