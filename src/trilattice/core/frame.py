"""
どこで: `src/trilattice/core/frame.py`。
何を: 1 フレーム分の三角形レイヤー列（背景格子 → 装飾 → wide → narrow）を組み立てる。
なぜ: interactive（GL 描画）と export（ヘッドレス出力）で共通のフレーム生成を共有するため。
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from trilattice.core.color import ColorRGB
from trilattice.core.decor import DecorTable
from trilattice.core.emitter import TriangleBuffer, TriangleSet
from trilattice.core.figure import Figure
from trilattice.core.lattice import LatticeGenerator
from trilattice.core.mask import OccupancyMask, build_mask
from trilattice.core.rotation import RotationAnimator
from trilattice.core.runtime_config import RuntimeConfig
from trilattice.core.sampler import MaskSampler


class FrameClock(Protocol):
    """フレーム時刻の供給源（RealTimeClock / FixedStepClock）。"""

    def ms(self) -> float: ...

    def tick(self) -> None: ...


@dataclass(frozen=True, slots=True)
class TriangleLayer:
    """描画/出力のために生成済みにした三角形レイヤー。"""

    name: str
    triangles: TriangleSet
    color: ColorRGB


class FrameComposer:
    """フィギュアと設定から、回転角ごとのフレームを生成する。

    Notes
    -----
    マスクは初期化時に 1 度だけ構築し、以降は読み取り専用で共有する。
    `compose()` は回転角だけに依存する純粋な処理。
    """

    def __init__(self, figure: Figure, config: RuntimeConfig) -> None:
        self._config = config
        self._figure = figure
        canvas_size = config.canvas_size
        if figure.canvas_size is not None and tuple(figure.canvas_size) != tuple(canvas_size):
            raise RuntimeError(
                "figure の canvas と設定の canvas が一致しません: "
                f"figure={figure.canvas_size} config={canvas_size}"
            )

        self.mask: OccupancyMask = build_mask(figure.outer, figure.holes, size=canvas_size)
        sampler = MaskSampler(self.mask)

        common = dict(
            canvas_size=canvas_size,
            width_switch=config.width_switch,
            pivot_fraction=config.pivot_fraction,
            thickness_radius=config.thickness_radius,
            band_fraction=config.narrow_band_fraction,
        )
        self.background = LatticeGenerator(config.background, mode="background", **common)
        self.wide = LatticeGenerator(config.wide, mode="wide", sampler=sampler, **common)
        self.narrow = LatticeGenerator(config.narrow, mode="narrow", sampler=sampler, **common)

    @property
    def canvas_size(self) -> tuple[int, int]:
        return self._config.canvas_size

    @property
    def background_color(self) -> ColorRGB:
        return self._config.background_color

    def compose(self, angle: float) -> list[TriangleLayer]:
        """回転角 angle [rad] のフレームを描画順のレイヤー列で返す。"""

        cfg = self._config
        return [
            TriangleLayer("background", _collect(self.background, angle), cfg.background_lattice_color),
            TriangleLayer("decor", _collect(self._figure.decor, angle), cfg.foreground_color),
            TriangleLayer("wide", _collect(self.wide, angle), cfg.foreground_color),
            TriangleLayer("narrow", _collect(self.narrow, angle), cfg.foreground_color),
        ]


def _collect(generator: LatticeGenerator | DecorTable, angle: float) -> TriangleSet:
    buf = TriangleBuffer()
    generator.generate(angle, buf)
    return buf.to_set()


class FrameRunner:
    """フレーム時計で回転状態を進め、このフレームで描くべきレイヤー列を返す。

    Notes
    -----
    フレーム内容はステップ番号だけで決まるため、ステップが変わったときだけ組み立て直す。
    """

    def __init__(
        self,
        composer: FrameComposer,
        animator: RotationAnimator,
        clock: FrameClock,
    ) -> None:
        self._composer = composer
        self._animator = animator
        self._clock = clock
        self._layers: list[TriangleLayer] | None = None
        self._layers_step: int | None = None

    @property
    def animator(self) -> RotationAnimator:
        return self._animator

    @property
    def layers(self) -> list[TriangleLayer]:
        """最後に返したレイヤー列（未生成なら空）。"""
        return list(self._layers) if self._layers is not None else []

    def advance(self) -> tuple[list[TriangleLayer], bool]:
        """時計を読んで状態を評価し、`(layers, changed)` を返す。"""

        angle = self._animator.update(self._clock.ms())
        self._clock.tick()
        step = self._animator.step_index
        if self._layers is not None and self._layers_step == step:
            return self._layers, False
        self._layers = self._composer.compose(angle)
        self._layers_step = step
        return self._layers, True


__all__ = ["FrameClock", "FrameComposer", "FrameRunner", "TriangleLayer"]
