"""
どこで: `src/trilattice/core/lattice.py`。
何を: 三角格子を走査し、マスクの局所量に応じてセルごとの採否・向きを決めて三角形を emit する。
なぜ: 太い領域は粗い格子、細い領域は細かい格子で埋め、回転後もシルエットからはみ出さないようにするため。
"""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

import numpy as np

from trilattice.core.emitter import TriangleEmitter
from trilattice.core.mask import INSIDE_THRESHOLD
from trilattice.core.sampler import MaskSampler

LatticeMode = Literal["wide", "narrow", "background"]

SQRT3 = math.sqrt(3.0)
HALF_PI = 0.5 * math.pi

DEFAULT_WIDTH_SWITCH = 28.0
DEFAULT_PIVOT_FRACTION = 0.12
DEFAULT_THICKNESS_RADIUS = 40.0
DEFAULT_BAND_FRACTION = 0.5


@dataclass(frozen=True, slots=True)
class LatticeSpec:
    """三角格子 1 種類分の寸法。

    Parameters
    ----------
    base_side : float
        格子を決める基準辺長 B。
    spacing : float
        三角形間の見た目の隙間 S。描画辺長は `B - 2S`。

    Raises
    ------
    ValueError
        `base_side <= 2 * spacing`（描画辺長が正にならない）の場合。
    """

    base_side: float
    spacing: float

    def __post_init__(self) -> None:
        base = float(self.base_side)
        spacing = float(self.spacing)
        if spacing < 0:
            raise ValueError(f"spacing は 0 以上である必要がある: got={spacing}")
        if base <= 2.0 * spacing:
            raise ValueError(
                f"base_side は 2*spacing より大きい必要がある: base_side={base}, spacing={spacing}"
            )
        object.__setattr__(self, "base_side", base)
        object.__setattr__(self, "spacing", spacing)

    @property
    def side(self) -> float:
        """描画する三角形の辺長。"""
        return self.base_side - 2.0 * self.spacing

    @property
    def row_step(self) -> float:
        return 0.5 * SQRT3 * self.base_side

    @property
    def col_step(self) -> float:
        return 0.5 * self.base_side

    @property
    def margin(self) -> float:
        """回転後の三角形に要求する余白（spacing の半分）。"""
        return 0.5 * self.spacing


def base_rotation(r: int, c: int) -> float:
    """格子パリティによる基本向き（偶数: -90°, 奇数: +90°）を返す。"""

    return -HALF_PI if (r + c) % 2 == 0 else HALF_PI


def equilateral_vertices(cx: float, cy: float, side: float, angle: float) -> np.ndarray:
    """中心・辺長・向きから正三角形の頂点 shape (3, 2) を返す。"""

    radius = side / SQRT3
    angles = angle + np.array([0.0, 2.0 * math.pi / 3.0, 4.0 * math.pi / 3.0])
    return np.stack([cx + radius * np.cos(angles), cy + radius * np.sin(angles)], axis=1)


def rotate_about(points: np.ndarray, pivot: tuple[float, float], angle: float) -> np.ndarray:
    """点列 shape (N, 2) を pivot 周りに angle [rad] 回転して返す。"""

    pts = np.asarray(points, dtype=np.float64)
    px, py = pivot
    ca = math.cos(angle)
    sa = math.sin(angle)
    dx = pts[:, 0] - px
    dy = pts[:, 1] - py
    return np.stack([px + dx * ca - dy * sa, py + dx * sa + dy * ca], axis=1)


def off_center_pivot(
    cx: float,
    cy: float,
    side: float,
    r: int,
    c: int,
    fraction: float = DEFAULT_PIVOT_FRACTION,
) -> tuple[float, float]:
    """セル中心から基本向き方向へ `side * fraction` ずらした回転中心を返す。"""

    direction = base_rotation(r, c)
    mag = side * fraction
    return cx + mag * math.cos(direction), cy + mag * math.sin(direction)


def triangle_probe_points(vertices: np.ndarray) -> np.ndarray:
    """3 頂点と 3 辺中点（計 6 点）を返す。"""

    v = np.asarray(vertices, dtype=np.float64)
    mids = 0.5 * (v + np.roll(v, -1, axis=0))
    return np.concatenate([v, mids], axis=0)


def fits_with_margin(sampler: MaskSampler, vertices: np.ndarray, margin: float) -> bool:
    """回転後の三角形が余白付きでマスク内に収まるかを返す。"""

    radius = float(math.ceil(margin * 2.0))
    for x, y in triangle_probe_points(vertices):
        if sampler.alpha_at(x, y) <= INSIDE_THRESHOLD:
            return False
        if sampler.local_thickness(x, y, radius) < margin:
            return False
    return True


class LatticeGenerator:
    """三角格子 1 パス分の生成器。

    Parameters
    ----------
    spec : LatticeSpec
        格子寸法。
    mode : {"wide", "narrow", "background"}
        `wide` / `narrow` は局所厚みで担当領域を分け合う。`background` はマスクを見ずに全面へ敷く。
    canvas_size : tuple[int, int]
        走査範囲 (width, height)。
    sampler : MaskSampler | None
        `background` 以外では必須。
    width_switch : float
        wide/narrow を分ける厚みの閾値（px）。
    pivot_fraction : float
        回転中心のずらし量（辺長に対する比）。
    thickness_radius : float
        セル分類時の局所厚み探索半径。
    band_fraction : float
        narrow モードの帯幅（基準辺長に対する比）。見た目調整用の値。
    """

    def __init__(
        self,
        spec: LatticeSpec,
        *,
        mode: LatticeMode,
        canvas_size: tuple[int, int],
        sampler: MaskSampler | None = None,
        width_switch: float = DEFAULT_WIDTH_SWITCH,
        pivot_fraction: float = DEFAULT_PIVOT_FRACTION,
        thickness_radius: float = DEFAULT_THICKNESS_RADIUS,
        band_fraction: float = DEFAULT_BAND_FRACTION,
    ) -> None:
        if mode not in ("wide", "narrow", "background"):
            raise ValueError(f"未対応の lattice mode: {mode!r}")
        if mode != "background" and sampler is None:
            raise ValueError(f"mode={mode!r} には sampler が必要")
        width, height = canvas_size
        if int(width) <= 0 or int(height) <= 0:
            raise ValueError("canvas_size は正の (width, height) である必要がある")
        if float(band_fraction) <= 0:
            raise ValueError("band_fraction は正の値である必要がある")

        self.spec = spec
        self.mode: LatticeMode = mode
        self._width = int(width)
        self._height = int(height)
        self._sampler = sampler
        self.width_switch = float(width_switch)
        self.pivot_fraction = float(pivot_fraction)
        self.thickness_radius = float(thickness_radius)
        self.band_fraction = float(band_fraction)

    def iter_cells(self) -> Iterator[tuple[int, int, float, float]]:
        """走査対象のセル `(r, c, x, y)` を列挙する。

        Notes
        -----
        回転でずれた端に隙間が出ないよう、キャンバス外へ 1 ステップ分はみ出して走査する。
        """

        row_step = self.spec.row_step
        col_step = self.spec.col_step
        y_limit = self._height + row_step
        x_limit = self._width + self.spec.base_side

        r = 0
        while r * row_step <= y_limit:
            y = r * row_step
            c = 0
            while c * col_step <= x_limit:
                yield r, c, c * col_step, y
                c += 1
            r += 1

    def classify(self, x: float, y: float) -> Literal["wide", "narrow"]:
        """局所厚みで (x, y) を wide / narrow に分類する。"""

        sampler = self._require_sampler()
        thick = sampler.local_thickness(x, y, self.thickness_radius)
        return "wide" if thick >= self.width_switch else "narrow"

    def orientation(self, r: int, c: int, x: float, y: float) -> float:
        """セルの描画向き [rad] を返す。

        narrow モードでは境界法線へ射影した帯番号の偶奇で向きを反転し、
        細い帯の両側から三角形が向かい合うようにする。
        """

        if self.mode != "narrow":
            return base_rotation(r, c)

        sampler = self._require_sampler()
        normal = sampler.normal_angle(x, y, 2.0)
        q = x * math.cos(normal) + y * math.sin(normal)
        band = math.floor(q / (self.spec.base_side * self.band_fraction))
        return normal if band % 2 == 0 else normal + math.pi

    def accepts(self, x: float, y: float) -> bool:
        """(x, y) のセルがこのパスの担当か（マスク内かつ厚み分類が一致）を返す。"""

        if self.mode == "background":
            return True
        sampler = self._require_sampler()
        if sampler.alpha_at(x, y) <= INSIDE_THRESHOLD:
            return False
        return self.classify(x, y) == self.mode

    def cell_triangle(self, r: int, c: int, angle: float) -> np.ndarray | None:
        """セル (r, c) の回転済み三角形 shape (3, 2) を返す。描かないセルは None。"""

        x = c * self.spec.col_step
        y = r * self.spec.row_step
        if not self.accepts(x, y):
            return None
        return self._place(r, c, x, y, angle)

    def generate(self, angle: float, emitter: TriangleEmitter) -> int:
        """全セルを走査し、採用した三角形を emitter へ渡す。emit 数を返す。"""

        count = 0
        for r, c, x, y in self.iter_cells():
            if not self.accepts(x, y):
                continue
            tri = self._place(r, c, x, y, angle)
            if tri is None:
                continue
            emitter.triangle(
                (float(tri[0, 0]), float(tri[0, 1])),
                (float(tri[1, 0]), float(tri[1, 1])),
                (float(tri[2, 0]), float(tri[2, 1])),
            )
            count += 1
        return count

    def _place(self, r: int, c: int, x: float, y: float, angle: float) -> np.ndarray | None:
        side = self.spec.side
        verts = equilateral_vertices(x, y, side, self.orientation(r, c, x, y))
        pivot = off_center_pivot(x, y, side, r, c, self.pivot_fraction)
        rotated = rotate_about(verts, pivot, angle)

        if self.mode == "background":
            return rotated
        if not fits_with_margin(self._require_sampler(), rotated, self.spec.margin):
            return None
        return rotated

    def _require_sampler(self) -> MaskSampler:
        sampler = self._sampler
        if sampler is None:
            raise RuntimeError("background モードではマスク問い合わせを行えない")
        return sampler


__all__ = [
    "DEFAULT_BAND_FRACTION",
    "DEFAULT_PIVOT_FRACTION",
    "DEFAULT_THICKNESS_RADIUS",
    "DEFAULT_WIDTH_SWITCH",
    "LatticeGenerator",
    "LatticeMode",
    "LatticeSpec",
    "base_rotation",
    "equilateral_vertices",
    "fits_with_margin",
    "off_center_pivot",
    "rotate_about",
    "triangle_probe_points",
]
