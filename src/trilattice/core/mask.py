"""
どこで: `src/trilattice/core/mask.py`。
何を: 閉パス群をラスタライズして占有マスク（alpha 0..255）を構築する。
なぜ: 「外周を塗る → 穴を消す」という描画状態依存の手順を、2 枚のマスクの AND-NOT 合成として明示するため。
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from trilattice.core.path import DEFAULT_CURVE_SAMPLES, VectorPath

ALPHA_INSIDE = 255
# alpha がこの値以下なら「外側」とみなす。
INSIDE_THRESHOLD = 1


@dataclass(frozen=True, slots=True)
class OccupancyMask:
    """キャンバス上の alpha 場（行優先 shape (height, width), uint8）。

    Notes
    -----
    構築後は不変。配列は writeable=False で保持する。
    """

    alpha: np.ndarray

    def __post_init__(self) -> None:
        alpha = np.asarray(self.alpha)
        if alpha.ndim != 2:
            raise ValueError("alpha は shape (height, width) の 2 次元配列である必要がある")
        if alpha.shape[0] <= 0 or alpha.shape[1] <= 0:
            raise ValueError("alpha は空であってはならない")
        if alpha.dtype != np.uint8:
            alpha = np.clip(alpha, 0, 255).astype(np.uint8)
        alpha = np.ascontiguousarray(alpha)
        alpha.setflags(write=False)
        object.__setattr__(self, "alpha", alpha)

    @property
    def width(self) -> int:
        return int(self.alpha.shape[1])

    @property
    def height(self) -> int:
        return int(self.alpha.shape[0])

    def at(self, x: float, y: float) -> int:
        """(x, y) を含むピクセルの alpha を返す（範囲外は最寄りの端ピクセル）。"""

        ix = min(max(int(math.floor(x)), 0), self.width - 1)
        iy = min(max(int(math.floor(y)), 0), self.height - 1)
        return int(self.alpha[iy, ix])

    def inside(self) -> np.ndarray:
        """内側判定の bool 配列を返す。"""

        return self.alpha > INSIDE_THRESHOLD


def rasterize_paths(
    paths: Iterable[VectorPath],
    size: tuple[int, int],
    *,
    samples_per_curve: int = DEFAULT_CURVE_SAMPLES,
) -> np.ndarray:
    """パス群の和集合を bool 配列 shape (height, width) として返す。

    各パスは nonzero 規則で塗り、ピクセル中心 (ix+0.5, iy+0.5) で内外を判定する。
    """

    width, height = _as_size(size)
    canvas = np.zeros((height, width), dtype=np.uint8)
    for path in paths:
        polygon = np.ascontiguousarray(path.flatten(samples_per_curve), dtype=np.float64)
        if polygon.shape[0] < 3:
            continue
        _fill_polygon_nonzero(canvas, polygon)
    return canvas > 0


def build_mask(
    outer_paths: Iterable[VectorPath],
    hole_paths: Iterable[VectorPath] = (),
    *,
    size: tuple[int, int],
    samples_per_curve: int = DEFAULT_CURVE_SAMPLES,
) -> OccupancyMask:
    """外周パスの和集合から穴パスの和集合を差し引いた占有マスクを構築する。

    Parameters
    ----------
    outer_paths : Iterable[VectorPath]
        シルエット外周（alpha=255 で塗る）。
    hole_paths : Iterable[VectorPath]
        穴。外周の塗りに関係なく alpha=0 に落とす。
    size : tuple[int, int]
        キャンバス寸法 (width, height)。
    samples_per_curve : int
        ベジェ 1 区間あたりの平坦化サンプル数。

    Returns
    -------
    OccupancyMask
        不変の占有マスク。
    """

    outer = rasterize_paths(outer_paths, size, samples_per_curve=samples_per_curve)
    holes = rasterize_paths(hole_paths, size, samples_per_curve=samples_per_curve)
    alpha = np.where(outer & ~holes, ALPHA_INSIDE, 0).astype(np.uint8)
    return OccupancyMask(alpha=alpha)


def _as_size(size: tuple[int, int]) -> tuple[int, int]:
    try:
        w, h = size
        width = int(w)
        height = int(h)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"size は (width, height) である必要がある: got={size!r}") from exc
    if width <= 0 or height <= 0:
        raise ValueError(f"size は正の (width, height) である必要がある: got={size!r}")
    return width, height


@njit(cache=True)  # type: ignore[misc]
def _fill_polygon_nonzero(canvas: np.ndarray, polygon: np.ndarray) -> None:
    """閉多角形を nonzero 規則のスキャンラインで canvas へ 255 として塗る（Numba 版）。"""
    height = canvas.shape[0]
    width = canvas.shape[1]
    n = polygon.shape[0]

    y_min = polygon[0, 1]
    y_max = polygon[0, 1]
    for i in range(1, n):
        y = polygon[i, 1]
        if y < y_min:
            y_min = y
        if y > y_max:
            y_max = y

    row0 = int(math.floor(y_min))
    row1 = int(math.ceil(y_max))
    if row0 < 0:
        row0 = 0
    if row1 > height - 1:
        row1 = height - 1

    xs = np.empty(n, dtype=np.float64)
    dirs = np.empty(n, dtype=np.int64)

    for iy in range(row0, row1 + 1):
        scan_y = iy + 0.5
        k = 0
        for i in range(n):
            x1 = polygon[i, 0]
            y1 = polygon[i, 1]
            j = i + 1 if i + 1 < n else 0
            x2 = polygon[j, 0]
            y2 = polygon[j, 1]
            if y1 == y2:
                continue
            if y1 <= scan_y < y2:
                direction = 1
            elif y2 <= scan_y < y1:
                direction = -1
            else:
                continue
            xs[k] = x1 + (scan_y - y1) * (x2 - x1) / (y2 - y1)
            dirs[k] = direction
            k += 1

        if k < 2:
            continue

        order = np.argsort(xs[:k])
        winding = 0
        for m in range(k - 1):
            winding += dirs[order[m]]
            if winding == 0:
                continue
            xa = xs[order[m]]
            xb = xs[order[m + 1]]
            # ピクセル中心 ix+0.5 が [xa, xb) に入る列を塗る。
            col0 = int(math.ceil(xa - 0.5))
            col1 = int(math.ceil(xb - 0.5)) - 1
            if col0 < 0:
                col0 = 0
            if col1 > width - 1:
                col1 = width - 1
            for ix in range(col0, col1 + 1):
                canvas[iy, ix] = 255


__all__ = [
    "ALPHA_INSIDE",
    "INSIDE_THRESHOLD",
    "OccupancyMask",
    "build_mask",
    "rasterize_paths",
]
