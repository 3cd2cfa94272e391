"""
どこで: `src/trilattice/core/sampler.py`。
何を: 占有マスクへの点問い合わせ（alpha・勾配・局所厚み）を提供する。
なぜ: 格子セルごとの判定に必要な局所量を、距離場を前計算せずにセル解像度で求めるため。
"""

from __future__ import annotations

import math

import numpy as np
from numba import njit  # type: ignore[attr-defined]

from trilattice.core.mask import INSIDE_THRESHOLD, OccupancyMask

# 局所厚みのレイ本数。
THICKNESS_RAYS = 16


class MaskSampler:
    """OccupancyMask を読み取り専用で問い合わせる。"""

    def __init__(self, mask: OccupancyMask) -> None:
        self._mask = mask
        self._alpha = mask.alpha

    @property
    def mask(self) -> OccupancyMask:
        return self._mask

    def alpha_at(self, x: float, y: float) -> int:
        """(x, y) を範囲内へ clamp し、floor したピクセルの alpha を返す。"""

        return int(_alpha_at(self._alpha, float(x), float(y)))

    def is_inside(self, x: float, y: float) -> bool:
        return self.alpha_at(x, y) > INSIDE_THRESHOLD

    def gradient(self, x: float, y: float, radius: float) -> tuple[float, float]:
        """±radius の中心差分で alpha の勾配 (gx, gy) を返す。"""

        gx, gy = _gradient(self._alpha, float(x), float(y), float(radius))
        return float(gx), float(gy)

    def normal_angle(self, x: float, y: float, radius: float = 2.0) -> float:
        """勾配方向の角度 `atan2(gy, gx)` を返す（勾配 0 のときは 0）。"""

        gx, gy = self.gradient(x, y, radius)
        return math.atan2(gy, gx)

    def local_thickness(self, x: float, y: float, max_radius: float) -> float:
        """最寄りの外側までの距離（局所半幅の近似）を返す。

        Notes
        -----
        16 方向へ 1 px 刻みでレイを伸ばし、最初に alpha<=1 となった距離の最小値を返す。
        どのレイも `max_radius` 以内で外へ出なければ `max_radius` を返す。
        """

        return float(_local_thickness(self._alpha, float(x), float(y), float(max_radius)))


@njit(cache=True)  # type: ignore[misc]
def _alpha_at(alpha: np.ndarray, x: float, y: float) -> int:
    height = alpha.shape[0]
    width = alpha.shape[1]
    ix = int(math.floor(x))
    iy = int(math.floor(y))
    if ix < 0:
        ix = 0
    elif ix > width - 1:
        ix = width - 1
    if iy < 0:
        iy = 0
    elif iy > height - 1:
        iy = height - 1
    # uint8 のまま返すと差分が符号なしで折り返すため int64 にする。
    return np.int64(alpha[iy, ix])


@njit(cache=True)  # type: ignore[misc]
def _gradient(alpha: np.ndarray, x: float, y: float, radius: float) -> tuple[float, float]:
    ax1 = _alpha_at(alpha, x + radius, y)
    ax0 = _alpha_at(alpha, x - radius, y)
    ay1 = _alpha_at(alpha, x, y + radius)
    ay0 = _alpha_at(alpha, x, y - radius)
    return float(ax1) - float(ax0), float(ay1) - float(ay0)


@njit(cache=True)  # type: ignore[misc]
def _local_thickness(alpha: np.ndarray, x: float, y: float, max_radius: float) -> float:
    min_d = max_radius
    step = 2.0 * math.pi / THICKNESS_RAYS
    for k in range(THICKNESS_RAYS):
        a = k * step
        ca = math.cos(a)
        sa = math.sin(a)
        d = 1.0
        while d <= max_radius:
            if _alpha_at(alpha, x + d * ca, y + d * sa) <= INSIDE_THRESHOLD:
                if d < min_d:
                    min_d = d
                break
            d += 1.0
    return min_d


__all__ = ["MaskSampler", "THICKNESS_RAYS"]
