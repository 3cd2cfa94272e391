# どこで: `src/trilattice/core/rotation.py`。
# 何を: 0° → 120° → 240° を一定周期で巡回する離散回転の状態機械を提供する。
# なぜ: 回転角をグローバル変数ではなく「フレームごとに受け渡す値」として扱うため。

from __future__ import annotations

import logging
import math

_logger = logging.getLogger(__name__)

STEP_COUNT = 3
STEP_ANGLE = 2.0 * math.pi / STEP_COUNT
MIN_RATE = 1e-4


class RotationAnimator:
    """離散 3 状態の回転コントローラ。

    Parameters
    ----------
    rate : float
        1 秒あたりのステップ数。`<=0` は `MIN_RATE` に置き換える。
    start_ms : float
        最後にステップした時刻の初期値（ミリ秒）。

    Notes
    -----
    補間は行わない。経過時間が周期に達したときだけ状態を 1 つ進める。
    """

    def __init__(self, rate: float = 1.0, *, start_ms: float = 0.0) -> None:
        rate_f = float(rate)
        if not rate_f > 0:
            _logger.warning("rotation_rate=%r は正でないため %g に置き換えます", rate, MIN_RATE)
            rate_f = MIN_RATE
        self._rate = rate_f
        self._step_index = 0
        self._step_count = 0
        self._last_step_ms = float(start_ms)

    @property
    def rate(self) -> float:
        return self._rate

    @property
    def period_ms(self) -> float:
        """1 ステップの周期（ミリ秒）。"""
        return 1000.0 / self._rate

    @property
    def step_index(self) -> int:
        return self._step_index

    @property
    def step_count(self) -> int:
        """開始からのステップ総数。"""
        return self._step_count

    @property
    def angle(self) -> float:
        """現在の回転角 [rad]（0, 2π/3, 4π/3 のいずれか）。"""
        return self._step_index * STEP_ANGLE

    def update(self, now_ms: float) -> float:
        """時刻 `now_ms` で状態を評価し、このフレームの回転角を返す。"""

        now = float(now_ms)
        if now - self._last_step_ms >= self.period_ms:
            self._step_index = (self._step_index + 1) % STEP_COUNT
            self._step_count += 1
            self._last_step_ms = now
        return self.angle


def angle_for_step(step_index: int) -> float:
    """ステップ番号に対応する回転角 [rad] を返す。"""

    return (int(step_index) % STEP_COUNT) * STEP_ANGLE


__all__ = ["MIN_RATE", "RotationAnimator", "STEP_ANGLE", "STEP_COUNT", "angle_for_step"]
