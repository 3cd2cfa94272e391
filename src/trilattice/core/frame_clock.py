# どこで: `src/trilattice/core/frame_clock.py`。
# 何を: RotationAnimator に渡すフレーム時刻（ミリ秒）の供給源を提供する。
# なぜ: プレビューは実時間、書き出しとテストは固定 fps のタイムラインで同じ FrameRunner を回すため。

from __future__ import annotations

import time


class RealTimeClock:
    """`perf_counter()` の経過時間をそのまま返す時計。"""

    def __init__(self, *, start_time: float) -> None:
        self._start_time = float(start_time)

    def ms(self) -> float:
        return (time.perf_counter() - self._start_time) * 1000.0

    def tick(self) -> None:
        return


class FixedStepClock:
    """1 フレームごとに `1000 / fps` ミリ秒だけ進む時計。

    Raises
    ------
    ValueError
        `fps <= 0` の場合。
    """

    def __init__(self, *, fps: float, start_ms: float = 0.0) -> None:
        _fps = float(fps)
        if _fps <= 0:
            raise ValueError("fps は正の値である必要がある")
        self._frame_ms = 1000.0 / _fps
        self._start_ms = float(start_ms)
        self._frames = 0

    def ms(self) -> float:
        # 累積加算ではなく掛け算で求め、長いタイムラインでも誤差を溜めない。
        return self._start_ms + self._frames * self._frame_ms

    def tick(self) -> None:
        self._frames += 1
