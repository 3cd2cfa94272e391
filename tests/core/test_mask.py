"""占有マスク（ラスタライズ + 穴の差し引き）に関するテスト群。"""

from __future__ import annotations

import numpy as np
import pytest

from trilattice.core.mask import OccupancyMask, build_mask, rasterize_paths
from trilattice.core.path import VectorPath


def _rect(x0: float, y0: float, x1: float, y1: float) -> VectorPath:
    return VectorPath.from_commands(
        [["M", x0, y0], ["L", x1, y0], ["L", x1, y1], ["L", x0, y1]]
    )


def _circle(cx: float, cy: float, r: float) -> VectorPath:
    # 4 本の 3 次ベジェで近似した円。
    k = 0.5522847498 * r
    return VectorPath.from_commands(
        [
            ["M", cx + r, cy],
            ["C", cx + r, cy + k, cx + k, cy + r, cx, cy + r],
            ["C", cx - k, cy + r, cx - r, cy + k, cx - r, cy],
            ["C", cx - r, cy - k, cx - k, cy - r, cx, cy - r],
            ["C", cx + k, cy - r, cx + r, cy - k, cx + r, cy],
        ]
    )


def test_rect_is_filled_at_pixel_centers() -> None:
    inside = rasterize_paths([_rect(10, 10, 20, 20)], (40, 30))

    assert inside.shape == (30, 40)
    assert inside[10, 10]
    assert inside[19, 19]
    assert not inside[9, 10]
    assert not inside[10, 20]
    assert int(inside.sum()) == 100


def test_points_outside_silhouette_are_outside() -> None:
    mask = build_mask([_circle(50, 50, 30)], [_rect(45, 45, 55, 55)], size=(100, 100))

    assert mask.at(2, 2) <= 1
    assert mask.at(95, 50) <= 1
    assert mask.at(50, 10) <= 1


def test_points_inside_silhouette_and_outside_holes_are_inside() -> None:
    mask = build_mask([_circle(50, 50, 30)], [_rect(45, 45, 55, 55)], size=(100, 100))

    assert mask.at(30, 50) > 1
    assert mask.at(50, 70) > 1
    assert mask.at(60.5, 60.5) > 1


def test_points_inside_hole_are_outside_regardless_of_fill() -> None:
    mask = build_mask([_circle(50, 50, 30)], [_rect(45, 45, 55, 55)], size=(100, 100))

    for x, y in [(45.5, 45.5), (50, 50), (54.5, 54.5)]:
        assert mask.at(x, y) <= 1


def test_hole_outside_outer_does_not_add_coverage() -> None:
    mask = build_mask([_rect(0, 0, 10, 10)], [_rect(5, 5, 30, 30)], size=(40, 40))

    assert mask.at(2, 2) == 255
    assert mask.at(7, 7) == 0
    assert mask.at(20, 20) == 0


def test_overlapping_outer_paths_are_united() -> None:
    inside = rasterize_paths([_rect(0, 0, 20, 10), _rect(10, 0, 30, 10)], (40, 20))

    assert inside[5, 15]
    assert int(inside[5].sum()) == 30


def test_out_of_range_coordinates_clamp_to_edge_pixel() -> None:
    alpha = np.zeros((4, 5), dtype=np.uint8)
    alpha[0, 0] = 255
    alpha[3, 4] = 7
    mask = OccupancyMask(alpha=alpha)

    assert mask.at(-10.0, -3.0) == 255
    assert mask.at(100.0, 100.0) == 7
    assert mask.width == 5
    assert mask.height == 4


def test_mask_is_read_only() -> None:
    mask = build_mask([_rect(0, 0, 10, 10)], size=(16, 16))

    assert mask.alpha.dtype == np.uint8
    assert not mask.alpha.flags.writeable
    with pytest.raises(ValueError):
        mask.alpha[0, 0] = 0


def test_build_mask_rejects_non_positive_size() -> None:
    with pytest.raises(ValueError):
        build_mask([_rect(0, 0, 10, 10)], size=(0, 10))
