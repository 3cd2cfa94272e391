"""VectorPath のパース・平坦化に関するテスト群。"""

from __future__ import annotations

import numpy as np
import pytest

from trilattice.core.path import CubicTo, LineTo, VectorPath, cubic_bezier_points


def test_from_commands_builds_line_and_cubic_segments() -> None:
    path = VectorPath.from_commands(
        [
            ["M", 0, 0],
            ["L", 10, 0],
            ["C", 10, 5, 5, 10, 0, 10],
        ]
    )

    assert path.start == (0.0, 0.0)
    assert path.segments == (
        LineTo(end=(10.0, 0.0)),
        CubicTo(c1=(10.0, 5.0), c2=(5.0, 10.0), end=(0.0, 10.0)),
    )


def test_from_commands_rejects_missing_move() -> None:
    with pytest.raises(ValueError):
        VectorPath.from_commands([["L", 1, 1]])


def test_from_commands_rejects_unknown_command_and_arity() -> None:
    with pytest.raises(ValueError, match="未対応"):
        VectorPath.from_commands([["M", 0, 0], ["Q", 1, 1, 2, 2]])
    with pytest.raises(ValueError):
        VectorPath.from_commands([["M", 0, 0], ["C", 1, 1, 2, 2]])


def test_flatten_line_path_drops_explicit_closing_point() -> None:
    path = VectorPath.from_commands(
        [["M", 0, 0], ["L", 10, 0], ["L", 10, 10], ["L", 0, 0]]
    )

    flat = path.flatten()

    np.testing.assert_allclose(flat, [[0.0, 0.0], [10.0, 0.0], [10.0, 10.0]])


def test_flatten_samples_cubic_endpoints_exactly() -> None:
    path = VectorPath.from_commands([["M", 0, 0], ["C", 0, 10, 10, 10, 10, 0]])

    flat = path.flatten(samples_per_curve=8)

    assert flat.shape == (9, 2)
    np.testing.assert_allclose(flat[0], [0.0, 0.0])
    np.testing.assert_allclose(flat[-1], [10.0, 0.0])
    # 対称な制御点なので t=0.5 は x=5, y=7.5。
    np.testing.assert_allclose(flat[4], [5.0, 7.5])


def test_cubic_bezier_points_matches_straight_line_for_collinear_controls() -> None:
    p0 = np.array([0.0, 0.0])
    p3 = np.array([3.0, 0.0])
    pts = cubic_bezier_points(p0, np.array([1.0, 0.0]), np.array([2.0, 0.0]), p3, 3)

    np.testing.assert_allclose(pts, [[0.0, 0.0], [1.0, 0.0], [2.0, 0.0], [3.0, 0.0]])
