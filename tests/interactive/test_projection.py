import numpy as np

from trilattice.interactive.gl.utils import build_projection


def test_projection_maps_canvas_corners_to_clip_space():
    proj = build_projection(600.0, 400.0)
    # ModernGL へは転置済みで渡すため、数式上の行列は proj.T。
    m = proj.T.astype(np.float64)

    top_left = m @ np.array([0.0, 0.0, 0.0, 1.0])
    bottom_right = m @ np.array([600.0, 400.0, 0.0, 1.0])
    center = m @ np.array([300.0, 200.0, 0.0, 1.0])

    np.testing.assert_allclose(top_left[:2], [-1.0, 1.0], atol=1e-6)
    np.testing.assert_allclose(bottom_right[:2], [1.0, -1.0], atol=1e-6)
    np.testing.assert_allclose(center[:2], [0.0, 0.0], atol=1e-6)


def test_projection_is_float32():
    assert build_projection(10.0, 10.0).dtype == np.float32
