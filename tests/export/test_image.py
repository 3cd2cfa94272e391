from __future__ import annotations

import subprocess
from pathlib import Path

import numpy as np
import pytest

from trilattice.core.emitter import TriangleSet
from trilattice.core.frame import TriangleLayer
from trilattice.core.runtime_config import runtime_config, set_config_path
from trilattice.export import image


# `trilattice.export.image`（SVG→PNG / resvg）をテストする。

@pytest.fixture(autouse=True)
def _reset_runtime_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    set_config_path(None)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    set_config_path(None)
    yield
    set_config_path(None)


def _layers() -> list[TriangleLayer]:
    tri = np.asarray([[[0.0, 0.0], [4.0, 0.0], [0.0, 4.0]]], dtype=np.float32)
    return [TriangleLayer(name="wide", triangles=TriangleSet(vertices=tri), color=(0.0, 0.0, 0.0))]


def test_default_output_path_uses_data_dir_and_stem():
    path = image.default_output_path("trilattice", "png")
    assert path.parts[0] == "data"
    assert path.parts[1] == "output"
    assert path.parts[2] == "png"
    assert path.name == "trilattice.png"


def test_png_output_size_scales_canvas_by_png_scale():
    scale = float(runtime_config().png_scale)
    expected = (int(300 * scale), int(300 * scale))
    assert image.png_output_size((300, 300)) == expected


def test_rasterize_svg_to_png_invokes_resvg(tmp_path, monkeypatch: pytest.MonkeyPatch):
    src_svg = tmp_path / "in.svg"
    src_svg.write_text(
        '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 300 300" width="300" height="300"></svg>\n',
        encoding="utf-8",
    )
    out_png = tmp_path / "out.png"

    def fake_run(cmd, *, capture_output: bool, text: bool, check: bool):
        assert capture_output is True
        assert text is True
        assert check is False
        assert cmd[0] == "resvg"
        assert cmd[cmd.index("--width") + 1] == "600"
        assert cmd[cmd.index("--height") + 1] == "600"
        assert cmd[cmd.index("--background") + 1] == "#FF00FF"
        assert Path(cmd[-2]) == src_svg
        assert Path(cmd[-1]) == out_png
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout="", stderr="")

    monkeypatch.setattr(image.subprocess, "run", fake_run)

    path = image.rasterize_svg_to_png(
        src_svg, out_png, output_size=(600, 600), background_color_rgb01=(1.0, 0.0, 1.0)
    )
    assert path == out_png


def test_rasterize_svg_to_png_raises_when_resvg_is_missing(tmp_path, monkeypatch: pytest.MonkeyPatch):
    src_svg = tmp_path / "in.svg"
    src_svg.write_text("<svg xmlns=\"http://www.w3.org/2000/svg\"></svg>\n", encoding="utf-8")

    def missing(*args, **kwargs):
        raise FileNotFoundError

    monkeypatch.setattr(image.subprocess, "run", missing)

    with pytest.raises(RuntimeError, match="resvg が見つかりません"):
        image.rasterize_svg_to_png(src_svg, tmp_path / "out.png", output_size=(10, 10))


def test_rasterize_svg_to_png_raises_on_failure(tmp_path, monkeypatch: pytest.MonkeyPatch):
    src_svg = tmp_path / "in.svg"
    src_svg.write_text("<svg xmlns=\"http://www.w3.org/2000/svg\"></svg>\n", encoding="utf-8")

    def failing(cmd, **kwargs):
        return subprocess.CompletedProcess(args=cmd, returncode=2, stdout="", stderr="bad svg")

    monkeypatch.setattr(image.subprocess, "run", failing)

    with pytest.raises(RuntimeError, match="bad svg"):
        image.rasterize_svg_to_png(src_svg, tmp_path / "out.png", output_size=(10, 10))


def test_export_image_dispatches_by_suffix(tmp_path, monkeypatch: pytest.MonkeyPatch):
    calls: list[list[str]] = []

    def fake_run(cmd, **kwargs):
        calls.append(list(cmd))
        return subprocess.CompletedProcess(args=cmd, returncode=0, stdout="", stderr="")

    monkeypatch.setattr(image.subprocess, "run", fake_run)

    svg = image.export_image(_layers(), tmp_path / "a.svg", canvas_size=(10, 10))
    assert svg.read_text(encoding="utf-8").startswith("<?xml")
    assert calls == []

    png = image.export_image(_layers(), tmp_path / "b.png", canvas_size=(10, 10))
    assert png == tmp_path / "b.png"
    assert (tmp_path / "b.svg").exists()
    assert len(calls) == 1
    assert calls[0][calls[0].index("--width") + 1] == "20"

    with pytest.raises(ValueError):
        image.export_image(_layers(), tmp_path / "c.jpg", canvas_size=(10, 10))
