"""SVG export（`trilattice.export.svg.export_svg`）のテスト。"""

from __future__ import annotations

import xml.etree.ElementTree as ET

import numpy as np
import pytest

from trilattice.core.emitter import TriangleSet
from trilattice.core.frame import TriangleLayer
from trilattice.export.svg import export_svg

_SVG_NS = "http://www.w3.org/2000/svg"
_NS = {"svg": _SVG_NS}


def _layer(
    name: str,
    triangles: list[list[list[float]]],
    color: tuple[float, float, float] = (0.0, 0.0, 0.0),
) -> TriangleLayer:
    return TriangleLayer(
        name=name,
        triangles=TriangleSet(vertices=np.asarray(triangles, dtype=np.float32).reshape((-1, 3, 2))),
        color=color,
    )


def _parse_svg(text: str) -> ET.Element:
    root = ET.fromstring(text)
    assert root.tag == f"{{{_SVG_NS}}}svg"
    return root


def test_export_svg_writes_valid_svg(tmp_path) -> None:
    layers = [_layer("wide", [[[0.0, 0.0], [10.0, 0.0], [0.0, 20.5]]], color=(1.0, 0.0, 0.0))]
    out_path = tmp_path / "nested" / "out.svg"

    returned = export_svg(layers, out_path, canvas_size=(100, 200))
    assert returned == out_path
    assert out_path.exists()

    root = _parse_svg(out_path.read_text(encoding="utf-8"))
    assert root.attrib["viewBox"] == "0 0 100 200"
    assert root.attrib["width"] == "100"
    assert root.attrib["height"] == "200"
    assert root.findall("svg:rect", _NS) == []

    groups = root.findall("svg:g", _NS)
    assert len(groups) == 1
    group = groups[0]
    assert group.attrib["id"] == "wide"
    assert group.attrib["fill"] == "#FF0000"
    assert group.attrib["stroke"] == "none"

    polygons = group.findall("svg:polygon", _NS)
    assert len(polygons) == 1
    assert polygons[0].attrib["points"] == "0.000,0.000 10.000,0.000 0.000,20.500"


def test_export_svg_draws_background_rect_first(tmp_path) -> None:
    layers = [_layer("background", [[[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]])]
    out_path = tmp_path / "out.svg"

    export_svg(layers, out_path, canvas_size=(10, 10), background_color=(1.0, 0.0, 1.0))

    root = _parse_svg(out_path.read_text(encoding="utf-8"))
    children = list(root)
    assert children[0].tag == f"{{{_SVG_NS}}}rect"
    assert children[0].attrib["fill"] == "#FF00FF"
    assert children[1].attrib["id"] == "background"


def test_export_svg_keeps_layer_order_and_skips_empty_layers(tmp_path) -> None:
    tri = [[[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]]
    layers = [
        _layer("background", tri),
        TriangleLayer(name="decor", triangles=TriangleSet.empty(), color=(0.0, 0.0, 0.0)),
        _layer("wide", tri + tri),
        _layer("narrow", tri),
    ]
    out_path = tmp_path / "out.svg"

    export_svg(layers, out_path, canvas_size=(10, 10))

    root = _parse_svg(out_path.read_text(encoding="utf-8"))
    groups = root.findall("svg:g", _NS)
    assert [g.attrib["id"] for g in groups] == ["background", "wide", "narrow"]
    assert len(groups[1].findall("svg:polygon", _NS)) == 2


def test_export_svg_normalizes_negative_zero(tmp_path) -> None:
    layers = [_layer("wide", [[[-0.0001, 0.0], [1.0, -0.0], [0.0, 1.0]]])]
    out_path = tmp_path / "out.svg"

    export_svg(layers, out_path, canvas_size=(10, 10))

    root = _parse_svg(out_path.read_text(encoding="utf-8"))
    polygon = root.find("svg:g/svg:polygon", _NS)
    assert polygon is not None
    assert polygon.attrib["points"] == "0.000,0.000 1.000,0.000 0.000,1.000"


def test_export_svg_is_deterministic(tmp_path) -> None:
    layers = [_layer("wide", [[[0.1, 0.2], [10.0, 20.0], [5.5, 3.3]]], color=(0.1, 0.2, 0.3))]

    a = tmp_path / "a.svg"
    b = tmp_path / "b.svg"
    export_svg(layers, a, canvas_size=(100, 100))
    export_svg(layers, b, canvas_size=(100, 100))

    assert a.read_bytes() == b.read_bytes()


def test_export_svg_rejects_non_positive_canvas(tmp_path) -> None:
    with pytest.raises(ValueError):
        export_svg([], tmp_path / "out.svg", canvas_size=(0, 10))
