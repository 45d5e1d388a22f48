"""SVG export（`compline.export.svg.export_svg`）のテスト。"""

from __future__ import annotations

import xml.etree.ElementTree as ET

import pytest

from compline.core.composition_config import CompositionConfig
from compline.core.pipeline import render
from compline.core.style import RenderStyle
from compline.export.svg import export_svg, render_svg_text

_SVG_NS = "http://www.w3.org/2000/svg"
_NS = {"svg": _SVG_NS}


def _config(**overrides) -> CompositionConfig:
    base = dict(grid_width=16, grid_height=16, line_count=12, stroke_width=3, seed=5)
    base.update(overrides)
    return CompositionConfig(**base)


def _parse_svg(text: str) -> ET.Element:
    root = ET.fromstring(text)
    assert root.tag == f"{{{_SVG_NS}}}svg"
    return root


def _group(root: ET.Element, name: str) -> ET.Element | None:
    for g in root.findall("svg:g", _NS):
        if g.attrib.get("id") == name:
            return g
    return None


def test_export_svg_writes_valid_svg(tmp_path) -> None:
    output = render(_config(), canvas_size=(300, 200))
    out_path = tmp_path / "nested" / "out.svg"

    returned = export_svg(output, out_path)
    assert returned == out_path
    assert out_path.exists()

    root = _parse_svg(out_path.read_text(encoding="utf-8"))
    assert root.attrib["viewBox"] == "0 0 300 200"
    assert root.attrib["width"] == "300"
    assert root.attrib["height"] == "200"

    lines_group = _group(root, "lines")
    assert lines_group is not None
    assert lines_group.attrib["stroke"] == "#282828"
    assert lines_group.attrib["stroke-width"] == "3.000"
    assert lines_group.attrib["stroke-linecap"] == "square"
    assert len(lines_group.findall("svg:line", _NS)) == len(output.lines)


def test_line_elements_match_segment_coords() -> None:
    output = render(_config(apply_grain=False, mask_to_circle=False), canvas_size=(100, 100))
    root = _parse_svg(render_svg_text(output))
    elements = _group(root, "lines").findall("svg:line", _NS)

    coords = output.line_coords()
    for el, ((x1, y1), (x2, y2)) in zip(elements, coords.tolist()):
        assert float(el.attrib["x1"]) == pytest.approx(x1, abs=1e-3)
        assert float(el.attrib["y1"]) == pytest.approx(y1, abs=1e-3)
        assert float(el.attrib["x2"]) == pytest.approx(x2, abs=1e-3)
        assert float(el.attrib["y2"]) == pytest.approx(y2, abs=1e-3)


def test_optional_layers_follow_output() -> None:
    full = render(_config(show_grid=True, show_circle_outline=True, apply_grain=True))
    bare = render(_config(show_grid=False, show_circle_outline=False, apply_grain=False))

    root = _parse_svg(render_svg_text(full))
    assert _group(root, "grid") is not None
    assert len(_group(root, "grain").findall("svg:circle", _NS)) == len(full.grain)
    circle = [c for c in root.findall("svg:circle", _NS) if c.attrib.get("id") == "circle"]
    assert len(circle) == 1
    assert circle[0].attrib["stroke"] == "#CCCCCC"

    root = _parse_svg(render_svg_text(bare))
    assert _group(root, "grid") is None
    assert _group(root, "grain") is None
    assert not [c for c in root.findall("svg:circle", _NS) if c.attrib.get("id") == "circle"]


def test_grain_opacity_comes_from_alpha() -> None:
    output = render(_config(apply_grain=True), grain_count=5)
    root = _parse_svg(render_svg_text(output))
    dots = _group(root, "grain").findall("svg:circle", _NS)
    for dot, speckle in zip(dots, output.grain):
        assert float(dot.attrib["fill-opacity"]) == pytest.approx(speckle.alpha / 255.0, abs=1e-3)
        assert dot.attrib["fill"] == "#E5E5E5"


def test_custom_style_colours_are_used() -> None:
    style = RenderStyle(line_color=(1.0, 0.0, 0.0), background_color=(0.0, 0.0, 0.0))
    root = _parse_svg(render_svg_text(render(_config()), style=style))
    assert _group(root, "lines").attrib["stroke"] == "#FF0000"
    background = root.find("svg:rect", _NS)
    assert background.attrib["fill"] == "#000000"


def test_export_svg_is_deterministic(tmp_path) -> None:
    cfg = _config(show_grid=True)
    a = tmp_path / "a.svg"
    b = tmp_path / "b.svg"
    export_svg(render(cfg), a)
    export_svg(render(cfg), b)

    assert a.read_bytes() == b.read_bytes()


def test_background_is_omitted_when_style_has_none() -> None:
    style = RenderStyle(background_color=None)
    root = _parse_svg(render_svg_text(render(_config()), style=style))
    assert root.find("svg:rect", _NS) is None
    assert _group(root, "lines") is not None
