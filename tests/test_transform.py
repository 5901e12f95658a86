"""Tests for transform.py: node walking, style interning and response parsing."""

import pytest

from global_vars import GlobalVars
from paint import UnsupportedPaintType
from transform import (
    build_simplified_effects,
    build_simplified_strokes,
    build_text_style,
    parse_figma_response,
    parse_node,
    simplify_nodes,
)

from conftest import frame, solid


def _walk(nodes):
    for node in nodes:
        yield node
        yield from _walk(node.get("children", []))


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------


class TestParseFigmaResponse:

    def test_shared_fill_interned_once(self, file_response):
        design = parse_figma_response(file_response)

        nodes = list(_walk(design["nodes"]))
        assert [n["id"] for n in nodes] == ["1:1", "1:2", "1:3"]

        styles = design["globalVars"]["styles"]
        fill_ids = [k for k in styles if k.startswith("fill_")]
        assert len(fill_ids) == 1
        assert styles[fill_ids[0]] == ["#FF0000"]
        assert all(n["fills"] == fill_ids[0] for n in nodes)

    def test_metadata(self, file_response):
        design = parse_figma_response(file_response)
        assert design["name"] == "Landing Page"
        assert design["lastModified"] == "2024-05-01T10:00:00Z"
        assert design["thumbnailUrl"] == "https://figma.example.com/thumb.png"

    def test_missing_metadata_is_compacted(self):
        design = parse_figma_response({"document": {"children": [frame("5:1")]}})
        assert "name" not in design
        assert "lastModified" not in design
        assert design["thumbnailUrl"] == ""
        assert [n["id"] for n in design["nodes"]] == ["5:1"]

    def test_empty_document_compacts_to_metadata(self):
        design = parse_figma_response({"name": "Empty", "document": {"children": []}})
        assert design == {"name": "Empty", "thumbnailUrl": ""}

    def test_nodes_response(self, nodes_response):
        design = parse_figma_response(nodes_response)
        assert [n["id"] for n in design["nodes"]] == ["1:1"]

    def test_nodes_response_skips_missing_entries(self, nodes_response):
        nodes_response["nodes"]["9:9"] = None
        design = parse_figma_response(nodes_response)
        assert [n["id"] for n in design["nodes"]] == ["1:1"]

    def test_max_depth_one_emits_roots_only(self, file_response):
        design = parse_figma_response(file_response, max_depth=1)
        assert len(design["nodes"]) == 1
        assert "children" not in design["nodes"][0]

    def test_max_depth_two(self, file_response):
        design = parse_figma_response(file_response, max_depth=2)
        middle = design["nodes"][0]["children"][0]
        assert middle["id"] == "1:2"
        assert "children" not in middle

    def test_every_style_reference_resolves(self, file_response):
        leaf = file_response["document"]["children"][0]["children"][0]["children"][0]
        leaf.update(
            strokes=[solid(0, 0, 0)],
            strokeWeight=2,
            effects=[{"type": "LAYER_BLUR", "radius": 3}],
            layoutMode="HORIZONTAL",
            itemSpacing=4,
        )
        design = parse_figma_response(file_response)

        styles = design["globalVars"]["styles"]
        for node in _walk(design["nodes"]):
            for key in ("fills", "strokes", "effects", "layout", "textStyle"):
                if key in node:
                    assert node[key] in styles

    def test_unsupported_paint_aborts(self, file_response):
        leaf = file_response["document"]["children"][0]["children"][0]["children"][0]
        leaf["fills"] = [{"type": "VIDEO"}]
        with pytest.raises(UnsupportedPaintType):
            parse_figma_response(file_response)

    def test_fresh_table_per_call(self, file_response):
        first = parse_figma_response(file_response)
        second = parse_figma_response(file_response)
        assert first["globalVars"] == second["globalVars"]
        assert len(second["globalVars"]["styles"]) == 1


# ---------------------------------------------------------------------------
# Visibility and ordering
# ---------------------------------------------------------------------------


class TestVisibility:

    def test_hidden_subtree_is_dropped(self):
        hidden = frame("2:2", visible=False, children=[frame("2:3", visible=True)])
        root = frame("2:1", children=[frame("2:0"), hidden, frame("2:4")])

        design = simplify_nodes([root])
        ids = [n["id"] for n in _walk(design["nodes"])]
        assert ids == ["2:1", "2:0", "2:4"]

    def test_hidden_root_is_dropped(self):
        design = simplify_nodes([frame("3:1", visible=False), frame("3:2")])
        assert [n["id"] for n in design["nodes"]] == ["3:2"]

    def test_null_visible_flag_keeps_node(self):
        design = parse_figma_response({"document": {"children": [frame("3:3", visible=None)]}})
        assert [n["id"] for n in design["nodes"]] == ["3:3"]

    def test_hidden_paints_are_ignored(self):
        node = frame("4:1", fills=[solid(1, 1, 1, visible=False), solid(0, 0, 0)])
        table = GlobalVars()
        simplified = parse_node(table, node)
        assert table.styles[simplified["fills"]] == ["#000000"]


# ---------------------------------------------------------------------------
# Node fields
# ---------------------------------------------------------------------------


class TestParseNode:

    def test_text_node(self):
        node = {
            "id": "5:1",
            "name": "Title",
            "type": "TEXT",
            "characters": "Hello",
            "style": {
                "fontFamily": "Inter",
                "fontWeight": 600,
                "fontSize": 16,
                "lineHeightPx": 24,
                "letterSpacing": 2,
                "textAlignHorizontal": "LEFT",
            },
        }
        table = GlobalVars()
        simplified = parse_node(table, node)

        assert simplified["text"] == "Hello"
        assert table.styles[simplified["textStyle"]] == {
            "fontFamily": "Inter",
            "fontWeight": 600,
            "fontSize": 16,
            "lineHeight": "1.5em",
            "letterSpacing": "12.5%",
            "textAlignHorizontal": "LEFT",
        }

    def test_vector_reported_as_svg(self):
        simplified = parse_node(GlobalVars(), {"id": "6:1", "name": "Icon", "type": "VECTOR"})
        assert simplified["type"] == "IMAGE-SVG"

    def test_opacity_and_radius_inlined(self):
        node = frame("7:1", opacity=0.5, cornerRadius=8)
        simplified = parse_node(GlobalVars(), node)
        assert simplified["opacity"] == 0.5
        assert simplified["borderRadius"] == "8px"

    def test_full_opacity_omitted(self):
        assert "opacity" not in parse_node(GlobalVars(), frame("7:2", opacity=1))

    def test_per_corner_radius(self):
        simplified = parse_node(GlobalVars(), frame("7:3", rectangleCornerRadii=[4, 4, 0, 0]))
        assert simplified["borderRadius"] == "4px 4px 0px 0px"

    def test_layout_interned_only_when_meaningful(self):
        table = GlobalVars()
        plain = parse_node(table, frame("8:1"))
        assert "layout" not in plain

        row = parse_node(table, frame("8:2", layoutMode="HORIZONTAL", itemSpacing=12))
        assert table.styles[row["layout"]] == {"mode": "row", "gap": "12px"}

    def test_children_keep_order(self):
        root = frame("9:1", children=[frame(f"9:{i}") for i in range(2, 7)])
        simplified = parse_node(GlobalVars(), root)
        assert [c["id"] for c in simplified["children"]] == ["9:2", "9:3", "9:4", "9:5", "9:6"]


class TestBuilders:

    def test_strokes(self):
        node = {"strokes": [solid(0, 0, 0)], "strokeWeight": 1, "strokeDashes": [4, 2]}
        assert build_simplified_strokes(node) == {
            "colors": ["#000000"],
            "strokeWeight": "1px",
            "strokeDashes": [4, 2],
        }

    def test_individual_stroke_weights(self):
        node = {
            "strokes": [solid(0, 0, 0)],
            "strokeWeight": 1,
            "individualStrokeWeights": {"top": 1, "right": 0, "bottom": 1, "left": 0},
        }
        assert build_simplified_strokes(node)["strokeWeight"] == "1px 0px"

    def test_shadows_and_blurs(self):
        shadow_color = {"r": 0, "g": 0, "b": 0, "a": 0.25}
        node = {
            "type": "FRAME",
            "effects": [
                {"type": "DROP_SHADOW", "offset": {"x": 0, "y": 4}, "radius": 8, "color": shadow_color},
                {"type": "INNER_SHADOW", "offset": {"x": 1, "y": 1}, "radius": 2, "spread": 1, "color": shadow_color},
                {"type": "LAYER_BLUR", "radius": 4},
                {"type": "BACKGROUND_BLUR", "radius": 10},
                {"type": "DROP_SHADOW", "visible": False, "offset": {"x": 9, "y": 9}, "radius": 9, "color": shadow_color},
            ],
        }
        assert build_simplified_effects(node) == {
            "boxShadow": "0px 4px 8px 0px rgba(0, 0, 0, 0.25), inset 1px 1px 2px 1px rgba(0, 0, 0, 0.25)",
            "filter": "blur(4px)",
            "backdropFilter": "blur(10px)",
        }

    def test_text_shadow_on_text_nodes(self):
        node = {
            "type": "TEXT",
            "effects": [{"type": "DROP_SHADOW", "offset": {"x": 0, "y": 1}, "radius": 1, "color": {"r": 0, "g": 0, "b": 0, "a": 1}}],
        }
        assert "textShadow" in build_simplified_effects(node)

    def test_text_style_empty_without_style(self):
        assert build_text_style({"type": "FRAME"}) == {}
