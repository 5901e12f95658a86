# css_layout.py
"""
Box-model shorthand and flex layout extraction.

Auto-layout frames map onto CSS flexbox: layoutMode gives the flex
direction, the primary/counter axis alignments give justify-content and
align-items, and per-child sizing says whether a child is fixed, fills
its parent or hugs its content.
"""

from typing import Optional

from node_utils import format_number

FRAME_TYPES = {"FRAME", "COMPONENT", "COMPONENT_SET", "INSTANCE", "SECTION"}

_AXIS_ALIGN = {
    "MAX": "flex-end",
    "CENTER": "center",
    "SPACE_BETWEEN": "space-between",
    "BASELINE": "baseline",
}

_SELF_ALIGN = {
    "MAX": "flex-end",
    "CENTER": "center",
    "STRETCH": "stretch",
}

_SIZING = {
    "FIXED": "fixed",
    "FILL": "fill",
    "HUG": "hug",
}


def generate_css_shorthand(top, right, bottom, left, ignore_zero: bool = True, suffix: str = "px") -> Optional[str]:
    """
    Collapse top/right/bottom/left values into a CSS shorthand.

    (10, 10, 10, 10) -> "10px"
    (10, 20, 10, 20) -> "10px 20px"
    (10, 20, 30, 20) -> "10px 20px 30px"
    (10, 20, 30, 40) -> "10px 20px 30px 40px"

    Returns None when ignore_zero is set and every value is 0.
    """
    if ignore_zero and top == 0 and right == 0 and bottom == 0 and left == 0:
        return None

    t, r, b, l = (f"{format_number(v)}{suffix}" for v in (top, right, bottom, left))

    if top == right == bottom == left:
        return t
    if right == left:
        if top == bottom:
            return f"{t} {r}"
        return f"{t} {r} {b}"
    return f"{t} {r} {b} {l}"


def is_frame(node: Optional[dict]) -> bool:
    if not node:
        return False
    return node.get("type") in FRAME_TYPES or "clipsContent" in node


def _layout_mode(node: dict) -> str:
    mode = node.get("layoutMode")
    if not mode or mode == "NONE":
        return "none"
    return "row" if mode == "HORIZONTAL" else "column"


def _direction(axis: str, mode: str) -> str:
    if axis == "primary":
        return "horizontal" if mode == "row" else "vertical"
    return "vertical" if mode == "row" else "horizontal"


def _children_stretch(children: list, axis: str, mode: str) -> bool:
    if not children:
        return False

    sizing_key = "layoutSizingHorizontal" if _direction(axis, mode) == "horizontal" else "layoutSizingVertical"
    for child in children:
        if child.get("layoutPositioning") == "ABSOLUTE":
            continue
        if child.get(sizing_key) != "FILL":
            return False
    return True


def _convert_align(axis_align: Optional[str], children: list, axis: str, mode: str) -> Optional[str]:
    if _children_stretch(children, axis, mode):
        return "stretch"
    return _AXIS_ALIGN.get(axis_align)


def _pixel_round(value: float) -> float:
    return round(value, 2)


def _frame_values(node: dict) -> dict:
    values = {"mode": _layout_mode(node)}

    # Scrolling
    overflow = node.get("overflowDirection") or ""
    scroll = []
    if "HORIZONTAL" in overflow:
        scroll.append("x")
    if "VERTICAL" in overflow:
        scroll.append("y")
    if scroll:
        values["overflowScroll"] = scroll

    mode = values["mode"]
    if mode == "none":
        return values

    children = node.get("children", [])
    values["justifyContent"] = _convert_align(node.get("primaryAxisAlignItems", "MIN"), children, "primary", mode)
    values["alignItems"] = _convert_align(node.get("counterAxisAlignItems", "MIN"), children, "counter", mode)
    values["alignSelf"] = _SELF_ALIGN.get(node.get("layoutAlign"))
    values["wrap"] = True if node.get("layoutWrap") == "WRAP" else None
    values["gap"] = f"{format_number(node['itemSpacing'])}px" if node.get("itemSpacing") else None
    values["padding"] = generate_css_shorthand(
        node.get("paddingTop", 0),
        node.get("paddingRight", 0),
        node.get("paddingBottom", 0),
        node.get("paddingLeft", 0),
    )
    return values


def _dimensions(node: dict, mode: str) -> dict:
    box = node.get("absoluteBoundingBox")
    if not box:
        return {}

    horizontal = node.get("layoutSizingHorizontal")
    vertical = node.get("layoutSizingVertical")
    dims = {}

    if mode == "row":
        if not node.get("layoutGrow") and horizontal == "FIXED":
            dims["width"] = box.get("width")
        if node.get("layoutAlign") != "STRETCH" and vertical == "FIXED":
            dims["height"] = box.get("height")
    elif mode == "column":
        if node.get("layoutAlign") != "STRETCH" and horizontal == "FIXED":
            dims["width"] = box.get("width")
        if not node.get("layoutGrow") and vertical == "FIXED":
            dims["height"] = box.get("height")
        if node.get("preserveRatio") and box.get("height"):
            dims["aspectRatio"] = _pixel_round(box["width"] / box["height"])
    else:
        if not horizontal or horizontal == "FIXED":
            dims["width"] = box.get("width")
        if not vertical or vertical == "FIXED":
            dims["height"] = box.get("height")

    return {k: _pixel_round(v) for k, v in dims.items() if v is not None}


def _child_values(node: dict, parent: Optional[dict], mode: str) -> dict:
    values = {
        "sizing": {
            k: v for k, v in (
                ("horizontal", _SIZING.get(node.get("layoutSizingHorizontal"))),
                ("vertical", _SIZING.get(node.get("layoutSizingVertical"))),
            ) if v is not None
        },
    }

    absolute = node.get("layoutPositioning") == "ABSOLUTE"
    if is_frame(parent) and (_layout_mode(parent) == "none" or absolute):
        if absolute:
            values["position"] = "absolute"
        box = node.get("absoluteBoundingBox")
        parent_box = parent.get("absoluteBoundingBox")
        if box and parent_box:
            values["locationRelativeToParent"] = {
                "x": _pixel_round(box["x"] - parent_box["x"]),
                "y": _pixel_round(box["y"] - parent_box["y"]),
            }

    values["dimensions"] = _dimensions(node, mode)
    return values


def build_simplified_layout(node: dict, parent: Optional[dict] = None) -> dict:
    """Build the flex layout description of a node; None-valued keys are dropped."""
    layout = {"mode": "none"}
    if is_frame(node):
        layout = _frame_values(node)
    layout.update(_child_values(node, parent, layout["mode"]))

    return {k: v for k, v in layout.items() if v is not None and v != {}}
