# transform.py
import logging
from typing import Optional

from css_layout import build_simplified_layout, generate_css_shorthand
from global_vars import GlobalVars
from node_utils import format_number, is_visible, remove_empty_keys
from paint import format_rgba_color, parse_paint

logger = logging.getLogger("figma_mcp.transform")


def build_text_style(node: dict) -> dict:
    style = node.get("style") or {}
    if not style:
        return {}

    font_size = style.get("fontSize")
    line_height = style.get("lineHeightPx")
    letter_spacing = style.get("letterSpacing")

    text_style = {
        "fontFamily": style.get("fontFamily"),
        "fontWeight": style.get("fontWeight"),
        "fontSize": font_size,
        "lineHeight": f"{format_number(line_height / font_size)}em" if line_height and font_size else None,
        "letterSpacing": (
            f"{format_number(letter_spacing / font_size * 100)}%"
            if letter_spacing and font_size else None
        ),
        "textCase": style.get("textCase"),
        "textAlignHorizontal": style.get("textAlignHorizontal"),
        "textAlignVertical": style.get("textAlignVertical"),
    }
    return {k: v for k, v in text_style.items() if v is not None}


def build_simplified_strokes(node: dict) -> dict:
    strokes = {"colors": [parse_paint(s) for s in node.get("strokes") or [] if is_visible(s)]}

    weight = node.get("strokeWeight")
    if isinstance(weight, (int, float)) and weight > 0:
        strokes["strokeWeight"] = f"{format_number(weight)}px"

    if node.get("strokeDashes"):
        strokes["strokeDashes"] = node["strokeDashes"]

    # Per-side weights win over the uniform weight
    sides = node.get("individualStrokeWeights")
    if sides:
        shorthand = generate_css_shorthand(
            sides.get("top", 0), sides.get("right", 0), sides.get("bottom", 0), sides.get("left", 0)
        )
        if shorthand:
            strokes["strokeWeight"] = shorthand

    return strokes


def _shadow(effect: dict) -> str:
    offset = effect.get("offset") or {}
    parts = [
        f"{format_number(offset.get('x', 0))}px",
        f"{format_number(offset.get('y', 0))}px",
        f"{format_number(effect.get('radius', 0))}px",
        f"{format_number(effect.get('spread', 0))}px",
        format_rgba_color(effect.get("color") or {}),
    ]
    prefix = "inset " if effect.get("type") == "INNER_SHADOW" else ""
    return prefix + " ".join(parts)


def _blur(effect: dict) -> str:
    return f"blur({format_number(effect.get('radius', 0))}px)"


def build_simplified_effects(node: dict) -> dict:
    effects = [e for e in node.get("effects") or [] if is_visible(e)]
    if not effects:
        return {}

    shadows = [_shadow(e) for e in effects if e.get("type") == "DROP_SHADOW"]
    shadows += [_shadow(e) for e in effects if e.get("type") == "INNER_SHADOW"]
    layer_blur = " ".join(_blur(e) for e in effects if e.get("type") == "LAYER_BLUR")
    background_blur = " ".join(_blur(e) for e in effects if e.get("type") == "BACKGROUND_BLUR")

    result = {}
    if shadows:
        key = "textShadow" if node.get("type") == "TEXT" else "boxShadow"
        result[key] = ", ".join(shadows)
    if layer_blur:
        result["filter"] = layer_blur
    if background_blur:
        result["backdropFilter"] = background_blur
    return result


def _border_radius(node: dict) -> Optional[str]:
    radii = node.get("rectangleCornerRadii")
    if isinstance(radii, list) and len(radii) == 4:
        return generate_css_shorthand(*radii)

    radius = node.get("cornerRadius")
    if isinstance(radius, (int, float)):
        return f"{format_number(radius)}px"
    return None


def parse_node(global_vars: GlobalVars, node: dict, parent: Optional[dict] = None,
               depth: int = 1, max_depth: Optional[int] = None) -> Optional[dict]:
    """
    Simplify one node and, depth permitting, its visible children.

    Invisible nodes return None and are never descended into. Roots sit at
    depth 1, so max_depth=1 keeps only the roots themselves.
    """
    if not is_visible(node):
        return None

    simplified = {
        "id": node.get("id"),
        "name": node.get("name"),
        "type": node.get("type"),
    }

    # Text
    if node.get("characters"):
        simplified["text"] = node["characters"]
    text_style = build_text_style(node)
    if text_style:
        simplified["textStyle"] = global_vars.find_or_create(text_style, "style")

    # Fills
    fills = [parse_paint(f) for f in node.get("fills") or [] if is_visible(f)]
    if fills:
        simplified["fills"] = global_vars.find_or_create(fills, "fill")

    # Strokes
    strokes = build_simplified_strokes(node)
    if strokes["colors"]:
        simplified["strokes"] = global_vars.find_or_create(strokes, "stroke")

    # Effects
    effects = build_simplified_effects(node)
    if effects:
        simplified["effects"] = global_vars.find_or_create(effects, "effect")

    opacity = node.get("opacity")
    if isinstance(opacity, (int, float)) and opacity != 1:
        simplified["opacity"] = opacity

    border_radius = _border_radius(node)
    if border_radius:
        simplified["borderRadius"] = border_radius

    # Layout
    layout = build_simplified_layout(node, parent)
    if len(layout) > 1:
        simplified["layout"] = global_vars.find_or_create(layout, "layout")

    if node.get("type") == "VECTOR":
        simplified["type"] = "IMAGE-SVG"

    simplified["children"] = []
    if max_depth is not None and depth >= max_depth:
        return simplified

    for child in node.get("children") or []:
        child_node = parse_node(global_vars, child, node, depth + 1, max_depth)
        if child_node is not None:
            simplified["children"].append(child_node)

    return simplified


def simplify_nodes(nodes: list, max_depth: Optional[int] = None, metadata: Optional[dict] = None) -> dict:
    """
    Simplify a forest of raw node subtrees that share one style table.

    The assembled design (metadata, nodes, globalVars) is compacted once
    as a whole.
    """
    global_vars = GlobalVars()
    simplified_nodes = []
    for root in nodes:
        simplified = parse_node(global_vars, root, max_depth=max_depth)
        if simplified is not None:
            simplified_nodes.append(simplified)

    logger.debug(f"Simplified {len(simplified_nodes)} root nodes, {len(global_vars)} shared styles")

    return remove_empty_keys({
        **(metadata or {}),
        "nodes": simplified_nodes,
        "globalVars": global_vars.to_dict(),
    })


def parse_figma_response(data: dict, max_depth: Optional[int] = None) -> dict:
    """
    Convert a GET /files/:key or GET /files/:key/nodes response into a
    simplified design: metadata, root nodes and the shared style table.
    """
    metadata = {
        "name": data.get("name"),
        "lastModified": data.get("lastModified"),
        "thumbnailUrl": data.get("thumbnailUrl") or "",
    }

    if "document" in data:
        roots = data["document"].get("children") or []
    else:
        roots = [entry["document"] for entry in (data.get("nodes") or {}).values()
                 if entry and entry.get("document")]

    return simplify_nodes(roots, max_depth, metadata)
