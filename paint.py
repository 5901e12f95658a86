# paint.py
"""
Figma paint and color conversion.

Figma colors arrive as normalized channels ({"r", "g", "b", "a"} in [0, 1]).
Paints are converted to the cheapest textual form that still carries the
information: a bare hex string for opaque solids, an rgba() string for
translucent solids, and small dicts for image and gradient paints.
"""

import math
from enum import Enum

from node_utils import format_number


class PaintType(str, Enum):
    SOLID = "SOLID"
    IMAGE = "IMAGE"
    GRADIENT_LINEAR = "GRADIENT_LINEAR"
    GRADIENT_RADIAL = "GRADIENT_RADIAL"
    GRADIENT_ANGULAR = "GRADIENT_ANGULAR"
    GRADIENT_DIAMOND = "GRADIENT_DIAMOND"


GRADIENT_TYPES = {
    PaintType.GRADIENT_LINEAR,
    PaintType.GRADIENT_RADIAL,
    PaintType.GRADIENT_ANGULAR,
    PaintType.GRADIENT_DIAMOND,
}


class UnsupportedPaintType(ValueError):
    """Raised for a paint `type` this converter does not know."""

    def __init__(self, paint_type):
        self.paint_type = paint_type
        super().__init__(f"Unknown paint type: {paint_type}")


def _round(value: float) -> int:
    # Half-up, so 0.5 always rounds away from the lower channel value
    return math.floor(value + 0.5)


def _channels(color: dict) -> tuple:
    return (
        _round(color.get("r", 0) * 255),
        _round(color.get("g", 0) * 255),
        _round(color.get("b", 0) * 255),
    )


def _fold_opacity(color: dict, opacity: float) -> float:
    # Paint opacity and color alpha multiply, then round to 2 decimals
    return _round(opacity * color.get("a", 1) * 100) / 100


def convert_color(color: dict, opacity: float = 1) -> dict:
    """Convert a Figma RGBA color to {"hex": "#RRGGBB", "opacity": a}."""
    r, g, b = _channels(color)
    return {
        "hex": f"#{r:02X}{g:02X}{b:02X}",
        "opacity": _fold_opacity(color, opacity),
    }


def format_rgba_color(color: dict, opacity: float = 1) -> str:
    """Convert a Figma RGBA color to a CSS rgba(r, g, b, a) string."""
    r, g, b = _channels(color)
    a = _fold_opacity(color, opacity)
    return f"rgba({r}, {g}, {b}, {format_number(a)})"


def hex_to_rgba(hex_color: str, opacity: float = 1) -> str:
    """Convert "#RGB" or "#RRGGBB" plus an opacity to rgba(r, g, b, a)."""
    hex_color = hex_color.replace("#", "")
    if len(hex_color) == 3:
        hex_color = "".join(c * 2 for c in hex_color)

    r = int(hex_color[0:2], 16)
    g = int(hex_color[2:4], 16)
    b = int(hex_color[4:6], 16)
    a = min(max(opacity, 0), 1)

    return f"rgba({r}, {g}, {b}, {format_number(a)})"


def _paint_type(raw: dict) -> PaintType:
    try:
        return PaintType(raw.get("type"))
    except ValueError:
        raise UnsupportedPaintType(raw.get("type")) from None


def parse_paint(raw: dict):
    """
    Convert a Figma paint (solid, image or gradient) to a simplified fill.

    Solid paints fold the paint opacity into the color. Gradient stops only
    use each stop's own alpha.
    """
    paint_type = _paint_type(raw)

    if paint_type is PaintType.IMAGE:
        return {
            "type": paint_type.value,
            "imageRef": raw.get("imageRef"),
            "scaleMode": raw.get("scaleMode"),
        }

    if paint_type is PaintType.SOLID:
        converted = convert_color(raw["color"], raw.get("opacity", 1))
        if converted["opacity"] == 1:
            return converted["hex"]
        return hex_to_rgba(converted["hex"], converted["opacity"])

    if paint_type in GRADIENT_TYPES:
        return {
            "type": paint_type.value,
            "gradientHandlePositions": raw.get("gradientHandlePositions"),
            "gradientStops": [
                {"position": stop["position"], "color": convert_color(stop["color"])}
                for stop in raw.get("gradientStops", [])
            ],
        }

    raise UnsupportedPaintType(paint_type.value)
