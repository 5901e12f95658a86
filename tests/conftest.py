"""Shared fixtures: small raw Figma payloads."""

import pytest


def solid(r, g, b, a=1.0, opacity=None, visible=None):
    paint = {"type": "SOLID", "color": {"r": r, "g": g, "b": b, "a": a}}
    if opacity is not None:
        paint["opacity"] = opacity
    if visible is not None:
        paint["visible"] = visible
    return paint


def frame(node_id, children=None, **extra):
    node = {
        "id": node_id,
        "name": f"Frame {node_id}",
        "type": "FRAME",
        "children": children or [],
    }
    node.update(extra)
    return node


@pytest.fixture
def red_fill():
    return solid(1, 0, 0)


@pytest.fixture
def nested_frames(red_fill):
    """Three frames nested inside each other, all painted the same red."""
    inner = frame("1:3", fills=[red_fill])
    middle = frame("1:2", children=[inner], fills=[red_fill])
    return frame("1:1", children=[middle], fills=[red_fill])


@pytest.fixture
def file_response(nested_frames):
    """Sample GET /v1/files/:key response."""
    return {
        "name": "Landing Page",
        "lastModified": "2024-05-01T10:00:00Z",
        "thumbnailUrl": "https://figma.example.com/thumb.png",
        "document": {
            "id": "0:0",
            "name": "Document",
            "type": "DOCUMENT",
            "children": [nested_frames],
        },
    }


@pytest.fixture
def nodes_response(nested_frames):
    """Sample GET /v1/files/:key/nodes?ids=1:1 response."""
    return {
        "name": "Landing Page",
        "lastModified": "2024-05-01T10:00:00Z",
        "thumbnailUrl": "https://figma.example.com/thumb.png",
        "nodes": {
            "1:1": {"document": nested_frames, "components": {}, "styles": {}},
        },
    }
