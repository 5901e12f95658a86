# node_utils.py


def is_visible(element: dict) -> bool:
    """Nodes, paints and effects without a `visible` flag are visible."""
    visible = element.get("visible")
    return True if visible is None else visible


def format_number(value) -> str:
    """Render a number the way it reads in CSS: 1.0 -> "1", 0.5 -> "0.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _is_empty(value) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, dict)) and len(value) == 0:
        return True
    return False


def remove_empty_keys(value):
    """
    Drop keys holding None, empty lists or empty dicts, recursively.

    List elements are cleaned but never removed. Falsy primitives
    (0, False, "") are kept.
    """
    if isinstance(value, list):
        return [remove_empty_keys(item) for item in value]

    if isinstance(value, dict):
        result = {}
        for key, item in value.items():
            cleaned = remove_empty_keys(item)
            if not _is_empty(cleaned):
                result[key] = cleaned
        return result

    return value
