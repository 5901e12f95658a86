# global_vars.py
import json
import string

_ID_CHARS = string.digits + string.ascii_uppercase
_ID_LENGTH = 6


def _canonical(value):
    # 100 and 100.0 describe the same style
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, dict):
        return {k: _canonical(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_canonical(v) for v in value]
    return value


def _encode_id(number: int) -> str:
    chars = []
    while number:
        number, rem = divmod(number, len(_ID_CHARS))
        chars.append(_ID_CHARS[rem])
    return "".join(reversed(chars)).rjust(_ID_LENGTH, "0")


class GlobalVars:
    """
    Run-scoped style table.

    Repeated style values are stored once under a generated id such as
    "fill_000001"; nodes keep only the id. Values are matched by structure,
    so two equal dicts or lists built for different nodes share one entry.
    A new table is created for every conversion.
    """

    def __init__(self):
        self.styles = {}
        self._ids_by_value = {}
        self._count = 0

    def __len__(self):
        return len(self.styles)

    def __contains__(self, var_id):
        return var_id in self.styles

    def _new_id(self, prefix: str) -> str:
        self._count += 1
        return f"{prefix}_{_encode_id(self._count)}"

    def find_or_create(self, value, prefix: str = "var") -> str:
        key = json.dumps(_canonical(value), sort_keys=True, separators=(",", ":"))
        var_id = self._ids_by_value.get(key)
        if var_id is not None:
            return var_id

        var_id = self._new_id(prefix)
        self._ids_by_value[key] = var_id
        self.styles[var_id] = value
        return var_id

    def to_dict(self) -> dict:
        return {"styles": dict(self.styles)}
