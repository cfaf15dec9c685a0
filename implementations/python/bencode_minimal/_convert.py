"""Bridge between native Python data and the bencode value model.

Native mapping:

    int             ↔ INTEGER   (bool rejected, int64 range-checked)
    bytes-like/str  → STRING    (str is UTF-8 encoded; comes back as bytes)
    list / tuple    → LIST      (comes back as list)
    dict            → DICT      (str or bytes-like keys; comes back bytes-keyed)

There is no None and no float in bencode; both are rejected rather than
guessed at.  Callers that need them should map them to strings or
integers themselves before conversion.
"""

from __future__ import annotations

from typing import Any, Dict

from ._errors import ERR_TYPE, BencodeError
from ._value import KIND_DICT, KIND_INT, KIND_LIST, KIND_STR, Value


def from_python(obj: Any) -> Value:
    """Build an owned Value tree from native Python data."""
    if isinstance(obj, Value):
        return obj

    if isinstance(obj, dict):
        return Value.from_dict((k, from_python(v)) for k, v in obj.items())

    if isinstance(obj, (list, tuple)):
        return Value.from_list(from_python(item) for item in obj)

    if isinstance(obj, str):
        return Value.from_text(obj)

    if isinstance(obj, (bytes, bytearray, memoryview)):
        return Value.from_bytes(obj)

    # bool before int: bool is an int subclass in Python.
    if isinstance(obj, bool):
        raise BencodeError(ERR_TYPE, "booleans have no bencode representation")

    if isinstance(obj, int):
        return Value.from_int(obj)

    if obj is None:
        raise BencodeError(ERR_TYPE, "None has no bencode representation")

    raise BencodeError(ERR_TYPE, "unsupported type {}".format(type(obj).__name__))


def to_python(value: Value) -> Any:
    """Convert a Value tree to native data, copying every byte string.

    Dict keys come back as bytes, in canonical order.
    """
    kind = value.kind
    if kind == KIND_INT:
        return value.payload
    if kind == KIND_STR:
        return bytes(value.payload)
    if kind == KIND_LIST:
        return [to_python(item) for item in value.payload]
    if kind == KIND_DICT:
        out: Dict[bytes, Any] = {}
        for k, v in value.sorted_items():
            out[bytes(k)] = to_python(v)
        return out
    raise BencodeError(ERR_TYPE, "unknown value kind {!r}".format(kind))
