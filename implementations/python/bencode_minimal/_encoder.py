"""Bencode encode engine.

Encoding is a total function over well-formed Values: it mirrors the
grammar in _decoder and never validates beyond checking that containers
hold Values and that dict keys coerce to byte strings (str keys are
UTF-8 encoded, as in Value.from_dict).  Dict entries are always written in strictly ascending byte
order of their keys, whatever order they were inserted in, so equal
Values always produce identical bytes.
"""

from __future__ import annotations

from ._constants import TOKEN_COLON, TOKEN_DICT, TOKEN_END, TOKEN_INT, TOKEN_LIST
from ._errors import ERR_TYPE, BencodeError
from ._value import KIND_DICT, KIND_INT, KIND_LIST, KIND_STR, ByteString, Value


def _write_bytestring(bs: ByteString, out: bytearray) -> None:
    out += b"%d" % len(bs)
    out.append(TOKEN_COLON)
    # Borrowed strings are read through the view; no intermediate copy.
    out += bs.view


def _write_value(val: Value, out: bytearray) -> None:
    if not isinstance(val, Value):
        raise BencodeError(ERR_TYPE, "cannot encode {}".format(type(val).__name__))

    kind = val.kind
    if kind == KIND_INT:
        # "%d" is already canonical: no leading zeros and 0 has no sign.
        out.append(TOKEN_INT)
        out += b"%d" % val.payload
        out.append(TOKEN_END)
    elif kind == KIND_STR:
        _write_bytestring(val.payload, out)
    elif kind == KIND_LIST:
        out.append(TOKEN_LIST)
        for item in val.payload:
            _write_value(item, out)
        out.append(TOKEN_END)
    elif kind == KIND_DICT:
        out.append(TOKEN_DICT)
        for key, item in val.sorted_items():
            _write_bytestring(key, out)
            _write_value(item, out)
        out.append(TOKEN_END)
    else:
        raise BencodeError(ERR_TYPE, "unknown value kind {!r}".format(kind))


def encode_into(value: Value, buf: bytearray) -> None:
    """Encode value into buf, replacing its contents.

    Reusing one bytearray across calls avoids reallocating the output
    buffer for every message.
    """
    buf.clear()
    _write_value(value, buf)


def encode(value: Value) -> bytes:
    """Encode value to a fresh bytes object in canonical form."""
    out = bytearray()
    _write_value(value, out)
    return bytes(out)
