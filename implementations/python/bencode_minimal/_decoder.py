"""Bencode decode engine: recursive descent with an allocation budget.

Grammar:

    value       ::= integer | bytestring | list | dict
    integer     ::= 'i' '-'? digits 'e'     no leading zero, no "-0"
    bytestring  ::= length ':' <length raw bytes>
    list        ::= 'l' value* 'e'
    dict        ::= 'd' (bytestring value)* 'e'    keys unique, any order

The decoder reads from a read-only memoryview of the caller's buffer.
Byte-string payloads are sliced out of that view, never copied, so every
ByteString in the result borrows from the input.

Failure contract: decode() returns None for *any* malformed input, budget
exhaustion or excessive nesting.  Inside the engine each failure is a
BencodeError so that one raise unwinds every level of the descent; the
code is logged at DEBUG and then dropped.  No partial tree ever escapes.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from ._budget import AllocationBudget
from ._constants import (
    DIGIT_NINE,
    DIGIT_ZERO,
    INT64_MAX,
    INT64_MIN,
    MAX_DEPTH,
    MAX_INT_DIGITS,
    TOKEN_COLON,
    TOKEN_DICT,
    TOKEN_END,
    TOKEN_INT,
    TOKEN_LIST,
    TOKEN_MINUS,
)
from ._errors import (
    ERR_DUP_KEY,
    ERR_LIMIT_DEPTH,
    ERR_MALFORMED_INT,
    ERR_MALFORMED_LENGTH,
    ERR_TRUNCATED,
    ERR_UNEXPECTED_TOKEN,
    ERR_UNTERMINATED,
    BencodeError,
)
from ._value import KIND_DICT, KIND_INT, KIND_LIST, KIND_STR, ByteString, Value

logger = logging.getLogger(__name__)


def _as_view(buf: Any) -> memoryview:
    """Read-only, flat, unsigned-byte view of any C-contiguous buffer."""
    view = memoryview(buf)
    if not view.readonly:
        view = view.toreadonly()
    if view.format != "B" or view.ndim != 1:
        view = view.cast("B")
    return view


def _is_digit(b: int) -> bool:
    return DIGIT_ZERO <= b <= DIGIT_NINE


def _scan_digits(buf: memoryview, off: int) -> int:
    """Return the offset of the first non-digit at or after off."""
    end = len(buf)
    while off < end and _is_digit(buf[off]):
        off += 1
    return off


# ── Scalars ───────────────────────────────────────────────────

def _read_bytestring(buf: memoryview, off: int) -> Tuple[ByteString, int]:
    """Decode '<len>:<bytes>' at off.  The payload is borrowed from buf."""
    start = off
    off = _scan_digits(buf, off)
    if off >= len(buf):
        raise BencodeError(ERR_TRUNCATED, "truncated string length")
    if buf[off] != TOKEN_COLON:
        raise BencodeError(ERR_MALFORMED_LENGTH, "string length not followed by ':'")
    digits = off - start
    if digits == 0:
        raise BencodeError(ERR_MALFORMED_LENGTH, "missing string length")
    if digits > 1 and buf[start] == DIGIT_ZERO:
        raise BencodeError(ERR_MALFORMED_LENGTH, "leading zero in string length")
    # More digits than len(buf) has means the payload can't possibly fit.
    # Checked before int() so a huge digit run is never converted.
    if digits > len(str(len(buf))):
        raise BencodeError(ERR_TRUNCATED, "string length exceeds input")

    n = int(bytes(buf[start:off]))
    off += 1
    if off + n > len(buf):
        raise BencodeError(ERR_TRUNCATED, "truncated string payload")
    return ByteString.borrow(buf[off:off + n]), off + n


def _read_integer(buf: memoryview, off: int) -> Tuple[Value, int]:
    """Decode 'i<signed decimal>e' at off (buf[off] is already 'i')."""
    off += 1
    negative = off < len(buf) and buf[off] == TOKEN_MINUS
    if negative:
        off += 1

    start = off
    off = _scan_digits(buf, off)
    if off >= len(buf):
        raise BencodeError(ERR_TRUNCATED, "truncated integer")
    if buf[off] != TOKEN_END:
        raise BencodeError(ERR_MALFORMED_INT, "unexpected byte in integer")

    digits = off - start
    if digits == 0:
        raise BencodeError(ERR_MALFORMED_INT, "integer has no digits")
    if buf[start] == DIGIT_ZERO:
        if digits > 1:
            raise BencodeError(ERR_MALFORMED_INT, "leading zero in integer")
        if negative:
            raise BencodeError(ERR_MALFORMED_INT, "negative zero")
    if digits > MAX_INT_DIGITS:
        raise BencodeError(ERR_MALFORMED_INT, "integer outside int64 range")

    n = int(bytes(buf[start:off]))
    if negative:
        n = -n
    if n < INT64_MIN or n > INT64_MAX:
        raise BencodeError(ERR_MALFORMED_INT, "integer outside int64 range")
    return Value(KIND_INT, n), off + 1


# ── Recursive descent ─────────────────────────────────────────

def _decode_one(buf: memoryview, off: int, depth: int,
                budget: AllocationBudget, max_depth: int) -> Tuple[Value, int]:
    """Decode one value at off.  Returns (value, offset just past it).

    Depth counts enclosing containers: the root list/dict sits at depth 1.
    Scalars don't increment depth.
    """
    if off >= len(buf):
        raise BencodeError(ERR_TRUNCATED, "expected a value")
    tok = buf[off]

    if tok == TOKEN_INT:
        return _read_integer(buf, off)

    if _is_digit(tok):
        bs, off = _read_bytestring(buf, off)
        return Value(KIND_STR, bs), off

    if tok == TOKEN_LIST:
        if depth + 1 > max_depth:
            raise BencodeError(ERR_LIMIT_DEPTH, "depth exceeds max_depth")
        off += 1
        items: List[Value] = []
        while True:
            if off >= len(buf):
                raise BencodeError(ERR_UNTERMINATED, "unterminated list")
            if buf[off] == TOKEN_END:
                break
            budget.charge()
            item, off = _decode_one(buf, off, depth + 1, budget, max_depth)
            items.append(item)
        return Value(KIND_LIST, items), off + 1

    if tok == TOKEN_DICT:
        if depth + 1 > max_depth:
            raise BencodeError(ERR_LIMIT_DEPTH, "depth exceeds max_depth")
        off += 1
        entries: Dict[ByteString, Value] = {}
        while True:
            if off >= len(buf):
                raise BencodeError(ERR_UNTERMINATED, "unterminated dict")
            if buf[off] == TOKEN_END:
                break
            if not _is_digit(buf[off]):
                raise BencodeError(ERR_UNEXPECTED_TOKEN, "dict key must be a byte string")
            key, off = _read_bytestring(buf, off)
            # Input key order is free, but a repeated key is never
            # silently overwritten.
            if key in entries:
                raise BencodeError(ERR_DUP_KEY, "duplicate dict key")
            budget.charge()
            val, off = _decode_one(buf, off, depth + 1, budget, max_depth)
            entries[key] = val
        return Value(KIND_DICT, entries), off + 1

    raise BencodeError(ERR_UNEXPECTED_TOKEN, "unexpected byte 0x{:02x}".format(tok))


# ── Public entry points ───────────────────────────────────────

def decode_prefix(buf: Any, max_allocations: int, *,
                  max_depth: int = MAX_DEPTH) -> Optional[Tuple[Value, int]]:
    """Decode the first complete value in buf.

    Returns (value, end) where end is the offset just past the value, or
    None if the input is not a valid bencode value within the limits.
    Callers that want to reject trailing bytes compare end to len(buf).
    """
    budget = AllocationBudget(max_allocations)
    if max_depth < 0:
        raise ValueError("max_depth must be non-negative")
    view = _as_view(buf)

    try:
        return _decode_one(view, 0, 0, budget, max_depth)
    except BencodeError as e:
        logger.debug("bencode: rejected input [%s]: %s", e.code, e)
        return None
    except RecursionError:
        # Only reachable when max_depth was raised past what the
        # interpreter's stack allows.
        logger.debug("bencode: rejected input: recursion limit hit (max_depth=%d)",
                     max_depth)
        return None


def decode(buf: Any, max_allocations: int, *,
           max_depth: int = MAX_DEPTH) -> Optional[Value]:
    """Decode one bencode value from the front of buf.

    ``max_allocations`` caps the list elements plus dict entries the
    decoder may create.  Bytes after the first complete value are ignored.
    Returns None on any failure; the cause is deliberately not reported.

    Byte strings in the result borrow from buf: keep buf alive and
    unmodified while the value is in use, or call ``to_owned()``.
    """
    result = decode_prefix(buf, max_allocations, max_depth=max_depth)
    if result is None:
        return None
    return result[0]
