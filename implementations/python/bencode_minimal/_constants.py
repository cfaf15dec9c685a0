"""Bencode constants: wire tokens, integer range, and default decode limits."""

from __future__ import annotations

# ── Wire tokens (single ASCII byte each) ─────────────────────
# Indexing a memoryview yields ints, so tokens are kept as ints too.
TOKEN_INT: int = ord("i")
TOKEN_LIST: int = ord("l")
TOKEN_DICT: int = ord("d")
TOKEN_END: int = ord("e")
TOKEN_COLON: int = ord(":")
TOKEN_MINUS: int = ord("-")
DIGIT_ZERO: int = ord("0")
DIGIT_NINE: int = ord("9")

# ── Signed 64-bit integer range ──────────────────────────────
# Python ints are arbitrary-precision, so we must explicitly range-check.
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# Longest magnitude that can still fit in int64 ("9223372036854775808").
# Anything longer is rejected before int() is ever called on it.
MAX_INT_DIGITS: int = 19

# ── Decode limits ────────────────────────────────────────────
# Each nesting level costs one Python frame, so the default stays well
# below sys.getrecursionlimit() (1000 on CPython).
MAX_DEPTH: int = 256
