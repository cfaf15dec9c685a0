"""Bencode error codes and exception class.

The decoder's public contract is present/absent: every decode failure
collapses to ``None``.  Internally each failure is raised as a
``BencodeError`` so the descent can unwind from any nesting level in one
step; the code survives only as a DEBUG log line.

Construction errors (``ERR_TYPE``, ``ERR_RANGE``, ``ERR_DUP_KEY``) do reach
callers, since building a malformed Value is a programming error.
"""

from __future__ import annotations

# ── Decode-time codes ────────────────────────────────────────
ERR_TRUNCATED: str = "ERR_TRUNCATED"                # input ended mid-token
ERR_MALFORMED_LENGTH: str = "ERR_MALFORMED_LENGTH"  # bad string length prefix
ERR_MALFORMED_INT: str = "ERR_MALFORMED_INT"        # leading zero, -0, no digits
ERR_UNEXPECTED_TOKEN: str = "ERR_UNEXPECTED_TOKEN"  # byte cannot start a value / key
ERR_UNTERMINATED: str = "ERR_UNTERMINATED"          # list or dict missing 'e'
ERR_DUP_KEY: str = "ERR_DUP_KEY"                    # duplicate dict key
ERR_LIMIT_ALLOC: str = "ERR_LIMIT_ALLOC"            # allocation budget exhausted
ERR_LIMIT_DEPTH: str = "ERR_LIMIT_DEPTH"            # nesting exceeds max_depth

# ── Construction-time codes ──────────────────────────────────
ERR_TYPE: str = "ERR_TYPE"    # not representable as a Value
ERR_RANGE: str = "ERR_RANGE"  # integer outside int64


class BencodeError(Exception):
    """Exception for bencode processing errors.

    The `.code` attribute is one of the ERR_* strings above.
    """

    def __init__(self, code: str, msg: str = "") -> None:
        super().__init__(msg or code)
        self.code = code
