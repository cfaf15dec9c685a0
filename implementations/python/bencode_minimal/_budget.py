"""Allocation budget for one decode call.

A few bytes of input can describe a very large tree ("lllll...eeeee", or
thousands of one-byte entries), so input size alone doesn't bound memory.
The budget counts structures instead: one unit per list element and one
per dict entry.  Byte payloads are free since they are borrowed, not
copied.
"""

from __future__ import annotations

from ._errors import ERR_LIMIT_ALLOC, BencodeError


class AllocationBudget:
    """Countdown of allocations a single decode may still perform."""

    __slots__ = ("remaining",)

    def __init__(self, limit: int) -> None:
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise TypeError("max_allocations must be an int")
        if limit < 0:
            raise ValueError("max_allocations must be non-negative")
        self.remaining = limit

    def charge(self, n: int = 1) -> None:
        if n > self.remaining:
            raise BencodeError(ERR_LIMIT_ALLOC, "allocation budget exceeded")
        self.remaining -= n
