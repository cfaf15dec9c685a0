"""bencode_minimal — a small, hardened Bencode codec.

Decode untrusted bencode with a bounded allocation budget, and encode
values canonically (dict keys in ascending byte order).

Quick start:
    >>> from bencode_minimal import decode, encode, from_python
    >>> msg = decode(b"d1:q4:ping1:t2:aa1:y1:qe", 16)
    >>> msg.get("q").as_str()
    'ping'
    >>> decode(b"d1:ai1e1:ai2ee", 16) is None     # duplicate key
    True
    >>> encode(from_python({"name": "John", "age": 42}))
    b'd3:agei42e4:name4:Johne'

Decoded byte strings borrow from the input buffer (zero-copy).  Keep the
buffer alive and unmodified while using the result, or call
``Value.to_owned()``.
"""

from __future__ import annotations

from ._budget import AllocationBudget
from ._constants import INT64_MAX, INT64_MIN, MAX_DEPTH
from ._convert import from_python, to_python
from ._decoder import decode, decode_prefix
from ._encoder import encode, encode_into
from ._errors import (
    ERR_DUP_KEY,
    ERR_LIMIT_ALLOC,
    ERR_LIMIT_DEPTH,
    ERR_MALFORMED_INT,
    ERR_MALFORMED_LENGTH,
    ERR_RANGE,
    ERR_TRUNCATED,
    ERR_TYPE,
    ERR_UNEXPECTED_TOKEN,
    ERR_UNTERMINATED,
    BencodeError,
)
from ._value import KIND_DICT, KIND_INT, KIND_LIST, KIND_STR, ByteString, Value

__version__ = "1.0.0"

__all__ = [
    # Codec entry points
    "decode",
    "decode_prefix",
    "encode",
    "encode_into",
    # Value model
    "Value",
    "ByteString",
    "KIND_INT",
    "KIND_STR",
    "KIND_LIST",
    "KIND_DICT",
    "from_python",
    "to_python",
    "AllocationBudget",
    # Limits
    "MAX_DEPTH",
    "INT64_MIN",
    "INT64_MAX",
    # Exception
    "BencodeError",
    # Error codes
    "ERR_TRUNCATED",
    "ERR_MALFORMED_LENGTH",
    "ERR_MALFORMED_INT",
    "ERR_UNEXPECTED_TOKEN",
    "ERR_UNTERMINATED",
    "ERR_DUP_KEY",
    "ERR_LIMIT_ALLOC",
    "ERR_LIMIT_DEPTH",
    "ERR_TYPE",
    "ERR_RANGE",
]
