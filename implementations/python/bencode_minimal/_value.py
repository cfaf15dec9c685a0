"""Bencode value model.

A ``Value`` is a closed tagged union over four kinds:

    KIND_INT   signed 64-bit integer
    KIND_STR   byte string (``ByteString``), not necessarily text
    KIND_LIST  ordered list of Values
    KIND_DICT  mapping of ByteString keys to Values, unique keys

Dispatch is by ``value.kind``; there are no per-kind subclasses because the
format fixes the set of kinds once and for all.

Byte strings are either *borrowed* or *owned*.  The decoder hands out
borrowed strings: read-only memoryview slices of the caller's input buffer,
so a 1 MiB payload costs no copy.  A borrowed string is only meaningful
while that buffer is alive and unmodified.  Strings built by application
code own their bytes.  Both behave identically for comparison, hashing,
``len()`` and ``bytes()``; ``to_owned()`` detaches a tree from its input.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ._constants import INT64_MAX, INT64_MIN, MAX_DEPTH
from ._errors import ERR_DUP_KEY, ERR_RANGE, ERR_TYPE, BencodeError

KIND_INT: str = "int"
KIND_STR: str = "str"
KIND_LIST: str = "list"
KIND_DICT: str = "dict"

BytesLike = Union[bytes, bytearray, memoryview]
KeyLike = Union[str, bytes, bytearray, memoryview, "ByteString"]


class ByteString:
    """A byte string that either borrows from an input buffer or owns its bytes."""

    __slots__ = ("_data",)

    def __init__(self, data: Union[BytesLike, "ByteString"] = b"") -> None:
        if isinstance(data, ByteString):
            data = data._data
        if isinstance(data, bytes):
            # Immutable, nothing to copy.
            self._data: Union[bytes, memoryview] = data
        elif isinstance(data, (bytearray, memoryview)):
            self._data = bytes(data)
        else:
            raise BencodeError(ERR_TYPE,
                               "byte string needs bytes-like data, got {}".format(
                                   type(data).__name__))

    @classmethod
    def borrow(cls, view: memoryview) -> "ByteString":
        """Wrap a memoryview without copying.

        The view is made read-only; the caller must keep the underlying
        buffer alive and unchanged for as long as the result is used.
        """
        if not view.readonly:
            view = view.toreadonly()
        if view.format != "B" or view.ndim != 1:
            view = view.cast("B")
        bs = cls.__new__(cls)
        bs._data = view
        return bs

    @classmethod
    def from_text(cls, text: str) -> "ByteString":
        return cls(text.encode("utf-8"))

    @property
    def is_borrowed(self) -> bool:
        return isinstance(self._data, memoryview)

    @property
    def view(self) -> memoryview:
        """Read-only view of the bytes (no copy in either representation)."""
        return memoryview(self._data)

    def text(self) -> Optional[str]:
        """Interpret the bytes as UTF-8; None if they aren't valid UTF-8."""
        try:
            return bytes(self._data).decode("utf-8")
        except UnicodeDecodeError:
            return None

    def to_owned(self) -> "ByteString":
        if self.is_borrowed:
            return ByteString(bytes(self._data))
        return self

    def __bytes__(self) -> bytes:
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ByteString):
            return self._data == other._data
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self._data == other
        return NotImplemented

    def __lt__(self, other: "ByteString") -> bool:
        if not isinstance(other, ByteString):
            return NotImplemented
        return bytes(self._data) < bytes(other._data)

    # Must equal hash() of the equivalent bytes so dict lookups accept
    # plain b"key".  memoryview's own hash can't be used: it refuses views
    # over unhashable exporters such as bytearray.
    def __hash__(self) -> int:
        return hash(bytes(self._data))

    def __repr__(self) -> str:
        return "ByteString({!r})".format(bytes(self._data))


def coerce_key(key: KeyLike) -> ByteString:
    """Turn a str / bytes-like / ByteString into a ByteString dict key."""
    if isinstance(key, ByteString):
        return key
    if isinstance(key, str):
        return ByteString.from_text(key)
    if isinstance(key, (bytes, bytearray, memoryview)):
        return ByteString(key)
    raise BencodeError(ERR_TYPE,
                       "dict key must be str or bytes-like, got {}".format(type(key).__name__))


def _entry_sort_key(entry: Tuple[ByteString, "Value"]) -> bytes:
    # bytes ordering is unsigned memcmp with the shorter prefix first.
    return bytes(entry[0])


def _canonical_entries(entries: Dict[Any, "Value"]) -> List[Tuple[ByteString, "Value"]]:
    """Entries with ByteString keys in ascending byte order.

    A dict reached through ``as_dict()`` may have been given plain str or
    bytes keys; they are coerced here.  "k" and b"k" can sit side by side
    in the payload but are one bencode key, so that raises ERR_DUP_KEY.
    """
    out = sorted(((coerce_key(k), v) for k, v in entries.items()), key=_entry_sort_key)
    for prev, cur in zip(out, out[1:]):
        if prev[0] == cur[0]:
            raise BencodeError(ERR_DUP_KEY, "duplicate key {!r}".format(bytes(cur[0])))
    return out


class Value:
    """One bencode value: ``kind`` is a KIND_* tag, ``payload`` its data.

    Payload types by kind: ``int``, ``ByteString``, ``list`` of Value,
    ``dict`` of ByteString → Value.  Use the ``from_*`` constructors in
    application code; they validate what the decoder guarantees by
    construction.
    """

    __slots__ = ("kind", "payload")

    def __init__(self, kind: str, payload: Any) -> None:
        self.kind = kind
        self.payload = payload

    # ── Constructors ─────────────────────────────────────────

    @classmethod
    def from_int(cls, n: int) -> "Value":
        # bool is an int subclass; True is not a bencode integer.
        if isinstance(n, bool) or not isinstance(n, int):
            raise BencodeError(ERR_TYPE,
                               "integer required, got {}".format(type(n).__name__))
        if n < INT64_MIN or n > INT64_MAX:
            raise BencodeError(ERR_RANGE, "integer {} outside int64 range".format(n))
        return cls(KIND_INT, n)

    @classmethod
    def from_bytes(cls, data: Union[BytesLike, ByteString]) -> "Value":
        if isinstance(data, ByteString):
            return cls(KIND_STR, data)
        return cls(KIND_STR, ByteString(data))

    @classmethod
    def from_text(cls, text: str) -> "Value":
        if not isinstance(text, str):
            raise BencodeError(ERR_TYPE, "text required, got {}".format(type(text).__name__))
        return cls(KIND_STR, ByteString.from_text(text))

    @classmethod
    def from_list(cls, items: Iterable["Value"] = ()) -> "Value":
        out = list(items)
        for item in out:
            if not isinstance(item, Value):
                raise BencodeError(ERR_TYPE,
                                   "list item must be a Value, got {}".format(
                                       type(item).__name__))
        return cls(KIND_LIST, out)

    @classmethod
    def from_dict(cls, pairs: Any = ()) -> "Value":
        """Build a dict from a mapping or an iterable of (key, Value) pairs.

        Keys that collide after conversion to bytes (``"a"`` and ``b"a"``)
        raise ERR_DUP_KEY instead of silently overwriting.
        """
        if hasattr(pairs, "items"):
            pairs = pairs.items()
        out: Dict[ByteString, Value] = {}
        for k, v in pairs:
            key = coerce_key(k)
            if not isinstance(v, Value):
                raise BencodeError(ERR_TYPE,
                                   "dict value must be a Value, got {}".format(
                                       type(v).__name__))
            if key in out:
                raise BencodeError(ERR_DUP_KEY, "duplicate key {!r}".format(bytes(key)))
            out[key] = v
        return cls(KIND_DICT, out)

    # ── Kind predicates ──────────────────────────────────────

    def is_int(self) -> bool:
        return self.kind == KIND_INT

    def is_str(self) -> bool:
        return self.kind == KIND_STR

    def is_list(self) -> bool:
        return self.kind == KIND_LIST

    def is_dict(self) -> bool:
        return self.kind == KIND_DICT

    # ── Accessors ────────────────────────────────────────────
    # Each returns None on a kind mismatch rather than raising.

    def as_int(self) -> Optional[int]:
        return self.payload if self.kind == KIND_INT else None

    def as_bytestring(self) -> Optional[ByteString]:
        return self.payload if self.kind == KIND_STR else None

    def as_bytes(self, length: Optional[int] = None) -> Optional[bytes]:
        """Owned copy of a byte string's contents.

        With ``length``, also None unless the string is exactly that long
        (a 20-byte node id, a 4-byte IPv4 address).
        """
        if self.kind != KIND_STR:
            return None
        if length is not None and len(self.payload) != length:
            return None
        return bytes(self.payload)

    def as_str(self) -> Optional[str]:
        """UTF-8 text of a byte string; None if not a string or not UTF-8."""
        return self.payload.text() if self.kind == KIND_STR else None

    def as_list(self) -> Optional[List["Value"]]:
        return self.payload if self.kind == KIND_LIST else None

    def as_pair(self) -> Optional[Tuple["Value", "Value"]]:
        """First two elements of a list; None if not a list or shorter than two."""
        if self.kind != KIND_LIST or len(self.payload) < 2:
            return None
        return self.payload[0], self.payload[1]

    def as_dict(self) -> Optional[Dict[ByteString, "Value"]]:
        return self.payload if self.kind == KIND_DICT else None

    def get(self, key: KeyLike) -> Optional["Value"]:
        """Look up a dict entry; None if this isn't a dict or the key is absent."""
        if self.kind != KIND_DICT:
            return None
        return self.payload.get(coerce_key(key))

    def items(self) -> Optional[Iterator[Tuple[ByteString, "Value"]]]:
        """Dict entries in storage order (not meaningful; see sorted_items)."""
        if self.kind != KIND_DICT:
            return None
        return iter(self.payload.items())

    def sorted_items(self) -> Optional[List[Tuple[ByteString, "Value"]]]:
        """Dict entries in canonical (ascending byte) key order.

        Keys are always ByteStrings here, even ones inserted as str or bytes.
        """
        if self.kind != KIND_DICT:
            return None
        return _canonical_entries(self.payload)

    # ── Whole-tree operations ────────────────────────────────

    def to_owned(self) -> "Value":
        """Deep copy in which every borrowed byte string owns its bytes.

        Use this when a decoded value must outlive its input buffer.
        """
        if self.kind == KIND_INT:
            return Value(KIND_INT, self.payload)
        if self.kind == KIND_STR:
            return Value(KIND_STR, self.payload.to_owned())
        if self.kind == KIND_LIST:
            return Value(KIND_LIST, [item.to_owned() for item in self.payload])
        entries = _canonical_entries(self.payload)
        return Value(KIND_DICT, {k.to_owned(): v.to_owned() for k, v in entries})

    def allocation_count(self) -> int:
        """Smallest ``max_allocations`` that decodes ``self.encode()``.

        One unit per list element and per dict entry, at every level.
        """
        if self.kind == KIND_LIST:
            return len(self.payload) + sum(item.allocation_count() for item in self.payload)
        if self.kind == KIND_DICT:
            return len(self.payload) + sum(v.allocation_count()
                                           for v in self.payload.values())
        return 0

    def encode(self) -> bytes:
        from ._encoder import encode
        return encode(self)

    def encode_into(self, buf: bytearray) -> None:
        from ._encoder import encode_into
        encode_into(self, buf)

    @staticmethod
    def decode(buf: Any, max_allocations: int, *,
               max_depth: int = MAX_DEPTH) -> Optional["Value"]:
        from ._decoder import decode
        return decode(buf, max_allocations, max_depth=max_depth)

    # ── Dunder ───────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self.kind == other.kind and self.payload == other.payload

    # Lists and dicts are mutable in place.
    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.kind == KIND_INT:
            return str(self.payload)
        if self.kind == KIND_STR:
            return _repr_bytes(self.payload)
        if self.kind == KIND_LIST:
            return "[" + ", ".join(repr(item) for item in self.payload) + "]"
        return "{" + ", ".join("{}: {!r}".format(_repr_bytes(k), v)
                               for k, v in self.sorted_items()) + "}"


def _repr_bytes(bs: ByteString) -> str:
    # Text when it decodes, otherwise lowercase hex.
    text = bs.text()
    if text is not None:
        return repr(text)
    return bytes(bs).hex()
