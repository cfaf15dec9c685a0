#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Codec invariants (property tests) over random valid value trees.
#
# This runner:
# - generates random Values (dicts/lists/strings/integers) with unique keys
# - checks algebraic invariants of encode/decode
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation

import os, sys, random
from typing import Any, List

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

from bencode_minimal import INT64_MAX, INT64_MIN, Value, decode, decode_prefix, encode

SEED = int(os.environ.get("BENCODE_SEED", "1337"))
TRIALS = int(os.environ.get("BENCODE_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("BENCODE_GEN_MAX_DEPTH", "6"))
MAX_KEYS = int(os.environ.get("BENCODE_GEN_MAX_KEYS", "6"))
MAX_LIST = int(os.environ.get("BENCODE_GEN_MAX_LIST", "6"))
MAX_BYTES = int(os.environ.get("BENCODE_GEN_MAX_BYTES", "32"))

random.seed(SEED)

def rand_bytes() -> bytes:
    # Mostly short ASCII-ish keys so collisions (and dedup) actually happen.
    if random.random() < 0.6:
        n = random.randint(0, 3)
        return bytes(random.choice(b"abcAB:ie0") for _ in range(n))
    return bytes(random.getrandbits(8) for _ in range(random.randint(0, MAX_BYTES)))

def rand_int() -> int:
    r = random.random()
    if r < 0.6:
        return random.randint(-1000, 1000)
    if r < 0.8:
        return random.choice([0, -1, INT64_MIN, INT64_MAX])
    return random.randint(INT64_MIN, INT64_MAX)

def gen_scalar() -> Value:
    return Value.from_int(rand_int()) if random.random() < 0.4 else Value.from_bytes(rand_bytes())

def gen_value(depth: int) -> Value:
    if depth >= MAX_GEN_DEPTH:
        return gen_scalar()
    r = random.random()
    if r < 0.35:
        keys = list(dict.fromkeys(rand_bytes() for _ in range(random.randint(0, MAX_KEYS))))  # de-dup
        random.shuffle(keys)
        return Value.from_dict((k, gen_value(depth + 1)) for k in keys)
    if r < 0.7:
        return Value.from_list(gen_value(depth + 1) for _ in range(random.randint(0, MAX_LIST)))
    return gen_scalar()

def dict_keys_ascending(v: Value) -> bool:
    # Walk the re-decoded tree: storage order of a decoded dict is wire order.
    if v.is_list():
        return all(dict_keys_ascending(x) for x in v.as_list())
    if v.is_dict():
        keys: List[bytes] = [bytes(k) for k in v.as_dict()]
        if any(a >= b for a, b in zip(keys, keys[1:])):
            return False
        return all(dict_keys_ascending(x) for x in v.as_dict().values())
    return True

def fail(msg: str, ctx: Any) -> int:
    print("INVARIANT FAIL:", msg)
    print("CTX:", repr(ctx)[:2000])
    return 1

def main() -> int:
    for t in range(TRIALS):
        v = gen_value(0)
        n = v.allocation_count()

        # (1) Encode stability (encode twice, same bytes)
        b1 = encode(v)
        if b1 != encode(v):
            return fail("encode stability", {"trial": t})

        # (2) Round trip at exactly the structural allocation count
        back = decode(b1, n)
        if back != v:
            return fail("round trip", {"trial": t, "value": v})

        # (3) Budget tightness: one unit short must fail
        if n > 0 and decode(b1, n - 1) is not None:
            return fail("budget tightness", {"trial": t, "count": n})

        # (4) Canonical key order on the wire
        if not dict_keys_ascending(back):
            return fail("canonical key order", {"trial": t, "wire": b1})

        # (5) Re-encoding a decoded (borrowed) tree is byte-identical
        if encode(back) != b1:
            return fail("re-encode identity", {"trial": t})

        # (6) Trailing bytes are ignored and the prefix end is exact
        res = decode_prefix(b1 + b"i0e", n)
        if res is None or res[1] != len(b1) or res[0] != v:
            return fail("prefix framing", {"trial": t})

        # (7) to_owned() survives the buffer
        owned = decode(bytes(bytearray(b1)), n).to_owned()
        if owned != v:
            return fail("to_owned equality", {"trial": t})

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
