#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Hostile-input fuzzing of the decoder.
#
# Generates three fuzz categories:
#   A) random VALID encodings with single-byte mutations
#   B) random truncations and splices of valid encodings
#   C) random token soup (bytes drawn from the bencode alphabet)
#
# For every input the decoder must return None or a Value; it must never
# raise.  Any accepted Value must round-trip through encode/decode.
# Any violation prints a minimal repro payload and exits non-zero.

import os, sys, base64, random
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, os.path.join(ROOT, "implementations", "python"))

from bencode_minimal import Value, decode, encode, from_python

SEED = int(os.environ.get("BENCODE_SEED", "4242"))
ROUNDS = int(os.environ.get("BENCODE_FUZZ_ROUNDS", "5000"))
BUDGET = int(os.environ.get("BENCODE_FUZZ_BUDGET", "64"))

random.seed(SEED)

ALPHABET = b"ilde:-0123456789abc"

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def mismatch(label: str, data: bytes, ctx: Dict[str, Any]) -> None:
    print("FAIL:", label)
    print("INPUT_B64:", b64(data))
    print("CTX:", repr(ctx)[:2000])
    raise SystemExit(1)

def seed_value() -> Any:
    pool = [0, -7, 42, 2**63 - 1, -(2**63), b"", b"spam", b"\x00\xff", "key"]
    r = random.random()
    if r < 0.3:
        return random.choice(pool)
    if r < 0.6:
        return [seed_value() for _ in range(random.randint(0, 4))]
    return {random.choice(["a", "b", "id", "q", "zz"]): seed_value() for _ in range(random.randint(0, 4))}

def mutate(data: bytes) -> bytes:
    b = bytearray(data)
    if not b:
        return bytes([random.choice(ALPHABET)])
    op = random.random()
    i = random.randrange(len(b))
    if op < 0.4:
        b[i] = random.choice(ALPHABET)
    elif op < 0.6:
        del b[i]
    elif op < 0.8:
        b.insert(i, random.choice(ALPHABET))
    else:
        b[i] = random.getrandbits(8)
    return bytes(b)

def check(data: bytes, ctx: Dict[str, Any]) -> None:
    try:
        v = decode(data, BUDGET)
    except Exception as e:  # the decoder's contract is None, never an exception
        mismatch("decoder raised {}: {}".format(type(e).__name__, e), data, ctx)
        return
    if v is None:
        return
    if not isinstance(v, Value):
        mismatch("decoder returned {}".format(type(v).__name__), data, ctx)
    wire = encode(v)
    if decode(wire, v.allocation_count()) != v:
        mismatch("accepted value does not round-trip", data, ctx)

def main() -> int:
    accepted = 0
    for r in range(ROUNDS):
        base = encode(from_python(seed_value()))

        # A) single-byte mutations
        m = mutate(base)
        check(m, {"round": r, "cat": "A"})

        # B) truncation / splice
        cut = random.randint(0, len(base))
        check(base[:cut], {"round": r, "cat": "B-trunc"})
        other = encode(from_python(seed_value()))
        check(base[:cut] + other, {"round": r, "cat": "B-splice"})

        # C) token soup
        soup = bytes(random.choice(ALPHABET) for _ in range(random.randint(0, 24)))
        check(soup, {"round": r, "cat": "C"})

        if decode(m, BUDGET) is not None:
            accepted += 1

    print(f"OK: fuzz passed for ROUNDS={ROUNDS} seed={SEED} (mutants accepted: {accepted})")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
