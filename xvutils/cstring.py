"""String helpers with the semantics of the small user library."""

from __future__ import annotations

from typing import IO, Union

Text = Union[str, bytes, bytearray]


def _as_bytes(value: Text) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8", "surrogateescape")
    return bytes(value)


def atoi(s: Text) -> int:
    """Parse the leading decimal digits of ``s``; no sign or spaces are accepted."""
    n = 0
    for byte in _as_bytes(s):
        if not 0x30 <= byte <= 0x39:
            break
        n = n * 10 + (byte - 0x30)
    return n


def strcmp(a: Text, b: Text) -> int:
    """Compare two NUL-terminated strings; return the difference at the first mismatch."""
    left, right = _as_bytes(a), _as_bytes(b)
    i = 0
    while True:
        p = left[i] if i < len(left) else 0
        q = right[i] if i < len(right) else 0
        if p == 0 or p != q:
            return p - q
        i += 1


def memcmp(a: Text, b: Text, n: int) -> int:
    """Compare the first ``n`` bytes of ``a`` and ``b``."""
    left, right = _as_bytes(a), _as_bytes(b)
    if n < 0 or len(left) < n or len(right) < n:
        raise ValueError(f"memcmp: both operands need at least {n} bytes")
    for p, q in zip(left[:n], right[:n]):
        if p != q:
            return p - q
    return 0


def gets(stream: IO, max_len: int) -> str:
    """Read one line, at most ``max_len - 1`` characters, keeping the end-of-line mark."""
    chars = []
    while len(chars) + 1 < max_len:
        c = stream.read(1)
        if not c:
            break
        if isinstance(c, bytes):
            c = c.decode("latin-1")
        chars.append(c)
        if c in ("\n", "\r"):
            break
    return "".join(chars)