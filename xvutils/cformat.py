"""A small formatter understanding %d, %l, %x, %p, %s, %c and %%."""

from __future__ import annotations

import sys
from typing import IO, Any, Iterator

_DIGITS = "0123456789ABCDEF"
_MASK32 = 0xFFFFFFFF
_MASK64 = 0xFFFFFFFFFFFFFFFF


def _format_int(value: int, base: int, signed: bool) -> str:
    value &= _MASK32
    negative = signed and bool(value & 0x80000000)
    x = (1 << 32) - value if negative else value
    digits = []
    while True:
        digits.append(_DIGITS[x % base])
        x //= base
        if x == 0:
            break
    if negative:
        digits.append("-")
    return "".join(reversed(digits))


def _format_string(value: Any) -> str:
    if value is None:
        return "(null)"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("latin-1")
    return str(value)


def _format_char(value: Any) -> str:
    if isinstance(value, str):
        return value[:1]
    return chr(value & 0xFF)


def _next_arg(args: Iterator[Any], fmt: str) -> Any:
    try:
        return next(args)
    except StopIteration:
        raise TypeError(f"not enough arguments for format {fmt!r}") from None


def format_message(fmt: str, *args: Any) -> str:
    """Render ``fmt`` with ``args`` and return the text."""
    pieces = []
    remaining = iter(args)
    pending_percent = False
    for c in fmt:
        if not pending_percent:
            if c == "%":
                pending_percent = True
            else:
                pieces.append(c)
            continue
        pending_percent = False
        if c == "d":
            pieces.append(_format_int(_next_arg(remaining, fmt), 10, True))
        elif c == "l":
            pieces.append(_format_int(_next_arg(remaining, fmt), 10, False))
        elif c == "x":
            pieces.append(_format_int(_next_arg(remaining, fmt), 16, False))
        elif c == "p":
            pieces.append(f"0x{_next_arg(remaining, fmt) & _MASK64:016X}")
        elif c == "s":
            pieces.append(_format_string(_next_arg(remaining, fmt)))
        elif c == "c":
            pieces.append(_format_char(_next_arg(remaining, fmt)))
        elif c == "%":
            pieces.append("%")
        else:
            # Unknown sequence: print it to draw attention.
            pieces.append("%" + c)
    return "".join(pieces)


def fprintf(stream: IO[str], fmt: str, *args: Any) -> None:
    """Write the formatted text to ``stream``."""
    stream.write(format_message(fmt, *args))


def printf(fmt: str, *args: Any) -> None:
    """Write the formatted text to standard output."""
    fprintf(sys.stdout, fmt, *args)