"""Count lines, words and characters."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import IO, Optional, Sequence

_CHUNK = 512
# A NUL byte counts as a separator too.
_SEPARATORS = frozenset(" \r\t\n\v\0")


@dataclass
class Counts:
    """Line, word and character totals for one input."""

    lines: int = 0
    words: int = 0
    chars: int = 0


def count(stream: IO) -> Counts:
    """Count a text or binary stream; in a binary stream every byte is one character."""
    counts = Counts()
    in_word = False
    while True:
        chunk = stream.read(_CHUNK)
        if not chunk:
            break
        if isinstance(chunk, (bytes, bytearray)):
            chunk = bytes(chunk).decode("latin-1")
        for c in chunk:
            counts.chars += 1
            if c == "\n":
                counts.lines += 1
            if c in _SEPARATORS:
                in_word = False
            elif not in_word:
                counts.words += 1
                in_word = True
    return counts


def wc(stream: IO, name: str, out: IO[str]) -> Counts:
    """Count ``stream`` and write one summary line for it."""
    counts = count(stream)
    out.write(f"{counts.lines} {counts.words} {counts.chars} {name}\n")
    return counts


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``wc [file ...]``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        try:
            wc(sys.stdin.buffer, "", sys.stdout)
        except OSError:
            sys.stdout.write("wc: read error\n")
            return 1
        return 0
    for name in args:
        try:
            stream = open(name, "rb")
        except OSError:
            sys.stdout.write(f"wc: cannot open {name}\n")
            return 1
        with stream:
            try:
                wc(stream, name, sys.stdout)
            except OSError:
                sys.stdout.write("wc: read error\n")
                return 1
    return 0