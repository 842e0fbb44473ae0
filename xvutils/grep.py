"""A small grep supporting only the ^ . * $ operators."""

from __future__ import annotations

import sys
from typing import IO, Optional, Sequence

_BUF_SIZE = 1024


def match(pattern: str, text: str) -> bool:
    """Search for ``pattern`` anywhere in ``text``."""
    if pattern.startswith("^"):
        return match_here(pattern[1:], text)
    # The empty suffix must be tried too.
    return any(match_here(pattern, text[i:]) for i in range(len(text) + 1))


def match_here(pattern: str, text: str) -> bool:
    """Search for ``pattern`` at the beginning of ``text``."""
    if not pattern:
        return True
    if len(pattern) > 1 and pattern[1] == "*":
        return match_star(pattern[0], pattern[2:], text)
    if pattern == "$":
        return text == ""
    if text and (pattern[0] == "." or pattern[0] == text[0]):
        return match_here(pattern[1:], text[1:])
    return False


def match_star(c: str, pattern: str, text: str) -> bool:
    """Search for ``c*`` followed by ``pattern`` at the beginning of ``text``."""
    i = 0
    while True:
        if match_here(pattern, text[i:]):
            return True
        if i < len(text) and (text[i] == c or c == "."):
            i += 1
        else:
            return False


def grep(pattern: str, stream: IO[str], out: IO[str]) -> None:
    """Write every newline-terminated line of ``stream`` that matches ``pattern``."""
    pending = ""
    while True:
        room = _BUF_SIZE - 1 - len(pending)
        if room <= 0:
            break
        chunk = stream.read(room)
        if not chunk:
            break
        pending += chunk
        *lines, pending = pending.split("\n")
        for line in lines:
            if match(pattern, line):
                out.write(line + "\n")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``grep pattern [file ...]``."""
    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        sys.stderr.write("usage: grep pattern [file ...]\n")
        return 1
    pattern, files = args[0], args[1:]
    if not files:
        grep(pattern, sys.stdin, sys.stdout)
        return 0
    for name in files:
        try:
            stream = open(name, encoding="utf-8", errors="surrogateescape", newline="")
        except OSError:
            sys.stdout.write(f"grep: cannot open {name}\n")
            return 1
        with stream:
            grep(pattern, stream, sys.stdout)
    return 0