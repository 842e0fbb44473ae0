"""cat, echo and a reversing echo."""

from __future__ import annotations

import sys
from typing import IO, Optional, Sequence

_CHUNK = 512


def cat(stream: IO, out: IO) -> None:
    """Copy ``stream`` to ``out`` until end of input."""
    while True:
        try:
            chunk = stream.read(_CHUNK)
        except OSError as exc:
            raise OSError("cat: read error") from exc
        if not chunk:
            return
        try:
            written = out.write(chunk)
        except OSError as exc:
            raise OSError("cat: write error") from exc
        if written is not None and written != len(chunk):
            raise OSError("cat: write error")


def echo(args: Sequence[str]) -> str:
    """Join the arguments with spaces and end with a newline; nothing for no arguments."""
    return " ".join(args) + "\n" if args else ""


def reverse_echo(args: Sequence[str]) -> str:
    """Print the arguments last to first, each spelled backwards and followed by a space."""
    return "".join(arg[::-1] + " " for arg in reversed(args)) + "\n"


def cat_main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``cat [file ...]``."""
    args = list(sys.argv[1:] if argv is None else argv)
    out = sys.stdout.buffer
    try:
        if not args:
            cat(sys.stdin.buffer, out)
            return 0
        for name in args:
            try:
                stream = open(name, "rb")
            except OSError:
                sys.stderr.write(f"cat: cannot open {name}\n")
                return 1
            with stream:
                cat(stream, out)
        return 0
    except OSError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    finally:
        out.flush()


def echo_main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``echo [arg ...]``."""
    args = list(sys.argv[1:] if argv is None else argv)
    sys.stdout.write(echo(args))
    return 0


def echo_reversal_main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: reversed echo of the arguments."""
    args = list(sys.argv[1:] if argv is None else argv)
    sys.stdout.write(reverse_echo(args))
    return 0