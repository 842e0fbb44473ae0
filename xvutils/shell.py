"""Parser for the command language of the small shell."""

from __future__ import annotations

from dataclasses import dataclass
from typing import IO, List, Optional, Tuple, Union

from .cstring import gets
from .filemodes import OpenFlag

WHITESPACE = " \t\r\n\v"
SYMBOLS = "<|>&;()"
MAXARGS = 10
_LINE_MAX = 100

_SINGLE_CHAR_TOKENS = "|();&<"


class ShellSyntaxError(ValueError):
    """Raised when a command line cannot be parsed."""


@dataclass(frozen=True)
class Token:
    """One lexical token: its kind, its text and where it starts in the line."""

    kind: str
    text: str
    start: int


@dataclass(frozen=True)
class ExecCmd:
    """Run a program with arguments."""

    argv: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RedirCmd:
    """Run ``cmd`` with descriptor ``fd`` replaced by ``file`` opened with ``mode``."""

    cmd: "Command"
    file: str
    mode: OpenFlag
    fd: int


@dataclass(frozen=True)
class PipeCmd:
    """Connect the output of ``left`` to the input of ``right``."""

    left: "Command"
    right: "Command"


@dataclass(frozen=True)
class ListCmd:
    """Run ``left`` to completion, then ``right``."""

    left: "Command"
    right: "Command"


@dataclass(frozen=True)
class BackCmd:
    """Run ``cmd`` without waiting for it."""

    cmd: "Command"


Command = Union[ExecCmd, RedirCmd, PipeCmd, ListCmd, BackCmd]

_Redirect = Tuple[str, OpenFlag, int]


def _visible(line: str) -> str:
    # Input ends at the first NUL, as a C string would.
    return line.split("\0", 1)[0]


def tokenize(line: str) -> List[Token]:
    """Split a command line into tokens; ``>>`` is one token."""
    line = _visible(line)
    tokens: List[Token] = []
    i, n = 0, len(line)
    while True:
        while i < n and line[i] in WHITESPACE:
            i += 1
        if i >= n:
            return tokens
        start = i
        c = line[i]
        if c in _SINGLE_CHAR_TOKENS:
            kind = c
            i += 1
        elif c == ">":
            i += 1
            if i < n and line[i] == ">":
                i += 1
                kind = ">>"
            else:
                kind = ">"
        else:
            while i < n and line[i] not in WHITESPACE and line[i] not in SYMBOLS:
                i += 1
            kind = "word"
        tokens.append(Token(kind, line[start:i], start))


class _Parser:
    def __init__(self, line: str) -> None:
        self.line = line
        self.tokens = tokenize(line)
        self.pos = 0

    def peek(self, *kinds: str) -> bool:
        return self.pos < len(self.tokens) and self.tokens[self.pos].kind in kinds

    def next(self) -> Optional[Token]:
        if self.pos >= len(self.tokens):
            return None
        token = self.tokens[self.pos]
        self.pos += 1
        return token

    def parse_line(self) -> Command:
        cmd = self.parse_pipe()
        while self.peek("&"):
            self.next()
            cmd = BackCmd(cmd)
        if self.peek(";"):
            self.next()
            cmd = ListCmd(cmd, self.parse_line())
        return cmd

    def parse_pipe(self) -> Command:
        cmd = self.parse_exec()
        if self.peek("|"):
            self.next()
            cmd = PipeCmd(cmd, self.parse_pipe())
        return cmd

    def parse_redirs(self) -> List[_Redirect]:
        redirects: List[_Redirect] = []
        while self.peek("<", ">", ">>"):
            op = self.next()
            target = self.next()
            if target is None or target.kind != "word":
                raise ShellSyntaxError("missing file for redirection")
            if op.kind == "<":
                redirects.append((target.text, OpenFlag.RDONLY, 0))
            elif op.kind == ">":
                redirects.append(
                    (target.text, OpenFlag.WRONLY | OpenFlag.CREATE | OpenFlag.TRUNC, 1)
                )
            else:
                redirects.append((target.text, OpenFlag.WRONLY | OpenFlag.CREATE, 1))
        return redirects

    @staticmethod
    def wrap(cmd: Command, redirects: List[_Redirect]) -> Command:
        for file, mode, fd in redirects:
            cmd = RedirCmd(cmd, file, mode, fd)
        return cmd

    def parse_block(self) -> Command:
        if not self.peek("("):
            raise ShellSyntaxError("parseblock")
        self.next()
        cmd = self.parse_line()
        if not self.peek(")"):
            raise ShellSyntaxError("syntax - missing )")
        self.next()
        return self.wrap(cmd, self.parse_redirs())

    def parse_exec(self) -> Command:
        if self.peek("("):
            return self.parse_block()
        argv: List[str] = []
        redirects = self.parse_redirs()
        while not self.peek("|", ")", "&", ";"):
            token = self.next()
            if token is None:
                break
            if token.kind != "word":
                raise ShellSyntaxError("syntax")
            argv.append(token.text)
            if len(argv) >= MAXARGS:
                raise ShellSyntaxError("too many args")
            redirects += self.parse_redirs()
        return self.wrap(ExecCmd(tuple(argv)), redirects)


def parse_command(line: str) -> Command:
    """Parse a whole command line into a command tree."""
    parser = _Parser(_visible(line))
    cmd = parser.parse_line()
    if parser.pos < len(parser.tokens):
        rest = parser.line[parser.tokens[parser.pos].start:]
        raise ShellSyntaxError(f"leftovers: {rest}")
    return cmd


def read_command(stream: IO, out: IO[str]) -> Optional[str]:
    """Prompt on ``out`` and read one line from ``stream``; ``None`` at end of input."""
    out.write("$ ")
    line = gets(stream, _LINE_MAX)
    return line or None