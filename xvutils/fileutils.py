"""ls, ln, mkdir, rm and kill over the host file system."""

from __future__ import annotations

import os
import signal
import stat as statmod
import sys
from typing import IO, Optional, Sequence

from .cstring import atoi
from .filemodes import FileType

DIRSIZ = 14
_PATH_BUF = 512
_KILL_SIGNAL = getattr(signal, "SIGKILL", signal.SIGTERM)


def fmtname(path: str) -> str:
    """Return the last path component, blank-padded to the directory name width."""
    name = path[path.rfind("/") + 1:]
    if len(name) >= DIRSIZ:
        return name
    return name.ljust(DIRSIZ)


def _file_type(mode: int) -> FileType:
    if statmod.S_ISDIR(mode):
        return FileType.DIR
    if statmod.S_ISREG(mode):
        return FileType.FILE
    return FileType.DEVICE


def _line(path: str, st: os.stat_result) -> str:
    return f"{fmtname(path)} {int(_file_type(st.st_mode))} {st.st_ino} {st.st_size}\n"


def ls(path: str, out: Optional[IO[str]] = None, err: Optional[IO[str]] = None) -> None:
    """List a file, or every entry of a directory including ``.`` and ``..``."""
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    try:
        st = os.stat(path)
    except OSError:
        err.write(f"ls: cannot open {path}\n")
        return
    if _file_type(st.st_mode) != FileType.DIR:
        out.write(_line(path, st))
        return
    if len(path) + 1 + DIRSIZ + 1 > _PATH_BUF:
        out.write("ls: path too long\n")
        return
    try:
        names = sorted(os.listdir(path))
    except OSError:
        err.write(f"ls: cannot open {path}\n")
        return
    for name in [".", ".."] + names:
        entry = f"{path}/{name}"
        try:
            entry_st = os.stat(entry)
        except OSError:
            out.write(f"ls: cannot stat {entry}\n")
            continue
        out.write(_line(entry, entry_st))


def _args(argv: Optional[Sequence[str]]) -> list:
    return list(sys.argv[1:] if argv is None else argv)


def ls_main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``ls [path ...]``."""
    args = _args(argv)
    for path in args or ["."]:
        ls(path)
    return 0


def ln_main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``ln old new``."""
    args = _args(argv)
    if len(args) != 2:
        sys.stderr.write("Usage: ln old new\n")
        return 1
    old, new = args
    try:
        os.link(old, new)
    except OSError:
        sys.stderr.write(f"link {old} {new}: failed\n")
    return 0


def mkdir_main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``mkdir dir ...``; stops at the first failure."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: mkdir files...\n")
        return 1
    for path in args:
        try:
            os.mkdir(path)
        except OSError:
            sys.stderr.write(f"mkdir: {path} failed to create\n")
            break
    return 0


def _unlink(path: str) -> None:
    if os.path.isdir(path) and not os.path.islink(path):
        os.rmdir(path)
    else:
        os.unlink(path)


def rm_main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``rm file ...``; empty directories may be removed too."""
    args = _args(argv)
    if not args:
        sys.stderr.write("Usage: rm files...\n")
        return 1
    for path in args:
        try:
            _unlink(path)
        except OSError:
            sys.stderr.write(f"rm: {path} failed to delete\n")
            break
    return 0


def kill_main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: ``kill pid ...``; failures are ignored."""
    args = _args(argv)
    if not args:
        sys.stderr.write("usage: kill pid...\n")
        return 1
    for arg in args:
        pid = atoi(arg)
        if pid <= 0:
            continue
        try:
            os.kill(pid, _KILL_SIGNAL)
        except (OSError, OverflowError):
            pass
    return 0