"""Several workers writing and reading their own files at the same time."""

from __future__ import annotations

import os
import sys
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

_BLOCK = 512
_BLOCKS = 20
_WORKERS = 5

_output_lock = threading.Lock()


def _say(out: IO[str], text: str) -> None:
    with _output_lock:
        out.write(text)


def stress_one(directory: Union[str, os.PathLike], index: int, out: IO[str]) -> Path:
    """Write and then read back twenty blocks of ``a`` in file ``stressfs<index>``."""
    path = Path(directory) / f"stressfs{chr(ord('0') + index)}"
    _say(out, f"write {index}\n")
    data = b"a" * _BLOCK
    fd = os.open(path, os.O_CREAT | os.O_RDWR, 0o666)
    with os.fdopen(fd, "r+b") as f:
        for _ in range(_BLOCKS):
            f.write(data)
    _say(out, "read\n")
    with open(path, "rb") as f:
        for _ in range(_BLOCKS):
            f.read(_BLOCK)
    return path


def run(directory: Union[str, os.PathLike], out: IO[str]) -> List[Path]:
    """Run all workers concurrently in ``directory``; return the files written."""
    _say(out, "stressfs starting\n")
    with ThreadPoolExecutor(max_workers=_WORKERS) as pool:
        return list(pool.map(lambda i: stress_one(directory, i, out), range(_WORKERS)))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Command entry: run in the current directory; arguments are ignored."""
    run(".", sys.stdout)
    return 0