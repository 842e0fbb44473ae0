# xvutils

A compact set of Unix-style command-line tools together with small, readable
models of the data structures a teaching kernel works with: Sv39 page tables,
a free-list heap allocator, ELF headers and virtio block-device rings.
Pure Python, no dependencies.

## Commands

| Command            | Does                                                                  |
|--------------------|-----------------------------------------------------------------------|
| `xv-cat`           | copy files (or standard input) to standard output                     |
| `xv-echo`          | print its arguments separated by spaces                               |
| `xv-echo-reversal` | print the arguments last to first, each spelled backwards            |
| `xv-grep`          | print lines matching a pattern that uses only `^ . * $`               |
| `xv-wc`            | print line, word and byte counts and the file name                    |
| `xv-ls`            | list a file, or a directory's entries (with `.` and `..`), as name, type (1 dir, 2 file, 3 other), inode number and size |
| `xv-ln`            | make a hard link: `xv-ln old new`                                     |
| `xv-mkdir`         | create directories, stopping at the first failure                     |
| `xv-rm`            | remove files or empty directories, stopping at the first failure      |
| `xv-kill`          | send a kill signal to each process id given; failures are ignored     |
| `xv-stressfs`      | five concurrent workers each write and read back `stressfs0`…`stressfs4` in the current directory |

## Library modules

- `xvutils.shell`: `tokenize`, `parse_command` and `read_command` for a small
  command language with pipes `|`, lists `;`, background `&`, grouping `( )`
  and redirections `<`, `>`, `>>`. `parse_command` returns a tree of
  `ExecCmd`, `RedirCmd`, `PipeCmd`, `ListCmd` and `BackCmd` and raises
  `ShellSyntaxError` on bad input (including more than nine arguments).
- `xvutils.grep`: `match`, `match_here`, `match_star` and `grep`.
- `xvutils.wc`: `count` returns a `Counts` (lines, words, chars) for a text or
  binary stream; `wc` also writes the summary line.
- `xvutils.textutils`: `cat`, `echo` and `reverse_echo`.
- `xvutils.fileutils`: `fmtname` and `ls`.
- `xvutils.cformat`: `format_message`, `printf` and `fprintf` with the
  `%d %l %x %p %s %c %%` directives (32-bit integers, 16-digit pointers).
- `xvutils.cstring`: `atoi`, `strcmp`, `memcmp` and `gets` with C semantics.
- `xvutils.rand`: the Park–Miller generator (`do_rand`, `ParkMiller`).
- `xvutils.umalloc`: a first-fit, coalescing free-list `Allocator` over a
  simulated heap, with `malloc` and `free` and an optional size limit.
- `xvutils.vm`: a three-level Sv39 `PageTable` over a simulated
  `PhysicalMemory`: `walk`, `walkaddr`, `mappages`, `unmap`, `load_first`,
  `grow`, `shrink`, `free`, `copy_to`, `clear_user`, `copyout`, `copyin`
  and `copyinstr`; `kvmmake` builds a direct-mapped kernel table. Errors are
  raised as `VmPanic`, `OutOfMemory` and `BadAddress`.
- `xvutils.elf`: `ElfHeader`, `ProgramHeader`, `ProgFlag` and
  `read_program_headers`; malformed input raises `ElfFormatError`.
- `xvutils.virtio`: MMIO register offsets and `pack`/`unpack` for
  `VirtqDesc`, `VirtqAvail`, `VirtqUsedElem`, `VirtqUsed` and `VirtioBlkReq`.
- `xvutils.layout`: the board's physical memory map, with helpers such as
  `clint_mtimecmp`, the `plic_*` register functions and `kstack`.
- `xvutils.filemodes`: `OpenFlag`, `FileType` and the packed `Stat` record.

## Install

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Examples

```
$ xv-echo hello world
hello world
$ xv-echo-reversal abc def
fed cba
$ printf 'one two\nthree\n' | xv-wc
2 3 14
$ xv-grep '^th' notes.txt
```

From Python:

```python
from xvutils.grep import match
from xvutils.shell import parse_command

match("a.c$", "xxabc")          # True
cmd = parse_command("cat < in | grep x > out ; echo done &")
```

```python
from xvutils.vm import PhysicalMemory, PageTable, PteFlag

memory = PhysicalMemory()
table = PageTable(memory)
size = table.grow(0, 8192, PteFlag.W)
table.copyout(100, b"hello\0")
table.copyinstr(100, 64)        # b"hello"
```

## What it does not do

- There is no interactive shell: `xvutils.shell` parses command lines into
  trees and reads a prompted line, but runs nothing.
- The memory, ELF and virtio modules are models for study and testing; they
  do not load programs, drive devices or boot anything.
- There is no file-system image builder and no system-call stress runner.