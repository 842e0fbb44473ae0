"""Unix-style text and file tools, a shell command parser, and models of page tables, a heap allocator, ELF headers and virtio rings."""

__version__ = "0.1.0"