[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xvutils"
version = "0.1.0"
description = "Small Unix-style text and file tools, a shell command parser, and models of page tables, a heap allocator, ELF headers and virtio rings"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "unix",
    "utilities",
    "grep",
    "wc",
    "shell",
    "parser",
    "page-table",
    "sv39",
    "elf",
    "virtio",
    "allocator",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Operating System",
    "Topic :: Education",
    "Topic :: Utilities",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
xv-cat = "xvutils.textutils:cat_main"
xv-echo = "xvutils.textutils:echo_main"
xv-echo-reversal = "xvutils.textutils:echo_reversal_main"
xv-grep = "xvutils.grep:main"
xv-wc = "xvutils.wc:main"
xv-ls = "xvutils.fileutils:ls_main"
xv-ln = "xvutils.fileutils:ln_main"
xv-mkdir = "xvutils.fileutils:mkdir_main"
xv-rm = "xvutils.fileutils:rm_main"
xv-kill = "xvutils.fileutils:kill_main"
xv-stressfs = "xvutils.stressfs:main"

[tool.hatch.build.targets.wheel]
packages = ["xvutils"]

[tool.hatch.build.targets.sdist]
include = ["xvutils", "tests", "pyproject.toml", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
