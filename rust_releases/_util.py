"""
Utility functions for `rust-releases`.
"""

from __future__ import annotations

import platform
from typing import NoReturn  # pragma: no cover

# `platform.machine()` spellings that differ from the architecture part of a Rust target triple.
_MACHINE_ALIASES = {
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "aarch64",
    "i386": "i686",
    "i586": "i686",
}


def assert_never(x: NoReturn) -> NoReturn:  # pragma: no cover
    """
    A hint to the typechecker that a branch can never occur.
    """
    assert False, f"unhandled type: {type(x).__name__}"


def host_triple() -> str:
    """
    Return a best-effort Rust target triple for the running interpreter's host.

    Unrecognized operating systems map onto `unknown` parts rather than failing.
    """
    machine = platform.machine().lower() or "unknown"
    arch = _MACHINE_ALIASES.get(machine, machine)
    system = platform.system()

    if system == "Linux":
        return f"{arch}-unknown-linux-gnu"
    elif system == "Darwin":
        return f"{arch}-apple-darwin"
    elif system == "Windows":
        return f"{arch}-pc-windows-msvc"
    elif system == "FreeBSD":
        return f"{arch}-unknown-freebsd"
    return f"{arch}-unknown-unknown"
