"""Version strings of the package."""

from __future__ import annotations

import struct

VERSION = "1.0.0"


def _architecture() -> str:
    bits = struct.calcsize("P") * 8
    return "(64-bit)" if bits == 64 else "(32-bit)"


def printable() -> str:
    """Return the version followed by the pointer width of the build."""
    return f"{VERSION} {_architecture()}"


def stable() -> str:
    """Return the stable version number."""
    return VERSION


def revision() -> str:
    """Return the revision string."""
    return VERSION


def with_revision() -> str:
    """Return the stable version joined to the revision with a dot."""
    return stable() + "." + revision()