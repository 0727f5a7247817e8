"""Character-level helpers shared by the parser and the printers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Encoding(Enum):
    """How the bytes of a document are interpreted."""

    UNKNOWN = 0
    UTF8 = 1
    LEGACY = 2


DEFAULT_ENCODING = Encoding.UNKNOWN

# The predefined entities, in the order the encoder looks them up.
ENTITIES = (
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&apos;", "'"),
)

_ESCAPES = {char: entity for entity, char in ENTITIES}
_WHITESPACE = frozenset(" \t\n\v\f\r")

_condense_whitespace = True


@dataclass
class Cursor:
    """A 0-based position in the source text; -1 means unknown."""

    row: int = -1
    col: int = -1


def set_condense_whitespace(condense: bool) -> None:
    """Choose whether runs of white space in text are condensed to one space."""
    global _condense_whitespace
    _condense_whitespace = bool(condense)


def is_whitespace_condensed() -> bool:
    """Return the current white-space setting."""
    return _condense_whitespace


def is_whitespace(char) -> bool:
    """Tell whether a character (or character code) is XML white space."""
    if isinstance(char, int):
        if char < 0 or char >= 256:
            return False
        char = chr(char)
    return len(char) == 1 and char in _WHITESPACE


def encode_string(text: str) -> str:
    """Replace markup characters and control characters with entities.

    Hexadecimal character references already in the text are kept.
    """
    out = []
    i = 0
    n = len(text)
    while i < n:
        c = text[i]
        if c == "&" and i < n - 2 and text[i + 1] == "#" and text[i + 2] == "x":
            while i < n - 1:
                out.append(text[i])
                i += 1
                if text[i] == ";":
                    break
            continue
        escaped = _ESCAPES.get(c)
        if escaped is not None:
            out.append(escaped)
        elif ord(c) < 32:
            out.append(f"&#x{ord(c):02X};")
        else:
            out.append(c)
        i += 1
    return "".join(out)


def utf8_sequence_length(lead: int) -> int:
    """Return the byte count of a UTF-8 sequence starting with ``lead``.

    Invalid lead bytes count as one byte so the data passes through.
    """
    if not 0 <= lead <= 0xFF:
        raise ValueError(f"not a byte value: {lead}")
    if 0xC2 <= lead <= 0xDF:
        return 2
    if 0xE0 <= lead <= 0xEF:
        return 3
    if 0xF0 <= lead <= 0xF4:
        return 4
    return 1


_FIRST_BYTE_MARK = (0x00, 0x00, 0xC0, 0xE0, 0xF0)


def utf32_to_utf8(code_point: int) -> bytes:
    """Encode a code point as UTF-8; values from 0x200000 up give b""."""
    if code_point < 0:
        raise ValueError(f"negative code point: {code_point}")
    if code_point < 0x80:
        length = 1
    elif code_point < 0x800:
        length = 2
    elif code_point < 0x10000:
        length = 3
    elif code_point < 0x200000:
        length = 4
    else:
        return b""

    tail = []
    for _ in range(length - 1):
        tail.append((code_point | 0x80) & 0xBF)
        code_point >>= 6
    lead = (code_point | _FIRST_BYTE_MARK[length]) & 0xFF
    return bytes([lead, *reversed(tail)])