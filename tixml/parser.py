"""Recursive-descent parser that builds a node tree from XML text.

The parser fills a document node. Besides being a ``Node`` whose type is
``NodeType.DOCUMENT``, the document must offer ``clear_error()`` and
``set_error(code, cursor)``; its ``tab_size`` (default 4, 0 turns row and
column tracking off) is read, and ``use_microsoft_bom`` is set to True
when the text starts with a byte order mark.
"""

from __future__ import annotations

import string
from typing import Optional

from .errors import ErrorCode, XmlError
from .nodes import Attribute, Comment, Declaration, Element, Node, Text, Unknown
from .text import (
    DEFAULT_ENCODING,
    ENTITIES,
    Cursor,
    Encoding,
    is_whitespace,
    is_whitespace_condensed,
)

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)
_ASCII_LETTERS = frozenset(string.ascii_letters)
_ASCII_ALNUM = frozenset(string.ascii_letters + string.digits)
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_DEC_DIGITS = frozenset("0123456789")
_NAME_EXTRA = frozenset("_-.:")
# Byte order mark and the two non-characters that UTF-8 mode skips.
_ZERO_WIDTH = frozenset("\ufeff\ufffe\uffff")

_XML_HEADER = "<?xml"
_COMMENT_START = "<!--"
_COMMENT_END = "-->"
_CDATA_START = "<![CDATA["
_CDATA_END = "]]>"
_DTD_START = "<!"


class _Halt(Exception):
    """Unwinds the parse; any error has been recorded before it is raised."""


def _is_alpha(char: str) -> bool:
    if ord(char) < 127:
        return char in _ASCII_LETTERS
    return True


def _is_alnum(char: str) -> bool:
    if ord(char) < 127:
        return char in _ASCII_ALNUM
    return True


class _Parser:
    def __init__(self, document: Node, text: str, encoding: Encoding) -> None:
        self.document = document
        self.s = text
        self.n = len(text)
        self.encoding = encoding
        self.tab_size = getattr(document, "tab_size", 4)
        self.cursor = Cursor(0, 0)
        self.stamp_at = 0
        self.error: Optional[XmlError] = None

    # -- bookkeeping -----------------------------------------------------

    def stamp(self, now: int) -> Cursor:
        """Advance the row/column cursor up to ``now`` and return a copy."""
        if self.tab_size >= 1:
            s, n, tab = self.s, self.n, self.tab_size
            utf8 = self.encoding is Encoding.UTF8
            row, col = self.cursor.row, self.cursor.col
            p = self.stamp_at
            while p < now and p < n:
                c = s[p]
                if c == "\r":
                    row += 1
                    col = 0
                    p += 1
                    if p < n and s[p] == "\n":
                        p += 1
                elif c == "\n":
                    row += 1
                    col = 0
                    p += 1
                    if p < n and s[p] == "\r":
                        p += 1
                elif c == "\t":
                    p += 1
                    col = (col // tab + 1) * tab
                elif utf8 and c in _ZERO_WIDTH:
                    p += 1
                else:
                    p += 1
                    col += 1
            self.cursor = Cursor(row, col)
            self.stamp_at = p
        return Cursor(self.cursor.row, self.cursor.col)

    def record(self, code: ErrorCode, p: Optional[int] = None) -> None:
        """Record an error unless one was recorded already."""
        if self.error is not None:
            return
        cursor = self.stamp(p) if p is not None else Cursor()
        self.error = XmlError(code, cursor.row + 1, cursor.col + 1)
        self.document.set_error(code, cursor)

    def fail(self, code: ErrorCode, p: Optional[int] = None):
        self.record(code, p)
        raise _Halt()

    # -- character level -------------------------------------------------

    def skip_ws(self, p: Optional[int]) -> Optional[int]:
        s, n = self.s, self.n
        if p is None or p >= n:
            return None
        if self.encoding is Encoding.UTF8:
            while p < n:
                c = s[p]
                if c in _ZERO_WIDTH or is_whitespace(c):
                    p += 1
                else:
                    break
        else:
            while p < n and is_whitespace(s[p]):
                p += 1
        return p

    def string_equal(self, p: Optional[int], tag: str, ignore_case: bool) -> bool:
        if p is None or p >= self.n:
            return False
        segment = self.s[p:p + len(tag)]
        if ignore_case:
            return segment.translate(_ASCII_LOWER) == tag.translate(_ASCII_LOWER)
        return segment == tag

    def read_name(self, p: Optional[int]) -> tuple[Optional[int], str]:
        s, n = self.s, self.n
        if p is None or p >= n or not (_is_alpha(s[p]) or s[p] == "_"):
            return None, ""
        start = p
        while p < n and (_is_alnum(s[p]) or s[p] in _NAME_EXTRA):
            p += 1
        return p, s[start:p]

    def get_entity(self, p: int) -> tuple[Optional[int], str]:
        s, n = self.s, self.n
        if p + 2 < n and s[p + 1] == "#":
            if s[p + 2] == "x":
                if p + 3 >= n:
                    return None, ""
                q = s.find(";", p + 3)
                if q < 0:
                    return None, ""
                digits = s[p + 3:q].rsplit("x", 1)[-1]
                if not all(d in _HEX_DIGITS for d in digits):
                    return None, ""
                ucs = int(digits, 16) if digits else 0
            else:
                q = s.find(";", p + 2)
                if q < 0:
                    return None, ""
                digits = s[p + 2:q].rsplit("#", 1)[-1]
                if not all(d in _DEC_DIGITS for d in digits):
                    return None, ""
                ucs = int(digits) if digits else 0
            if self.encoding is Encoding.UTF8:
                char = chr(ucs) if ucs < 0x110000 else ""
            else:
                char = chr(ucs & 0xFF)
            return q + 1, char
        for entity, char in ENTITIES:
            if s.startswith(entity, p):
                return p + len(entity), char
        # An unrecognised entity: the ampersand is dropped.
        return p + 1, ""

    def get_char(self, p: int) -> tuple[Optional[int], str]:
        if self.s[p] == "&":
            return self.get_entity(p)
        return p + 1, self.s[p]

    def read_text(
        self, p: Optional[int], trim: bool, end_tag: str, ignore_case: bool
    ) -> tuple[Optional[int], str]:
        """Read up to ``end_tag``; return the position past it (or None) and the text."""
        n = self.n
        out: list[str] = []
        if not trim or not is_whitespace_condensed():
            while p is not None and p < n and not self.string_equal(p, end_tag, ignore_case):
                p, char = self.get_char(p)
                out.append(char)
        else:
            pending_space = False
            p = self.skip_ws(p)
            while p is not None and p < n and not self.string_equal(p, end_tag, ignore_case):
                if is_whitespace(self.s[p]):
                    pending_space = True
                    p += 1
                    continue
                if pending_space:
                    out.append(" ")
                    pending_space = False
                p, char = self.get_char(p)
                out.append(char)
        if p is not None and p < n:
            p += len(end_tag)
        return (p if p is not None and p < n else None), "".join(out)

    # -- nodes -----------------------------------------------------------

    def identify(self, p: Optional[int]) -> Optional[Node]:
        p = self.skip_ws(p)
        if p is None or p >= self.n or self.s[p] != "<":
            return None
        if self.string_equal(p, _XML_HEADER, True):
            return Declaration()
        if self.string_equal(p, _COMMENT_START, False):
            return Comment()
        if self.string_equal(p, _CDATA_START, False):
            return Text(cdata=True)
        if self.string_equal(p, _DTD_START, False):
            return Unknown()
        if p + 1 < self.n and (_is_alpha(self.s[p + 1]) or self.s[p + 1] == "_"):
            return Element()
        return Unknown()

    def parse_node(self, node: Node, p: int) -> int:
        if isinstance(node, Element):
            return self.parse_element(node, p)
        if isinstance(node, Text):
            return self.parse_text(node, p)
        if isinstance(node, Comment):
            return self.parse_comment(node, p)
        if isinstance(node, Declaration):
            return self.parse_declaration(node, p)
        return self.parse_unknown(node, p)

    def parse_attribute(
        self, attrib: Attribute, p: Optional[int], report: bool
    ) -> Optional[int]:
        s, n = self.s, self.n
        p = self.skip_ws(p)
        if p is None or p >= n:
            return None
        attrib.location = self.stamp(p)
        p_err = p
        p, attrib.name = self.read_name(p)
        if p is None or p >= n:
            if report:
                self.record(ErrorCode.READING_ATTRIBUTES, p_err)
            return None
        p = self.skip_ws(p)
        if p is None or p >= n or s[p] != "=":
            if report:
                self.record(ErrorCode.READING_ATTRIBUTES, p)
            return None
        p = self.skip_ws(p + 1)
        if p is None or p >= n:
            if report:
                self.record(ErrorCode.READING_ATTRIBUTES, p)
            return None
        quote = s[p]
        if quote in "'\"":
            p, attrib.value = self.read_text(p + 1, False, quote, False)
            return p
        chars: list[str] = []
        while p < n and not is_whitespace(s[p]) and s[p] not in "/>":
            if s[p] in "'\"":
                attrib.value = "".join(chars)
                if report:
                    self.record(ErrorCode.READING_ATTRIBUTES, p)
                return None
            chars.append(s[p])
            p += 1
        attrib.value = "".join(chars)
        return p

    def parse_element(self, element: Element, p: int) -> int:
        s, n = self.s, self.n
        p = self.skip_ws(p)
        if p is None or p >= n:
            self.fail(ErrorCode.PARSING_ELEMENT)
        element.location = self.stamp(p)
        if s[p] != "<":
            self.fail(ErrorCode.PARSING_ELEMENT, p)
        p = self.skip_ws(p + 1)
        p_err = p
        p, element.value = self.read_name(p)
        if p is None or p >= n:
            self.fail(ErrorCode.FAILED_TO_READ_ELEMENT_NAME, p_err)
        end_tag = "</" + element.value

        while True:
            p_err = p
            p = self.skip_ws(p)
            if p is None or p >= n:
                self.fail(ErrorCode.READING_ATTRIBUTES, p_err)
            if s[p] == "/":
                p += 1
                if p >= n or s[p] != ">":
                    self.fail(ErrorCode.PARSING_EMPTY, p)
                return p + 1
            if s[p] == ">":
                p = self.read_value(element, p + 1)
                if p >= n:
                    self.fail(ErrorCode.READING_END_TAG, p)
                if self.string_equal(p, end_tag, False):
                    p = self.skip_ws(p + len(end_tag))
                    if p is not None and p < n and s[p] == ">":
                        return p + 1
                self.fail(ErrorCode.READING_END_TAG, p)
            attrib = Attribute()
            p_err = p
            p = self.parse_attribute(attrib, p, report=True)
            if p is None or p >= n:
                self.fail(ErrorCode.PARSING_ELEMENT, p_err)
            if element.attribute(attrib.name) is not None:
                self.fail(ErrorCode.PARSING_ELEMENT, p_err)
            added = element.set_attribute(attrib.name, attrib.value)
            added.location = attrib.location

    def read_value(self, element: Element, p: int) -> int:
        s, n = self.s, self.n
        with_whitespace: Optional[int] = p
        p = self.skip_ws(p)
        try:
            while p is not None and p < n:
                if s[p] != "<":
                    text = Text()
                    start = p if is_whitespace_condensed() else with_whitespace
                    try:
                        p = self.parse_text(text, start)
                    finally:
                        if not text.is_blank():
                            element.append_child(text)
                else:
                    if self.string_equal(p, "</", False):
                        return p
                    node = self.identify(p)
                    element.append_child(node)
                    p = self.parse_node(node, p)
                with_whitespace = p
                p = self.skip_ws(p)
        except _Halt:
            self.record(ErrorCode.READING_ELEMENT_VALUE)
            raise
        if p is None:
            self.fail(ErrorCode.READING_ELEMENT_VALUE)
        return p

    def parse_text(self, text: Text, p: int) -> int:
        text.value = ""
        text.location = self.stamp(p)
        if text.cdata or self.string_equal(p, _CDATA_START, False):
            text.cdata = True
            if not self.string_equal(p, _CDATA_START, False):
                self.fail(ErrorCode.PARSING_CDATA, p)
            p += len(_CDATA_START)
            end = self.s.find(_CDATA_END, p)
            if end < 0:
                text.value = self.s[p:]
                raise _Halt()
            text.value = self.s[p:end]
            p = end + len(_CDATA_END)
            if p >= self.n:
                raise _Halt()
            return p
        p, text.value = self.read_text(p, True, "<", False)
        if p is None:
            raise _Halt()
        return p - 1  # leave the '<' for the caller

    def parse_comment(self, comment: Comment, p: int) -> int:
        comment.value = ""
        p = self.skip_ws(p)
        comment.location = self.stamp(p)
        if not self.string_equal(p, _COMMENT_START, False):
            self.fail(ErrorCode.PARSING_COMMENT, p)
        p += len(_COMMENT_START)
        end = self.s.find(_COMMENT_END, p)
        if end < 0:
            comment.value = self.s[p:]
            return self.n
        comment.value = self.s[p:end]
        return end + len(_COMMENT_END)

    def parse_unknown(self, unknown: Unknown, p: int) -> int:
        p = self.skip_ws(p)
        unknown.location = self.stamp(p)
        if p is None or p >= self.n or self.s[p] != "<":
            self.fail(ErrorCode.PARSING_UNKNOWN, p)
        p += 1
        end = self.s.find(">", p)
        if end < 0:
            unknown.value = self.s[p:]
            return self.n
        unknown.value = self.s[p:end]
        return end + 1

    def parse_declaration(self, declaration: Declaration, p: int) -> int:
        s, n = self.s, self.n
        p = self.skip_ws(p)
        if p is None or p >= n or not self.string_equal(p, _XML_HEADER, True):
            self.fail(ErrorCode.PARSING_DECLARATION)
        declaration.location = self.stamp(p)
        p += len(_XML_HEADER)
        declaration.version = ""
        declaration.encoding = ""
        declaration.standalone = ""
        position: Optional[int] = p
        while position is not None and position < n:
            if s[position] == ">":
                return position + 1
            position = self.skip_ws(position)
            field = next(
                (
                    name
                    for name in ("version", "encoding", "standalone")
                    if self.string_equal(position, name, True)
                ),
                None,
            )
            if field is not None:
                attrib = Attribute()
                position = self.parse_attribute(attrib, position, report=False)
                setattr(declaration, field, attrib.value)
            else:
                while (
                    position is not None
                    and position < n
                    and s[position] != ">"
                    and not is_whitespace(s[position])
                ):
                    position += 1
        raise _Halt()

    # -- document level --------------------------------------------------

    @staticmethod
    def _encoding_of(declared: str) -> Encoding:
        if not declared:
            return Encoding.UTF8
        lowered = declared.translate(_ASCII_LOWER)
        if lowered.startswith("utf-8") or lowered.startswith("utf8"):
            return Encoding.UTF8
        return Encoding.LEGACY

    def run(self) -> Optional[int]:
        document = self.document
        document.clear_error()
        if not self.s:
            self.record(ErrorCode.DOCUMENT_EMPTY)
            raise self.error
        document.location = Cursor(0, 0)
        if self.encoding is Encoding.UNKNOWN and self.s.startswith("\ufeff"):
            self.encoding = Encoding.UTF8
            document.use_microsoft_bom = True

        p = self.skip_ws(0)
        try:
            while p is not None and p < self.n:
                node = self.identify(p)
                if node is None:
                    break
                document.append_child(node)
                p = self.parse_node(node, p)
                if self.encoding is Encoding.UNKNOWN and isinstance(node, Declaration):
                    self.encoding = self._encoding_of(node.encoding)
                p = self.skip_ws(p)
        except _Halt:
            p = None

        if document.first_child() is None:
            self.record(ErrorCode.DOCUMENT_EMPTY)
        if self.error is not None:
            raise self.error
        return p


def parse(document: Node, text: str, encoding: Encoding = DEFAULT_ENCODING) -> Optional[int]:
    """Parse ``text`` and append the nodes found to ``document``.

    Returns the index in ``text`` where parsing stopped, or None when the
    whole text was consumed. Raises XmlError for the first error found;
    the nodes read before it stay in the document. A NUL character ends
    the text.
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, not {type(text).__name__}")
    text = text.split("\0", 1)[0]
    return _Parser(document, text, Encoding(encoding)).run()