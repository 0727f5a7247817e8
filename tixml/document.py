"""The document node: the root of a tree, with loading, saving and errors."""

from __future__ import annotations

import os
import sys
from typing import Optional, TextIO, Union

from .errors import ErrorCode, XmlError
from .nodes import Element, Node, NodeType, Visitor
from .parser import parse as _parse
from .text import DEFAULT_ENCODING, Cursor, Encoding

_BOM = "\ufeff"

PathLike = Union[str, "os.PathLike[str]"]


def _normalise_newlines(data: bytes) -> bytes:
    """Turn CR LF pairs and lone CRs into LF, as XML requires."""
    return data.replace(b"\r\n", b"\n").replace(b"\r", b"\n")


def _decode(data: bytes, encoding: Encoding) -> str:
    if encoding is Encoding.LEGACY:
        return data.decode("latin-1")
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1")


class Document(Node):
    """The top of a tree. Its value is the file name of the document."""

    node_type = NodeType.DOCUMENT

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self.tab_size = 4
        self.use_microsoft_bom = False
        self.error = False
        self.error_id = ErrorCode.NO_ERROR
        self.error_desc = ""
        self.error_location = Cursor(0, 0)
        self.clear_error()

    def __repr__(self) -> str:
        return f"Document({self.value!r})"

    # -- errors ----------------------------------------------------------

    @property
    def error_row(self) -> int:
        """1-based row of the error; 0 when it is not known."""
        return self.error_location.row + 1

    @property
    def error_col(self) -> int:
        """1-based column of the error; 0 when it is not known."""
        return self.error_location.col + 1

    def set_error(self, code, cursor: Optional[Cursor] = None) -> None:
        """Record an error; the first error recorded is kept."""
        if self.error:
            return
        code = ErrorCode(code)
        if code is ErrorCode.NO_ERROR:
            raise ValueError("set_error needs a real error code")
        self.error = True
        self.error_id = code
        self.error_desc = code.description()
        if cursor is None:
            self.error_location = Cursor()
        else:
            self.error_location = Cursor(cursor.row, cursor.col)

    def clear_error(self) -> None:
        """Forget any recorded error."""
        self.error = False
        self.error_id = ErrorCode.NO_ERROR
        self.error_desc = ""
        self.error_location = Cursor(0, 0)

    def _fail(self, code: ErrorCode) -> XmlError:
        self.set_error(code)
        return XmlError(code, self.error_row, self.error_col)

    # -- content ---------------------------------------------------------

    def root_element(self) -> Optional[Element]:
        """Return the first top-level element, or None."""
        return self.first_child_element()

    def parse(self, text: str, encoding: Encoding = DEFAULT_ENCODING) -> Optional[int]:
        """Parse ``text`` into this document; see ``tixml.parser.parse``."""
        return _parse(self, text, encoding)

    def load_file(
        self,
        filename: Optional[PathLike] = None,
        encoding: Encoding = DEFAULT_ENCODING,
    ) -> Optional[int]:
        """Replace the content with the document read from ``filename``.

        Without a file name the document's own value is used. Raises
        XmlError when the file cannot be read or does not parse.
        """
        if filename is not None:
            self.value = os.fspath(filename)
        try:
            with open(self.value, "rb") as handle:
                data = handle.read()
        except OSError as exc:
            raise self._fail(ErrorCode.OPENING_FILE) from exc

        self.clear()
        self.location = Cursor()
        if not data:
            raise self._fail(ErrorCode.DOCUMENT_EMPTY)

        text = _decode(_normalise_newlines(data), Encoding(encoding))
        return self.parse(text, encoding)

    def save_file(self, filename: Optional[PathLike] = None) -> None:
        """Write the formatted document to ``filename`` (or its own value)."""
        path = self.value if filename is None else os.fspath(filename)
        with open(path, "w", encoding="utf-8") as handle:
            if self.use_microsoft_bom:
                handle.write(_BOM)
            self.print(handle, 0)

    # -- node protocol ---------------------------------------------------

    def clone(self) -> "Document":
        copy = Document()
        self._copy_base_to(copy)
        copy.error = self.error
        copy.error_id = self.error_id
        copy.error_desc = self.error_desc
        copy.tab_size = self.tab_size
        copy.error_location = Cursor(self.error_location.row, self.error_location.col)
        copy.use_microsoft_bom = self.use_microsoft_bom
        for child in self:
            copy.append_child(child.clone())
        return copy

    def accept(self, visitor: Visitor) -> bool:
        if visitor.visit_enter(self):
            for child in self:
                if not child.accept(visitor):
                    break
        return visitor.visit_exit(self)

    def print(self, file: Optional[TextIO] = None, depth: int = 0) -> None:
        out = sys.stdout if file is None else file
        for child in self:
            child.print(out, depth)
            out.write("\n")