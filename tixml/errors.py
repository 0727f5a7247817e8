"""Error codes and exceptions raised by the XML document model."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Identifiers of the errors a document can report."""

    def __new__(cls, value: int, text: str) -> "ErrorCode":
        member = int.__new__(cls, value)
        member._value_ = value
        member._text = text
        return member

    NO_ERROR = (0, "No error")
    ERROR = (1, "Error")
    OPENING_FILE = (2, "Failed to open file")
    PARSING_ELEMENT = (3, "Error parsing Element.")
    FAILED_TO_READ_ELEMENT_NAME = (4, "Failed to read Element name")
    READING_ELEMENT_VALUE = (5, "Error reading Element value.")
    READING_ATTRIBUTES = (6, "Error reading Attributes.")
    PARSING_EMPTY = (7, "Error: empty tag.")
    READING_END_TAG = (8, "Error reading end tag.")
    PARSING_UNKNOWN = (9, "Error parsing Unknown.")
    PARSING_COMMENT = (10, "Error parsing Comment.")
    PARSING_DECLARATION = (11, "Error parsing Declaration.")
    DOCUMENT_EMPTY = (12, "Error document empty.")
    EMBEDDED_NULL = (
        13,
        "Error null (0) or unexpected EOF found in input stream.",
    )
    PARSING_CDATA = (14, "Error parsing CDATA.")
    DOCUMENT_TOP_ONLY = (
        15,
        "Error when TiXmlDocument added to document, "
        "because TiXmlDocument can only be at the root.",
    )

    def description(self) -> str:
        """Return the English description of this error."""
        return self._text


class XmlError(Exception):
    """An error found while building, loading or parsing a document.

    ``row`` and ``column`` are 1-based; 0 means the location is unknown.
    """

    def __init__(self, code, row: int = 0, column: int = 0) -> None:
        code = ErrorCode(code)
        if code is ErrorCode.NO_ERROR:
            raise ValueError("an XmlError needs a real error code")
        self.code = code
        self.row = row
        self.column = column
        message = code.description()
        if row > 0 or column > 0:
            message = f"{message} (row {row}, column {column})"
        super().__init__(message)

    @property
    def description(self) -> str:
        return self.code.description()


class DocumentTopOnlyError(XmlError):
    """A document was added as the child of another node."""

    def __init__(self, row: int = 0, column: int = 0) -> None:
        super().__init__(ErrorCode.DOCUMENT_TOP_ONLY, row, column)


class NoAttributeError(LookupError):
    """The requested attribute does not exist on the element."""


class WrongTypeError(ValueError):
    """An attribute value cannot be read as the requested type."""