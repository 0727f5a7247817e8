"""The document object model: nodes, elements, attributes and visitors."""

from __future__ import annotations

import abc
import functools
import re
import sys
from enum import Enum
from typing import Iterator, Optional, TextIO

from .errors import DocumentTopOnlyError, NoAttributeError, WrongTypeError
from .text import Cursor, encode_string, is_whitespace

INDENT = "    "

_SPACE = "[ \t\n\v\f\r]*"
_INT_RE = re.compile(_SPACE + r"([+-]?[0-9]+)")
_FLOAT_RE = re.compile(
    _SPACE
    + r"([+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?"
    + r"|inf(?:inity)?|nan))",
    re.IGNORECASE,
)

_TRUE_WORDS = ("true", "yes", "1")
_FALSE_WORDS = ("false", "no", "0")


def _scan_int(text: str) -> Optional[int]:
    match = _INT_RE.match(text)
    return int(match.group(1)) if match else None


def _scan_float(text: str) -> Optional[float]:
    match = _FLOAT_RE.match(text)
    return float(match.group(1)) if match else None


def _output(file: Optional[TextIO]) -> TextIO:
    return sys.stdout if file is None else file


class NodeType(Enum):
    """The kinds of node in a document tree."""

    DOCUMENT = 0
    ELEMENT = 1
    COMMENT = 2
    UNKNOWN = 3
    TEXT = 4
    DECLARATION = 5


class Visitor:
    """Callbacks for a walk over a tree with ``Node.accept``.

    Container nodes get a ``visit_enter``/``visit_exit`` pair, leaves get
    ``visit``. Returning False from ``visit_enter`` skips the children;
    returning False from any callback stops the visit of later siblings.
    """

    def visit_enter(self, node: "Node") -> bool:
        return True

    def visit_exit(self, node: "Node") -> bool:
        return True

    def visit(self, node: "Node") -> bool:
        return True


@functools.total_ordering
class Attribute:
    """A name-value pair on an element. Attributes compare by name."""

    __hash__ = None  # type: ignore[assignment]

    def __init__(self, name: str = "", value: str = "") -> None:
        self.name = name
        self.value = value
        self.location = Cursor()

    @property
    def row(self) -> int:
        return self.location.row + 1

    @property
    def column(self) -> int:
        return self.location.col + 1

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Attribute):
            return NotImplemented
        return self.name == other.name

    def __lt__(self, other: "Attribute") -> bool:
        if not isinstance(other, Attribute):
            return NotImplemented
        return self.name < other.name

    def __repr__(self) -> str:
        return f"Attribute({self.name!r}, {self.value!r})"

    def int_value(self) -> int:
        """Return the leading integer of the value, or 0."""
        result = _scan_int(self.value)
        return 0 if result is None else result

    def float_value(self) -> float:
        """Return the leading number of the value, or 0.0."""
        result = _scan_float(self.value)
        return 0.0 if result is None else result

    def query_int(self) -> int:
        """Return the value as an integer, raising WrongTypeError if it is not one."""
        result = _scan_int(self.value)
        if result is None:
            raise WrongTypeError(f"attribute {self.name!r} is not an integer")
        return result

    def query_float(self) -> float:
        """Return the value as a float, raising WrongTypeError if it is not one."""
        result = _scan_float(self.value)
        if result is None:
            raise WrongTypeError(f"attribute {self.name!r} is not a number")
        return result

    def set_int(self, value: int) -> None:
        self.value = "%d" % int(value)

    def set_float(self, value: float) -> None:
        self.value = "%g" % value

    def to_string(self) -> str:
        """Return the attribute as markup: name="value" (or single quotes)."""
        name = encode_string(self.name)
        value = encode_string(self.value)
        if '"' in self.value:
            return f"{name}='{value}'"
        return f'{name}="{value}"'


class Node(abc.ABC):
    """A node of the tree: it has a value, a parent and ordered children."""

    node_type: NodeType

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.parent: Optional[Node] = None
        self.user_data = None
        self.location = Cursor()
        self._children: list[Node] = []

    @property
    def row(self) -> int:
        return self.location.row + 1

    @property
    def column(self) -> int:
        return self.location.col + 1

    def __iter__(self) -> Iterator["Node"]:
        return iter(tuple(self._children))

    def children(self, value: Optional[str] = None) -> Iterator["Node"]:
        """Yield the children, only those with the given value if one is given."""
        for child in tuple(self._children):
            if value is None or child.value == value:
                yield child

    # -- structure -------------------------------------------------------

    def _position_of(self, node: "Node") -> int:
        for position, child in enumerate(self._children):
            if child is node:
                return position
        raise ValueError("node is not a child of this node")

    def _check_child(self, node: Optional["Node"]) -> int:
        if node is None or node.parent is not self:
            raise ValueError("node is not a child of this node")
        return self._position_of(node)

    @staticmethod
    def _refuse_document(node: "Node") -> None:
        if node.node_type is NodeType.DOCUMENT:
            raise DocumentTopOnlyError()

    def append_child(self, node: "Node") -> "Node":
        """Make ``node`` itself the last child and return it."""
        self._refuse_document(node)
        if node.parent is not None and node.parent is not self:
            raise ValueError("node already belongs to another parent")
        if any(child is node for child in self._children):
            raise ValueError("node is already a child of this node")
        node.parent = self
        self._children.append(node)
        return node

    def insert_end_child(self, node: "Node") -> "Node":
        """Append a copy of ``node`` and return the copy."""
        self._refuse_document(node)
        return self.append_child(node.clone())

    def insert_before_child(self, before: "Node", node: "Node") -> "Node":
        """Insert a copy of ``node`` before the child ``before``."""
        position = self._check_child(before)
        self._refuse_document(node)
        copy = node.clone()
        copy.parent = self
        self._children.insert(position, copy)
        return copy

    def insert_after_child(self, after: "Node", node: "Node") -> "Node":
        """Insert a copy of ``node`` after the child ``after``."""
        position = self._check_child(after)
        self._refuse_document(node)
        copy = node.clone()
        copy.parent = self
        self._children.insert(position + 1, copy)
        return copy

    def replace_child(self, old: "Node", new: "Node") -> "Node":
        """Put a copy of ``new`` in place of the child ``old``."""
        position = self._check_child(old)
        self._refuse_document(new)
        copy = new.clone()
        copy.parent = self
        self._children[position] = copy
        old.parent = None
        return copy

    def remove_child(self, node: "Node") -> None:
        """Detach the child ``node``."""
        position = self._check_child(node)
        del self._children[position]
        node.parent = None

    def clear(self) -> None:
        """Remove every child."""
        for child in self._children:
            child.parent = None
        self._children.clear()

    # -- navigation ------------------------------------------------------

    def first_child(self, value: Optional[str] = None) -> Optional["Node"]:
        return next(self.children(value), None)

    def last_child(self, value: Optional[str] = None) -> Optional["Node"]:
        for child in reversed(self._children):
            if value is None or child.value == value:
                return child
        return None

    def _following(self) -> list["Node"]:
        if self.parent is None:
            return []
        position = self.parent._position_of(self)
        return self.parent._children[position + 1:]

    def _preceding(self) -> list["Node"]:
        if self.parent is None:
            return []
        position = self.parent._position_of(self)
        return self.parent._children[:position][::-1]

    def next_sibling(self, value: Optional[str] = None) -> Optional["Node"]:
        for node in self._following():
            if value is None or node.value == value:
                return node
        return None

    def previous_sibling(self, value: Optional[str] = None) -> Optional["Node"]:
        for node in self._preceding():
            if value is None or node.value == value:
                return node
        return None

    def first_child_element(self, value: Optional[str] = None) -> Optional["Element"]:
        return next(
            (c for c in self.children(value) if isinstance(c, Element)), None
        )

    def next_sibling_element(self, value: Optional[str] = None) -> Optional["Element"]:
        for node in self._following():
            if isinstance(node, Element) and (value is None or node.value == value):
                return node
        return None

    def get_document(self) -> Optional["Node"]:
        """Return the document this node lives in, or None."""
        node: Optional[Node] = self
        while node is not None:
            if node.node_type is NodeType.DOCUMENT:
                return node
            node = node.parent
        return None

    # -- copying, visiting, printing -------------------------------------

    def _copy_base_to(self, target: "Node") -> None:
        target.value = self.value
        target.user_data = self.user_data
        target.location = Cursor(self.location.row, self.location.col)

    @abc.abstractmethod
    def clone(self) -> "Node":
        """Return a deep copy of this node, without a parent."""

    @abc.abstractmethod
    def accept(self, visitor: Visitor) -> bool:
        """Walk this node and its children with ``visitor``."""

    @abc.abstractmethod
    def print(self, file: Optional[TextIO] = None, depth: int = 0) -> None:
        """Write this node, formatted, to ``file`` (standard output by default)."""


class Element(Node):
    """A named element holding attributes and child nodes."""

    node_type = NodeType.ELEMENT

    def __init__(self, name: str = "") -> None:
        super().__init__(name)
        self._attributes: dict[str, Attribute] = {}

    @property
    def name(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return f"Element({self.value!r})"

    def _find(self, name: str) -> Attribute:
        try:
            return self._attributes[name]
        except KeyError:
            raise NoAttributeError(name) from None

    def attribute(self, name: str) -> Optional[str]:
        """Return the value of the named attribute, or None."""
        attrib = self._attributes.get(name)
        return None if attrib is None else attrib.value

    def attributes(self) -> list[Attribute]:
        """Return the attributes in document order."""
        return list(self._attributes.values())

    def query_int_attribute(self, name: str) -> int:
        return self._find(name).query_int()

    def query_unsigned_attribute(self, name: str) -> int:
        return self._find(name).query_int() & 0xFFFFFFFF

    def query_bool_attribute(self, name: str) -> bool:
        """Read "true", "yes", "1" as True and "false", "no", "0" as False."""
        value = self._find(name).value
        lowered = value.lower()
        if value:
            if any(lowered.startswith(word) for word in _TRUE_WORDS):
                return True
            if any(lowered.startswith(word) for word in _FALSE_WORDS):
                return False
        raise WrongTypeError(f"attribute {name!r} is not a boolean")

    def query_float_attribute(self, name: str) -> float:
        return self._find(name).query_float()

    def _find_or_create(self, name: str) -> Attribute:
        attrib = self._attributes.get(name)
        if attrib is None:
            attrib = Attribute(name)
            self._attributes[name] = attrib
        return attrib

    def set_attribute(self, name: str, value) -> Attribute:
        """Set an attribute to a string or integer value and return it."""
        if isinstance(value, int):
            attrib = self._find_or_create(name)
            attrib.set_int(value)
        elif isinstance(value, str):
            attrib = self._find_or_create(name)
            attrib.value = value
        else:
            raise TypeError(f"attribute value must be str or int, not {type(value).__name__}")
        return attrib

    def set_float_attribute(self, name: str, value: float) -> Attribute:
        attrib = self._find_or_create(name)
        attrib.set_float(value)
        return attrib

    def remove_attribute(self, name: str) -> None:
        self._attributes.pop(name, None)

    def get_text(self) -> Optional[str]:
        """Return the text of the first child if it is a text node."""
        child = self.first_child()
        if isinstance(child, Text):
            return child.value
        return None

    def clone(self) -> "Element":
        copy = Element()
        self._copy_base_to(copy)
        for attrib in self._attributes.values():
            copy.set_attribute(attrib.name, attrib.value)
        for child in self._children:
            copy.append_child(child.clone())
        return copy

    def accept(self, visitor: Visitor) -> bool:
        if visitor.visit_enter(self):
            for child in tuple(self._children):
                if not child.accept(visitor):
                    break
        return visitor.visit_exit(self)

    def print(self, file: Optional[TextIO] = None, depth: int = 0) -> None:
        out = _output(file)
        out.write(INDENT * depth)
        out.write(f"<{self.value}")
        for attrib in self._attributes.values():
            out.write(" " + attrib.to_string())
        if not self._children:
            out.write(" />")
        elif len(self._children) == 1 and isinstance(self._children[0], Text):
            out.write(">")
            self._children[0].print(out, depth + 1)
            out.write(f"</{self.value}>")
        else:
            out.write(">")
            for child in self._children:
                if not isinstance(child, Text):
                    out.write("\n")
                child.print(out, depth + 1)
            out.write("\n")
            out.write(INDENT * depth)
            out.write(f"</{self.value}>")


class Comment(Node):
    """An XML comment; its value is the comment text."""

    node_type = NodeType.COMMENT

    def __repr__(self) -> str:
        return f"Comment({self.value!r})"

    def clone(self) -> "Comment":
        copy = Comment()
        self._copy_base_to(copy)
        return copy

    def accept(self, visitor: Visitor) -> bool:
        return visitor.visit(self)

    def print(self, file: Optional[TextIO] = None, depth: int = 0) -> None:
        out = _output(file)
        out.write(INDENT * depth)
        out.write(f"<!--{self.value}-->")


class Text(Node):
    """Character data, printed either encoded or as a CDATA section."""

    node_type = NodeType.TEXT

    def __init__(self, value: str = "", cdata: bool = False) -> None:
        super().__init__(value)
        self.cdata = cdata

    def __repr__(self) -> str:
        return f"Text({self.value!r}, cdata={self.cdata})"

    def is_blank(self) -> bool:
        """Tell whether the text is nothing but white space."""
        return all(is_whitespace(char) for char in self.value)

    def clone(self) -> "Text":
        copy = Text()
        self._copy_base_to(copy)
        copy.cdata = self.cdata
        return copy

    def accept(self, visitor: Visitor) -> bool:
        return visitor.visit(self)

    def print(self, file: Optional[TextIO] = None, depth: int = 0) -> None:
        out = _output(file)
        if self.cdata:
            out.write("\n")
            out.write(INDENT * depth)
            out.write(f"<![CDATA[{self.value}]]>\n")
        else:
            out.write(encode_string(self.value))


class Declaration(Node):
    """The ``<?xml ...?>`` declaration with its three fixed fields."""

    node_type = NodeType.DECLARATION

    def __init__(self, version: str = "", encoding: str = "", standalone: str = "") -> None:
        super().__init__("")
        self.version = version
        self.encoding = encoding
        self.standalone = standalone

    def __repr__(self) -> str:
        return (
            f"Declaration({self.version!r}, {self.encoding!r}, {self.standalone!r})"
        )

    def to_string(self) -> str:
        parts = ["<?xml "]
        for field, value in (
            ("version", self.version),
            ("encoding", self.encoding),
            ("standalone", self.standalone),
        ):
            if value:
                parts.append(f'{field}="{value}" ')
        parts.append("?>")
        return "".join(parts)

    def clone(self) -> "Declaration":
        copy = Declaration(self.version, self.encoding, self.standalone)
        self._copy_base_to(copy)
        return copy

    def accept(self, visitor: Visitor) -> bool:
        return visitor.visit(self)

    def print(self, file: Optional[TextIO] = None, depth: int = 0) -> None:
        _output(file).write(self.to_string())


class Unknown(Node):
    """A tag the model does not understand, kept verbatim (DTDs and the like)."""

    node_type = NodeType.UNKNOWN

    def __repr__(self) -> str:
        return f"Unknown({self.value!r})"

    def clone(self) -> "Unknown":
        copy = Unknown()
        self._copy_base_to(copy)
        return copy

    def accept(self, visitor: Visitor) -> bool:
        return visitor.visit(self)

    def print(self, file: Optional[TextIO] = None, depth: int = 0) -> None:
        out = _output(file)
        out.write(INDENT * depth)
        out.write(f"<{self.value}>")