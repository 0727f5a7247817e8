"""A visitor that prints a tree to a string."""

from __future__ import annotations

from .document import Document
from .nodes import Comment, Declaration, Element, Node, Text, Unknown, Visitor
from .text import encode_string


class Printer(Visitor):
    """Collects the markup of the nodes it visits.

    By default it pretty-prints with four-space indents and newlines;
    ``set_stream_printing`` turns both off.
    """

    def __init__(self, indent: str = "    ", line_break: str = "\n") -> None:
        self.indent = indent or ""
        self.line_break = line_break or ""
        self.depth = 0
        self._simple_text = False
        self._parts: list[str] = []

    @property
    def text(self) -> str:
        """The markup printed so far."""
        return "".join(self._parts)

    def __str__(self) -> str:
        return self.text

    def __len__(self) -> int:
        return len(self.text)

    def set_stream_printing(self) -> None:
        """Print densely, without indents or line breaks."""
        self.indent = ""
        self.line_break = ""

    def _do_indent(self) -> None:
        self._parts.append(self.indent * self.depth)

    def _do_line_break(self) -> None:
        self._parts.append(self.line_break)

    def visit_enter(self, node: Node) -> bool:
        if isinstance(node, Document):
            return True
        if not isinstance(node, Element):
            return True
        self._do_indent()
        self._parts.append("<" + node.value)
        for attrib in node.attributes():
            self._parts.append(" " + attrib.to_string())
        first = node.first_child()
        if first is None:
            self._parts.append(" />")
            self._do_line_break()
        else:
            self._parts.append(">")
            if isinstance(first, Text) and node.last_child() is first and not first.cdata:
                self._simple_text = True
            else:
                self._do_line_break()
        self.depth += 1
        return True

    def visit_exit(self, node: Node) -> bool:
        if not isinstance(node, Element):
            return True
        self.depth -= 1
        if node.first_child() is not None:
            if self._simple_text:
                self._simple_text = False
            else:
                self._do_indent()
            self._parts.append(f"</{node.value}>")
            self._do_line_break()
        return True

    def visit(self, node: Node) -> bool:
        if isinstance(node, Text):
            if node.cdata:
                self._do_indent()
                self._parts.append(f"<![CDATA[{node.value}]]>")
                self._do_line_break()
            elif self._simple_text:
                self._parts.append(encode_string(node.value))
            else:
                self._do_indent()
                self._parts.append(encode_string(node.value))
                self._do_line_break()
        elif isinstance(node, Declaration):
            self._do_indent()
            self._parts.append(node.to_string())
            self._do_line_break()
        elif isinstance(node, Comment):
            self._do_indent()
            self._parts.append(f"<!--{node.value}-->")
            self._do_line_break()
        elif isinstance(node, Unknown):
            self._do_indent()
            self._parts.append(f"<{node.value}>")
            self._do_line_break()
        return True


def print_node(node: Node, indent: str = "    ", line_break: str = "\n") -> str:
    """Return the markup of ``node`` and everything below it."""
    printer = Printer(indent, line_break)
    node.accept(printer)
    return printer.text