"""A null-safe wrapper for walking down a tree."""

from __future__ import annotations

from itertools import islice
from typing import Iterable, Optional

from .nodes import Element, Node, Text, Unknown


def _nth(items: Iterable, index: int):
    return next(islice(items, max(index, 0), None), None)


class Handle:
    """Wraps a node or None; every step on a None handle gives a None handle."""

    __slots__ = ("_node",)

    def __init__(self, node: Optional[Node] = None) -> None:
        self._node = node

    def __repr__(self) -> str:
        return f"Handle({self._node!r})"

    def first_child(self, value: Optional[str] = None) -> "Handle":
        if self._node is None:
            return Handle(None)
        return Handle(self._node.first_child(value))

    def first_child_element(self, value: Optional[str] = None) -> "Handle":
        if self._node is None:
            return Handle(None)
        return Handle(self._node.first_child_element(value))

    def child(self, index: int, value: Optional[str] = None) -> "Handle":
        """Return the child at ``index`` (0-based), counting only matching values."""
        if self._node is None:
            return Handle(None)
        return Handle(_nth(self._node.children(value), index))

    def child_element(self, index: int, value: Optional[str] = None) -> "Handle":
        """Return the child element at ``index``, counting only elements."""
        if self._node is None:
            return Handle(None)
        elements = (
            c
            for c in self._node.children(value)
            if isinstance(c, Element)
        )
        return Handle(_nth(elements, index))

    def to_node(self) -> Optional[Node]:
        return self._node

    def to_element(self) -> Optional[Element]:
        return self._node if isinstance(self._node, Element) else None

    def to_text(self) -> Optional[Text]:
        return self._node if isinstance(self._node, Text) else None

    def to_unknown(self) -> Optional[Unknown]:
        return self._node if isinstance(self._node, Unknown) else None