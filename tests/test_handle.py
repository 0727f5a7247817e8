from tixml.handle import Handle
from tixml.nodes import Comment, Element, Text, Unknown


def _tree():
    root = Element("root")
    first = root.append_child(Comment("c"))
    a0 = root.append_child(Element("item"))
    other = root.append_child(Element("other"))
    a1 = root.append_child(Element("item"))
    a1.append_child(Text("value"))
    unknown = root.append_child(Unknown("!X"))
    return root, first, a0, other, a1, unknown


def test_first_child_and_element():
    root, first, a0, other, a1, unknown = _tree()
    h = Handle(root)
    assert h.first_child().to_node() is first
    assert h.first_child("other").to_node() is other
    assert h.first_child_element().to_element() is a0
    assert h.first_child_element("other").to_element() is other


def test_child_by_index():
    root, first, a0, other, a1, unknown = _tree()
    h = Handle(root)
    assert h.child(0).to_node() is first
    assert h.child(2).to_node() is other
    assert h.child(1, "item").to_node() is a1
    assert h.child(9).to_node() is None


def test_child_element_by_index():
    root, first, a0, other, a1, unknown = _tree()
    h = Handle(root)
    assert h.child_element(0).to_element() is a0
    assert h.child_element(2).to_element() is a1
    assert h.child_element(1, "item").to_element() is a1
    assert h.child_element(3).to_element() is None


def test_negative_index_gives_first():
    root, first, a0, *_ = _tree()
    assert Handle(root).child(-1).to_node() is first
    assert Handle(root).child_element(-3).to_element() is a0


def test_chain_through_missing_node():
    root, *_ = _tree()
    h = Handle(root).first_child("nope").first_child_element().child(0)
    assert h.to_node() is None
    assert h.to_element() is None
    assert Handle(None).child_element(0, "x").to_node() is None


def test_type_conversions():
    root, first, a0, other, a1, unknown = _tree()
    text_handle = Handle(root).child(1, "item").first_child()
    assert text_handle.to_text().value == "value"
    assert text_handle.to_element() is None
    assert Handle(root).child(4).to_unknown() is unknown
    assert Handle(first).to_element() is None
    assert Handle(first).to_text() is None
    assert Handle(a0).to_unknown() is None