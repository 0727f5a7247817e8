import pytest

from tixml.errors import ErrorCode, XmlError
from tixml.nodes import (
    Comment,
    Declaration,
    Element,
    Node,
    NodeType,
    Text,
    Unknown,
)
from tixml.parser import parse
from tixml.text import Encoding, encode_string, set_condense_whitespace


class SimpleDocument(Node):
    node_type = NodeType.DOCUMENT

    def __init__(self, tab_size=4):
        super().__init__("")
        self.tab_size = tab_size
        self.use_microsoft_bom = False
        self.errors = []

    def clear_error(self):
        self.errors.clear()

    def set_error(self, code, cursor):
        self.errors.append((code, cursor))

    def clone(self):
        copy = SimpleDocument(self.tab_size)
        for child in self:
            copy.append_child(child.clone())
        return copy

    def accept(self, visitor):
        if visitor.visit_enter(self):
            for child in self:
                if not child.accept(visitor):
                    break
        return visitor.visit_exit(self)

    def print(self, file=None, depth=0):
        for child in self:
            child.print(file, depth)


def parsed(text, encoding=Encoding.UNKNOWN):
    doc = SimpleDocument()
    parse(doc, text, encoding)
    return doc


def error_of(text):
    doc = SimpleDocument()
    with pytest.raises(XmlError) as info:
        parse(doc, text)
    return doc, info.value


def test_element_attributes_and_text():
    doc = parsed("<root a=\"1\" b='two'>hello</root>")
    root = doc.first_child()
    assert isinstance(root, Element)
    assert root.value == "root"
    assert [a.name for a in root.attributes()] == ["a", "b"]
    assert root.attribute("a") == "1"
    assert root.attribute("b") == "two"
    assert root.get_text() == "hello"


def test_children_keep_order():
    doc = parsed("<a><b/><c>t</c><b/></a>")
    root = doc.first_child()
    assert [child.value for child in root] == ["b", "c", "b"]
    assert root.first_child("c").get_text() == "t"


def test_declaration_fields():
    doc = parsed('<?xml version="1.0" encoding="UTF-8" standalone="yes"?><r/>')
    decl, root = list(doc)
    assert isinstance(decl, Declaration)
    assert (decl.version, decl.encoding, decl.standalone) == ("1.0", "UTF-8", "yes")
    assert root.value == "r"


def test_declaration_header_is_case_insensitive():
    doc = parsed("<?XML version='1.0'?><r/>")
    decl = doc.first_child()
    assert isinstance(decl, Declaration)
    assert decl.version == "1.0"


def test_comment_kept_verbatim():
    doc = parsed("<!-- hi & <there> --><r/>")
    comment = doc.first_child()
    assert isinstance(comment, Comment)
    assert comment.value == " hi & <there> "


def test_cdata_section():
    doc = parsed("<r><![CDATA[a <b> & c]]></r>")
    text = doc.first_child().first_child()
    assert isinstance(text, Text)
    assert text.cdata is True
    assert text.value == "a <b> & c"


def test_unknown_tag():
    doc = parsed("<!DOCTYPE r><r/>")
    unknown = doc.first_child()
    assert isinstance(unknown, Unknown)
    assert unknown.value == "!DOCTYPE r"


def test_unclosed_unknown_at_end_is_not_an_error():
    doc = SimpleDocument()
    result = parse(doc, "<r/><!DOCTYPE x")
    assert result is None
    assert doc.last_child().value == "!DOCTYPE x"
    assert doc.errors == []


def test_entities_round_trip():
    original = "x < y & \"z\" 'w' >"
    doc = parsed(f"<r>{encode_string(original)}</r>")
    assert doc.first_child().get_text() == original


def test_whitespace_condensed():
    doc = parsed("<r>  a \n\t b  </r>")
    assert doc.first_child().get_text() == "a b"


def test_whitespace_kept_when_not_condensing():
    set_condense_whitespace(False)
    try:
        doc = parsed("<r>  a \n\t b  </r>")
    finally:
        set_condense_whitespace(True)
    assert doc.first_child().get_text() == "  a \n\t b  "


@pytest.mark.parametrize("condense", [True, False])
def test_blank_text_dropped(condense):
    set_condense_whitespace(condense)
    try:
        doc = parsed("<r>   <c/>   </r>")
    finally:
        set_condense_whitespace(True)
    assert [type(child) for child in doc.first_child()] == [Element]


def test_unquoted_attribute_value():
    doc = parsed("<r a=5 />")
    assert doc.first_child().attribute("a") == "5"


def test_trailing_text_stops_parsing():
    text = "<r/> trailing"
    doc = SimpleDocument()
    stop = parse(doc, text)
    assert text[stop:] == "trailing"
    assert [type(child) for child in doc] == [Element]


def test_nul_ends_the_text():
    doc = parsed("<r/>\0<x/>")
    assert [child.value for child in doc] == ["r"]


def test_byte_order_mark_detected():
    doc = parsed("\ufeff<r/>")
    assert doc.use_microsoft_bom is True
    assert doc.first_child().value == "r"


def test_character_reference_in_utf8_document():
    doc = parsed('<?xml version="1.0" encoding="UTF-8"?><r>&#x4E2D;</r>')
    assert doc.last_child().get_text() == chr(0x4E2D)


def test_character_reference_with_explicit_encoding():
    doc = parsed("<r>&#x4E2D;</r>", Encoding.UTF8)
    assert doc.first_child().get_text() == chr(0x4E2D)


def test_character_reference_in_legacy_document_keeps_low_byte():
    doc = parsed('<?xml version="1.0" encoding="ISO-8859-1"?><r>&#x4E2D;</r>')
    assert doc.last_child().get_text() == "-"


@pytest.mark.parametrize("text", ["", "   "])
def test_empty_document(text):
    _, error = error_of(text)
    assert error.code is ErrorCode.DOCUMENT_EMPTY


@pytest.mark.parametrize(
    "text, code",
    [
        ("<r>", ErrorCode.READING_ELEMENT_VALUE),
        ("<a></b>", ErrorCode.READING_END_TAG),
        ("<a x='1' x='2'/>", ErrorCode.PARSING_ELEMENT),
        ("<a/ >", ErrorCode.PARSING_EMPTY),
        ("<a x></a>", ErrorCode.READING_ATTRIBUTES),
        ("<a x=1'/>", ErrorCode.READING_ATTRIBUTES),
        ("<abc", ErrorCode.FAILED_TO_READ_ELEMENT_NAME),
        ("<r><![CDATA[abc</r>", ErrorCode.READING_ELEMENT_VALUE),
    ],
)
def test_error_codes(text, code):
    doc, error = error_of(text)
    assert error.code is code
    assert doc.errors[0][0] is code


def test_only_first_error_recorded():
    doc, error = error_of("<a><b></c></a>")
    assert [code for code, _ in doc.errors] == [ErrorCode.READING_END_TAG]
    assert error.code is ErrorCode.READING_END_TAG


def test_error_location():
    doc, error = error_of("<a>\n</b>")
    cursor = doc.errors[0][1]
    assert error.row == cursor.row + 1
    assert error.column == cursor.col + 1
    assert error.row == 2


def test_partial_tree_kept_after_error():
    doc, _ = error_of("<a><b/></c>")
    root = doc.first_child()
    assert root.value == "a"
    assert [child.value for child in root] == ["b"]


def test_node_locations_follow_lines():
    doc = parsed("<a>\n  <b/>\n</a>")
    a = doc.first_child()
    b = a.first_child()
    assert b.row == a.row + 1
    assert b.column > a.column


def test_tab_size_zero_disables_tracking():
    doc = SimpleDocument(tab_size=0)
    parse(doc, "<a>\n  <b/>\n</a>")
    a = doc.first_child()
    b = a.first_child()
    assert (b.row, b.column) == (a.row, a.column)


def test_stale_errors_cleared_on_success():
    doc = SimpleDocument()
    doc.errors.append((ErrorCode.ERROR, None))
    parse(doc, "<r/>")
    assert doc.errors == []
    assert doc.first_child().value == "r"


def test_rejects_non_string_input():
    with pytest.raises(TypeError):
        parse(SimpleDocument(), b"<r/>")