from tixml.document import Document
from tixml.nodes import Comment, Declaration, Element, Text, Unknown
from tixml.printer import Printer, print_node


def _doc(text):
    doc = Document()
    doc.parse(text)
    return doc


def test_pretty_print():
    doc = _doc("<a><b>text</b><c/></a>")
    assert print_node(doc) == "<a>\n    <b>text</b>\n    <c />\n</a>\n"


def test_stream_printing():
    doc = _doc("<a><b>text</b><c/></a>")
    printer = Printer()
    printer.set_stream_printing()
    doc.accept(printer)
    assert printer.text == "<a><b>text</b><c /></a>"
    assert len(printer) == len(printer.text)
    assert printer.depth == 0


def test_round_trip_through_parser():
    source = '<?xml version="1.0"?><r k="v"><x>one</x><!-- note --><y/></r>'
    first = print_node(_doc(source))
    second = print_node(_doc(first))
    assert first == second


def test_custom_indent():
    doc = _doc("<a><b/></a>")
    out = print_node(doc, indent="\t")
    assert "\n\t<b />" in out
    assert print_node(doc, indent="", line_break="") == "<a><b /></a>"


def test_attribute_with_quote_uses_single_quotes():
    element = Element("e")
    element.set_attribute("x", 'say "hi"')
    out = print_node(element, "", "")
    assert out.startswith("<e " + element.attributes()[0].to_string())
    assert "'" in out


def test_text_is_encoded():
    element = Element("e")
    element.append_child(Text("a<b&c"))
    assert print_node(element, "", "") == "<e>a&lt;b&amp;c</e>"


def test_cdata_is_not_encoded():
    element = Element("e")
    element.append_child(Text("x<y", cdata=True))
    out = print_node(element)
    assert "<![CDATA[x<y]]>" in out
    assert out.endswith("</e>\n")


def test_leaf_nodes():
    comment = "a comment"
    assert print_node(Comment(comment), "", "") == "<!--" + comment + "-->"
    assert print_node(Unknown("!DOCTYPE x"), "", "") == "<!DOCTYPE x>"
    declaration = Declaration("1.0", "UTF-8", "")
    assert print_node(declaration, "", "") == declaration.to_string()


def test_mixed_children_are_indented():
    doc = _doc("<a>text<b/></a>")
    lines = print_node(doc).splitlines()
    assert lines[0] == "<a>"
    assert lines[-1] == "</a>"
    assert all(line.startswith("    ") for line in lines[1:-1])
    assert len(lines) == 4