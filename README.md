# tixml

A small XML document object model with a tolerant parser, a visitor
interface and a pretty printer. It uses only the standard library.

Install it with pip from the project directory. The `test` extra adds
pytest for running the test suite.

## Parsing and walking a document

```python
from tixml.document import Document
from tixml.handle import Handle

doc = Document()
doc.parse('<?xml version="1.0"?><config><item id="1">first</item><item id="2"/></config>')

root = doc.root_element()
for child in root:
    print(child.value, child.attribute("id"))

second = Handle(doc).first_child_element("config").child_element(1, "item").to_element()
print(second.query_int_attribute("id"))   # 2
```

`Document.parse` appends the nodes it reads to the document and returns the
index in the text where parsing stopped, or `None` when the whole text was
consumed. A NUL character ends the text.

Nodes are iterable over their children. `Node` also offers `children(value)`,
`first_child`, `last_child`, `next_sibling`, `previous_sibling`,
`first_child_element`, `next_sibling_element` and `get_document`. Each node
carries `row` and `column` (1-based) of where it was found in the text; set
`Document.tab_size` to 0 before parsing to turn that tracking off.

`Handle` (in `tixml.handle`) wraps a node or `None`, so a chain of steps
never fails part way: a missing step just gives a handle to `None`.

## Errors

Parse errors raise `tixml.errors.XmlError`. It carries an `ErrorCode` in
`code` and the 1-based `row` and `column` of the problem (0 when unknown).
The first error is also recorded on the document in `error`, `error_id`,
`error_desc`, `error_row` and `error_col`; `clear_error()` resets them.
Nodes read before the error stay in the document.

Adding a document as the child of another node raises
`DocumentTopOnlyError`. Attribute queries (`query_int_attribute`,
`query_unsigned_attribute`, `query_float_attribute`,
`query_bool_attribute`) raise `NoAttributeError` when the attribute is
missing and `WrongTypeError` when its value cannot be converted. Booleans
accept `true`, `yes`, `1` and `false`, `no`, `0`, ignoring case.

## Building and writing documents

```python
from tixml.document import Document
from tixml.nodes import Declaration, Element, Text
from tixml.printer import print_node

doc = Document()
doc.append_child(Declaration("1.0", "UTF-8", ""))
root = doc.append_child(Element("movies"))
movie = root.append_child(Element("movie"))
movie.set_attribute("title", "Example")
movie.append_child(Text("A made-up film"))

print(print_node(doc))
doc.save_file("movies.xml")
```

`append_child` links the node itself; `insert_end_child`,
`insert_before_child`, `insert_after_child` and `replace_child` insert a
copy and return it. `clone()` gives a deep copy of any node.

`print_node` takes the indent and line-break strings to use. The `Printer`
visitor collects the markup in its `text` property and can be switched to
dense output with `set_stream_printing()`. Every node also has
`print(file, depth)`, which writes formatted markup to a file or to
standard output.

Your own walks over a tree can subclass `tixml.nodes.Visitor` and pass it
to `accept`.

## Files

`Document.load_file(filename)` reads a file, turns CR LF and lone CR into
LF, decodes it as UTF-8 (falling back to Latin-1, or Latin-1 directly with
`Encoding.LEGACY`) and parses it. A missing file raises `XmlError` with
`ErrorCode.OPENING_FILE`. `save_file(filename)` writes the formatted
document as UTF-8, with a byte order mark if the parsed text had one.

## White space

By default runs of white space in text are condensed to a single space.
Call `tixml.text.set_condense_whitespace(False)` before parsing to keep text
exactly as written. `tixml.text` also holds `encode_string`, which replaces
markup characters with entities.

## Version

`tixml.version` gives `stable()`, `revision()`, `with_revision()` and
`printable()`, the last adding the pointer width of the running Python.

## What it does not do

This is a library only: there is no command-line program. It does not
validate documents, process DTDs (they are kept verbatim as `Unknown`
nodes), resolve namespaces or read from a stream incrementally.