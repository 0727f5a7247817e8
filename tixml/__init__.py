"""A small XML document object model with a tolerant parser, a visitor interface and a pretty printer."""

__version__ = "1.0.0"

__all__ = ["document", "errors", "handle", "nodes", "parser", "printer", "text", "version"]