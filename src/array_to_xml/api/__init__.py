"""Public conversion API."""

from .converter import (
    ArrayToXML,
    serialize,
    to_document,
    to_string,
    to_xml,
)

__all__ = [
    "ArrayToXML",
    "serialize",
    "to_document",
    "to_string",
    "to_xml",
]
