"""Tree layer: value classification, the lxml document builder and the mapper."""

from .builder import DocumentBuilder
from .mapper import TreeMapper, text_content
from .values import ValueKind, classify, is_associative

__all__ = [
    "DocumentBuilder",
    "TreeMapper",
    "text_content",
    "ValueKind",
    "classify",
    "is_associative",
]
