"""Classification of input values.

Input trees are built from plain Python containers. Each value is classified
once, when the mapper reaches it, into one of four kinds:

- ``FRAGMENT``: a pre-built lxml element or element tree
- ``SEQUENCE``: a list or tuple, or a mapping keyed exactly ``0..n-1``
- ``ASSOCIATIVE``: any other mapping, including the empty one
- ``SCALAR``: everything else
"""

from collections.abc import Mapping
from enum import Enum, auto
from typing import Any, Iterator, Tuple

from lxml import etree


class ValueKind(Enum):
    """Structural kind of an input value."""

    SCALAR = auto()
    ASSOCIATIVE = auto()
    SEQUENCE = auto()
    FRAGMENT = auto()


def _has_list_keys(mapping: Mapping) -> bool:
    for expected, key in enumerate(mapping):
        if type(key) is not int or key != expected:
            return False
    return bool(mapping)


def classify(value: Any) -> ValueKind:
    """Return the structural kind of ``value``."""
    if etree.iselement(value) or isinstance(value, etree._ElementTree):
        return ValueKind.FRAGMENT
    if isinstance(value, (list, tuple)):
        return ValueKind.SEQUENCE
    if isinstance(value, Mapping):
        if _has_list_keys(value):
            return ValueKind.SEQUENCE
        return ValueKind.ASSOCIATIVE
    return ValueKind.SCALAR


def is_associative(value: Any) -> bool:
    return classify(value) is ValueKind.ASSOCIATIVE


def iter_items(value: Any) -> Iterator[Tuple[Any, Any]]:
    """Iterate ``(key, item)`` pairs of a collection in order.

    Sequences yield their indices as keys.
    """
    if isinstance(value, Mapping):
        return iter(value.items())
    return enumerate(value)


def iter_sequence(value: Any) -> Iterator[Any]:
    """Iterate the items of a sequence in order."""
    if isinstance(value, Mapping):
        return iter(value.values())
    return iter(value)
