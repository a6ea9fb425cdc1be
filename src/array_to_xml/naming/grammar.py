"""Key grammar for array-to-XML conversion.

A mapping key encodes more than an element name::

    <elements@type=list|thing@lang=en
    ^ flatten marker (list values only)
     ^^^^^^^^ container element name
             ^^^^^^^^^^ container attributes
                       ^^^^^ explicit item name (list values only)
                            ^^^^^^^^ item attributes

The key is split on the first ``|`` before attributes are parsed, so
attributes belong to the name they follow. A flattened list has no
container element, so attributes written before ``|`` are ignored there.

The functions here are pure: they split strings and never touch a document.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

ATTRIBUTE_DELIMITER = "@"
ATTRIBUTE_VALUE_DELIMITER = "="
ITEM_NAME_DELIMITER = "|"
FLATTEN = "<"


@dataclass(frozen=True)
class KeySyntax:
    """A key split into its element name and attributes."""

    raw: str
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ListKeySyntax:
    """A list key split into container and item names."""

    raw: str
    container: str
    item_name: str

    @property
    def flatten(self) -> bool:
        """True when items attach directly to the enclosing element."""
        return self.container == FLATTEN


def split_attributes(key: str) -> Tuple[str, Dict[str, str]]:
    """Split a key into its element name and attributes.

    Args:
        key: A name optionally followed by ``@name=value`` segments

    Returns:
        Tuple of the attribute-free name and an ordered attribute mapping.
        A repeated attribute keeps its first position and its last value.
        Empty attribute names are returned as they are; rejecting them is
        left to the caller, after the element name has been checked.

    Examples:
        >>> split_attributes("name@attr1=foo@attr2=bar")
        ('name', {'attr1': 'foo', 'attr2': 'bar'})
        >>> split_attributes("link@href=a?b=c")
        ('link', {'href': 'a?b=c'})
    """
    name, *segments = key.split(ATTRIBUTE_DELIMITER)
    attributes: Dict[str, str] = {}
    for segment in segments:
        attr_name, _, attr_value = segment.partition(ATTRIBUTE_VALUE_DELIMITER)
        attributes[attr_name] = attr_value
    return name, attributes


def parse_key(key: str) -> KeySyntax:
    """Parse a key into a ``KeySyntax``."""
    name, attributes = split_attributes(key)
    return KeySyntax(raw=key, name=name, attributes=attributes)


def singularize(name: str) -> str:
    """Strip one trailing ``s`` (any case); other plurals are left alone."""
    if name[-1:] in ("s", "S"):
        return name[:-1]
    return name


def split_list_name(key: str) -> Tuple[str, str]:
    """Split a list key into container name and item name.

    Args:
        key: Key whose value is a sequence

    Returns:
        ``(container, item_name)`` where ``container`` is ``FLATTEN`` when
        the key starts with the flatten marker

    Examples:
        >>> split_list_name("elements")
        ('elements', 'element')
        >>> split_list_name("elements|thing")
        ('elements', 'thing')
        >>> split_list_name("<elements")
        ('<', 'element')
    """
    syntax = parse_list_key(key)
    return syntax.container, syntax.item_name


def parse_list_key(key: str) -> ListKeySyntax:
    """Parse a list key into a ``ListKeySyntax``."""
    remainder = key
    flatten = remainder.startswith(FLATTEN)
    if flatten:
        remainder = remainder[len(FLATTEN):]

    container, separator, explicit = remainder.partition(ITEM_NAME_DELIMITER)
    item_name: Optional[str] = explicit if separator else None
    if item_name is None:
        item_name = singularize(container)

    return ListKeySyntax(
        raw=key,
        container=FLATTEN if flatten else container,
        item_name=item_name,
    )
