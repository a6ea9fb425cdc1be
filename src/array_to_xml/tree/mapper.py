"""Tree mapper: turns nested mappings and sequences into XML elements.

For every ``(key, value)`` pair, in insertion order:

1. a foreign lxml fragment is copied in as is, and the key is ignored;
2. a non-empty mapping becomes an element named after the key, holding the
   mapping's own pairs;
3. a non-empty sequence becomes a container element (or, with the ``<``
   flatten marker, no container at all) holding one element per item,
   named by the item's name mapper;
4. empty mappings and sequences produce nothing;
5. anything else becomes a leaf element with the value as text, or as a
   CDATA section when the value carries the CDATA prefix.

The walk is depth-first but does not recurse on the Python call stack: each
collection is handled by a generator that yields the generators of its
nested collections, and ``map`` drives them from an explicit stack whose
height is capped by ``MappingConfig.max_depth``.
"""

from typing import Any, Iterator, List, Optional

from lxml import etree

from array_to_xml.naming.grammar import parse_key, parse_list_key
from array_to_xml.naming.mappers import NameMapperRegistry
from array_to_xml.shared.config import MappingConfig
from array_to_xml.shared.exceptions import (
    InvalidContentError,
    InvalidNameError,
    MaxDepthExceededError,
)
from array_to_xml.shared.logging import get_logger
from array_to_xml.tree.builder import DocumentBuilder
from array_to_xml.tree.values import ValueKind, classify, iter_items, iter_sequence

_Walk = Iterator[Iterator[Any]]


def text_content(value: Any) -> Optional[str]:
    """Render a scalar as element text; ``None`` means no text node."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "1" if value else None
    text = value if isinstance(value, str) else str(value)
    return text or None


class TreeMapper:
    """Maps a value tree onto elements created by a ``DocumentBuilder``.

    A mapper is bound to one builder, and therefore to one document; create
    a new mapper per conversion.
    """

    def __init__(
        self,
        builder: DocumentBuilder,
        registry: Optional[NameMapperRegistry] = None,
        config: Optional[MappingConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.builder = builder
        self.registry = registry or NameMapperRegistry()
        self.config = config or MappingConfig()
        self.logger = get_logger(__name__, correlation_id, "tree_mapper")

    @property
    def metrics(self):
        return self.builder.metrics

    def map(self, value: Any, parent: Optional[etree._Element] = None) -> etree._Element:
        """Map the pairs of ``value`` into ``parent``.

        Args:
            value: Collection whose pairs become children of ``parent``
            parent: Target element; defaults to the builder's document root

        Returns:
            ``parent``, with the new children appended

        Raises:
            InvalidNameError: If a key or mapped item name is not a valid name
            InvalidContentError: If a leaf value cannot be represented
            MaxDepthExceededError: If nesting exceeds ``config.max_depth``
        """
        if parent is None:
            parent = self.builder.document_root

        stack: List[_Walk] = [self._walk_collection(value, parent)]
        self.metrics.record_depth(1)

        while stack:
            try:
                nested = next(stack[-1])
            except StopIteration:
                stack.pop()
                continue

            depth = len(stack) + 1
            if depth > self.config.max_depth:
                raise MaxDepthExceededError(depth, self.config.max_depth)
            stack.append(nested)
            self.metrics.record_depth(depth)

        return parent

    def _walk_collection(self, collection: Any, parent: etree._Element) -> _Walk:
        for key, value in iter_items(collection):
            key = str(key)
            kind = classify(value)

            if kind is ValueKind.FRAGMENT:
                self.builder.append_child(parent, self._import_fragment(key, value))
            elif kind is ValueKind.SCALAR:
                self.builder.append_child(parent, self.create_element_node(key, value))
            elif not value:
                self._skip_empty(key, kind)
            elif kind is ValueKind.ASSOCIATIVE:
                element = self.create_element_node(key)
                yield self._walk_collection(value, element)
                self.builder.append_child(parent, element)
            else:
                yield self._walk_sequence(key, value, parent)

    def _walk_sequence(self, key: str, items: Any, parent: etree._Element) -> _Walk:
        syntax = parse_list_key(key)
        name_mapper = self.registry.resolve(syntax.item_name)
        list_node = parent if syntax.flatten else self.create_element_node(syntax.container)

        for index, item in enumerate(iter_sequence(items)):
            item_name = name_mapper(syntax.item_name, index, item)
            if not isinstance(item_name, str):
                raise TypeError(
                    f"Name mapper for {syntax.item_name!r} returned "
                    f"{type(item_name).__name__}, expected str"
                )

            kind = classify(item)
            if kind is ValueKind.FRAGMENT:
                element = self.create_element_node(item_name)
                self.builder.append_child(element, self._import_fragment(item_name, item))
            elif kind is ValueKind.SCALAR:
                element = self.create_element_node(item_name, item)
            else:
                element = self.create_element_node(item_name)
                yield self._walk_collection(item, element)
            self.builder.append_child(list_node, element)

        if list_node is not parent:
            self.builder.append_child(parent, list_node)

    def create_element_node(self, key: str, value: Any = None) -> etree._Element:
        """Create one element from a key and an optional scalar value.

        The key's attribute syntax is applied after the content. A string
        value starting with the CDATA prefix becomes a CDATA section.

        Raises:
            InvalidNameError: ``name`` is the full key for a rejected element
                name, or the attribute name for a rejected attribute
            InvalidContentError: If lxml rejects the text or attribute value
        """
        syntax = parse_key(key)
        try:
            element = self.builder.create_element(syntax.name)
        except ValueError as e:
            raise InvalidNameError("Invalid element name", key, e) from e

        prefix = self.config.cdata_prefix
        try:
            if isinstance(value, str) and value.startswith(prefix):
                self.builder.set_cdata(element, value[len(prefix):])
            else:
                text = text_content(value)
                if text is not None:
                    self.builder.set_text(element, text)
        except ValueError as e:
            raise InvalidContentError("Invalid element content", key) from e

        for attr_name, attr_value in syntax.attributes.items():
            if not attr_name:
                raise InvalidNameError("Invalid attribute name", attr_name)
            try:
                self.builder.validate_name(attr_name)
            except ValueError as e:
                raise InvalidNameError("Invalid attribute name", attr_name, e) from e
            try:
                self.builder.set_attribute(element, attr_name, attr_value)
            except ValueError as e:
                raise InvalidContentError("Invalid attribute value", attr_name) from e

        return element

    def _import_fragment(self, key: str, fragment: Any) -> etree._Element:
        try:
            return self.builder.import_fragment(fragment)
        except ValueError as e:
            raise InvalidContentError("Cannot import fragment", key) from e

    def _skip_empty(self, key: str, kind: ValueKind) -> None:
        self.metrics.empty_collections_skipped += 1
        self.logger.debug(
            "Skipped empty collection",
            extra={"key": key, "kind": kind.name}
        )
