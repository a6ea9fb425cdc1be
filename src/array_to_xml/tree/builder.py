"""Document builder backed by lxml.

The tree mapper never produces markup text itself. It asks this builder to
create elements, text, CDATA sections and attributes, and to serialize the
finished document; entity escaping and name checks are lxml's job.

Builder methods raise ``ValueError`` for names or content lxml rejects;
translating those into conversion errors is up to the caller, which knows
which key was being converted.
"""

import copy
from typing import Any, Optional

from lxml import etree

from array_to_xml.shared.config import OutputConfig
from array_to_xml.shared.exceptions import InvalidDocumentError
from array_to_xml.shared.logging import get_logger
from array_to_xml.shared.result import ConversionMetrics

# Tag of the synthetic element that collects top-level nodes; never serialized
_DOCUMENT_HOLDER_TAG = "document"


class DocumentBuilder:
    """Creates lxml nodes for one conversion and serializes the result.

    Attributes:
        output: Declaration and serialization settings
        metrics: Counters updated for every node created
    """

    def __init__(
        self,
        output: Optional[OutputConfig] = None,
        metrics: Optional[ConversionMetrics] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.output = output or OutputConfig()
        self.metrics = metrics or ConversionMetrics()
        self.logger = get_logger(__name__, correlation_id, "document_builder")
        self._holder = etree.Element(_DOCUMENT_HOLDER_TAG)

    @property
    def document_root(self) -> etree._Element:
        """Synthetic parent for top-level elements."""
        return self._holder

    def validate_name(self, name: str) -> None:
        """Raise ``ValueError`` unless ``name`` is a plain XML name.

        Namespaced names (``prefix:local`` or ``{uri}local``) are rejected.
        """
        if "{" in name or "}" in name:
            raise ValueError(f"Invalid name {name!r}: namespaces are not supported")
        etree.QName(name)

    def create_element(self, name: str) -> etree._Element:
        self.validate_name(name)
        element = etree.Element(name)
        self.metrics.elements_created += 1
        return element

    def set_text(self, element: etree._Element, text: str) -> None:
        element.text = text
        self.metrics.text_nodes += 1

    def set_cdata(self, element: etree._Element, text: str) -> None:
        """Set ``text`` as a CDATA section.

        A ``]]>`` inside ``text`` is written as adjacent CDATA sections, so
        the text reads back unchanged.
        """
        element.text = etree.CDATA(text)
        self.metrics.cdata_sections += 1

    def set_attribute(self, element: etree._Element, name: str, value: str) -> None:
        self.validate_name(name)
        element.set(name, value)
        self.metrics.attributes_set += 1

    def append_child(self, parent: etree._Element, child: etree._Element) -> None:
        parent.append(child)

    def import_fragment(self, fragment: Any) -> etree._Element:
        """Return a detached deep copy of a foreign element or element tree."""
        if isinstance(fragment, etree._ElementTree):
            fragment = fragment.getroot()
        if fragment is None:
            raise ValueError("Cannot import an empty element tree")

        node = copy.deepcopy(fragment)
        node.tail = None
        self.metrics.fragments_imported += 1
        self.logger.debug(
            "Imported foreign fragment",
            extra={"fragment_tag": str(node.tag)}
        )
        return node

    def finish(self, detach: bool = True) -> etree._ElementTree:
        """Wrap the single top-level element into its own document.

        Args:
            detach: Move the element out of the builder; when False the
                document holds a copy and the builder keeps the original

        Raises:
            InvalidDocumentError: If there is not exactly one top-level element
        """
        roots = list(self._holder)
        if len(roots) != 1:
            raise InvalidDocumentError(len(roots))

        root = roots[0]
        if detach:
            self._holder.remove(root)
        else:
            root = copy.deepcopy(root)
        return etree.ElementTree(root)

    def reset(self) -> None:
        """Drop everything built so far."""
        self._holder = etree.Element(_DOCUMENT_HOLDER_TAG)

    def declaration(self) -> str:
        encoding = (
            f' encoding="{self.output.encoding}"' if self.output.encoding else ""
        )
        return f'<?xml version="{self.output.version}"{encoding}?>'

    def serialize(
        self,
        document: etree._ElementTree,
        declare: Optional[bool] = None,
    ) -> str:
        """Serialize a document built by ``finish()``.

        Without an encoding, non-ASCII characters are written as character
        references. With a declaration the text ends with a newline; without
        one it ends at the root's closing tag.

        Args:
            document: Document to serialize
            declare: Override for ``output.declare``

        Returns:
            The serialized document
        """
        if declare is None:
            declare = self.output.declare

        root = document.getroot()
        if self.output.encoding:
            body = etree.tostring(
                root,
                encoding="unicode",
                pretty_print=self.output.pretty_print,
            )
        else:
            body = etree.tostring(
                root,
                encoding="us-ascii",
                xml_declaration=False,
                pretty_print=self.output.pretty_print,
            ).decode("ascii")

        if body.endswith("\n"):
            body = body[:-1]
        if not declare:
            return body
        return f"{self.declaration()}\n{body}\n"
