"""Conversion API with progressive disclosure.

Level 1 is a pair of module-level functions, ``to_string()`` and
``to_document()``, driven by the same options mapping. Level 2 is the
``ArrayToXML`` class, which holds a configuration and a name mapper
registry across conversions and exposes the incremental ``map()`` call.
"""

import time
from collections.abc import Mapping
from typing import Any, Dict, Optional, Tuple

from lxml import etree

from array_to_xml.naming.mappers import NameMapper, NameMapperRegistry
from array_to_xml.shared import (
    ConfigValidationError,
    ConversionError,
    ConversionMetrics,
    ConverterConfig,
    RootMustBeAssociativeError,
    get_logger,
)
from array_to_xml.tree.builder import DocumentBuilder
from array_to_xml.tree.mapper import TreeMapper
from array_to_xml.tree.values import is_associative

Options = Optional[Mapping]


def _name_mappers_from(options: Options) -> Optional[Mapping]:
    if not options or options.get("name_mappers") is None:
        return None
    name_mappers = options["name_mappers"]
    if not isinstance(name_mappers, Mapping):
        raise ConfigValidationError(
            "name_mappers must be a mapping of item name to function",
            field_name="name_mappers",
        )
    return name_mappers


def _check_root(root: Any) -> None:
    if not is_associative(root):
        raise RootMustBeAssociativeError(type(root).__name__)


def _convert(
    root: Any,
    config: ConverterConfig,
    registry: NameMapperRegistry,
    correlation_id: Optional[str],
) -> Tuple[etree._ElementTree, DocumentBuilder]:
    """Run one conversion with its own builder and mapper."""
    logger = get_logger(__name__, correlation_id, "convert")
    _check_root(root)

    metrics = ConversionMetrics()
    builder = DocumentBuilder(config.output, metrics, correlation_id)
    mapper = TreeMapper(builder, registry, config.mapping, correlation_id)

    logger.info(
        "Starting conversion",
        extra={
            "top_level_keys": len(root),
            "name_mappers": len(registry) - 1,
            "max_depth": config.mapping.max_depth,
        }
    )

    try:
        mapper.map(root)
        document = builder.finish()
    except ConversionError as e:
        metrics.finish()
        logger.error(
            "Conversion failed",
            extra={
                "error_type": type(e).__name__,
                "offending_name": getattr(e, "name", None),
                "processing_time_ms": metrics.processing_time_ms,
            },
            exc_info=False,
        )
        raise

    metrics.finish()
    if config.global_.enable_metrics:
        logger.info("Conversion completed", extra=metrics.to_dict())
    return document, builder


def to_document(
    root: Any,
    options: Options = None,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> etree._ElementTree:
    """Convert a mapping into an lxml document.

    Args:
        root: Associative collection; its single top-level element becomes
            the document root
        options: ``version``, ``encoding``, ``declare`` and ``name_mappers``
        config: Base configuration the options are applied on
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The converted document

    Raises:
        RootMustBeAssociativeError: If ``root`` is not a mapping
        InvalidNameError: If a key yields an invalid element or attribute name
        ConfigValidationError: If ``options`` holds unknown keys or bad values

    Examples:
        >>> document = to_document({"root": {"elements": [{"id": 1}]}})
        >>> document.getroot().find("elements/element/id").text
        '1'
    """
    effective = (config or ConverterConfig()).with_options(options)
    registry = NameMapperRegistry(_name_mappers_from(options))
    document, _ = _convert(root, effective, registry, correlation_id)
    return document


def to_string(
    root: Any,
    options: Options = None,
    config: Optional[ConverterConfig] = None,
    correlation_id: Optional[str] = None,
) -> str:
    """Convert a mapping into an XML string.

    Takes the same arguments as ``to_document()``.

    Examples:
        >>> to_string({"root": None})
        '<?xml version="1.0"?>\\n<root/>\\n'
        >>> to_string({"root": {"foo": "cdata:bar"}}, {"declare": False})
        '<root>\\n  <foo><![CDATA[bar]]></foo>\\n</root>'
    """
    effective = (config or ConverterConfig()).with_options(options)
    registry = NameMapperRegistry(_name_mappers_from(options))
    document, builder = _convert(root, effective, registry, correlation_id)
    return builder.serialize(document)


# Name of the entry point in earlier releases
to_xml = to_string


def serialize(
    document: etree._ElementTree,
    options: Options = None,
    config: Optional[ConverterConfig] = None,
) -> str:
    """Serialize a document returned by ``to_document()``.

    ``to_string(root, options)`` equals
    ``serialize(to_document(root, options), options)``.
    """
    effective = (config or ConverterConfig()).with_options(options)
    return DocumentBuilder(effective.output).serialize(document)


class ArrayToXML:
    """Configured converter with a reusable name mapper registry.

    Attributes:
        config: Configuration used for every conversion
        registry: Name mappers applied to every conversion
        correlation_id: Correlation ID for request tracking
        metrics: Metrics of the most recent conversion

    Examples:
        Reusing mappers across conversions:
        >>> converter = ArrayToXML()
        >>> converter.set_name_mapper("element", lambda n, i, v: n + v["id"])
        ArrayToXML(...)
        >>> converter.to_string({"elements": [{"id": "One"}]}, {"declare": False})
        '<elements>\\n  <elementOne>\\n    <id>One</id>\\n  </elementOne>\\n</elements>'

        Building a document incrementally:
        >>> converter = ArrayToXML()
        >>> root = converter.map({"root": None})[0]
        >>> converter.map({"child": "text"}, root)
        <Element root at ...>
        >>> converter.get_document().getroot()[0].text
        'text'
    """

    def __init__(
        self,
        config: Optional[ConverterConfig] = None,
        name_mappers: Optional[Mapping] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ConverterConfig()
        self.registry = NameMapperRegistry(name_mappers)
        self.correlation_id = correlation_id
        self.metrics: Optional[ConversionMetrics] = None

        self.logger = get_logger(__name__, correlation_id, "array_to_xml")
        self._builder = DocumentBuilder(
            self.config.output, ConversionMetrics(), correlation_id
        )

        self._conversion_count = 0
        self._failed_conversions = 0
        self._total_processing_time = 0.0

    def __repr__(self) -> str:
        return f"ArrayToXML(config={self.config.name!r}, mappers={self.registry.names()!r})"

    def set_name_mapper(self, name: str, mapper: NameMapper) -> "ArrayToXML":
        """Register a name mapper for singular item ``name``.

        Returns:
            The converter, for chaining
        """
        self.registry.register(name, mapper)
        return self

    def map(self, value: Any, parent: Optional[etree._Element] = None) -> etree._Element:
        """Map ``value`` into the working document.

        Args:
            value: Collection to map
            parent: Element of the working document; defaults to its root

        Returns:
            ``parent`` (the synthetic document node when omitted)
        """
        mapper = TreeMapper(
            self._builder, self.registry, self.config.mapping, self.correlation_id
        )
        return mapper.map(value, parent)

    def get_document(self) -> etree._ElementTree:
        """Return a copy of the working document built by ``map()``."""
        return self._builder.finish(detach=False)

    def reset(self) -> None:
        """Discard the working document."""
        self._builder.reset()

    def to_document(self, root: Any, options: Options = None) -> etree._ElementTree:
        """Convert ``root`` with this converter's configuration and mappers.

        ``options`` are applied on top of the converter's configuration for
        this call only; its ``name_mappers`` override registered ones.
        """
        document, _ = self._run(root, options)
        return document

    def to_string(self, root: Any, options: Options = None) -> str:
        """Convert ``root`` and serialize the result."""
        document, builder = self._run(root, options)
        return builder.serialize(document)

    def _run(self, root: Any, options: Options) -> Tuple[etree._ElementTree, DocumentBuilder]:
        start_time = time.perf_counter()
        config = self.config.with_options(options)
        registry = self.registry.copy()
        overrides = _name_mappers_from(options)
        if overrides:
            registry.update(overrides)

        self._conversion_count += 1
        try:
            document, builder = _convert(root, config, registry, self.correlation_id)
        except Exception:
            self._failed_conversions += 1
            raise
        finally:
            self._total_processing_time += (time.perf_counter() - start_time) * 1000

        self.metrics = builder.metrics
        return document, builder

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get converter usage statistics."""
        successful = self._conversion_count - self._failed_conversions
        return {
            "total_conversions": self._conversion_count,
            "successful_conversions": successful,
            "failed_conversions": self._failed_conversions,
            "success_rate": (
                successful / self._conversion_count
                if self._conversion_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset converter usage statistics."""
        self._conversion_count = 0
        self._failed_conversions = 0
        self._total_processing_time = 0.0

        self.logger.info("Converter statistics reset")
