"""Configuration classes for array-to-XML conversion.

This module provides configuration objects for the mapping and serialization
layers. Component configurations validate themselves on construction; the
aggregate ``ConverterConfig`` is immutable and can be derived from the
options mapping accepted by the public API.
"""

import difflib
import json
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional

# Options understood by to_string()/to_document()
OPTION_KEYS = ("version", "encoding", "declare", "name_mappers")

_VERSION_PATTERN = re.compile(r"^[0-9]+\.[0-9]+$")
# EncName production of the XML recommendation
_ENCODING_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9._-]*$")
_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
_COMPONENTS = ["output", "mapping", "global_"]


@dataclass
class OutputConfig:
    """Configuration for the XML declaration and serialization."""

    version: str = "1.0"
    encoding: Optional[str] = None
    declare: bool = True
    pretty_print: bool = True

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if not isinstance(self.version, str) or not _VERSION_PATTERN.match(self.version):
            raise ValueError(f"version must look like '1.0', got {self.version!r}")
        if self.encoding is not None and (
            not isinstance(self.encoding, str)
            or not _ENCODING_PATTERN.match(self.encoding)
        ):
            raise ValueError(f"encoding is not a valid encoding name: {self.encoding!r}")
        if not isinstance(self.declare, bool):
            raise ValueError("declare must be a boolean")
        if not isinstance(self.pretty_print, bool):
            raise ValueError("pretty_print must be a boolean")


@dataclass
class MappingConfig:
    """Configuration for the tree mapper."""

    cdata_prefix: str = "cdata:"
    max_depth: int = 256

    def __post_init__(self) -> None:
        """Validate mapping configuration."""
        if not self.cdata_prefix:
            raise ValueError("cdata_prefix cannot be empty")
        if self.max_depth <= 0:
            raise ValueError("max_depth must be > 0")


@dataclass
class GlobalConfig:
    """Global settings that apply across all components."""

    logging_level: str = "INFO"
    enable_metrics: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        if self.logging_level not in _LOGGING_LEVELS:
            raise ValueError(f"logging_level must be one of {_LOGGING_LEVELS}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ConverterConfig:
    """Complete configuration for a conversion.

    Immutable, so a single instance can be shared between threads running
    independent conversions.
    """

    output: OutputConfig = field(default_factory=OutputConfig)
    mapping: MappingConfig = field(default_factory=MappingConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    # Metadata
    version: str = "1.0.0"
    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete converter configuration."""
        try:
            self.output.__post_init__()
            self.mapping.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ConverterConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Field overrides; ``component__field`` addresses a field
                of a component configuration

        Returns:
            New ConverterConfig instance with overrides applied

        Example:
            >>> config = ConverterConfig()
            >>> compact = config.override(
            ...     output__pretty_print=False,
            ...     mapping__max_depth=32
            ... )
        """
        nested_overrides: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                        suggestions=difflib.get_close_matches(component, _COMPONENTS),
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                nested_overrides[key] = value

        new_fields: Dict[str, Any] = {}
        try:
            for component in _COMPONENTS:
                current_config = getattr(self, component)
                if component in nested_overrides:
                    new_fields[component] = replace(
                        current_config, **nested_overrides.pop(component)
                    )
                else:
                    new_fields[component] = current_config
        except (TypeError, ValueError) as e:
            raise ConfigValidationError(str(e)) from e

        new_fields.update(nested_overrides)
        try:
            return replace(self, **new_fields)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def with_options(self, options: Optional[Mapping[str, Any]]) -> "ConverterConfig":
        """Apply the public API's options mapping on top of this configuration.

        ``version``, ``encoding`` and ``declare`` map onto the output
        component. A ``None`` value counts as absent and keeps the configured
        setting. ``name_mappers`` is accepted but not part of the
        configuration; the API registers those separately.

        Raises:
            ConfigValidationError: On unknown option keys or invalid values
        """
        if not options:
            return self

        overrides: Dict[str, Any] = {}
        for key, value in options.items():
            if key not in OPTION_KEYS:
                raise ConfigValidationError(
                    f"Unknown option: {key}",
                    field_name=key,
                    suggestions=difflib.get_close_matches(str(key), OPTION_KEYS),
                )
            if key == "name_mappers" or value is None:
                continue
            overrides[f"output__{key}"] = value

        if not overrides:
            return self
        return self.override(**overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConverterConfig":
        """Create configuration from dictionary.

        Unknown keys raise ``ConfigValidationError`` instead of being dropped,
        so that a typo in a configuration file does not go unnoticed.
        """
        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            fields = target_class.__dataclass_fields__
            unknown = [key for key in data_dict if key not in fields]
            if unknown:
                raise ConfigValidationError(
                    f"Unknown {target_class.__name__} field: {unknown[0]}",
                    field_name=unknown[0],
                    suggestions=difflib.get_close_matches(unknown[0], list(fields)),
                )

            field_values: Dict[str, Any] = {}
            for field_name, value in data_dict.items():
                field_type = fields[field_name].type
                if hasattr(field_type, "__dataclass_fields__"):
                    field_values[field_name] = _dict_to_dataclass(value, field_type)
                else:
                    field_values[field_name] = value
            try:
                return target_class(**field_values)
            except ValueError as e:
                raise ConfigValidationError(str(e)) from e

        return _dict_to_dataclass(data, cls)

    @classmethod
    def from_json(cls, json_str: str) -> "ConverterConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def compact(cls) -> "ConverterConfig":
        """Create preset producing a single-line document."""
        return cls(
            output=OutputConfig(pretty_print=False),
            name="compact",
            description="Declaration kept, no indentation or line breaks",
        )

    @classmethod
    def fragment(cls) -> "ConverterConfig":
        """Create preset for embedding output into another document."""
        return cls(
            output=OutputConfig(declare=False),
            name="fragment",
            description="No XML declaration, suitable for embedding",
        )

    @classmethod
    def untrusted_input(cls) -> "ConverterConfig":
        """Create preset with a tight nesting limit for untrusted input."""
        return cls(
            mapping=MappingConfig(max_depth=64),
            name="untrusted_input",
            description="Nesting depth limited to 64 levels",
        )
