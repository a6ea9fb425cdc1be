"""Naming layer: key grammar and list item name mappers."""

from .grammar import (
    FLATTEN,
    KeySyntax,
    ListKeySyntax,
    parse_key,
    parse_list_key,
    singularize,
    split_attributes,
    split_list_name,
)
from .mappers import (
    DEFAULT_MAPPER_NAME,
    NameMapper,
    NameMapperRegistry,
    identity_mapper,
)

__all__ = [
    "FLATTEN",
    "KeySyntax",
    "ListKeySyntax",
    "parse_key",
    "parse_list_key",
    "singularize",
    "split_attributes",
    "split_list_name",
    "DEFAULT_MAPPER_NAME",
    "NameMapper",
    "NameMapperRegistry",
    "identity_mapper",
]
