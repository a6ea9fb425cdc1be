"""Tests for the name mapper registry."""

import pytest

from array_to_xml.naming.mappers import (
    DEFAULT_MAPPER_NAME,
    NameMapperRegistry,
    identity_mapper,
)


def suffix_with_id(name, index, value):
    return name + value["id"]


class TestNameMapperRegistry:
    """Test registration and resolution of name mappers."""

    def test_default_entry(self):
        """Test registry is seeded with the identity mapper."""
        registry = NameMapperRegistry()

        assert DEFAULT_MAPPER_NAME in registry
        assert len(registry) == 1
        assert registry.resolve("anything") is identity_mapper

    def test_identity_mapper(self):
        """Test identity mapper ignores index and value."""
        assert identity_mapper("element", 3, {"id": "x"}) == "element"

    def test_register_and_resolve(self):
        """Test registered mapper is returned for its exact name."""
        registry = NameMapperRegistry()
        registry.register("element", suffix_with_id)

        assert registry.resolve("element") is suffix_with_id
        assert registry.resolve("elements") is identity_mapper
        assert registry.resolve("element")("element", 0, {"id": "One"}) == "elementOne"

    def test_register_chaining(self):
        """Test register returns the registry."""
        registry = NameMapperRegistry()
        assert registry.register("a", identity_mapper) is registry

    def test_register_overwrites(self):
        """Test registering twice keeps the last mapper."""
        registry = NameMapperRegistry()
        registry.register("row", suffix_with_id)
        registry.register("row", identity_mapper)

        assert registry.resolve("row") is identity_mapper

    def test_register_default_replaces_fallback(self):
        """Test overriding 'default' changes the fallback."""
        registry = NameMapperRegistry()
        registry.register(DEFAULT_MAPPER_NAME, suffix_with_id)

        assert registry.resolve("unregistered") is suffix_with_id

    def test_register_non_callable(self):
        """Test non-callable mappers are rejected."""
        registry = NameMapperRegistry()
        with pytest.raises(TypeError, match="must be callable"):
            registry.register("row", "not a function")

    def test_initial_mappers(self):
        """Test constructor registers the given mapping."""
        registry = NameMapperRegistry({"row": suffix_with_id})

        assert registry.names() == [DEFAULT_MAPPER_NAME, "row"]
        assert list(registry) == registry.names()

    def test_copy_is_independent(self):
        """Test copies do not share registrations."""
        registry = NameMapperRegistry({"row": suffix_with_id})
        clone = registry.copy()
        clone.register("cell", identity_mapper)

        assert "cell" in clone
        assert "cell" not in registry
        assert clone.resolve("row") is suffix_with_id

    def test_repr(self):
        assert "row" in repr(NameMapperRegistry({"row": identity_mapper}))
