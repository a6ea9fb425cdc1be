"""Tests for the tree mapper."""

import pytest
from lxml import etree

from array_to_xml.naming.mappers import NameMapperRegistry
from array_to_xml.shared.config import MappingConfig
from array_to_xml.shared.exceptions import (
    InvalidContentError,
    InvalidNameError,
    MaxDepthExceededError,
)
from array_to_xml.tree.builder import DocumentBuilder
from array_to_xml.tree.mapper import TreeMapper, text_content


def map_to_string(value, registry=None, config=None):
    builder = DocumentBuilder()
    TreeMapper(builder, registry, config).map(value)
    return etree.tostring(builder.finish(), encoding="unicode")


def nested(depth, leaf="x"):
    """Build a mapping nested ``depth`` levels deep."""
    value = leaf
    for _ in range(depth):
        value = {"n": value}
    return value


class TestTextContent:
    """Test scalar rendering."""

    @pytest.mark.parametrize("value, expected", [
        (None, None),
        ("", None),
        (False, None),
        (True, "1"),
        (0, "0"),
        (1.5, "1.5"),
        ("text", "text"),
    ])
    def test_text_content(self, value, expected):
        assert text_content(value) == expected


class TestAssociativeMapping:
    """Test mapping of associative collections."""

    def test_leaf_values(self):
        result = map_to_string({"root": {"a": 1, "b": None, "c": True, "d": False}})
        assert result == "<root><a>1</a><b/><c>1</c><d/></root>"

    def test_preserves_insertion_order(self):
        result = map_to_string({"root": {"z": 1, "a": 2, "m": 3}})
        assert result == "<root><z>1</z><a>2</a><m>3</m></root>"

    def test_attributes_after_content(self):
        result = map_to_string({"root@id=7@lang=en": "text"})
        assert result == '<root id="7" lang="en">text</root>'

    def test_attributes_on_container(self):
        result = map_to_string({"root": {"item@id=1": {"name": "a"}}})
        assert result == '<root><item id="1"><name>a</name></item></root>'

    def test_cdata_prefix(self):
        result = map_to_string({"root": {"foo": "cdata:bar"}})
        assert result == "<root><foo><![CDATA[bar]]></foo></root>"

    def test_custom_cdata_prefix(self):
        config = MappingConfig(cdata_prefix="raw!")
        result = map_to_string({"root": {"foo": "raw!<b>", "bar": "cdata:x"}}, config=config)

        assert result == "<root><foo><![CDATA[<b>]]></foo><bar>cdata:x</bar></root>"

    def test_empty_collections_skipped(self):
        """Test empty mappings and sequences produce no element."""
        builder = DocumentBuilder()
        TreeMapper(builder).map({"root": {"items": [], "map": {}, "x": 1}})

        assert etree.tostring(builder.finish()) == b"<root><x>1</x></root>"
        assert builder.metrics.empty_collections_skipped == 2

    def test_integer_keys_become_names(self):
        """Test non-string keys are converted and validated as names."""
        with pytest.raises(InvalidNameError) as exc_info:
            map_to_string({"root": {5: "a"}})
        assert exc_info.value.name == "5"


class TestSequenceMapping:
    """Test mapping of sequences."""

    def test_derived_item_names(self):
        result = map_to_string({"root": {"elements": [{"id": 1}, {"id": 2}]}})
        expected = (
            "<root><elements><element><id>1</id></element>"
            "<element><id>2</id></element></elements></root>"
        )
        assert result == expected

    def test_explicit_item_name(self):
        result = map_to_string({"root": {"elements|thing": ["a", "b"]}})
        assert result == "<root><elements><thing>a</thing><thing>b</thing></elements></root>"

    def test_flatten(self):
        """Test items are appended directly to the parent."""
        result = map_to_string({"root": {"<elements": ["a", "b"], "after": 1}})
        assert result == "<root><element>a</element><element>b</element><after>1</after></root>"

    def test_index_keyed_mapping_is_sequence(self):
        result = map_to_string({"root": {"items": {0: "a", 1: "b"}}})
        assert result == "<root><items><item>a</item><item>b</item></items></root>"

    def test_container_attributes(self):
        result = map_to_string({"root": {"items@type=list|entry": ["a"]}})
        assert result == '<root><items type="list"><entry>a</entry></items></root>'

    def test_item_attributes_from_mapper(self):
        """Test a mapped item name may carry attribute syntax."""
        registry = NameMapperRegistry({"row": lambda n, i, v: f"{n}@index={i}"})
        result = map_to_string({"root": {"rows": ["a", "b"]}}, registry)

        assert result == '<root><rows><row index="0">a</row><row index="1">b</row></rows></root>'

    def test_mapper_receives_singular_name_index_and_value(self):
        calls = []

        def record(name, index, value):
            calls.append((name, index, value))
            return name

        registry = NameMapperRegistry({"element": record})
        map_to_string({"root": {"elements": [{"id": "One"}, "two"]}}, registry)

        assert calls == [("element", 0, {"id": "One"}), ("element", 1, "two")]

    def test_mapper_must_return_string(self):
        registry = NameMapperRegistry({"element": lambda n, i, v: None})
        with pytest.raises(TypeError, match="expected str"):
            map_to_string({"root": {"elements": ["a"]}}, registry)

    def test_nested_list_items_use_indices(self):
        """Test a list inside a list has index keys, which are invalid names."""
        with pytest.raises(InvalidNameError) as exc_info:
            map_to_string({"root": {"rows": [[1, 2]]}})
        assert exc_info.value.name == "0"

    def test_empty_item_name(self):
        with pytest.raises(InvalidNameError) as exc_info:
            map_to_string({"root": {"elements|": ["a"]}})
        assert exc_info.value.name == ""


class TestFragments:
    """Test embedding of foreign lxml nodes."""

    def test_fragment_value_ignores_key(self):
        fragment = etree.fromstring("<frag><x>1</x></frag>")
        result = map_to_string({"root": {"ignored": fragment, "y": 2}})

        assert result == "<root><frag><x>1</x></frag><y>2</y></root>"
        assert fragment.getparent() is None

    def test_fragment_item_wrapped(self):
        """Test fragment items in a sequence sit inside the item element."""
        fragment = etree.fromstring("<frag/>")
        result = map_to_string({"root": {"parts": [fragment]}})

        assert result == "<root><parts><part><frag/></part></parts></root>"

    def test_empty_tree_fragment(self):
        with pytest.raises(InvalidContentError) as exc_info:
            map_to_string({"root": {"doc": etree.ElementTree()}})
        assert exc_info.value.name == "doc"


class TestErrors:
    """Test error reporting."""

    @pytest.mark.parametrize("key, offending", [
        (">root", ">root"),
        ("root@", ""),
        ("root@id=1@=2", ""),
        (">root@", ">root@"),
        ("root@>", ">"),
        ("bad name@id=1", "bad name@id=1"),
        ("{urn:x}root", "{urn:x}root"),
    ])
    def test_invalid_names(self, key, offending):
        with pytest.raises(InvalidNameError) as exc_info:
            map_to_string({key: None})
        assert exc_info.value.name == offending

    def test_element_name_checked_before_attributes(self):
        """Test a bad element name wins over an empty attribute name."""
        with pytest.raises(InvalidNameError) as exc_info:
            map_to_string({"root": {"bad name@": "x"}})
        assert exc_info.value.name == "bad name@"
        assert "element" in str(exc_info.value)

    def test_invalid_text(self):
        with pytest.raises(InvalidContentError) as exc_info:
            map_to_string({"root": {"bad": "\x01"}})
        assert exc_info.value.name == "bad"

    def test_cdata_terminator_in_value(self):
        """Test a CDATA value containing "]]>" reads back unchanged."""
        result = map_to_string({"root": {"raw": "cdata:a]]>b"}})
        assert etree.fromstring(result).findtext("raw") == "a]]>b"


class TestDepth:
    """Test nesting limits and deep inputs."""

    def test_depth_at_limit(self):
        builder = DocumentBuilder()
        TreeMapper(builder, config=MappingConfig(max_depth=3)).map(nested(3))

        assert builder.metrics.max_depth_reached == 3

    def test_depth_over_limit(self):
        with pytest.raises(MaxDepthExceededError) as exc_info:
            map_to_string(nested(4), config=MappingConfig(max_depth=3))

        assert exc_info.value.depth == 4
        assert exc_info.value.limit == 3

    def test_sequences_count_as_a_level(self):
        value = {"root": {"items": ["a"]}}
        with pytest.raises(MaxDepthExceededError):
            map_to_string(value, config=MappingConfig(max_depth=2))

    def test_deep_input_does_not_recurse(self):
        """Test nesting deeper than the interpreter recursion limit."""
        depth = 3000
        builder = DocumentBuilder()
        TreeMapper(builder, config=MappingConfig(max_depth=depth)).map(nested(depth))

        root = builder.finish().getroot()
        assert sum(1 for _ in root.iter("n")) == depth


class TestMapIntoParent:
    """Test mapping into an existing element."""

    def test_map_into_element(self):
        builder = DocumentBuilder()
        mapper = TreeMapper(builder)
        root = mapper.map({"root": None})[0]

        assert mapper.map({"child": "text"}, root) is root
        assert etree.tostring(builder.finish()) == b"<root><child>text</child></root>"
