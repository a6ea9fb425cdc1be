"""Tests for input value classification."""

from collections import OrderedDict

import pytest
from lxml import etree

from array_to_xml.tree.values import (
    ValueKind,
    classify,
    is_associative,
    iter_items,
    iter_sequence,
)


class TestClassify:
    """Test structural classification of values."""

    @pytest.mark.parametrize("value", [
        ["a", "b"],
        ("a",),
        [],
        {0: "a", 1: "b"},
    ])
    def test_sequences(self, value):
        """Test lists, tuples and index-keyed mappings are sequences."""
        assert classify(value) is ValueKind.SEQUENCE
        assert not is_associative(value)

    @pytest.mark.parametrize("value", [
        {"a": 1},
        OrderedDict([("a", 1)]),
        {},
        {1: "a", 2: "b"},
        {1: "b", 0: "a"},
        {"0": "a"},
        {False: "a", True: "b"},
    ])
    def test_associative(self, value):
        """Test every other mapping, including the empty one, is associative."""
        assert classify(value) is ValueKind.ASSOCIATIVE
        assert is_associative(value)

    @pytest.mark.parametrize("value", [None, "text", 1, 1.5, True, b"bytes"])
    def test_scalars(self, value):
        assert classify(value) is ValueKind.SCALAR
        assert not is_associative(value)

    def test_element_fragment(self):
        """Test lxml elements are fragments."""
        element = etree.fromstring("<a/>")
        assert classify(element) is ValueKind.FRAGMENT

    def test_tree_fragment(self):
        """Test lxml element trees are fragments."""
        tree = etree.ElementTree(etree.fromstring("<a/>"))
        assert classify(tree) is ValueKind.FRAGMENT
        assert not is_associative(tree)


class TestIteration:
    """Test collection iteration helpers."""

    def test_iter_items_mapping(self):
        assert list(iter_items({"a": 1, "b": 2})) == [("a", 1), ("b", 2)]

    def test_iter_items_sequence(self):
        """Test sequences yield indices as keys."""
        assert list(iter_items(["x", "y"])) == [(0, "x"), (1, "y")]

    def test_iter_sequence_mapping(self):
        """Test index-keyed mappings yield their values."""
        assert list(iter_sequence({0: "x", 1: "y"})) == ["x", "y"]

    def test_iter_sequence_list(self):
        assert list(iter_sequence(("x", "y"))) == ["x", "y"]
