"""
Tests for utilkit/structures/traversal.py

These tests pin down the visiting order (own keys first, then children in
insertion order) and the mutation contract of the two set operations.
"""

import pytest

from utilkit.structures.traversal import (
    deep_find_set,
    deep_get_key,
    deep_search,
    deep_search_items,
    find_and_set_object,
)


@pytest.fixture
def nested():
    """A record with the key "id" at several depths."""
    return {
        "meta": {"id": "meta-id", "tags": ["a", "b"]},
        "items": [
            {"id": 1, "child": {"id": 11}},
            {"id": 2, "child": {"id": 22}},
        ],
        "owner": {"name": "Ada", "profile": {"name": "Ada L."}},
    }


def test_deep_get_key_prefers_own_key_over_nested():
    """Test that the current level's key wins before any descent."""
    data = {"child": {"name": "inner"}, "name": "outer"}

    assert deep_get_key(data, "name") == "outer"


def test_deep_get_key_follows_insertion_order(nested):
    """Test that the first branch (in insertion order) holding the key wins."""
    assert deep_get_key(nested, "id") == "meta-id"


def test_deep_get_key_descends_into_sequences(nested):
    """Test that mappings inside lists are searched."""
    assert deep_get_key(nested["items"], "id") == 1
    assert deep_get_key({"rows": [{"x": {"deep": True}}]}, "deep") is True


def test_deep_get_key_missing_and_none_input(nested):
    """Test soft failure: missing keys and None input give None."""
    assert deep_get_key(nested, "absent") is None
    assert deep_get_key(None, "id") is None
    assert deep_get_key("scalar", "id") is None


def test_deep_search_with_predicate(nested):
    """Test that the predicate filters candidates and the search short-circuits."""
    calls = []

    def over_ten(key, value):
        calls.append(value)
        return isinstance(value, int) and value > 10

    assert deep_search(nested, "id", over_ten) == 11
    # Stops at 11: the later ids (2, 22) are never tested
    assert calls == ["meta-id", 1, 11]


def test_deep_search_return_parent(nested):
    """Test that return_parent gives the owning mapping."""
    parent = deep_search(nested, "name", lambda k, v: v == "Ada L.", return_parent=True)

    assert parent is nested["owner"]["profile"]


def test_deep_search_no_match_returns_none(nested):
    """Test that no match anywhere returns None."""
    assert deep_search(nested, "id", lambda k, v: v == "nope") is None


def test_deep_search_items_collects_all_owners_in_order(nested):
    """Test that every owner is returned, parents before nested children."""
    found = deep_search_items(nested, "id", lambda k, v: True)

    assert [item["id"] for item in found] == ["meta-id", 1, 11, 2, 22]
    assert found[1] is nested["items"][0]


def test_deep_search_items_with_filtering_predicate(nested):
    """Test that only accepted matches are collected."""
    found = deep_search_items(nested, "id", lambda k, v: isinstance(v, int) and v % 2 == 0)

    assert found == [{"id": 2, "child": {"id": 22}}, {"id": 22}]


def test_deep_search_items_none_input():
    """Test that None gives an empty list."""
    assert deep_search_items(None, "id", lambda k, v: True) == []


def test_deep_find_set_copies_path_and_shares_siblings():
    """Test the copy-on-write contract of deep_find_set()."""
    src = {"a": {"b": 1, "keep": {"x": 1}}, "c": {"d": 2}}

    out = deep_find_set(src, "b", 5)

    assert out == {"a": {"b": 5, "keep": {"x": 1}}, "c": {"d": 2}}
    # Input untouched
    assert src["a"]["b"] == 1
    # Path copied
    assert out is not src
    assert out["a"] is not src["a"]
    # Siblings shared
    assert out["c"] is src["c"]
    assert out["a"]["keep"] is src["a"]["keep"]


def test_deep_find_set_only_updates_first_match(nested):
    """Test that only the first owner (pre-order) is replaced."""
    out = deep_find_set(nested, "id", "X")

    assert out["meta"]["id"] == "X"
    assert out["items"][0]["id"] == 1
    assert out["items"] is nested["items"]


def test_deep_find_set_through_sequence():
    """Test that a match inside a list copies the list, not its other elements."""
    src = {"rows": [{"a": 1}, {"b": 2}]}

    out = deep_find_set(src, "b", 3)

    assert out == {"rows": [{"a": 1}, {"b": 3}]}
    assert out["rows"] is not src["rows"]
    assert out["rows"][0] is src["rows"][0]
    assert src["rows"][1] == {"b": 2}


def test_deep_find_set_missing_key_returns_original():
    """Test that an absent key returns the very same structure."""
    src = {"a": {"b": 1}}

    assert deep_find_set(src, "zzz", 1) is src


def test_find_and_set_object_mutates_in_place(nested):
    """Test that find_and_set_object() updates the first match and returns the same root."""
    meta = nested["meta"]

    out = find_and_set_object(nested, "id", "X")

    assert out is nested
    assert nested["meta"] is meta
    assert meta["id"] == "X"
    # Later owners untouched
    assert nested["items"][0]["id"] == 1


def test_find_and_set_object_nested_in_list():
    """Test that in-place update reaches mappings inside lists."""
    data = [{"a": 1}, {"b": {"c": 2}}]

    find_and_set_object(data, "c", 9)

    assert data == [{"a": 1}, {"b": {"c": 9}}]


def test_find_and_set_object_missing_key_is_noop():
    """Test that nothing changes when the key is absent."""
    data = {"a": {"b": 1}}

    assert find_and_set_object(data, "zzz", 1) == {"a": {"b": 1}}


def test_unhashable_key_finds_nothing(nested):
    """Test that searching for a list key returns None instead of raising."""
    assert deep_get_key({"a": 1}, ["a"]) is None
    assert deep_search(nested, {"id": 1}, lambda k, v: True) is None
    assert deep_search_items(nested, ["id"], lambda k, v: True) == []


def test_set_operations_with_unhashable_key_leave_input_alone(nested):
    """Test that both set operations treat an unhashable key as absent."""
    assert deep_find_set(nested, ["id"], 1) is nested
    assert find_and_set_object(nested, ["id"], 1) is nested
    assert nested["meta"]["id"] == "meta-id"
