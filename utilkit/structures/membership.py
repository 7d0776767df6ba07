"""
Presence checks over mappings, sequences and scalars.

has() answers a different question depending on what it is given:

  - mapping:  does it own the key?
  - sequence: is the key one of its elements?
  - scalar:   does its JSON text contain the key's JSON text?
"""

from typing import Any

from utilkit.structures.kinds import JsonKind, is_falsy, is_mapping, kind_of, owns_key, to_json_text


def val_contains(value: Any, search: Any, case_sensitive: bool = False) -> bool:
    """
    Check whether the JSON text of `value` contains the JSON text of `search`.

    **Edge cases**:
      - Strings keep their JSON quotes, so val_contains("abc", "b") is False
        while val_contains("abc", "abc") and val_contains(["abc"], "abc")
        are True.
      - Numbers compare digit-wise: val_contains(123, 2) is True.

    Args:
        value: Value to search in.
        search: Value to search for.
        case_sensitive: Compare case-sensitively (default False).

    Returns:
        True if the serialized search is a substring of the serialized value.
    """
    haystack = to_json_text(value)
    needle = to_json_text(search)
    if case_sensitive:
        return needle in haystack
    return needle.lower() in haystack.lower()


def has(structure: Any, key: Any = "") -> bool:
    """
    Check whether a structure "has" a key, according to its kind.

    Args:
        structure: Mapping, sequence or scalar.
        key: Key (mapping), element (sequence) or fragment (scalar). For a
            mapping, "" means "is this a mapping at all" and returns True.

    Returns:
        True/False; falsy scalars and None are always False.
    """
    if is_falsy(structure):
        return False

    kind = kind_of(structure)
    if kind is JsonKind.MAPPING:
        if key == "":
            return True
        return owns_key(structure, key)
    if kind is JsonKind.SEQUENCE:
        return len(structure) > 0 and structure[0] is not None and key in structure
    if kind is JsonKind.INVALID:
        return False
    return val_contains(structure, key)


def has_all(structure: Any, keys: Any) -> bool:
    """
    Check that every key is present, across every element of a sequence.

    **Conceptual**: All-or-nothing version of has(). With a list of keys, each
    key must be a string and must pass has_all() on its own. With a single key,
    a mapping must own it, and a sequence must consist only of mappings that
    all own it.

    Example:
        >>> has_all([{"a": 1, "b": 2}, {"a": 3, "b": 4}], ["a", "b"])
        True
        >>> has_all([{"a": 1}, {"b": 2}], ["a"])
        False
    """
    if isinstance(keys, (list, tuple)):
        if len(keys) == 0 or keys[0] is None:
            return False
        return all(isinstance(k, str) and has_all(structure, k) for k in keys)

    kind = kind_of(structure)
    if kind is JsonKind.SEQUENCE:
        if len(structure) == 0 or structure[0] is None:
            return False
        return all(is_mapping(element) and has_all(element, keys) for element in structure)
    if kind is JsonKind.MAPPING:
        return owns_key(structure, keys)
    return False
