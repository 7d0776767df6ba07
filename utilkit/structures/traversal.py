"""
Depth-first search and update of nested JSON-like structures.

**Conceptual**: All traversals here share one visiting order. At each mapping
the mapping's own keys are checked first (pre-order); only then are its values
descended into, in insertion order. Sequences are descended element by
element. Only mappings can "own" a key; sequences are containers to look
through.

**Mutation semantics**:
  - deep_get_key / deep_search / deep_search_items never modify anything.
  - deep_find_set is pure: it returns a new root, copying only the path to the
    updated mapping (copy-on-write) and sharing every untouched branch.
  - find_and_set_object is in-place: it overwrites the first match and
    returns the very same root object.
"""

from typing import Any, Callable, Iterator, List, Tuple

from utilkit.structures.kinds import is_mapping, is_sequence, owns_key

Predicate = Callable[[str, Any], bool]


def _children(node: Any) -> Iterator[Any]:
    """Yield the nested containers of a node, in visiting order."""
    if is_mapping(node):
        values = node.values()
    elif is_sequence(node):
        values = node
    else:
        return
    for value in values:
        if is_mapping(value) or is_sequence(value):
            yield value


def deep_search(structure: Any, key: str, predicate: Predicate, return_parent: bool = False) -> Any:
    """
    Find the first key/value pair accepted by a predicate, anywhere in a structure.

    **Conceptual**: Generalizes deep_get_key(). The search stops at the first
    mapping that owns `key` and for which predicate(key, value) is true.

    **Edge cases**:
      - A nested match whose value is None is indistinguishable from "not
        found", so the search continues past it.
      - None (or any scalar) as the structure returns None.

    Args:
        structure: Mapping, sequence or scalar to search.
        key: Key name to look for.
        predicate: Called as predicate(key, value) on every owning mapping.
        return_parent: If True, return the mapping that owns the key instead
            of the value at the key.

    Returns:
        The matched value (or owning mapping), or None if nothing matched.

    Example:
        >>> data = {"a": {"id": 1}, "b": [{"id": 2}]}
        >>> deep_search(data, "id", lambda k, v: v > 1)
        2
    """
    if structure is None:
        return None

    if owns_key(structure, key) and predicate(key, structure[key]):
        return structure if return_parent else structure[key]

    for child in _children(structure):
        found = deep_search(child, key, predicate, return_parent)
        if found is not None:
            return found

    return None


def deep_get_key(structure: Any, key: str) -> Any:
    """
    Return the first value stored under `key` anywhere in a structure.

    Pre-order: the shallowest owner along the first branch that has one wins.
    Returns None when no mapping owns the key.
    """
    return deep_search(structure, key, lambda k, v: k == key)


def deep_search_items(structure: Any, key: str, predicate: Predicate) -> List[Any]:
    """
    Collect every mapping that owns `key` with a value accepted by `predicate`.

    Unlike deep_search() this never short-circuits; matches are returned in
    discovery order (an owner is listed before any matches nested inside it).
    """
    matches: List[Any] = []
    if structure is None:
        return matches

    if owns_key(structure, key) and predicate(key, structure[key]):
        matches.append(structure)

    for child in _children(structure):
        matches.extend(deep_search_items(child, key, predicate))

    return matches


def _set_on_path(node: Any, key: str, value: Any) -> Tuple[bool, Any]:
    # Returns (found, replacement). Replacement is a copy only when found.
    if is_mapping(node):
        if owns_key(node, key):
            updated = dict(node)
            updated[key] = value
            return True, updated
        for child_key, child in node.items():
            found, replacement = _set_on_path(child, key, value)
            if found:
                updated = dict(node)
                updated[child_key] = replacement
                return True, updated
    elif is_sequence(node):
        for index, child in enumerate(node):
            found, replacement = _set_on_path(child, key, value)
            if found:
                updated = list(node)
                updated[index] = replacement
                return True, tuple(updated) if isinstance(node, tuple) else updated
    return False, node


def deep_find_set(structure: Any, key: str, value: Any) -> Any:
    """
    Return a new structure with the first occurrence of `key` set to `value`.

    **Conceptual**: Copy-on-write update. The first mapping (pre-order) that
    owns `key` is copied with the new value; each ancestor between it and the
    root is shallow-copied so it can point at the new child. Every branch off
    that path is shared with the input, and the input itself is untouched.

    **Edge cases**:
      - If no mapping owns `key`, the original structure is returned as-is
        (the same object, nothing copied).

    Args:
        structure: Root mapping or sequence.
        key: Key to replace.
        value: New value for the key.

    Returns:
        The updated copy of the root, or the original root if `key` is absent.

    Example:
        >>> src = {"a": {"b": 1}, "c": {"d": 2}}
        >>> out = deep_find_set(src, "b", 5)
        >>> out["a"]["b"], src["a"]["b"], out["c"] is src["c"]
        (5, 1, True)
    """
    found, updated = _set_on_path(structure, key, value)
    return updated if found else structure


def find_and_set_object(structure: Any, key: str, value: Any) -> Any:
    """
    Overwrite the first occurrence of `key` in place and return the same root.

    Uses the same visiting order as deep_find_set(). When nothing owns the
    key the structure is returned unchanged.
    """
    owner = deep_search(structure, key, lambda k, v: True, return_parent=True)
    if owner is not None:
        owner[key] = value
    return structure
