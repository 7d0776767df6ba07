"""
Deep copies of JSON-like structures.

clone_obj() and deep_copy() are interchangeable: both return a value equal
to the input in which no mapping or sequence is shared with the input.
clone_obj() recurses; deep_copy() walks the structure with an explicit work
stack, so it is not bounded by the interpreter's recursion limit.

Mappings are copied to plain dicts; tuples stay tuples, other sequences
become lists. Scalars are immutable and returned as-is.
"""

import json
from typing import Any, List, Tuple

from utilkit.structures.kinds import is_mapping, is_sequence


def _is_container(value: Any) -> bool:
    return is_mapping(value) or is_sequence(value)


def _blank(value: Any) -> Any:
    return {} if is_mapping(value) else [None] * len(value)


def clone_obj(value: Any) -> Any:
    """Recursively copy mappings and sequences; scalars are returned unchanged."""
    if is_mapping(value):
        return {key: clone_obj(item) for key, item in value.items()}
    if is_sequence(value):
        copied = [clone_obj(item) for item in value]
        return tuple(copied) if isinstance(value, tuple) else copied
    return value


def deep_copy(value: Any) -> Any:
    """
    Iteratively copy a structure field by field.

    **Conceptual**: Each container is paired with an empty copy and pushed on
    a work stack. Popping a pair copies its fields one at a time; nested
    containers get their own blank copy and are pushed in turn. Tuples are
    filled as lists and frozen at the end, innermost first, so a parent tuple
    always freezes after its children.

    Args:
        value: Any JSON-like value.

    Returns:
        A structurally independent copy of value.
    """
    if not _is_container(value):
        return value

    root = _blank(value)
    pending: List[Tuple[Any, Any]] = [(value, root)]
    frozen: List[Tuple[Any, Any, list]] = []

    while pending:
        source, target = pending.pop()
        entries = source.items() if is_mapping(source) else enumerate(source)
        for slot, item in entries:
            if _is_container(item):
                copy = _blank(item)
                if isinstance(item, tuple):
                    frozen.append((target, slot, copy))
                pending.append((item, copy))
                item = copy
            target[slot] = item

    for holder, slot, copy in reversed(frozen):
        holder[slot] = tuple(copy)

    return tuple(root) if isinstance(value, tuple) else root


def deep_copy_json(value: Any) -> Any:
    """Copy via a JSON round trip (tuples come back as lists)."""
    return json.loads(json.dumps(value))
