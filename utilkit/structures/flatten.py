"""
Flattening and sanitizing nested records for display.

Records fetched from an API are often nested several levels deep, while a
table or a form wants one flat row of key/value pairs with no blanks. The
helpers here produce exactly that:

  - flatten_obj() / flatten_obj_array() build new flat mappings whose keys
    are the nested key paths joined with "_".
  - sanitize_obj() / sanitize_obj_array() replace blank values with the "-"
    placeholder in place.

Both operations are idempotent: applying them to their own output changes
nothing.
"""

from typing import Any, Dict, List

from utilkit.structures.kinds import PLACEHOLDER, clean_invalid, is_mapping, is_sequence

SEPARATOR = "_"


def flatten_obj(mapping: Any) -> Dict[str, Any]:
    """
    Flatten nested mappings into a single-level mapping.

    **Conceptual**: Each leaf of a nested mapping is lifted to the top level
    under the path of keys leading to it, joined with "_". Sequences are
    leaves: they are kept as-is under their key and not descended into.

    **Functionally**:
      - None and "" leaves become "-" before flattening.
      - An empty nested mapping contributes no keys.
      - The input is not modified.

    Args:
        mapping: Mapping to flatten. None gives an empty result.

    Returns:
        New flat dict.

    Example:
        >>> flatten_obj({"a": {"b": 1, "c": {"d": 2}}, "e": None})
        {'a_b': 1, 'a_c_d': 2, 'e': '-'}
    """
    result: Dict[str, Any] = {}
    if not is_mapping(mapping):
        return result

    for key, value in mapping.items():
        if value is None or value == "":
            value = PLACEHOLDER
        if is_mapping(value):
            for sub_key, sub_value in flatten_obj(value).items():
                result[f"{key}{SEPARATOR}{sub_key}"] = sub_value
        else:
            result[key] = value

    return result


def flatten_obj_array(sequence: Any) -> List[Any]:
    """
    Apply flatten_obj() to every mapping in a sequence.

    Nested non-empty sequences are flattened positionally (they stay nested
    lists, with their mappings flattened); every other element is kept.
    """
    if not is_sequence(sequence):
        return []

    flattened = []
    for element in sequence:
        if is_mapping(element):
            flattened.append(flatten_obj(element))
        elif is_sequence(element) and len(element) > 0:
            flattened.append(flatten_obj_array(element))
        else:
            flattened.append(element)
    return flattened


def sanitize_obj(mapping: Any) -> Any:
    """
    Replace blank values with "-" throughout a mapping, in place.

    **Conceptual**: None, "" and " " are replaced by the placeholder at every
    level: nested mappings are sanitized recursively, and so are the mappings
    found inside sequence values.

    **Mutation**: The mapping is modified in place and the same object is
    returned, so both `sanitize_obj(row)` and `row = sanitize_obj(row)` work.

    Args:
        mapping: Mutable mapping to sanitize. Non-mappings (including None)
            are returned untouched.

    Returns:
        The same mapping object.
    """
    if not is_mapping(mapping):
        return mapping

    for key in list(mapping.keys()):
        value = clean_invalid(mapping[key], PLACEHOLDER)
        if is_mapping(value):
            sanitize_obj(value)
        elif is_sequence(value):
            sanitize_obj_array(value)
        mapping[key] = value

    return mapping


def sanitize_obj_array(sequence: Any) -> Any:
    """Sanitize every mapping inside a sequence (recursing into nested sequences); returns the same sequence."""
    if not is_sequence(sequence):
        return sequence

    for element in sequence:
        if is_mapping(element):
            sanitize_obj(element)
        elif is_sequence(element):
            sanitize_obj_array(element)

    return sequence
