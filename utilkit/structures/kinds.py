"""
Classification of JSON-like values.

Every shape-dependent helper in utilkit.structures dispatches on kind_of()
instead of sniffing types inline. The kinds mirror the JSON data model:
null, boolean, number, string, sequence (array) and mapping (object).
"""

import json
import math
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

PLACEHOLDER = "-"


class JsonKind(Enum):
    """Variant tag of a JSON-like value."""
    NULL = "null"
    BOOL = "boolean"
    NUMBER = "number"
    STRING = "string"
    SEQUENCE = "array"
    MAPPING = "object"
    INVALID = "invalid"


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    """True for lists, tuples and other sequences, but never for str/bytes."""
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


def owns_key(mapping: Any, key: Any) -> bool:
    """
    `key in mapping` for lookups that must not raise.

    Non-mappings and unhashable keys (lists, dicts) simply own nothing.
    """
    if not is_mapping(mapping):
        return False
    try:
        return key in mapping
    except TypeError:
        return False


def kind_of(value: Any) -> JsonKind:
    """
    Return the JsonKind of a value.

    bool is checked before numbers because bool is a subclass of int.
    """
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if is_mapping(value):
        return JsonKind.MAPPING
    if is_sequence(value):
        return JsonKind.SEQUENCE
    return JsonKind.INVALID


def type_name(value: Any) -> str:
    """
    Describe a value's type as a string.

    **Conceptual**: Used by form/table generators to decide how to render a
    field. Non-empty sequences are described by their first element, wrapped
    in brackets, so ["a", "b"] is "[string]" and [{"x": 1}] is "[object]".

    Args:
        value: Any JSON-like value.

    Returns:
        One of "null", "boolean", "number", "string", "object", "array",
        "[<element type>]" or "invalid".
    """
    kind = kind_of(value)
    if kind is JsonKind.SEQUENCE:
        if len(value) > 0 and value[0] is not None:
            return f"[{type_name(value[0])}]"
        return "array"
    return kind.value


def array_type(value: Any) -> str:
    """
    Describe the element type(s) of a sequence.

    Returns "[<type>]" when every element has the same type_name(), "[mixed]"
    when they differ, "array" for an empty sequence and "Not an array." for
    anything that is not a sequence.
    """
    if kind_of(value) is not JsonKind.SEQUENCE:
        return "Not an array."
    if len(value) == 0:
        return "array"

    subtype = None
    for element in value:
        element_type = type_name(element)
        if subtype is None:
            subtype = element_type
        elif subtype != element_type:
            subtype = "mixed"
            break
    return f"[{subtype}]"


def is_invalid(value: Any) -> bool:
    """True for the values the sanitizers replace: None, "" and " "."""
    return value is None or (isinstance(value, str) and value in ("", " "))


def clean_invalid(value: Any, replace: Any = PLACEHOLDER) -> Any:
    """Return `replace` when value is invalid (see is_invalid), else value."""
    return replace if is_invalid(value) else value


def is_falsy(value: Any) -> bool:
    """
    JavaScript-style falsiness.

    None, False, 0, NaN and "" are falsy. Mappings and sequences are never
    falsy, even when empty, which differs from Python's own truthiness.
    """
    kind = kind_of(value)
    if kind is JsonKind.NULL:
        return True
    if kind is JsonKind.BOOL:
        return not value
    if kind is JsonKind.NUMBER:
        return value == 0 or (isinstance(value, float) and math.isnan(value))
    if kind is JsonKind.STRING:
        return value == ""
    return False


def to_json_text(value: Any) -> str:
    """Compact JSON text of a value; objects JSON cannot encode fall back to str()."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)


def to_display_text(value: Any) -> str:
    """
    Convert a value to text the way a JavaScript String() conversion would.

    Booleans become "true"/"false", None becomes "null", integral floats drop
    their fraction ("1.0" -> "1"), sequences join their elements with ","
    and mappings become "[object Object]".
    """
    kind = kind_of(value)
    if kind is JsonKind.NULL:
        return "null"
    if kind is JsonKind.BOOL:
        return "true" if value else "false"
    if kind is JsonKind.NUMBER:
        if isinstance(value, float):
            if math.isnan(value):
                return "NaN"
            if math.isinf(value):
                return "Infinity" if value > 0 else "-Infinity"
            if value.is_integer():
                return str(int(value))
        return str(value)
    if kind is JsonKind.STRING:
        return value
    if kind is JsonKind.SEQUENCE:
        # Array.prototype.toString renders null elements as empty strings
        return ",".join("" if e is None else to_display_text(e) for e in value)
    if kind is JsonKind.MAPPING:
        return "[object Object]"
    return str(value)
