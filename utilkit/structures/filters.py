"""
Filtering, lookup and reshaping of record lists.

A "record list" is a sequence of mappings, typically rows decoded from a JSON
API response. Filters are given as a list of {"key": ..., "value": ...}
mappings and are combined with AND.

**filter_data vs filter_data_fast**:
  - filter_data converts the value at the key to text according to its kind
    (scalar, mapping, or per-element for sequences) and is permissive: a row
    that lacks the key, or holds a blank value there, passes the filter.
  - filter_data_fast compares against the JSON text of the value. It is
    cheaper but coarser: JSON quoting and escaping take part in the match,
    a sequence is matched as one string, and a row that lacks the key is
    dropped.
"""

import re
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from utilkit.structures.kinds import (
    JsonKind,
    is_falsy,
    is_mapping,
    is_sequence,
    kind_of,
    owns_key,
    to_display_text,
    to_json_text,
)
from utilkit.structures.traversal import deep_get_key


def _active_filters(filters: Any) -> Iterator[Tuple[Any, str]]:
    """Yield (key, lower-cased value) for every usable filter; blank ones are skipped."""
    if not is_sequence(filters):
        return
    for entry in filters:
        if not is_mapping(entry):
            continue
        key = entry.get("key")
        value = entry.get("value")
        if is_falsy(key) or is_falsy(value):
            continue
        yield key, to_display_text(value).lower()


def _passes(row: Any, key: Any, needle: str) -> bool:
    if is_falsy(row) or not is_mapping(row):
        return True
    if not owns_key(row, key):
        return True

    value = row[key]
    if is_falsy(value):
        return True

    kind = kind_of(value)
    if kind is JsonKind.MAPPING:
        return needle in to_display_text(list(value.values())).lower()
    if kind is JsonKind.SEQUENCE:
        return any(needle in to_display_text(item).lower() for item in value)
    return needle in to_display_text(value).lower()


def _passes_fast(row: Any, key: Any, needle: str) -> bool:
    if is_falsy(row):
        return True
    if not owns_key(row, key):
        return False
    return needle in to_json_text(row[key]).lower()


def filter_data(data: Any, filters: Any) -> List[Any]:
    """
    Keep the rows whose value at each filter key contains the filter value.

    **Conceptual**: Case-insensitive substring match, one pass per filter.
    The match is inclusive on missing data: rows without the key, rows with a
    falsy value at the key (None, "", 0, False) and falsy rows all pass.

    **Per-kind text**:
      - scalar: JavaScript-style text ("true", "1", "1.5").
      - mapping: its values joined with ",".
      - sequence: passes if any single element's text matches.

    Args:
        data: Sequence of mappings. None gives an empty result.
        filters: Sequence of {"key": str, "value": str}; filters with a blank
            key or value are ignored.

    Returns:
        New list of the retained rows, in their original order.

    Example:
        >>> filter_data([{"name": "Alice"}, {"name": "Bob"}], [{"key": "name", "value": "ali"}])
        [{'name': 'Alice'}]
    """
    rows = list(data) if is_sequence(data) else []
    for key, needle in _active_filters(filters):
        rows = [row for row in rows if _passes(row, key, needle)]
    return rows


def filter_data_fast(data: Any, filters: Any) -> List[Any]:
    """
    Faster, coarser filter_data(): match against the JSON text at the key.

    Rows missing the key are dropped; falsy rows pass.
    """
    rows = list(data) if is_sequence(data) else []
    for key, needle in _active_filters(filters):
        rows = [row for row in rows if _passes_fast(row, key, needle)]
    return rows


def find_one(
    data: Any,
    match_key: str = "",
    match_value: Any = "",
    return_key: str = "",
    match_substring: bool = False,
    match_case_insensitive: bool = True,
) -> Any:
    """
    Find the first row whose `match_key` equals (or contains) `match_value`.

    String comparisons honor `match_case_insensitive` and `match_substring`;
    anything else compares with ==.

    Returns:
        row[return_key] when return_key is given and the row owns it,
        otherwise the whole row; None when nothing matches.
    """
    if not is_sequence(data):
        return None

    for row in data:
        if not is_mapping(row):
            continue
        row_value = row[match_key] if owns_key(row, match_key) else None
        if isinstance(row_value, str) and isinstance(match_value, str):
            left, right = row_value, match_value
            if match_case_insensitive:
                left, right = left.lower(), right.lower()
            matched = right in left if match_substring else left == right
        else:
            matched = row_value == match_value
        if matched:
            if return_key and owns_key(row, return_key):
                return row[return_key]
            return row

    return None


def find_all(data: Any, match_key: str = "", match_value: Any = "", return_key: str = "") -> List[Any]:
    """Collect every row whose `match_key` equals `match_value` (or row[return_key] when the row owns it)."""
    found = []
    if not is_sequence(data):
        return found
    for row in data:
        if owns_key(row, match_key) and row[match_key] == match_value:
            found.append(row[return_key] if return_key and owns_key(row, return_key) else row)
    return found


def extract_key_array(data: Any, key: str = "") -> List[Any]:
    """Deep-look up `key` in every row; falsy results are skipped."""
    values = []
    if not is_sequence(data):
        return values
    for row in data:
        if is_mapping(row):
            value = deep_get_key(row, key)
            if not is_falsy(value):
                values.append(value)
    return values


def extract_keys(data: Any, keys: Sequence[str] = ()) -> List[Dict[str, Any]]:
    """
    Project every row onto `keys`, each looked up with deep_get_key().

    A row is left out entirely when any of the keys is missing or falsy
    (None, "", 0, false) or holds the literal "''".
    """
    projected = []
    if not is_sequence(data):
        return projected
    for row in data:
        if not is_mapping(row):
            continue
        result = {}
        for key in keys:
            value = deep_get_key(row, key)
            if is_falsy(value) or value == "''":
                break
            result[key] = value
        else:
            projected.append(result)
    return projected


def remove_key(mapping: Any, key: str) -> Dict[str, Any]:
    """Return a shallow copy of mapping without `key`."""
    copy = dict(mapping) if is_mapping(mapping) else {}
    if owns_key(copy, key):
        del copy[key]
    return copy


def filter_keys(mapping: Any, keys: Sequence[str] = ()) -> Any:
    """Return a shallow copy of mapping without any of `keys`; non-mappings are returned unchanged."""
    if not is_mapping(mapping):
        return mapping
    return {key: value for key, value in mapping.items() if key not in keys}


def sort_object(mapping: Any) -> Dict[str, Any]:
    """Return a copy of mapping with its keys in sorted order."""
    if not is_mapping(mapping):
        return {}
    return {key: mapping[key] for key in sorted(mapping)}


_DIGITS = re.compile(r"(\d+)")


def _natural_key(value: Any) -> Tuple[Tuple[int, int, str], ...]:
    # "item10" sorts after "item9"; text compares case-insensitively
    parts = _DIGITS.split(to_display_text(value).casefold())
    return tuple((0, int(part), "") if part.isdecimal() else (1, 0, part) for part in parts if part)


def key_sort_data(data: Any, key: Optional[str], order: str = "asc") -> List[Any]:
    """
    Sort rows by the value at `key`, comparing numbers inside text numerically.

    **Functionally**:
      - order "asc" sorts ascending; any other value sorts descending.
      - Rows whose value is None, or that lack the key, always go last and
        keep their relative order.
      - The input is not modified. With an empty key the rows are returned
        in their original order.

    Example:
        >>> key_sort_data([{"n": "v10"}, {"n": "v9"}, {"n": None}], "n")
        [{'n': 'v9'}, {'n': 'v10'}, {'n': None}]
    """
    rows = list(data) if is_sequence(data) else []
    if not key:
        return rows

    present = [row for row in rows if owns_key(row, key) and row[key] is not None]
    absent = [row for row in rows if not (owns_key(row, key) and row[key] is not None)]
    present.sort(key=lambda row: _natural_key(row[key]), reverse=(order != "asc"))
    return present + absent
