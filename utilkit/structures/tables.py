"""
Tabular views of nested record lists.

Converts decoded JSON rows into a pandas DataFrame for display or export:
each row is flattened with flatten_obj(), so nested fields become columns
named by their key path ("address_city").
"""

from typing import Any, Dict, List

import pandas as pd

from utilkit.structures.flatten import flatten_obj, flatten_obj_array
from utilkit.structures.kinds import is_mapping, is_sequence


def records_to_frame(records: Any) -> pd.DataFrame:
    """
    Flatten a list of nested records and load them into a DataFrame.

    **Functionally**:
      - Mappings are flattened; None/"" leaves show as "-".
      - Non-mapping elements (and nested sequences of rows) are skipped.
      - Columns appear in first-seen order; a row missing a column gets NaN.
      - None or an empty list gives an empty DataFrame.

    Args:
        records: Sequence of (possibly nested) mappings.

    Returns:
        DataFrame with one row per mapping.

    Example:
        >>> df = records_to_frame([{"id": 1, "owner": {"name": "Ada"}}])
        >>> list(df.columns)
        ['id', 'owner_name']
    """
    if not is_sequence(records):
        return pd.DataFrame()

    rows = [row for row in flatten_obj_array(records) if is_mapping(row)]
    if len(rows) == 0:
        return pd.DataFrame()

    try:
        return pd.DataFrame(rows)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Failed to convert records to DataFrame: {e}") from e


def column_options(mapping: Any) -> List[Dict[str, Any]]:
    """
    Describe the flattened columns of a record as selector options.

    Each option is {"id": index, "key": column, "value": column, "label": ...}
    where the label replaces the first "_" with a space and capitalizes the
    first letter ("first_name" -> "First name").
    """
    if not is_mapping(mapping):
        return []

    options = []
    for index, key in enumerate(flatten_obj(mapping)):
        label = str(key).replace("_", " ", 1)
        options.append({
            "id": index,
            "key": key,
            "value": key,
            "label": label[:1].upper() + label[1:],
        })
    return options
