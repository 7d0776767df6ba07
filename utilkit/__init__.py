"""
utilkit – helpers for nested JSON-like data and normalized HTTP fetches.

Subpackages are imported explicitly (utilkit.structures, utilkit.net);
nothing is re-exported from this top-level namespace.
"""
