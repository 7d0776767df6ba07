"""
Deep traversal, copying, flattening and filtering of nested JSON-like data.

Every function here works on plain mappings, sequences and scalars. Only
functions documented as in-place mutate their input.
"""
