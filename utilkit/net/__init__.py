"""
Thin HTTP fetch wrappers with uniform error records.

Every failure (transport error, timeout, abort, non-ok status) surfaces as a
FetchError carrying a FetchErrorRecord.
"""
