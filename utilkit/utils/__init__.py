"""
Generic utility functions shared across modules.

Includes the clock abstraction used to timestamp fetch errors and the
logging setup helper.
"""
