"""
Configuration loading and validation for fetch and logging settings.

Provides strongly typed settings objects read from environment variables
(optionally via a .env file) with upfront validation.
"""
