"""Utility module for EVE Settings Manager.

This module provides cross-cutting utilities:
- Logging: Configured logging with home directory redaction
- Validators: Input validation for ids, names and paths
- Threading: Bounded worker pool and background task helpers
"""
