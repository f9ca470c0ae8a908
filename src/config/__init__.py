"""Configuration module for EVE Settings Manager.

This module handles application settings and persisted state:
- SettingsManager: JSON-based application settings persistence
- SettingsStore: Dotted-key store for links, groups, names and selections
- Paths: Path constants and discovery
- Servers: Known game servers and their name-lookup endpoints
"""
