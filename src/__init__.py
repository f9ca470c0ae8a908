"""EVE Settings Manager.

Discovers, links, groups and synchronizes EVE client character and
account settings files.
"""

__version__ = "1.0.0"
