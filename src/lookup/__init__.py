"""Remote character name lookup.

This module resolves numeric character ids to display names:
- CharacterNameClient: HTTP client for the server's public character endpoint
- NameResolver: Bounded-concurrency resolution with a persistent cache
"""

from .client import (
    CharacterNameClient,
    NameLookupError,
    NameLookupConnectionError,
    NameLookupNotFoundError,
)
from .resolver import NameResolver, NameResolution, ResolutionStatus, NameCache

__all__ = [
    "CharacterNameClient",
    "NameLookupError",
    "NameLookupConnectionError",
    "NameLookupNotFoundError",
    "NameResolver",
    "NameResolution",
    "ResolutionStatus",
    "NameCache",
]
