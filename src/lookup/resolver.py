"""Best-effort character name resolution.

Names are fetched with a fixed-width worker pool. A failed lookup leaves
the character unresolved for a later scan; a successful one is cached
under ``names.<server>.<fileId>`` and never fetched again.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from src.config.servers import get_server, server_resolves_names
from src.config.store import SettingsStore
from src.lookup.client import CharacterNameClient, NameLookupError
from src.utils.threading import map_limit

logger = logging.getLogger("eve_settings.name_resolver")

DEFAULT_CONCURRENCY = 4


class ResolutionStatus(Enum):
    """Outcome of a single name lookup."""
    RESOLVED = "resolved"
    UNRESOLVED = "unresolved"


@dataclass
class NameResolution:
    """Result of resolving one character file's name."""
    file_id: str
    character_id: str
    status: ResolutionStatus
    name: Optional[str] = None
    error: Optional[str] = None

    @property
    def resolved(self) -> bool:
        """True if a name was obtained."""
        return self.status == ResolutionStatus.RESOLVED


class NameCache:
    """Persistent cache of resolved character names."""

    def __init__(self, store: SettingsStore):
        self._store = store

    @staticmethod
    def _key(server: str, file_id: str) -> Tuple[str, str, str]:
        return ("names", server, file_id)

    def get(self, server: str, file_id: str) -> Optional[str]:
        name = self._store.read(self._key(server, file_id))
        return name if isinstance(name, str) and name else None

    def set(self, server: str, file_id: str, name: str) -> bool:
        try:
            self._store.save(self._key(server, file_id), name)
        except OSError as e:
            logger.warning(f"Could not cache name for {file_id}: {e}")
            return False
        return True


class NameResolver:
    """Resolves missing character names with bounded concurrency."""

    def __init__(
        self,
        client: CharacterNameClient,
        cache: NameCache,
        concurrency: int = DEFAULT_CONCURRENCY
    ):
        """
        Initialize the resolver.

        Args:
            client: HTTP client used for lookups
            cache: Cache receiving successful resolutions
            concurrency: Number of lookup workers
        """
        self._client = client
        self._cache = cache
        self._concurrency = max(1, concurrency)

    def resolve(
        self,
        server: str,
        pending: Sequence[tuple]
    ) -> List[NameResolution]:
        """
        Resolve names for characters missing one.

        Args:
            server: Server name
            pending: (file_id, character_id) pairs

        Returns:
            One NameResolution per pending entry, in input order
        """
        if not pending:
            return []
        if not server_resolves_names(server):
            logger.debug(f"Server {server} does not resolve names")
            return [
                NameResolution(file_id, char_id, ResolutionStatus.UNRESOLVED,
                               error="unsupported server")
                for file_id, char_id in pending
            ]

        info = get_server(server)

        def lookup(entry: tuple, _index: int) -> NameResolution:
            file_id, char_id = entry
            try:
                name = self._client.get_name(info, char_id)
            except NameLookupError as e:
                logger.debug(f"Name lookup for {file_id} failed: {e}")
                return NameResolution(file_id, char_id, ResolutionStatus.UNRESOLVED,
                                      error=str(e))
            self._cache.set(server, file_id, name)
            return NameResolution(file_id, char_id, ResolutionStatus.RESOLVED, name=name)

        results = map_limit(list(pending), self._concurrency, lookup)

        resolutions = []
        for (file_id, char_id), result in zip(pending, results):
            if result is None:
                result = NameResolution(file_id, char_id, ResolutionStatus.UNRESOLVED,
                                        error="lookup failed")
            resolutions.append(result)

        resolved = sum(1 for r in resolutions if r.resolved)
        logger.info(f"Resolved {resolved} of {len(resolutions)} character names on {server}")
        return resolutions
