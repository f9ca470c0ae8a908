"""HTTP client for character name lookups.

Fetches the public character record for a numeric id from the server's
ESI endpoint and extracts its ``name`` field.
"""

import logging

import requests

from src.config.servers import ServerInfo

logger = logging.getLogger("eve_settings.name_client")


# Request timeout in seconds
REQUEST_TIMEOUT = 10

USER_AGENT = "EVESettingsManager/1.0"


class NameLookupError(Exception):
    """Base exception for name lookup errors."""
    pass


class NameLookupConnectionError(NameLookupError):
    """Raised when unable to reach the lookup endpoint."""
    pass


class NameLookupNotFoundError(NameLookupError):
    """Raised when the character does not exist."""
    pass


class CharacterNameClient:
    """Client for the public character endpoint."""

    def __init__(self, timeout: int = REQUEST_TIMEOUT):
        """
        Initialize the client.

        Args:
            timeout: Request timeout in seconds
        """
        self._timeout = timeout
        self._session = requests.Session()
        self._session.headers.update({
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        })

    def get_name(self, server: ServerInfo, character_id: str) -> str:
        """
        Look up a character's display name.

        Args:
            server: Server whose endpoint to query
            character_id: Numeric character id

        Returns:
            The character name

        Raises:
            NameLookupConnectionError: If unable to connect
            NameLookupNotFoundError: If the character is unknown
            NameLookupError: For unsupported servers, other statuses
                and malformed bodies
        """
        if not server.resolves_names:
            raise NameLookupError(f"Server {server.name} has no name endpoint")

        url = server.character_url(character_id)
        try:
            logger.debug(f"Looking up character name: {url}")
            response = self._session.get(url, timeout=self._timeout)
        except requests.exceptions.Timeout:
            raise NameLookupConnectionError(f"Name lookup timed out for {character_id}")
        except requests.exceptions.ConnectionError as e:
            raise NameLookupConnectionError(f"Unable to reach name endpoint: {e}")
        except requests.exceptions.RequestException as e:
            raise NameLookupError(f"Name lookup failed: {e}")

        if response.status_code == 404:
            raise NameLookupNotFoundError(f"Character not found: {character_id}")
        if response.status_code != 200:
            raise NameLookupError(
                f"Name lookup error {response.status_code} for {character_id}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise NameLookupError(f"Malformed response for {character_id}: {e}")

        name = data.get("name") if isinstance(data, dict) else None
        if not isinstance(name, str) or not name:
            raise NameLookupError(f"Response for {character_id} has no name")

        return name

    def close(self) -> None:
        """Close the HTTP session."""
        self._session.close()

    def __enter__(self) -> "CharacterNameClient":
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()
