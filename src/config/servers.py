"""Known game servers for EVE Settings Manager.

Each server keeps its own client folders, and some of them expose a
public endpoint for resolving character ids to names.
"""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class ServerInfo:
    """A game server and its character name endpoint."""
    name: str
    name_url: str = ""
    name_suffix: str = ""

    @property
    def resolves_names(self) -> bool:
        """True if character names can be looked up remotely."""
        return bool(self.name_url)

    def character_url(self, character_id: str) -> str:
        """Build the lookup URL for a numeric character id."""
        return f"{self.name_url}{character_id}{self.name_suffix}"


DEFAULT_SERVER = "tranquility"

SERVERS: Dict[str, ServerInfo] = {
    "tranquility": ServerInfo(
        name="tranquility",
        name_url="https://esi.evetech.net/latest/characters/",
        name_suffix="/?datasource=tranquility",
    ),
    "serenity": ServerInfo(
        name="serenity",
        name_url="https://ali-esi.evepc.163.com/latest/characters/",
        name_suffix="/?datasource=serenity",
    ),
    "singularity": ServerInfo(name="singularity"),
    # infinity shares serenity's host but names are not looked up for it
    "infinity": ServerInfo(name="infinity"),
    "thunderdome": ServerInfo(name="thunderdome"),
}


def get_server(name: str) -> ServerInfo:
    """
    Look up a server by name.

    Args:
        name: Server name

    Returns:
        ServerInfo, falling back to tranquility for unknown names
    """
    return SERVERS.get(name, SERVERS[DEFAULT_SERVER])


def server_names() -> List[str]:
    """Names of all known servers."""
    return list(SERVERS)


def server_resolves_names(name: str) -> bool:
    """True if name is a known server with a name endpoint."""
    info = SERVERS.get(name)
    return info is not None and info.resolves_names
