"""Main application entry point for EVE Settings Manager.

Initializes the application, wires up components, and dispatches a
command-line action against the selected client folder and profile.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config.paths import get_default_eve_dir, get_log_file_path
from .config.servers import server_names
from .config.settings import SettingsManager
from .config.store import SettingsStore
from .lookup.client import CharacterNameClient
from .profiles.discovery import choose_profile, find_eve_folders, find_profiles
from .profiles.models import ALL_GROUPS
from .profiles.repository import ProfileRepository, Session
from .utils.logging import setup_logging


class Application:
    """
    Main application controller.

    Resolves the session from arguments and saved selections, runs one
    action through the ProfileRepository and prints its result.
    """

    def __init__(
        self,
        settings_manager: Optional[SettingsManager] = None,
        store: Optional[SettingsStore] = None,
        verbose: bool = False
    ):
        """Initialize the application."""
        self._logger = setup_logging(
            level=logging.DEBUG if verbose else logging.INFO,
            log_file=get_log_file_path(),
            console=verbose,
        )
        self._logger.info("Application starting")

        self._settings_manager = settings_manager or SettingsManager()
        self._settings = self._settings_manager.load()
        self._name_client = CharacterNameClient(timeout=self._settings.request_timeout)
        self._repository = ProfileRepository(
            store or SettingsStore(),
            settings=self._settings,
            name_client=self._name_client,
        )

    @property
    def repository(self) -> ProfileRepository:
        return self._repository

    def resolve_session(
        self,
        server: Optional[str] = None,
        folder: Optional[str] = None,
        profile: Optional[str] = None
    ) -> Session:
        """
        Build the session, falling back to saved selections.

        Explicit choices are remembered for the next run.
        """
        selections = self._repository.selections
        server = server or self._settings.server
        if server != self._settings.server:
            self._settings_manager.update(server=server)

        if folder:
            selections.set_folder(server, folder)
        else:
            folder = selections.get_folder(server)
            if not folder:
                candidates = find_eve_folders(get_default_eve_dir(), server)
                folder = str(candidates[0]) if candidates else None

        profiles = find_profiles(folder)
        chosen = choose_profile(profiles, profile or selections.get_profile(server))
        if chosen:
            selections.set_profile(server, chosen)

        return Session(
            server=server,
            folder=Path(folder) if folder else None,
            profile=chosen or profile or "",
        )

    def run(self, args: argparse.Namespace) -> int:
        """Run the command selected on the command line."""
        session = self.resolve_session(args.server, args.folder, args.profile)
        self._logger.info(f"Session: {session.server} / {session.profile}")

        handler = getattr(self, f"_cmd_{args.command.replace('-', '_')}")
        try:
            return handler(session, args)
        finally:
            self._name_client.close()

    # ----- Commands -----

    def _print(self, value) -> None:
        print(json.dumps(value, indent=2, ensure_ascii=False, default=str))

    def _result(self, result) -> int:
        data = dict(result.__dict__)
        if data.get("reason") is not None:
            data["reason"] = data["reason"].value
        self._print(data)
        return 0 if result.ok else 1

    def _cmd_scan(self, session: Session, args) -> int:
        self._repository.refresh(session, resolve_names=not args.offline)
        view = self._repository.view(session, args.group)
        for entry in view.characters:
            print(f"char  {entry.file_id}: {entry.label}")
        for entry in view.accounts:
            print(f"user  {entry.file_id}: {entry.label}")
        for character, account in self._repository.dangling_links(session).items():
            print(f"dangling link {character} -> {account}")
        return 0

    def _cmd_link(self, session: Session, args) -> int:
        return 0 if self._repository.link(session, args.character, args.account) else 1

    def _cmd_unlink(self, session: Session, args) -> int:
        return 0 if self._repository.unlink(session, args.character) else 1

    def _cmd_autolink(self, session: Session, args) -> int:
        result = self._repository.auto_link(session, args.character)
        self._print({
            "ok": result.ok,
            "reason": result.reason.value if result.reason else None,
            "character": result.character,
            "account": result.account,
            "candidates": [c.__dict__ for c in result.candidates],
        })
        return 0 if result.ok else 1

    def _cmd_group(self, session: Session, args) -> int:
        repo = self._repository
        action = args.action
        if action == "list":
            groups = repo.groups.all(session.scope)
            self._print({gid: g.to_dict() for gid, g in groups.items()})
            return 0
        if action == "create":
            group = repo.create_group(session, args.name)
            if group is None:
                return 1
            repo.selections.set_group(session.scope, group.id)
            print(group.id)
            return 0
        if action == "select":
            repo.selections.set_group(session.scope, args.group_id)
            return 0
        if action == "apply":
            return self._result(repo.apply_group(session, args.group_id))

        operations = {
            "delete": lambda: repo.delete_group(session, args.group_id),
            "rename": lambda: repo.rename_group(session, args.group_id, args.name),
            "add-linked": lambda: repo.add_linked_to_group(session, args.group_id, args.account),
            "add": lambda: repo.add_to_group(session, args.group_id, args.character),
            "remove": lambda: repo.remove_from_group(session, args.group_id, args.character),
            "template": lambda: repo.set_template(session, args.group_id, args.character),
        }
        return 0 if operations[action]() else 1

    def _cmd_clear_cache(self, session: Session, args) -> int:
        cleared = self._repository.clear_cache()
        self._settings = self._settings_manager.reset()
        return 0 if cleared else 1

    def _cmd_apply_links(self, session: Session, args) -> int:
        return self._result(self._repository.apply_links(session, args.character))

    def _cmd_overwrite(self, session: Session, args) -> int:
        self._repository.refresh(session, resolve_names=False)
        targets = args.targets
        if not targets:
            inventory = self._repository.inventory
            pool = inventory.characters if args.source in inventory.characters else inventory.accounts
            targets = [file_id for file_id in pool if file_id != args.source]
        return self._result(self._repository.overwrite(session, args.source, targets))

    def _cmd_describe(self, session: Session, args) -> int:
        return 0 if self._repository.set_description(session, args.file_id, args.text) else 1

    def _cmd_export(self, session: Session, args) -> int:
        return self._result(self._repository.export_links(session, args.output))

    def _cmd_import(self, session: Session, args) -> int:
        return self._result(self._repository.import_links(session, args.path))


def build_parser() -> argparse.ArgumentParser:
    """Command-line interface definition."""
    parser = argparse.ArgumentParser(
        prog="eve-settings",
        description="Link, group and copy EVE client settings files.",
    )
    parser.add_argument("--server", choices=server_names())
    parser.add_argument("--folder", help="Client settings folder")
    parser.add_argument("--profile", help="Profile directory (settings_*)")
    parser.add_argument("-v", "--verbose", action="store_true")

    commands = parser.add_subparsers(dest="command", required=True)

    scan = commands.add_parser("scan", help="List characters and accounts")
    scan.add_argument("--group", help=f"Group filter (default: saved, or {ALL_GROUPS})")
    scan.add_argument("--offline", action="store_true", help="Skip name lookups")

    link = commands.add_parser("link", help="Link a character to an account")
    link.add_argument("character")
    link.add_argument("account")

    unlink = commands.add_parser("unlink", help="Remove a character's link")
    unlink.add_argument("character")

    autolink = commands.add_parser("autolink", help="Link to the account written just now")
    autolink.add_argument("character")

    group = commands.add_parser("group", help="Manage character groups")
    group_actions = group.add_subparsers(dest="action", required=True)
    group_actions.add_parser("list")
    create = group_actions.add_parser("create")
    create.add_argument("name", nargs="?")
    for action in ("delete", "apply", "select"):
        sub = group_actions.add_parser(action)
        sub.add_argument("group_id")
    for action in ("add", "remove", "template"):
        sub = group_actions.add_parser(action)
        sub.add_argument("group_id")
        sub.add_argument("character")
    rename = group_actions.add_parser("rename")
    rename.add_argument("group_id")
    rename.add_argument("name")
    add_linked = group_actions.add_parser("add-linked", help="Add every character linked to an account")
    add_linked.add_argument("group_id")
    add_linked.add_argument("account")

    apply_links = commands.add_parser("apply-links", help="Copy a linked pair onto all links")
    apply_links.add_argument("character")

    overwrite = commands.add_parser("overwrite", help="Copy one file onto others of its kind")
    overwrite.add_argument("source")
    overwrite.add_argument("targets", nargs="*", help="Targets (default: all of the same kind)")

    describe = commands.add_parser("describe", help="Set a file description")
    describe.add_argument("file_id")
    describe.add_argument("text", nargs="?", default="")

    export = commands.add_parser("export", help="Export links to a folder")
    export.add_argument("output")

    import_ = commands.add_parser("import", help="Import links from a document")
    import_.add_argument("path")

    commands.add_parser("clear-cache", help="Forget all links, groups, names and selections")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Application entry point.

    Returns:
        Exit code (0 for success)
    """
    args = build_parser().parse_args(argv)
    try:
        app = Application(verbose=args.verbose)
        return app.run(args)
    except Exception as e:
        print(f"Fatal error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
