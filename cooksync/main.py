#!/usr/bin/env python3
"""CLI entry point for the Cooksync client."""

import argparse
import sys
import webbrowser
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.table import Table

from .core.client import CooksyncClient
from .core.controller import SyncController, SyncOutcome
from .core.credentials import CredentialStore
from .core.export import ExportRequester
from .core.handshake import AuthHandshake, AuthOutcome
from .core.materializer import RecipeMaterializer
from .core.notifier import ConsoleNotifier
from .core.state import StateFileError, SyncState
from .core.storage import LocalStorage, StorageError
from .core.vault import Vault
from .logger import setup_logging
from .models.config import CooksyncConfig

console = Console()

DEFAULT_CONFIG_PATH = Path("cooksync.yaml")

# A killed process leaves is_syncing set; the startup hook clears it
STALE_FLAG_HINT = "If no sync is running, run 'cooksync startup' to clear the flag"


@dataclass
class App:
    """Everything a command needs, wired from one config."""

    config: CooksyncConfig
    client: CooksyncClient
    controller: SyncController


def build_app(config: CooksyncConfig) -> App:
    """Wire the components together."""
    notifier = ConsoleNotifier(console)
    state = SyncState(config.state_file)
    credentials = CredentialStore(state, LocalStorage(config.local_storage_file))
    client = CooksyncClient(config.base_url, timeout=config.request_timeout)

    controller = SyncController(
        state=state,
        credentials=credentials,
        requester=ExportRequester(client, credentials),
        materializer=RecipeMaterializer(Vault(config.vault_dir), state, notifier),
        notifier=notifier,
        handshake=AuthHandshake(client, credentials, notifier),
    )
    return App(config=config, client=client, controller=controller)


def _print_results(controller: SyncController) -> None:
    results = controller.last_results
    if not results:
        return
    written = sum(1 for r in results if r.success)
    for result in results:
        if result.success:
            console.print(f"[green]{result.message}")
        else:
            console.print(f"[red]FAILED: {result.path}")
            console.print(f"        {result.message}")
    console.print(f"\n[bold]Summary:[/bold] {written} written, {len(results) - written} failed")


def cmd_connect(app: App, args: argparse.Namespace) -> int:
    """Link this client to a Cooksync account."""
    if app.controller.credentials.has_token():
        console.print("[green]Already connected to Cooksync")
        return 0

    console.print("Waiting for authorization in your browser...", style="blue")
    outcome = app.controller.connect()
    if outcome is AuthOutcome.SUCCEEDED:
        console.print("[green]Connected to Cooksync!")
        return 0
    return 1


def cmd_sync(app: App, args: argparse.Namespace) -> int:
    """Run one sync cycle."""
    if not app.controller.credentials.has_token():
        console.print("[yellow]Not connected. Run 'cooksync connect' first.")
        return 1

    console.print("Syncing recipes from Cooksync...", style="blue")
    outcome = app.controller.start_sync()
    if outcome is SyncOutcome.ALREADY_RUNNING:
        console.print(STALE_FLAG_HINT, style="yellow")
    _print_results(app.controller)
    return 0 if outcome in (SyncOutcome.COMPLETED, SyncOutcome.UP_TO_DATE) else 1


def cmd_startup(app: App, args: argparse.Namespace) -> int:
    """Startup hook: sync automatically if enabled and due."""
    outcome = app.controller.on_startup()
    if outcome is None:
        console.print("[dim]No automatic sync needed[/dim]")
        return 0
    _print_results(app.controller)
    return 1 if outcome is SyncOutcome.FAILED else 0


def cmd_status(app: App, args: argparse.Namespace) -> int:
    """Show sync status."""
    status = app.controller.status_summary()

    table = Table(title="Cooksync")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("Connected", "[green]Yes" if status["connected"] else "[red]No")
    table.add_row("Vault", str(app.config.vault_dir))
    table.add_row("Recipe folder", status["target_dir"])
    table.add_row("Sync in progress", "Yes" if status["is_syncing"] else "No")
    table.add_row("Last sync", status["last_sync"][:19] if status["last_sync"] else "Never")
    table.add_row("Last sync failed", "[red]Yes" if status["last_sync_failed"] else "No")
    table.add_row("Imported recipes", str(status["imported_recipes"]))
    table.add_row("Sync on start", "On" if status["auto_sync_on_start"] else "Off")

    console.print(table)
    if status["is_syncing"]:
        console.print(STALE_FLAG_HINT, style="yellow")
    return 0


def cmd_set_dir(app: App, args: argparse.Namespace) -> int:
    """Change the folder recipes are saved into."""
    target_dir = app.controller.update_target_dir(args.directory)
    console.print(f"[green]Recipes will be saved to {target_dir}")
    return 0


def cmd_auto_sync(app: App, args: argparse.Namespace) -> int:
    """Turn sync-on-start on or off."""
    enabled = args.mode == "on"
    app.controller.set_auto_sync_on_start(enabled)
    console.print(f"[green]Sync on start {'enabled' if enabled else 'disabled'}")
    return 0


def cmd_customize(app: App, args: argparse.Namespace) -> int:
    """Open the import options page."""
    url = app.client.customize_url()
    if not webbrowser.open(url):
        console.print(f"Open this URL in your browser: {url}")
    return 0


COMMANDS = {
    "connect": cmd_connect,
    "sync": cmd_sync,
    "startup": cmd_startup,
    "status": cmd_status,
    "set-dir": cmd_set_dir,
    "auto-sync": cmd_auto_sync,
    "customize": cmd_customize,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Sync your Cooksync recipes into a Markdown vault",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=DEFAULT_CONFIG_PATH,
        help="Path to config file (default: ./cooksync.yaml)",
    )
    parser.add_argument("--vault", help="Vault directory (overrides config)")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("connect", help="Connect to your Cooksync account")
    subparsers.add_parser("sync", help="Sync your Cooksync data")
    subparsers.add_parser("startup", help="Sync if sync-on-start is enabled and due")
    subparsers.add_parser("status", help="Show sync status")

    set_dir_parser = subparsers.add_parser("set-dir", help="Change the recipe folder")
    set_dir_parser.add_argument("directory", help="Folder inside the vault (blank for default)")

    auto_sync_parser = subparsers.add_parser("auto-sync", help="Sync automatically on start")
    auto_sync_parser.add_argument("mode", choices=["on", "off"])

    subparsers.add_parser("customize", help="Customize import options, such as tags")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    config = CooksyncConfig.load(args.config)
    if args.vault:
        config.vault_path = args.vault
    setup_logging(config.log_file, config.log_level)

    try:
        return handler(build_app(config), args)
    except (StateFileError, StorageError) as e:
        console.print(f"[red]{e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
