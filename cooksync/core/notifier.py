"""User-facing notices."""

from typing import Protocol

from loguru import logger
from rich.console import Console


class Notifier(Protocol):
    """Anything that can show the user a short, fire-and-forget message."""

    def notify(self, message: str) -> None: ...


class ConsoleNotifier:
    """Prints short transient notices and keeps a record of them in the log."""

    def __init__(self, console: Console | None = None, quiet: bool = False) -> None:
        self.console = console or Console(stderr=True)
        self.quiet = quiet

    def notify(self, message: str) -> None:
        logger.info(f"Notice: {message}")
        if not self.quiet:
            self.console.print(f"[cyan]{message}[/cyan]", highlight=False)
