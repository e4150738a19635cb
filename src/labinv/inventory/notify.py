"""Notification sinks for store outcomes (the web client's toasts)."""

from abc import ABC, abstractmethod

from rich.console import Console

from labinv import logger


class Notifier(ABC):
    @abstractmethod
    def success(self, message: str) -> None: ...

    @abstractmethod
    def error(self, message: str) -> None: ...


class LogNotifier(Notifier):
    """Sends outcomes to the log only."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.error(message)


class ConsoleNotifier(Notifier):
    """Prints outcomes to the terminal and logs them."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(stderr=True)

    def success(self, message: str) -> None:
        logger.info(message)
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        logger.error(message)
        self.console.print(f"[red]❌[/red] {message}")
