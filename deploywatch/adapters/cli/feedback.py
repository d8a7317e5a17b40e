"""
Rich-based watch feedback
"""
from typing import Optional

from rich.console import Console
from rich.status import Status

from ...core.interfaces import WatchFeedback
from ...core.logging import get_stdout_console


class RichWatchFeedback(WatchFeedback):
    """Spinner while idle, a check mark line per deploy action"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or get_stdout_console()
        self._status: Optional[Status] = None

    def clear(self) -> None:
        self.console.clear()

    def watching(self, message: str) -> None:
        text = f"[yellow]{message}[/yellow]"
        if self._status is None:
            self._status = self.console.status(text, spinner="dots", spinner_style="yellow")
            self._status.start()
        else:
            self._status.update(text)
            self._status.start()

    def announce(self, message: str) -> None:
        self.stop()
        self.console.print(f"[green]✔[/green] {message}")

    def stop(self) -> None:
        if self._status is not None:
            self._status.stop()
