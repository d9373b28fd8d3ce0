"""Windows-safe Console wrapper for Rich library.

Wraps Rich's Console to automatically sanitize Unicode characters
on Windows terminals that don't support UTF-8, and adds the step /
success / warning lines the CLI prints while extracting.
"""
from rich.console import Console
from rich.markup import escape
from typing import Any
from .logger import sanitize_for_terminal, is_utf8_capable


class SafeConsole(Console):
    """Console wrapper that sanitizes Unicode output for Windows compatibility."""

    def __init__(self, *args, **kwargs):
        """Initialize SafeConsole with UTF-8 capability detection.

        All arguments are passed through to Rich's Console.
        """
        self._needs_sanitization = not is_utf8_capable()

        # Force legacy_windows mode if needed to prevent Unicode spinner issues
        if self._needs_sanitization:
            kwargs['legacy_windows'] = True

        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        """Print with automatic Unicode sanitization."""
        if self._needs_sanitization:
            objects = tuple(
                sanitize_for_terminal(obj) if isinstance(obj, str) else obj
                for obj in objects
            )
        super().print(*objects, **kwargs)

    def status(self, *args, **kwargs):
        """Create a status context with ASCII-safe spinner on Windows."""
        if self._needs_sanitization:
            kwargs['spinner'] = 'line'

        return super().status(*args, **kwargs)

    def step(self, icon: str, message: str) -> None:
        self.print(f"{icon} [bold blue]{escape(message)}[/bold blue]")

    def success(self, message: str) -> None:
        self.print(f"✅ [bold green]{escape(message)}[/bold green]")

    def warn(self, message: str) -> None:
        self.print(f"⚠ [yellow]{escape(message)}[/yellow]")

    def error(self, message: str) -> None:
        self.print(f"❌ [bold red]Error:[/bold red] {escape(message)}")
