"""Logging setup and Windows-safe output handling with Unicode fallback.

Detects terminal encoding and provides ASCII alternatives for Unicode icons
to prevent crashes on Windows terminals that don't support UTF-8. Library
modules log through the standard `logging` module; the CLI routes those
records through rich.
"""
import sys
import locale
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


# Unicode to ASCII icon mapping for Windows compatibility
ICON_MAP = {
    # Status icons
    '✓': '[OK]',
    '✔': '[OK]',
    '✅': '[OK]',
    '✗': '[FAIL]',
    '❌': '[FAIL]',
    '⚠️': '[WARN]',
    '⚠': '[WARN]',

    # Progress/action icons
    '→': '->',
    '←': '<-',
    '✂': '[cut]',

    # Symbols
    '…': '...',
    '•': '*',
    '📁': '[dir]',
    '📄': '[file]',
    '📦': '[pkg]',
    '🔍': '[search]',
    '🔗': '[deps]',
    '🌳': '[tree]',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    # Try stdout encoding first
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    # Fallback to locale
    try:
        return locale.getpreferredencoding().lower()
    except Exception:
        pass

    # Ultimate fallback
    return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters."""
    return detect_terminal_encoding() in ('utf-8', 'utf8', 'utf_8')


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode icons with ASCII equivalents if terminal doesn't support UTF-8.

    Args:
        text: Text potentially containing Unicode icons

    Returns:
        str: Sanitized text safe for current terminal
    """
    if is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)

    return sanitized


def configure_logging(level: str | int = "WARNING", console: Optional[Console] = None) -> logging.Logger:
    """Route the package's log records through a rich handler.

    Args:
        level: Log level name or number
        console: Console to render on (defaults to stderr)

    Returns:
        The package logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    package_logger = logging.getLogger("component_extractor")
    package_logger.handlers = [handler]
    package_logger.setLevel(level)
    package_logger.propagate = False
    return package_logger
