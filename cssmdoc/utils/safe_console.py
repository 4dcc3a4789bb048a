"""Terminal-safe Console wrapper for the Rich library.

Wraps Rich's Console to automatically sanitize Unicode characters
on terminals that don't support UTF-8.
"""
from rich import box
from rich.console import Console
from typing import Any
from .logger import sanitize_for_terminal, is_utf8_capable


class SafeConsole(Console):
    """Console wrapper that sanitizes Unicode output for legacy terminals.

    Inherits from Rich's Console and overrides print() to automatically
    replace Unicode icons with ASCII equivalents on non-UTF-8 terminals.
    """

    def __init__(self, *args, **kwargs):
        """Initialize SafeConsole with UTF-8 capability detection.

        All arguments are passed through to Rich's Console.
        """
        self._needs_sanitization = not is_utf8_capable()

        if self._needs_sanitization:
            kwargs['legacy_windows'] = True

        super().__init__(*args, **kwargs)

    def print(self, *objects: Any, **kwargs) -> None:
        """Print with automatic Unicode sanitization.

        Args:
            *objects: Objects to print (same as Rich Console.print)
            **kwargs: Keyword arguments (same as Rich Console.print)
        """
        if self._needs_sanitization:
            sanitized_objects = []
            for obj in objects:
                if isinstance(obj, str):
                    sanitized_objects.append(sanitize_for_terminal(obj))
                else:
                    sanitized_objects.append(obj)

            super().print(*sanitized_objects, **kwargs)
        else:
            super().print(*objects, **kwargs)


def table_box() -> box.Box:
    """Box style for report tables: ASCII on terminals without UTF-8."""
    return box.HEAVY_HEAD if is_utf8_capable() else box.ASCII


# Diagnostics never share stdout with the report
err_console = SafeConsole(stderr=True, soft_wrap=True)
