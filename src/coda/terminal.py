"""ANSI colors for Coda diagnostics.

Colors are used only when stdout is a TTY. ``NO_COLOR`` disables them and
``FORCE_COLOR`` enables them regardless of the TTY check.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

_CODES = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "yellow": "\033[33m",
    "cyan": "\033[36m",
    "green": "\033[32m",
    "bright_red": "\033[91m",
    "bright_green": "\033[92m",
}

Color = Literal["bold", "dim", "yellow", "cyan", "green", "bright_red", "bright_green"]

_ANSI = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


def _colors_enabled() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_ENABLED = _colors_enabled()


def supports_color() -> bool:
    return _ENABLED


def colorize(text: str, *colors: Color) -> str:
    """Wrap ``text`` in the given colors, or return it unchanged.

    Example:
        >>> colorize("C-RUN-001", "bright_red", "bold")
        '\\033[91m\\033[1mC-RUN-001\\033[0m'  # colors enabled
        'C-RUN-001'                          # colors disabled
    """
    if not _ENABLED or not colors:
        return text
    prefix = "".join(_CODES[c] for c in colors)
    return f"{prefix}{text}{_CODES['reset']}"


def strip_colors(text: str) -> str:
    return _ANSI.sub("", text)


def location(text: str) -> str:
    return colorize(text, "cyan")


def hint(text: str) -> str:
    return colorize(text, "green")


def suggestion(text: str) -> str:
    return colorize(text, "bright_green", "bold")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def format_error_header(code: str | None, message: str) -> str:
    if code:
        return f"{colorize(code, 'bright_red', 'bold')}: {message}"
    return message


def format_source_line(lineno: int, content: str, *, is_call: bool = False) -> str:
    """Format one numbered source line, marking the invoking call with ``>``."""
    marker = ">" if is_call else " "
    number = colorize(f"{marker}{lineno:>4}", "yellow")
    body = colorize(content, "bright_red") if is_call else dim_text(content)
    return f"{number} | {body}"
