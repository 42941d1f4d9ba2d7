"""ANSI colors for diagnostics.

Colors are used only when stdout is a TTY. ``NO_COLOR`` disables them and
``FORCE_COLOR`` enables them regardless (https://no-color.org/). The
decision is made per call, so toggling the variables takes effect
immediately.
"""

from __future__ import annotations

import os
import re
import sys

_CODES = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "cyan": "\033[36m",
    "yellow": "\033[33m",
    "green": "\033[32m",
    "bright_red": "\033[91m",
}

_ANSI_RE = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")


def supports_color() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


def colorize(text: str, *colors: str) -> str:
    """Wrap ``text`` in the given ANSI codes when colors are enabled."""
    if not colors or not supports_color():
        return text
    prefix = "".join(_CODES[color] for color in colors)
    return f"{prefix}{text}{_CODES['reset']}"


def strip_colors(text: str) -> str:
    return _ANSI_RE.sub("", text)


def location(text: str) -> str:
    return colorize(text, "cyan")


def hint(text: str) -> str:
    return colorize(text, "green")


def dim_text(text: str) -> str:
    return colorize(text, "dim")


def error_code(text: str) -> str:
    return colorize(text, "bright_red", "bold")


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """Render one numbered source line; the error line gets a ``>`` marker."""
    marker = ">" if is_error else " "
    number = colorize(f"{marker}{lineno:>3}", "yellow")
    body = colorize(content, "bright_red") if is_error else dim_text(content)
    return f"{number} | {body}"
