"""HTML escaping for ``{{ }}`` output."""

from __future__ import annotations

from typing import Any

# Only the three characters that can open or close markup are replaced
_ESCAPE_TABLE = str.maketrans({"&": "&amp;", "<": "&lt;", ">": "&gt;"})


def to_str(value: Any) -> str:
    """Stringify an expression result; ``None`` renders as nothing."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def html_escape(value: Any) -> str:
    """Escape ``&``, ``<`` and ``>`` in the string form of ``value``.

    Example:
        >>> html_escape("<b>Tom & Jerry</b>")
        '&lt;b&gt;Tom &amp; Jerry&lt;/b&gt;'

    Complexity: O(n) single pass via ``str.translate()``.
    """
    return to_str(value).translate(_ESCAPE_TABLE)
