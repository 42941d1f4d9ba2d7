"""HTML minification of rendered output.

Rendered strings are passed once, after the whole template has run, to
``minify_html``. Partials and mixin calls are never minified on their
own.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import minify_html

logger = logging.getLogger(__name__)

DEFAULT_MINIFIER_OPTIONS: Mapping[str, Any] = {
    "minify_css": True,
    "minify_js": True,
    "keep_comments": False,
    "keep_closing_tags": True,
    "keep_html_and_head_opening_tags": True,
}


def minify(html: str, options: Mapping[str, Any] | None = None) -> str:
    """Minify ``html`` with ``options`` (keyword arguments of ``minify_html.minify``).

    ``None`` selects DEFAULT_MINIFIER_OPTIONS; a mapping replaces them
    entirely.
    """
    opts = DEFAULT_MINIFIER_OPTIONS if options is None else options
    result = minify_html.minify(html, **opts)
    logger.debug("Minified %d → %d characters", len(html), len(result))
    return result
