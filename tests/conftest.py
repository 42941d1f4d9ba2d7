"""Pytest configuration and fixtures for asynchtml tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from asynchtml import RenderOptions, Template, clear_cache

RAW = RenderOptions(minify=False)


async def render(source: str, context: Any = None, *, filename: str | None = None) -> str:
    """Render template text without minification."""
    return await Template(source, filename).render_async(context, RAW)


@pytest.fixture(autouse=True)
def _clear_template_cache():
    """Start and end every test with an empty top-level template cache."""
    clear_cache()
    yield
    clear_cache()


@pytest.fixture
def templates(tmp_path: Path) -> Callable[..., dict[str, Path]]:
    """Write template files under a temporary directory.

    Example:
        >>> page = templates(**{"page.html": "...", "parts/nav.html": "..."})["page.html"]
    """

    def write(**files: str) -> dict[str, Path]:
        written = {}
        for name, text in files.items():
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
            written[name] = path
        return written

    return write


def assert_contains(result: str, *expected_parts: str) -> None:
    """Assert the result contains all expected parts."""
    for part in expected_parts:
        assert part in result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {result!r}"
        )
