"""Shortcut entry points and the web-framework view-engine adapter.

Process Configuration:
    ``ASYNCHTML_ENV=production`` (case-insensitive) keeps top-level file
    templates cached between renders. Any other value bypasses the cache
    so edited files are picked up without a restart.

Example:
    >>> html = await render_file_async("views/index.html", {"title": "Home"})

    >>> def done(error, html):
    ...     ...
    >>> view_engine("views/index.html", {"title": "Home"}, done)

"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable, Mapping
from typing import Any

from asynchtml.template.core import RenderOptions, Template

logger = logging.getLogger(__name__)

ENV_VAR = "ASYNCHTML_ENV"

ViewCallback = Callable[[BaseException | None, str | None], Any]

# Strong references to scheduled renders; the loop only keeps weak ones
_background_tasks: set[asyncio.Task[None]] = set()


def is_production() -> bool:
    """Whether ``ASYNCHTML_ENV`` selects production mode (read on every call)."""
    return os.environ.get(ENV_VAR, "").lower() == "production"


async def render_async(
    text: str,
    context: Mapping[str, Any] | None = None,
    options: RenderOptions | None = None,
) -> str:
    """Render template text; same as ``Template(text).render_async(...)``."""
    return await Template(text).render_async(context, options)


async def render_file_async(
    path: str | os.PathLike[str],
    context: Mapping[str, Any] | None = None,
    options: RenderOptions | None = None,
) -> str:
    """Render a template file; cached only in production."""
    template = Template.from_file(path, ignore_cache=not is_production())
    return await template.render_async(context, options)


def view_engine(
    file_name: str | os.PathLike[str],
    options: Mapping[str, Any] | None,
    callback: ViewCallback,
) -> asyncio.Task[None] | None:
    """Render ``file_name`` with ``options`` as context and report to ``callback``.

    Calls ``callback(None, html)`` on success or ``callback(error, None)``
    on failure. Inside a running event loop the render is scheduled as a
    task, which is returned; otherwise it runs to completion first.
    """

    async def run() -> None:
        try:
            html = await render_file_async(file_name, options)
        except Exception as exc:
            logger.debug("View %s failed: %s", file_name, exc)
            callback(exc, None)
            return
        callback(None, html)

    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        asyncio.run(run())
        return None
    task = loop.create_task(run())
    _background_tasks.add(task)
    task.add_done_callback(_background_tasks.discard)
    return task
