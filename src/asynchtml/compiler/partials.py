"""Partial resolution for one compilation run.

All templates reached from one top-level compilation share a single
registry mapping resolved absolute paths to Template instances. A path
is loaded and compiled at most once per run, however many tags or
templates reference it, and a template already in the registry is never
compiled again, so partials may reference each other (or the page that
includes them) without looping.

Example:
    page.html ──partial="nav"──► nav.html ──partial="icon"──► icon.html
        │                                                        ▲
        └──────────────────────partial="icon"────────────────────┘

    icon.html is read and compiled once; both tags render the same
    Template instance.
"""

from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING

from asynchtml.environment.exceptions import ErrorCode, TemplateSyntaxError

if TYPE_CHECKING:
    from asynchtml.environment.loaders import FileSystemSource
    from asynchtml.template.core import Template

logger = logging.getLogger(__name__)


class PartialResolver:
    """Resolves, loads and compiles partials into a shared registry.

    Attributes:
        registry: Resolved absolute path → Template, for the whole run
    """

    __slots__ = ("_loader", "registry")

    def __init__(self, registry: dict[str, Template], loader: FileSystemSource):
        self.registry = registry
        self._loader = loader

    async def resolve(self, origin: Template, relative: str) -> Template:
        """Return the compiled Template for ``relative``, as seen from ``origin``.

        Raises:
            TemplateNotFoundError: If the partial file does not exist.
            TemplateSyntaxError: If the partial (or one it includes) fails to compile.
        """
        if origin.filename is None:
            raise TemplateSyntaxError(
                f"Cannot include partial {relative!r}: no file name",
                name=origin.name,
                code=ErrorCode.PARTIAL_WITHOUT_FILE,
            )
        path = await self._loader.resolve(origin.filename, relative)
        partial = self.registry.get(path)
        if partial is not None:
            logger.debug("Partial %s already in registry", path)
            return partial

        logger.debug("Loading partial %s (from %s)", path, origin.filename)
        partial = type(origin)(
            functools.partial(self._loader.read, path),
            path,
            loader=self._loader,
        )
        # Registered before compiling so references back to it are not reloaded
        self.registry[path] = partial
        await partial.compile_into(self.registry)
        return partial
