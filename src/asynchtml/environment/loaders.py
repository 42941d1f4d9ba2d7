"""Template sources for asynchtml.

A source provides template text to ``Template.from_file`` and to the
partial resolver. It implements three coroutines:

- ``read(path)``: return the text of the template at ``path``
- ``exists(path)``: whether a template exists at ``path``
- ``resolve(origin, relative)``: absolute path of a partial referenced by
  the template at ``origin``

Built-in Sources:
- `FileSystemSource`: non-blocking file reads (aiofiles)
- `DictSource`: in-memory mapping (testing/embedded)

Partial Resolution:
    ``relative`` is joined to the directory of ``origin`` and normalized.
    When nothing exists at that exact path, ``DEFAULT_EXTENSION`` is
    appended, so ``<template partial="nav">`` finds ``nav.html``:
        ```python
        await source.resolve("/site/pages/index.html", "../parts/nav")
        # '/site/parts/nav.html' if /site/parts/nav does not exist
        ```

Custom Sources:
    ```python
    class DatabaseSource(FileSystemSource):
        async def read(self, path: str) -> str:
            row = await db.fetch_one("SELECT body FROM templates WHERE path = $1", path)
            if row is None:
                raise TemplateNotFoundError(f"Template '{path}' not found", path)
            return row["body"]

        async def exists(self, path: str) -> bool:
            return await db.fetch_val("SELECT 1 FROM templates WHERE path = $1", path) is not None
    ```

"""

from __future__ import annotations

import logging
import os

import aiofiles
import aiofiles.os

from asynchtml.environment.exceptions import TemplateNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_EXTENSION = ".html"


class FileSystemSource:
    """Read templates from the filesystem without blocking the event loop.

    Attributes:
        _encoding: File encoding (default: utf-8)

    Example:
            >>> source = FileSystemSource()
            >>> text = await source.read("/site/pages/index.html")

    Raises:
        TemplateNotFoundError: If the file does not exist. Any other
            ``OSError`` (permissions, is-a-directory) propagates unchanged.

    """

    __slots__ = ("_encoding",)

    def __init__(self, encoding: str = "utf-8"):
        self._encoding = encoding

    async def read(self, path: str) -> str:
        try:
            async with aiofiles.open(path, encoding=self._encoding) as f:
                return await f.read()
        except FileNotFoundError as exc:
            raise TemplateNotFoundError(f"Template '{path}' not found", path) from exc

    async def exists(self, path: str) -> bool:
        return await aiofiles.os.path.exists(path)

    async def resolve(self, origin: str, relative: str) -> str:
        path = os.path.abspath(os.path.join(os.path.dirname(origin), relative))
        if not await self.exists(path):
            logger.debug("No file at %s, trying %s", path, DEFAULT_EXTENSION)
            path += DEFAULT_EXTENSION
        return path


class DictSource(FileSystemSource):
    """Serve templates from an in-memory ``{path: source}`` mapping.

    Paths are resolved exactly like ``FileSystemSource`` does, so keys
    should be absolute, normalized paths.

    Example:
            >>> source = DictSource({
            ...     "/t/page.html": '<template partial="nav"/>',
            ...     "/t/nav.html": "<nav></nav>",
            ... })
            >>> await Template.from_file("/t/page.html", loader=source).render_async()

    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        super().__init__()
        self._mapping = mapping

    async def read(self, path: str) -> str:
        if path not in self._mapping:
            from difflib import get_close_matches

            msg = f"Template '{path}' not found"
            matches = get_close_matches(path, sorted(self._mapping), n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            raise TemplateNotFoundError(msg, path)
        return self._mapping[path]

    async def exists(self, path: str) -> bool:
        return path in self._mapping
