"""asynchtml Template — one compilation unit, compiled on first render.

Architecture:
    ```
    Template
    ├── _source: str | awaitable | callable   # Deferred source text
    ├── _filename: absolute path or None      # Partial resolution, diagnostics
    ├── _compiled: asyncio.Future[Program]    # Memoized compilation
    ├── _includes: {path as written → Template}
    └── _renderer: Renderer                   # Created once per template
    ```

Pipeline:
    source → tokenize() → Parser → Program → PartialResolver (partials
    compiled recursively, one shared registry) → Renderer(context) → str
    → minify()

Lifecycle:
    A Template is built from text (``Template("...")``) or from a file
    (``Template.from_file(path)``, cached by absolute path). Its program
    is compiled at most once, on first render, and reused afterwards.
    A compilation failure is memoized too and re-raised on every render.

Example:
    >>> t = Template('<template for="i in range(3)">{{ i }}</template>')
    >>> await t.render_async(options=RenderOptions(minify=False))
    '012'

"""

from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import os
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any

from asynchtml.compiler.partials import PartialResolver
from asynchtml.environment.exceptions import TemplateError, TemplateRuntimeError
from asynchtml.environment.loaders import FileSystemSource
from asynchtml.lexer import tokenize
from asynchtml.minify import minify
from asynchtml.nodes import Program
from asynchtml.parser import Parser
from asynchtml.render_context import render_context
from asynchtml.template.cache import file_template_cache
from asynchtml.template.executor import Renderer

logger = logging.getLogger(__name__)

TemplateSource = str | Awaitable[str] | Callable[[], Awaitable[str]]


@dataclass(frozen=True, slots=True)
class RenderOptions:
    """Options for ``render_async``.

    Attributes:
        minify: Minify the rendered HTML (default True)
        minifier_options: Keyword arguments for ``minify_html.minify``;
            None selects ``DEFAULT_MINIFIER_OPTIONS``
    """

    minify: bool = True
    minifier_options: Mapping[str, Any] | None = None


DEFAULT_RENDER_OPTIONS = RenderOptions()


class Template:
    """Template source plus its lazily compiled render routine.

    Attributes:
        name: File name, or ``<template>`` for string templates
        filename: Absolute source path, if any

    Methods:
        render_async(context, options): Render to a string
        render(context, options): Synchronous form (runs its own event loop)
        compile_async(): Compile now instead of on first render

    Partials:
        Templates without a file name cannot use ``partial``/``wrap``;
        paths are resolved relative to the template's own file.

    """

    __slots__ = (
        "_compiled",
        "_filename",
        "_includes",
        "_loader",
        "_program",
        "_renderer",
        "_source",
        "_source_text",
    )

    def __init__(
        self,
        source: TemplateSource,
        filename: str | None = None,
        *,
        loader: FileSystemSource | None = None,
    ):
        """Create a template.

        Args:
            source: Template text, an awaitable of it, or a zero-argument
                callable returning such an awaitable (read on first compile)
            filename: Origin file, used to resolve partials and in error
                messages
            loader: Source used to load partials (default: FileSystemSource)
        """
        self._source = source
        self._source_text: str | None = source if isinstance(source, str) else None
        self._filename = os.path.abspath(filename) if filename else None
        self._loader = loader or FileSystemSource()
        self._compiled: asyncio.Future[Program] | None = None
        self._program: Program | None = None
        self._renderer: Renderer | None = None
        self._includes: dict[str, Template] = {}

    @classmethod
    def from_file(
        cls,
        path: str | os.PathLike[str],
        ignore_cache: bool = False,
        *,
        loader: FileSystemSource | None = None,
    ) -> Template:
        """Template for the file at ``path``; the file is read on first render.

        Instances are cached by absolute path unless ``ignore_cache`` is
        set, in which case a fresh, uncached instance is returned.
        """
        absolute = os.path.abspath(path)
        if not ignore_cache:
            cached = file_template_cache.get(absolute)
            if cached is not None:
                return cached

        source = loader or FileSystemSource()
        template = cls(functools.partial(source.read, absolute), absolute, loader=source)
        if not ignore_cache:
            file_template_cache.set(absolute, template)
        return template

    @property
    def name(self) -> str:
        return self._filename or "<template>"

    @property
    def filename(self) -> str | None:
        return self._filename

    @property
    def program(self) -> Program | None:
        """The compiled program, or None before compilation."""
        return self._program

    # ─────────────────────────────────────────────────────────────────────
    # Compilation
    # ─────────────────────────────────────────────────────────────────────

    async def compile_async(self) -> Program:
        """Compile this template and every partial it reaches (once)."""
        if self._program is not None:
            return self._program
        if self._compiled is None:
            registry: dict[str, Template] = {}
            if self._filename:
                registry[self._filename] = self
            self._compiled = asyncio.ensure_future(self.compile_into(registry))
        # Cancelling one render leaves the shared compilation running
        return await asyncio.shield(self._compiled)

    async def compile_into(self, registry: dict[str, Template]) -> Program:
        """Compile using ``registry`` shared with the whole compilation run."""
        logger.debug("Compiling %s", self.name)
        source = await self._load_source()
        program = Parser(tokenize(source), filename=self._filename, source=source).parse()

        resolver = PartialResolver(registry, self._loader)
        for path in program.partials:
            self._includes[path] = await resolver.resolve(self, path)

        self._program = program
        logger.debug("Compiled %s (%d instructions)", program.name, len(program.body))
        return program

    async def _load_source(self) -> str:
        if self._source_text is None:
            source = self._source
            if callable(source):
                source = source()
            if inspect.isawaitable(source):
                source = await source
            self._source_text = source
        return self._source_text

    def partial(self, path: str) -> Template:
        """The compiled partial referenced as ``path`` in this template."""
        return self._includes[path]

    # ─────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────

    def _get_renderer(self) -> Renderer:
        if self._renderer is None:
            if self._program is None:
                raise RuntimeError(f"Template '{self.name}' not compiled")
            self._renderer = Renderer(self, self._program)
        return self._renderer

    async def render_async(
        self,
        context: Mapping[str, Any] | None = None,
        options: RenderOptions | None = None,
    ) -> str:
        """Render with ``context``; compiles first if needed.

        Args:
            context: Mapping whose keys are visible as names in expressions
            options: RenderOptions (default: minify with default options)

        Returns:
            Rendered (and by default minified) HTML

        Raises:
            TemplateSyntaxError: The template or a partial failed to compile
            TemplateNotFoundError: The template or a partial file is missing
            TemplateRuntimeError: An embedded expression raised
            UndefinedError: An expression used an unknown name
        """
        options = options or DEFAULT_RENDER_OPTIONS
        await self.compile_async()
        renderer = self._get_renderer()

        with render_context(template_name=self.name, filename=self._filename):
            try:
                result = await renderer(context)
            except TemplateError:
                raise
            except Exception as exc:
                raise self._enhance_error(exc) from exc

        if options.minify:
            result = minify(result, options.minifier_options)
        return result

    def render(
        self,
        context: Mapping[str, Any] | None = None,
        options: RenderOptions | None = None,
    ) -> str:
        """Synchronous ``render_async``; not usable inside a running event loop."""
        return asyncio.run(self.render_async(context, options))

    async def render_partial(self, context: Mapping[str, Any]) -> str:
        """Render as an included partial: no minification, caller's render context."""
        return await self._get_renderer()(context)

    def _enhance_error(self, error: Exception) -> TemplateRuntimeError:
        """Wrap an exception raised outside any single expression (e.g. by an iterator)."""
        message = str(error).strip() or type(error).__name__
        return TemplateRuntimeError(
            f"{type(error).__name__}: {message}" if message != type(error).__name__ else message,
            template_name=self.name,
        )

    def __repr__(self) -> str:
        return f"<Template {self.name}>"
