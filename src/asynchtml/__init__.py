"""asynchtml — asynchronous HTML templates with embedded Python.

Templates are plain HTML with a handful of ``<template>`` attributes,
``<script in-template>`` blocks and ``{{ expr }}`` markers. Every
embedded expression is Python and may ``await``.

Quickstart:
    >>> from asynchtml import Template
    >>> await Template("<p>Hello, {{ name }}!</p>").render_async({"name": "World"})
    '<p>Hello, World!</p>'

File-based templates:
    >>> from asynchtml import Template
    >>> await Template.from_file("views/index.html").render_async({"page": page})

Markup:
    ```html
    <template if="user">…</template>
    <template for="item in items">{{ item }}</template>
    <template while="queue">…</template>
    <template html="trusted_markup"/>
    <template define="card"><div class="card">{{ content }}</div></template>
    <template use="card">body</template>
    <template partial="parts/nav" context="{'active': 'home'}"/>
    <template wrap="layout">page body</template>
    <script in-template>items = await load_items()</script>
    ```

Architecture:
    Template Source → Lexer → Parser → Program → PartialResolver → Renderer → minify

Strict names:
    Unknown names raise ``UndefinedError`` (a ``TemplateError``) with a
    "did you mean" suggestion instead of rendering as empty text.

"""

from asynchtml._types import Token, TokenType
from asynchtml.environment import (
    DEFAULT_EXTENSION,
    DictSource,
    ErrorCode,
    FileSystemSource,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from asynchtml.lexer import tokenize
from asynchtml.minify import DEFAULT_MINIFIER_OPTIONS, minify
from asynchtml.parser import parse
from asynchtml.render_context import (
    RenderContext,
    get_render_context,
    get_render_context_required,
    render_context,
)
from asynchtml.template import DEFAULT_RENDER_OPTIONS, RenderOptions, Template, clear_cache
from asynchtml.utils.html import html_escape
from asynchtml.view_engine import is_production, render_async, render_file_async, view_engine

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_EXTENSION",
    "DEFAULT_MINIFIER_OPTIONS",
    "DEFAULT_RENDER_OPTIONS",
    "DictSource",
    "ErrorCode",
    "FileSystemSource",
    "RenderContext",
    "RenderOptions",
    "SourceSnippet",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "Token",
    "TokenType",
    "UndefinedError",
    "__version__",
    "build_source_snippet",
    "clear_cache",
    "get_render_context",
    "get_render_context_required",
    "html_escape",
    "is_production",
    "minify",
    "parse",
    "render_async",
    "render_context",
    "render_file_async",
    "tokenize",
    "view_engine",
]
