"""Compiled templates: the Template class, its executor and the file cache."""

from asynchtml.template.cache import TemplateCache, clear_cache, file_template_cache
from asynchtml.template.core import DEFAULT_RENDER_OPTIONS, RenderOptions, Template
from asynchtml.template.executor import Renderer
from asynchtml.template.scope import Mixin, Scope

__all__ = [
    "DEFAULT_RENDER_OPTIONS",
    "Mixin",
    "RenderOptions",
    "Renderer",
    "Scope",
    "Template",
    "TemplateCache",
    "clear_cache",
    "file_template_cache",
]
