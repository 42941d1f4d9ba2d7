"""Template sources, exceptions and diagnostics for asynchtml."""

from asynchtml.environment.exceptions import (
    ErrorCode,
    SourceSnippet,
    TemplateError,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from asynchtml.environment.loaders import DEFAULT_EXTENSION, DictSource, FileSystemSource

__all__ = [
    "DEFAULT_EXTENSION",
    "DictSource",
    "ErrorCode",
    "FileSystemSource",
    "SourceSnippet",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRuntimeError",
    "TemplateSyntaxError",
    "UndefinedError",
    "build_source_snippet",
]
