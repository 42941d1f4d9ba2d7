"""Exceptions for asynchtml.

Exception Hierarchy:
TemplateError (base)
├── TemplateNotFoundError     # Template or partial file not found
├── TemplateSyntaxError       # Compile-time error in template markup
├── TemplateRuntimeError      # An embedded expression failed during render
└── UndefinedError            # Unknown name during render

Every failure of a compile or render surfaces as exactly one of these (or
as an ``OSError`` from the file source); there is no partial output.

Example:
    ```
    Syntax Error: Unexpected </template>
      --> pages/index.html:12
       |
     12 | </template>
    ```

"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from asynchtml.environment import terminal


class ErrorCode(Enum):
    """Searchable error codes, ``H-{CATEGORY}-{NUMBER}``.

    Categories: PAR (parser), RUN (runtime), TPL (template loading).
    """

    UNEXPECTED_CLOSE = "H-PAR-001"
    UNCLOSED_TAG = "H-PAR-002"
    UNKNOWN_ATTRIBUTE = "H-PAR-003"
    INVALID_MIXIN_NAME = "H-PAR-004"
    INVALID_EXPRESSION = "H-PAR-005"
    PARTIAL_WITHOUT_FILE = "H-PAR-006"

    UNDEFINED_VARIABLE = "H-RUN-001"
    RUNTIME_ERROR = "H-RUN-002"
    INCLUDE_DEPTH = "H-RUN-003"
    INVALID_CONTEXT = "H-RUN-004"

    TEMPLATE_NOT_FOUND = "H-TPL-001"
    SYNTAX_ERROR = "H-TPL-002"

    @property
    def category(self) -> str:
        prefix = self.value.split("-")[1]
        return {"PAR": "parser", "RUN": "runtime", "TPL": "template"}.get(prefix, "unknown")


def format_template_stack(stack: list[tuple[str, int]] | None) -> str:
    """Format the chain of partial inclusions leading to an error.

    Example:
        >>> print(format_template_stack([("page.html", 3), ("layout.html", 9)]))
        Template stack:
          • page.html:3
          • layout.html:9
    """
    if not stack:
        return ""
    lines = [terminal.dim_text("Template stack:")]
    for template_name, line_num in stack:
        lines.append(f"  • {terminal.location(f'{template_name}:{line_num}')}")
    return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class SourceSnippet:
    """Template lines surrounding an error line.

    Attributes:
        lines: (line_number, line_content) pairs around the error
        error_line: 1-based line number of the error
    """

    lines: tuple[tuple[int, str], ...]
    error_line: int

    def format(self) -> str:
        parts = [terminal.dim_text("   |")]
        for lineno, content in self.lines:
            parts.append(
                terminal.format_source_line(lineno, content, is_error=lineno == self.error_line)
            )
        parts.append(terminal.dim_text("   |"))
        return "\n".join(parts)


def build_source_snippet(source: str, error_line: int, *, context_lines: int = 2) -> SourceSnippet:
    """Collect ``context_lines`` lines either side of ``error_line``."""
    all_lines = source.splitlines()
    start = max(0, error_line - 1 - context_lines)
    end = min(len(all_lines), error_line + context_lines)
    lines = tuple((i + 1, all_lines[i]) for i in range(start, end))
    return SourceSnippet(lines=lines, error_line=error_line)


class TemplateError(Exception):
    """Base exception for all asynchtml template errors.

        >>> try:
        ...     await template.render_async(context)
        ... except TemplateError as e:
        ...     log.error("Template error: %s", e)

    Attributes:
        code: ErrorCode identifying the failure class
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Error code plus message, without traceback noise."""
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{terminal.error_code(self.code.value)}: {header}"
        return header


class TemplateNotFoundError(TemplateError):
    """A template or partial file could not be found.

    Raised by the file sources; for partials the path is the resolved
    absolute path, after the ``.html`` fallback.
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        super().__init__(message)


class TemplateSyntaxError(TemplateError):
    """Compile-time error in template markup.

    Covers unmatched or unclosed ``<template>`` tags, unknown attributes,
    invalid mixin names, Python syntax errors inside expressions, and
    partial references in templates that have no file name.
    """

    code: ErrorCode | None = ErrorCode.SYNTAX_ERROR

    def __init__(
        self,
        message: str,
        lineno: int | None = None,
        name: str | None = None,
        filename: str | None = None,
        source: str | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.lineno = lineno
        self.name = name
        self.filename = filename
        self.source = source
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.filename or self.name or "<template>"
        if self.lineno:
            location += f":{self.lineno}"
        header = f"Syntax Error: {self.message}\n  --> {location}"

        if self.source and self.lineno:
            lines = self.source.splitlines()
            if 0 < self.lineno <= len(lines):
                return f"{header}\n   |\n{self.lineno:>3} | {lines[self.lineno - 1]}"
        return header


class TemplateRuntimeError(TemplateError):
    """Render-time error with template context.

    Output Format:
            ```
            Runtime Error: division by zero
              Location: page.html:4
               |
            >  4 | {{ total / count }}
               |
              Expression: total / count
            ```

    Attributes:
        message: Error description
        expression: Template expression that failed
        template_name: Name of the template
        lineno: Line number in template source
        suggestion: Optional fix suggestion
        template_stack: (template_name, line) pairs of enclosing partial inclusions
    """

    code: ErrorCode | None = ErrorCode.RUNTIME_ERROR

    def __init__(
        self,
        message: str,
        *,
        expression: str | None = None,
        template_name: str | None = None,
        lineno: int | None = None,
        suggestion: str | None = None,
        source_snippet: SourceSnippet | None = None,
        template_stack: list[tuple[str, int]] | None = None,
        code: ErrorCode | None = None,
    ):
        self.message = message
        self.expression = expression
        self.template_name = template_name
        self.lineno = lineno
        self.suggestion = suggestion
        self.source_snippet = source_snippet
        self.template_stack = template_stack or []
        if code is not None:
            self.code = code
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        parts = [f"Runtime Error: {self.message}"]

        if self.template_name or self.lineno:
            loc = self.template_name or "<template>"
            if self.lineno:
                loc += f":{self.lineno}"
            parts.append(f"  Location: {terminal.location(loc)}")

        if self.source_snippet:
            parts.append(self.source_snippet.format())

        if self.template_stack:
            parts.append("")
            parts.append(format_template_stack(self.template_stack))

        if self.expression:
            parts.append(f"  Expression: {self.expression}")

        if self.suggestion:
            parts.append(f"\n  {terminal.hint('Suggestion:')} {self.suggestion}")

        return "\n".join(parts)


class UndefinedError(TemplateError):
    """A name used by an expression is neither a mixin, a context key, nor a builtin.

    If ``available_names`` is given, a "Did you mean?" suggestion is added
    when a close match exists.

    Example:
            >>> await Template("{{ titel }}").render_async({"title": "x"})
        UndefinedError: Undefined variable 'titel' in <template>:1. Did you mean 'title'?
    """

    code: ErrorCode | None = ErrorCode.UNDEFINED_VARIABLE

    def __init__(
        self,
        name: str,
        template: str | None = None,
        lineno: int | None = None,
        available_names: frozenset[str] | None = None,
        source_snippet: SourceSnippet | None = None,
        template_stack: list[tuple[str, int]] | None = None,
    ):
        self.name = name
        self.template = template or "<template>"
        self.lineno = lineno
        self._available_names = available_names
        self.source_snippet = source_snippet
        self.template_stack = template_stack or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        location = self.template
        if self.lineno:
            location += f":{self.lineno}"
        msg = f"Undefined variable '{self.name}' in {terminal.location(location)}"

        if self._available_names:
            from difflib import get_close_matches

            matches = get_close_matches(self.name, self._available_names, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"

        if self.source_snippet:
            msg += "\n" + self.source_snippet.format()

        if self.template_stack:
            msg += "\n\n" + format_template_stack(self.template_stack)

        return msg


def describe(value: Any) -> str:
    """Short ``repr`` for error messages."""
    text = repr(value)
    return text if len(text) <= 80 else text[:77] + "..."
