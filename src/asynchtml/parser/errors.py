"""Parser error helpers."""

from __future__ import annotations

from asynchtml.environment.exceptions import ErrorCode, TemplateSyntaxError


class ParserErrorsMixin:
    """Builds TemplateSyntaxError with the parser's location context.

    Required Host Attributes:
        - _filename: str | None
        - _name: str
        - _source: str
    """

    _filename: str | None
    _name: str
    _source: str

    def _error(
        self,
        message: str,
        lineno: int,
        code: ErrorCode = ErrorCode.SYNTAX_ERROR,
    ) -> TemplateSyntaxError:
        return TemplateSyntaxError(
            message,
            lineno=lineno,
            name=self._name,
            filename=self._filename,
            source=self._source,
            code=code,
        )

    def _python_error(self, exc: SyntaxError, where: str, lineno: int) -> TemplateSyntaxError:
        """Report a Python SyntaxError at the line where the fragment starts."""
        return self._error(
            f"Invalid Python in {where}: {exc.msg or exc}",
            lineno,
            ErrorCode.INVALID_EXPRESSION,
        )
