"""Structural parser and program generator for asynchtml.

Consumes the token stream left to right, keeps a stack of open
``<template>`` tags, and appends instructions to a flat program body.

Token Handling:
    - DATA: literal text; ``{{ expr }}`` markers become escaped Output
    - SCRIPT_OPEN: with ``in-template`` the body becomes an Exec
      instruction; otherwise the whole element is literal output
    - TEMPLATE_OPEN: push the tag, apply its attributes in source order,
      then emit the pending ``use`` call and ``partial`` inclusion; a
      self-closing tag is popped immediately
    - TEMPLATE_CLOSE: pop the innermost tag, emitting its closers

Example:
    >>> program = Parser(tokenize('<template if="x">{{ x }}</template>')).parse()
    >>> [type(node).__name__ for node in program.body]
    ['If', 'Output', 'EndScope']

"""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from asynchtml._types import Token, TokenType
from asynchtml.compiler import build_program, compile_expression, compile_statements
from asynchtml.environment.exceptions import ErrorCode, TemplateSyntaxError
from asynchtml.lexer import tokenize
from asynchtml.nodes import Data, Exec, Node, Output, Program
from asynchtml.parser.attributes import Attribute, AttributeSyntaxError, parse_template_tag
from asynchtml.parser.blocks.core import OpenTag
from asynchtml.parser.blocks.template_structure import TemplateStructureBlockParsingMixin

# Non-greedy, but a single `}` inside the expression does not end it
_EXPR_RE = re.compile(r"\{\{((?:[^}]|\}[^}])+)\}\}")
_IN_TEMPLATE_RE = re.compile(r"\sin-template(?=[\s/>=])")


class Parser(TemplateStructureBlockParsingMixin):
    """Turns a token stream into a linked Program.

    Attributes:
        _stack: Open tags, innermost last
        _body: Instructions emitted so far
        _partials: Partial paths referenced (insertion-ordered set)
    """

    _ATTRIBUTE_HANDLERS = {
        "if": "_attr_if",
        "for": "_attr_for",
        "while": "_attr_while",
        "html": "_attr_html",
        "define": "_attr_define",
    }

    def __init__(
        self,
        tokens: Iterable[Token],
        *,
        filename: str | None = None,
        source: str = "",
    ):
        self._tokens: Iterator[Token] = iter(tokens)
        self._filename = filename
        self._source = source
        self._name = filename or "<template>"
        self._code_filename = filename or "<template>"
        self._stack: list[OpenTag] = []
        self._body: list[Node] = []
        self._partials: dict[str, None] = {}

    def parse(self) -> Program:
        for token in self._tokens:
            if token.type is TokenType.TEMPLATE_OPEN:
                self._parse_template_open(token)
            elif token.type is TokenType.TEMPLATE_CLOSE:
                self._pop_tag(token)
            elif token.type is TokenType.SCRIPT_OPEN:
                self._parse_script(token)
            else:
                # DATA, or a </script> that closes nothing
                self._parse_data(token)
        self._check_all_closed()
        return build_program(
            self._body,
            filename=self._filename,
            source=self._source,
            partials=list(self._partials),
        )

    # ─────────────────────────────────────────────────────────────────────
    # Literal text
    # ─────────────────────────────────────────────────────────────────────

    def _emit_data(self, text: str, lineno: int) -> None:
        if not text:
            return
        last = self._body[-1] if self._body else None
        if isinstance(last, Data):
            self._body[-1] = Data(lineno=last.lineno, value=last.value + text)
        else:
            self._body.append(Data(lineno=lineno, value=text))

    def _parse_data(self, token: Token) -> None:
        text = token.value
        pos = 0
        for match in _EXPR_RE.finditer(text):
            self._emit_data(text[pos : match.start()], token.lineno + text.count("\n", 0, pos))
            lineno = token.lineno + text.count("\n", 0, match.start())
            try:
                expr = compile_expression(
                    match.group(1), filename=self._code_filename, lineno=lineno
                )
            except SyntaxError as exc:
                raise self._python_error(exc, match.group(0), lineno) from exc
            self._body.append(Output(lineno=lineno, expr=expr, escape=True))
            pos = match.end()
        self._emit_data(text[pos:], token.lineno + text.count("\n", 0, pos))

    # ─────────────────────────────────────────────────────────────────────
    # <script>
    # ─────────────────────────────────────────────────────────────────────

    def _parse_script(self, open_token: Token) -> None:
        """Read the script body verbatim; run it or pass it through."""
        body = ""
        body_lineno = open_token.lineno
        close = ""
        token = next(self._tokens, None)
        if token is not None and token.type is TokenType.DATA:
            body = token.value
            body_lineno = token.lineno
            token = next(self._tokens, None)
        if token is not None and token.type is TokenType.SCRIPT_CLOSE:
            close = token.value
        elif token is not None:
            # The lexer never produces this; only hand-built streams do
            raise self._error(f"Unexpected {token.value!r} inside <script>", token.lineno)

        if _IN_TEMPLATE_RE.search(open_token.value):
            try:
                statements = compile_statements(
                    body, filename=self._code_filename, lineno=body_lineno
                )
            except SyntaxError as exc:
                raise self._python_error(exc, "<script in-template>", body_lineno) from exc
            self._body.append(Exec(lineno=body_lineno, body=statements))
        else:
            self._emit_data(open_token.value + body + close, open_token.lineno)

    # ─────────────────────────────────────────────────────────────────────
    # <template ...>
    # ─────────────────────────────────────────────────────────────────────

    def _parse_template_open(self, token: Token) -> None:
        try:
            tag = parse_template_tag(token.value, token.lineno)
        except AttributeSyntaxError as exc:
            raise self._error(
                f"Unexpected: {exc.text} at line {exc.lineno}",
                exc.lineno,
                ErrorCode.UNKNOWN_ATTRIBUTE,
            ) from exc

        entry = self._push_tag(token)
        call: Attribute | None = None
        partial: Attribute | None = None
        context: Attribute | None = None

        for attr in tag.attributes:
            if attr.value is None:
                raise self._unexpected(attr)
            if attr.name == "use":
                call = attr
            elif attr.name in ("partial", "wrap"):
                partial = attr
            elif attr.name == "context":
                context = attr
            elif attr.name in self._ATTRIBUTE_HANDLERS:
                getattr(self, self._ATTRIBUTE_HANDLERS[attr.name])(attr, entry)
            else:
                raise self._unexpected(attr)

        if call is not None:
            self._emit_mixin_call(call, context, entry, tag.self_closing)
        if partial is not None:
            self._emit_partial(partial, context, entry, tag.self_closing)

        if tag.self_closing:
            self._pop_tag(token)

    def _unexpected(self, attr: Attribute) -> TemplateSyntaxError:
        return self._error(
            f"Unexpected: {attr.raw} at line {attr.lineno}",
            attr.lineno,
            ErrorCode.UNKNOWN_ATTRIBUTE,
        )


def parse(source: str, filename: str | None = None) -> Program:
    """Tokenize and parse template source into a Program."""
    return Parser(tokenize(source), filename=filename, source=source).parse()
