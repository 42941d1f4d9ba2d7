"""Tag tokenizer for asynchtml.

Splits template source into a flat stream of literal text and tag
boundaries. Only ``<script>`` and ``<template>`` tags are recognized;
everything else, including other HTML tags and ``{{ }}`` markers, stays
inside DATA tokens for the parser to deal with.

Example:
    >>> [t.type.name for t in tokenize('a<template if="x">b</template>')]
    ['DATA', 'TEMPLATE_OPEN', 'DATA', 'TEMPLATE_CLOSE']

Guarantees:
    - ``"".join(t.value for t in tokenize(src)) == src`` for every input
    - ``<script>`` bodies are emitted as a single DATA token and never
      scanned for tags
    - Quoted attribute values may contain ``>``
    - No errors: malformed markup is reported by the parser

"""

from __future__ import annotations

import re
from collections.abc import Iterator

from asynchtml._types import Token, TokenType

# Quoted attribute values are consumed whole so a `>` inside them does not end the tag
_ATTRS = r"""(?:\s(?:[^>"']|"[^"]*"|'[^']*')*)?"""

_TAG_RE = re.compile(rf"<(/?)\s*(script|template){_ATTRS}>")
_SCRIPT_CLOSE_RE = re.compile(rf"</\s*script{_ATTRS}>")

_TAG_TYPES = {
    ("", "script"): TokenType.SCRIPT_OPEN,
    ("/", "script"): TokenType.SCRIPT_CLOSE,
    ("", "template"): TokenType.TEMPLATE_OPEN,
    ("/", "template"): TokenType.TEMPLATE_CLOSE,
}


class Lexer:
    """Incremental tokenizer over one template source string.

    Tokens are produced lazily, so the parser can consume them without
    the whole stream being materialized.
    """

    __slots__ = ("_line_start", "_lineno", "_pos", "_source")

    def __init__(self, source: str):
        self._source = source
        self._pos = 0
        self._lineno = 1
        self._line_start = 0

    def tokenize(self) -> Iterator[Token]:
        source = self._source
        end = len(source)
        while self._pos < end:
            match = _TAG_RE.search(source, self._pos)
            if match is None:
                yield self._emit(TokenType.DATA, end)
                return

            if match.start() > self._pos:
                yield self._emit(TokenType.DATA, match.start())

            token_type = _TAG_TYPES[match.group(1), match.group(2)]
            yield self._emit(token_type, match.end())

            if token_type is TokenType.SCRIPT_OPEN:
                yield from self._script_body()

    def _script_body(self) -> Iterator[Token]:
        """Read verbatim up to the next ``</script>``, whatever it contains."""
        close = _SCRIPT_CLOSE_RE.search(self._source, self._pos)
        body_end = close.start() if close else len(self._source)
        if body_end > self._pos:
            yield self._emit(TokenType.DATA, body_end)
        if close:
            yield self._emit(TokenType.SCRIPT_CLOSE, close.end())

    def _emit(self, token_type: TokenType, stop: int) -> Token:
        value = self._source[self._pos : stop]
        token = Token(
            type=token_type,
            value=value,
            lineno=self._lineno,
            col_offset=self._pos - self._line_start,
        )
        newlines = value.count("\n")
        if newlines:
            self._lineno += newlines
            self._line_start = self._pos + value.rindex("\n") + 1
        self._pos = stop
        return token


def tokenize(source: str) -> Iterator[Token]:
    """Tokenize template source into DATA and tag-boundary tokens."""
    return Lexer(source).tokenize()
