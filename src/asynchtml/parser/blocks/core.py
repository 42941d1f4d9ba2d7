"""Nesting stack for open ``<template>`` tags."""

from __future__ import annotations

from dataclasses import dataclass, field

from asynchtml._types import Token
from asynchtml.environment.exceptions import ErrorCode
from asynchtml.nodes import Node
from asynchtml.parser.errors import ParserErrorsMixin


@dataclass(slots=True)
class OpenTag:
    """An open tag and the closing instructions it still owes.

    Closers are queued in the order their scopes were opened and emitted
    in reverse, so the innermost scope closes first.
    """

    token: Token
    closers: list[Node] = field(default_factory=list)


class BlockStackMixin(ParserErrorsMixin):
    """Stack of open tags shared by all block parsers.

    Required Host Attributes:
        - _stack: list[OpenTag]
        - _body: list[Node]
    """

    _stack: list[OpenTag]
    _body: list[Node]

    def _push_tag(self, token: Token) -> OpenTag:
        entry = OpenTag(token)
        self._stack.append(entry)
        return entry

    def _pop_tag(self, token: Token) -> None:
        """Close the innermost open tag, emitting its queued closers."""
        if not self._stack:
            raise self._error(
                "Unexpected </template>", token.lineno, ErrorCode.UNEXPECTED_CLOSE
            )
        entry = self._stack.pop()
        self._body.extend(reversed(entry.closers))

    def _check_all_closed(self) -> None:
        if self._stack:
            entry = self._stack[-1]
            raise self._error(
                f"Expected </template> for matching {entry.token.value}",
                entry.token.lineno,
                ErrorCode.UNCLOSED_TAG,
            )
