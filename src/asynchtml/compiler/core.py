"""Program linking.

The parser emits instructions into a flat list. ``link()`` pairs every
scope opener with its closer and rejects programs where they do not nest
in last-opened-first-closed order. The executor uses the resulting table
to skip or repeat scope bodies without re-scanning.

Pairs:
    - ``If``/``For``/``While`` → ``EndScope``
    - ``Define`` → ``EndDefine``
    - ``Capture`` → ``CallMixin``/``IncludePartial`` with ``captures=True``
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from asynchtml.environment.exceptions import ErrorCode, TemplateSyntaxError
from asynchtml.nodes import (
    BeginScope,
    CallMixin,
    Capture,
    Define,
    EndDefine,
    EndScope,
    IncludePartial,
    Node,
    Program,
)

logger = logging.getLogger(__name__)


def _closer_for(node: Node) -> type | tuple[type, ...]:
    if isinstance(node, BeginScope):
        return EndScope
    if isinstance(node, Define):
        return EndDefine
    return (CallMixin, IncludePartial)


def _is_opener(node: Node) -> bool:
    return isinstance(node, (BeginScope, Define, Capture))


def _is_closer(node: Node) -> bool:
    if isinstance(node, (EndScope, EndDefine)):
        return True
    return isinstance(node, (CallMixin, IncludePartial)) and node.captures


def link(body: Sequence[Node], *, name: str | None = None, source: str | None = None) -> dict[int, int]:
    """Map each opener index to its closer index.

    Raises:
        TemplateSyntaxError: If a closer has no opener, closes the wrong
            kind of scope, or an opener is never closed.
    """
    ends: dict[int, int] = {}
    open_stack: list[int] = []
    for index, node in enumerate(body):
        if _is_opener(node):
            open_stack.append(index)
        elif _is_closer(node):
            if not open_stack:
                raise TemplateSyntaxError(
                    f"Unexpected {type(node).__name__} with no open scope",
                    lineno=node.lineno,
                    name=name,
                    source=source,
                    code=ErrorCode.UNEXPECTED_CLOSE,
                )
            opener = open_stack.pop()
            if not isinstance(node, _closer_for(body[opener])):
                raise TemplateSyntaxError(
                    f"{type(node).__name__} cannot close {type(body[opener]).__name__} "
                    f"opened on line {body[opener].lineno}",
                    lineno=node.lineno,
                    name=name,
                    source=source,
                    code=ErrorCode.UNEXPECTED_CLOSE,
                )
            ends[opener] = index
    if open_stack:
        node = body[open_stack[-1]]
        raise TemplateSyntaxError(
            f"{type(node).__name__} is never closed",
            lineno=node.lineno,
            name=name,
            source=source,
            code=ErrorCode.UNCLOSED_TAG,
        )
    return ends


def program_name(filename: str | None) -> str:
    """Diagnostic name for a program: ``T_`` plus the sanitized file name."""
    return "T_" + re.sub(r"[^A-Za-z0-9_]", "_", filename or "untitled")


def build_program(
    body: Sequence[Node],
    *,
    filename: str | None,
    source: str,
    partials: Sequence[str] = (),
) -> Program:
    """Link ``body`` and wrap it in an immutable Program."""
    name = program_name(filename)
    ends = link(body, name=filename or name, source=source)
    logger.debug("Linked %s: %d instructions, %d scopes", name, len(body), len(ends))
    return Program(
        name=name,
        filename=filename,
        source=source,
        body=tuple(body),
        ends=ends,
        partials=tuple(partials),
    )
