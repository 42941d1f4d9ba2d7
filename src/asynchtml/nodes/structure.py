"""Partial inclusion and the compiled program container."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from asynchtml.nodes.base import Node
from asynchtml.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class IncludePartial(Node):
    """Partial inclusion: <template partial|wrap="path" [context="expr"]>

    ``path`` is kept as written; it is resolved against the including
    template's file when the program is compiled.
    """

    path: str
    context: Expr | None = None
    captures: bool = False


@dataclass(frozen=True, slots=True)
class Program:
    """Flat instruction sequence for one template.

    Attributes:
        name: Diagnostic name derived from the file name
        filename: Origin file, or None for string templates
        source: Template source (for error snippets)
        body: Instructions in document order
        ends: Index of each scope-opening instruction → index of its closer
        partials: Partial paths referenced, unique, in first-use order
    """

    name: str
    filename: str | None
    source: str
    body: Sequence[Node]
    ends: Mapping[int, int] = field(default_factory=dict)
    partials: Sequence[str] = ()
