"""Output instructions."""

from __future__ import annotations

from dataclasses import dataclass

from asynchtml.nodes.base import Node
from asynchtml.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Data(Node):
    """Literal text copied to the output unchanged."""

    value: str


@dataclass(frozen=True, slots=True)
class Output(Node):
    """Output expression: {{ expr }} (escaped) or html="expr" (raw)"""

    expr: Expr
    escape: bool = True


@dataclass(frozen=True, slots=True)
class Exec(Node):
    """Statements from <script in-template>; runs, emits nothing."""

    body: Expr


@dataclass(frozen=True, slots=True)
class Capture(Node):
    """Start of an output-capturing scope.

    Closed by the ``CallMixin`` or ``IncludePartial`` (with
    ``captures=True``) that receives the captured text as ``content``.
    """
