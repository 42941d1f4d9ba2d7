"""Mixin definition and call instructions."""

from __future__ import annotations

from dataclasses import dataclass

from asynchtml.nodes.base import Node
from asynchtml.nodes.expressions import Expr


@dataclass(frozen=True, slots=True)
class Define(Node):
    """Mixin definition: <template define="name">...</template>"""

    name: str


@dataclass(frozen=True, slots=True)
class EndDefine(Node):
    """Closes the innermost Define."""


@dataclass(frozen=True, slots=True)
class CallMixin(Node):
    """Mixin call: <template use="expr" [context="expr"]>

    With ``captures`` set this instruction closes a ``Capture`` and the
    captured output becomes the default ``content``.
    """

    call: Expr
    context: Expr | None = None
    captures: bool = False
