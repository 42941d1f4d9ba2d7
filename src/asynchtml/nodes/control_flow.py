"""Control flow instructions."""

from __future__ import annotations

from dataclasses import dataclass

from asynchtml.nodes.base import Node
from asynchtml.nodes.expressions import Expr, LoopHeader


@dataclass(frozen=True, slots=True)
class BeginScope(Node):
    """Opens a control-flow scope closed by the matching EndScope."""


@dataclass(frozen=True, slots=True)
class If(BeginScope):
    """Conditional: <template if="cond">"""

    test: Expr


@dataclass(frozen=True, slots=True)
class For(BeginScope):
    """Loop: <template for="target in iterable">"""

    header: LoopHeader


@dataclass(frozen=True, slots=True)
class While(BeginScope):
    """Loop: <template while="cond">"""

    test: Expr


@dataclass(frozen=True, slots=True)
class EndScope(Node):
    """Closes the innermost BeginScope."""
