"""Intermediate program representation for asynchtml.

A template compiles to a flat, ordered sequence of instructions. Scopes
(control flow, mixin bodies, output captures) are delimited by opening
and closing instructions that always pair up in last-opened-first-closed
order; ``Program.ends`` maps each opener to its closer.

Instruction Set:
    - Output: Data, Output, Exec, Capture
    - Control flow: If, For, While (BeginScope) / EndScope
    - Mixins: Define / EndDefine, CallMixin
    - Partials: IncludePartial
"""

from asynchtml.nodes.base import Node
from asynchtml.nodes.control_flow import BeginScope, EndScope, For, If, While
from asynchtml.nodes.expressions import LOOP_ITEM, Expr, LoopHeader
from asynchtml.nodes.functions import CallMixin, Define, EndDefine
from asynchtml.nodes.output import Capture, Data, Exec, Output
from asynchtml.nodes.structure import IncludePartial, Program

__all__ = [
    "LOOP_ITEM",
    "BeginScope",
    "CallMixin",
    "Capture",
    "Data",
    "Define",
    "EndDefine",
    "EndScope",
    "Exec",
    "Expr",
    "For",
    "If",
    "IncludePartial",
    "LoopHeader",
    "Node",
    "Output",
    "Program",
    "While",
]
