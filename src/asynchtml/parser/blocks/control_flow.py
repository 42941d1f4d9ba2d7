"""Control flow attributes: if, for, while, html."""

from __future__ import annotations

from asynchtml.compiler import compile_expression, compile_loop_header
from asynchtml.nodes import EndScope, Expr, For, If, Output, While
from asynchtml.parser.attributes import Attribute
from asynchtml.parser.blocks.core import BlockStackMixin, OpenTag


class ControlFlowBlockParsingMixin(BlockStackMixin):
    """Handlers for attributes that open a control-flow scope or emit raw output.

    Required Host Attributes:
        - All from BlockStackMixin
        - _code_filename: str
    """

    _code_filename: str

    def _expr(self, attr: Attribute) -> Expr:
        try:
            return compile_expression(attr.expression(), filename=self._code_filename, lineno=attr.lineno)
        except SyntaxError as exc:
            raise self._python_error(exc, f"'{attr.name}' attribute", attr.lineno) from exc

    def _attr_if(self, attr: Attribute, entry: OpenTag) -> None:
        self._body.append(If(lineno=attr.lineno, test=self._expr(attr)))
        entry.closers.append(EndScope(lineno=attr.lineno))

    def _attr_while(self, attr: Attribute, entry: OpenTag) -> None:
        self._body.append(While(lineno=attr.lineno, test=self._expr(attr)))
        entry.closers.append(EndScope(lineno=attr.lineno))

    def _attr_for(self, attr: Attribute, entry: OpenTag) -> None:
        try:
            header = compile_loop_header(
                attr.expression(), filename=self._code_filename, lineno=attr.lineno
            )
        except SyntaxError as exc:
            raise self._python_error(exc, "'for' attribute", attr.lineno) from exc
        self._body.append(For(lineno=attr.lineno, header=header))
        entry.closers.append(EndScope(lineno=attr.lineno))

    def _attr_html(self, attr: Attribute, entry: OpenTag) -> None:
        self._body.append(Output(lineno=attr.lineno, expr=self._expr(attr), escape=False))
