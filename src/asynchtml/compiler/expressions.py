"""Compilation of embedded Python fragments.

Template expressions are plain Python. Each fragment is parsed with
``ast``, shifted so its line numbers match the template line it came
from, and compiled once. ``PyCF_ALLOW_TOP_LEVEL_AWAIT`` lets every
fragment use ``await``; such fragments evaluate to a coroutine.

Fragment kinds:
    - expression: ``{{ x }}``, ``if``/``while``/``html``/``use``/``context``
    - statements: ``<script in-template>`` bodies
    - loop header: ``for="target in iterable"``

All functions raise ``SyntaxError`` for invalid Python; the parser turns
that into a ``TemplateSyntaxError`` pointing at the template line.
"""

from __future__ import annotations

import ast
import textwrap

from asynchtml.nodes import LOOP_ITEM, Expr, LoopHeader

_FLAGS = ast.PyCF_ALLOW_TOP_LEVEL_AWAIT


def compile_expression(source: str, *, filename: str, lineno: int) -> Expr:
    """Compile a single Python expression.

    The text is parenthesized so expressions may span several lines.
    """
    text = source.strip()
    if not text:
        raise SyntaxError("empty expression")
    tree = ast.parse(f"(\n{text}\n)", filename, mode="eval")
    ast.increment_lineno(tree, lineno - 2)
    code = compile(tree, filename, "eval", flags=_FLAGS, dont_inherit=True)
    return Expr(source=text, code=code, lineno=lineno)


def compile_statements(source: str, *, filename: str, lineno: int) -> Expr:
    """Compile a block of Python statements, dedented as a whole."""
    text = textwrap.dedent(source)
    tree = ast.parse(text, filename, mode="exec")
    ast.increment_lineno(tree, lineno - 1)
    code = compile(tree, filename, "exec", flags=_FLAGS, dont_inherit=True)
    return Expr(source=text.strip(), code=code, lineno=lineno)


def compile_loop_header(source: str, *, filename: str, lineno: int) -> LoopHeader:
    """Compile ``target in iterable`` into an iterable expression and a target binding.

    Example:
        >>> header = compile_loop_header("key, value in items.items()", filename="<t>", lineno=1)
        >>> header.iter.source
        'items.items()'
    """
    text = source.strip()
    tree = ast.parse(f"for {text}:\n    pass", filename, mode="exec")
    loop = tree.body[0] if len(tree.body) == 1 else None
    if (
        not isinstance(loop, ast.For)
        or loop.orelse
        or len(loop.body) != 1
        or not isinstance(loop.body[0], ast.Pass)
    ):
        raise SyntaxError(f"invalid loop header: {text!r}")
    ast.increment_lineno(tree, lineno - 1)

    iter_code = compile(
        ast.Expression(body=loop.iter), filename, "eval", flags=_FLAGS, dont_inherit=True
    )
    binding = ast.Module(
        body=[
            ast.Assign(
                targets=[loop.target],
                value=ast.Name(id=LOOP_ITEM, ctx=ast.Load()),
                lineno=loop.lineno,
                col_offset=0,
                end_lineno=loop.lineno,
                end_col_offset=0,
            )
        ],
        type_ignores=[],
    )
    ast.fix_missing_locations(binding)
    assign_code = compile(binding, filename, "exec", dont_inherit=True)

    return LoopHeader(
        iter=Expr(source=ast.unparse(loop.iter), code=iter_code, lineno=lineno),
        assign=Expr(source=ast.unparse(loop.target), code=assign_code, lineno=lineno),
    )
