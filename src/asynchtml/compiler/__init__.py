"""Compilation of embedded Python fragments and program linking."""

from asynchtml.compiler.core import build_program, link, program_name
from asynchtml.compiler.expressions import (
    compile_expression,
    compile_loop_header,
    compile_statements,
)

__all__ = [
    "build_program",
    "compile_expression",
    "compile_loop_header",
    "compile_statements",
    "link",
    "program_name",
]
