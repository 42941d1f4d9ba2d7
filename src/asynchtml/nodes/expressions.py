"""Compiled Python fragments embedded in a program."""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Expr:
    """A fragment of Python source plus its compiled code object.

    ``code`` is either an ``eval`` expression or an ``exec`` statement
    block. Both may contain top-level ``await``; evaluating such code
    yields a coroutine the executor awaits.
    """

    source: str
    code: types.CodeType
    lineno: int

    @property
    def is_async(self) -> bool:
        return bool(self.code.co_flags & inspect.CO_COROUTINE)


@dataclass(frozen=True, slots=True)
class LoopHeader:
    """A ``target in iterable`` header split into its two halves.

    ``assign`` binds the current item (stored under ``LOOP_ITEM``) to the
    target, which may be any assignable form such as ``key, value``.
    """

    iter: Expr
    assign: Expr


LOOP_ITEM = "__asynchtml_loop_item__"
