"""Mixin attributes: define, use."""

from __future__ import annotations

import keyword

from asynchtml.environment.exceptions import ErrorCode
from asynchtml.nodes import CallMixin, Capture, Define, EndDefine
from asynchtml.parser.attributes import Attribute
from asynchtml.parser.blocks.control_flow import ControlFlowBlockParsingMixin
from asynchtml.parser.blocks.core import OpenTag


def is_valid_mixin_name(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


class FunctionBlockParsingMixin(ControlFlowBlockParsingMixin):
    """Handlers for ``define`` and ``use``.

    ``use`` only records the call; it is emitted by ``_emit_mixin_call``
    once every attribute of the tag has been seen, because ``context``
    may come later in the tag.

    Required Host Attributes:
        - All from ControlFlowBlockParsingMixin
    """

    def _attr_define(self, attr: Attribute, entry: OpenTag) -> None:
        name = (attr.value or "").strip()
        if not is_valid_mixin_name(name):
            raise self._error(
                f"Invalid function name: {name!r}", attr.lineno, ErrorCode.INVALID_MIXIN_NAME
            )
        self._body.append(Define(lineno=attr.lineno, name=name))
        entry.closers.append(EndDefine(lineno=attr.lineno))

    def _emit_mixin_call(
        self,
        call: Attribute,
        context: Attribute | None,
        entry: OpenTag,
        self_closing: bool,
    ) -> None:
        node = CallMixin(
            lineno=call.lineno,
            call=self._expr(call),
            context=self._expr(context) if context else None,
            captures=not self_closing,
        )
        if self_closing:
            self._body.append(node)
        else:
            self._body.append(Capture(lineno=call.lineno))
            entry.closers.append(node)
