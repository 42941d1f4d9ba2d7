"""Partial inclusion: partial, wrap."""

from __future__ import annotations

from asynchtml.environment.exceptions import ErrorCode
from asynchtml.nodes import Capture, IncludePartial
from asynchtml.parser.attributes import Attribute
from asynchtml.parser.blocks.functions import FunctionBlockParsingMixin
from asynchtml.parser.blocks.core import OpenTag


class TemplateStructureBlockParsingMixin(FunctionBlockParsingMixin):
    """Emits partial inclusions once a tag's attributes are all known.

    Partial paths are taken literally (no ``{{ }}`` unwrapping) and
    collected in ``_partials`` so the template can resolve and compile
    them before the first render.

    Required Host Attributes:
        - All from FunctionBlockParsingMixin
        - _partials: dict[str, None]
    """

    _partials: dict[str, None]

    def _emit_partial(
        self,
        path_attr: Attribute,
        context: Attribute | None,
        entry: OpenTag,
        self_closing: bool,
    ) -> None:
        if not self._filename:
            raise self._error(
                "Cannot include partial: no file name",
                path_attr.lineno,
                ErrorCode.PARTIAL_WITHOUT_FILE,
            )
        path = (path_attr.value or "").strip()
        self._partials.setdefault(path, None)

        node = IncludePartial(
            lineno=path_attr.lineno,
            path=path,
            context=self._expr(context) if context else None,
            captures=not self_closing,
        )
        if self_closing:
            self._body.append(node)
        else:
            self._body.append(Capture(lineno=path_attr.lineno))
            entry.closers.append(node)
