"""Render executor for compiled programs.

A Renderer walks a Program's flat instruction list. Scope bodies are
found through ``Program.ends``: ``If`` runs its body at most once,
``For``/``While`` run it repeatedly, ``Define`` skips it and installs a
Mixin instead, ``Capture`` renders it into a separate buffer that is
handed to the closing call or inclusion as ``content``.

Output Accumulation:
    Each active scope appends to its own ``list[str]``, joined once the
    scope is complete::

        buf = []
        buf.append("Hello, ")
        buf.append(html_escape(name))
        return "".join(buf)

Ordering:
    Every awaitable (expressions containing ``await``, mixin calls,
    partial renders) is awaited before the next instruction runs, so the
    output order is the document order whatever each await costs.

Error Enhancement:
    Exceptions raised by embedded Python are wrapped into
    TemplateRuntimeError (or UndefinedError for unknown names) with the
    template name, line, expression and a source snippet. TemplateErrors
    from nested partials and mixins pass through unchanged.

"""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

from asynchtml.environment.exceptions import (
    TemplateError,
    TemplateRuntimeError,
    UndefinedError,
    build_source_snippet,
)
from asynchtml.nodes import (
    LOOP_ITEM,
    CallMixin,
    Capture,
    Data,
    Define,
    Exec,
    Expr,
    For,
    If,
    IncludePartial,
    LoopHeader,
    Node,
    Output,
    Program,
    While,
)
from asynchtml.render_context import get_render_context
from asynchtml.template.helpers import as_context, exported_context, with_content
from asynchtml.template.scope import Mixin, Scope
from asynchtml.utils.html import html_escape, to_str

if TYPE_CHECKING:
    from asynchtml.template.core import Template

_Handler = Callable[[int, Any, Scope, list[str]], Awaitable[int]]


class Renderer:
    """Callable render routine for one compiled template.

    Created once per Template and reused for every render; holds no
    per-render state, so concurrent renders can share it.

    Example:
        >>> renderer = Renderer(template, program)
        >>> await renderer({"name": "World"})
        'Hello, World!'
    """

    __slots__ = ("_dispatch", "_program", "_template")

    def __init__(self, template: Template, program: Program):
        self._template = template
        self._program = program
        self._dispatch: dict[type[Node], _Handler] = {
            Data: self._exec_data,
            Output: self._exec_output,
            Exec: self._exec_statements,
            If: self._exec_if,
            For: self._exec_for,
            While: self._exec_while,
            Define: self._exec_define,
            Capture: self._exec_capture,
            CallMixin: self._exec_call,
            IncludePartial: self._exec_include,
        }

    @property
    def template_name(self) -> str:
        return self._program.filename or "<template>"

    async def __call__(self, context: Any = None) -> str:
        scope = Scope(as_context(context, template_name=self.template_name))
        return await self.render_range(0, len(self._program.body), scope)

    async def render_range(self, start: int, stop: int, scope: Scope) -> str:
        """Run instructions ``start`` up to ``stop`` into a fresh buffer."""
        buf: list[str] = []
        await self._run(start, stop, scope, buf)
        return "".join(buf)

    async def _run(self, start: int, stop: int, scope: Scope, buf: list[str]) -> None:
        body = self._program.body
        dispatch = self._dispatch
        pc = start
        while pc < stop:
            node = body[pc]
            pc = await dispatch[type(node)](pc, node, scope, buf)

    # ─────────────────────────────────────────────────────────────────────
    # Output
    # ─────────────────────────────────────────────────────────────────────

    async def _exec_data(self, pc: int, node: Data, scope: Scope, buf: list[str]) -> int:
        buf.append(node.value)
        return pc + 1

    async def _exec_output(self, pc: int, node: Output, scope: Scope, buf: list[str]) -> int:
        value = await self._evaluate(node.expr, scope)
        buf.append(html_escape(value) if node.escape else to_str(value))
        return pc + 1

    async def _exec_statements(self, pc: int, node: Exec, scope: Scope, buf: list[str]) -> int:
        await self._evaluate(node.body, scope)
        return pc + 1

    # ─────────────────────────────────────────────────────────────────────
    # Control flow
    # ─────────────────────────────────────────────────────────────────────

    async def _exec_if(self, pc: int, node: If, scope: Scope, buf: list[str]) -> int:
        end = self._program.ends[pc]
        if await self._evaluate(node.test, scope):
            await self._run(pc + 1, end, scope, buf)
        return end + 1

    async def _exec_while(self, pc: int, node: While, scope: Scope, buf: list[str]) -> int:
        end = self._program.ends[pc]
        while await self._evaluate(node.test, scope):
            await self._run(pc + 1, end, scope, buf)
        return end + 1

    async def _exec_for(self, pc: int, node: For, scope: Scope, buf: list[str]) -> int:
        end = self._program.ends[pc]
        iterable = await self._evaluate(node.header.iter, scope)
        if hasattr(iterable, "__aiter__"):
            async for item in iterable:
                await self._bind(node.header, item, scope)
                await self._run(pc + 1, end, scope, buf)
        else:
            try:
                iterator = iter(iterable)
            except TypeError as exc:
                raise self._runtime_error(exc, node.header.iter) from exc
            for item in iterator:
                await self._bind(node.header, item, scope)
                await self._run(pc + 1, end, scope, buf)
        return end + 1

    async def _bind(self, header: LoopHeader, item: Any, scope: Scope) -> None:
        scope.namespace[LOOP_ITEM] = item
        try:
            await self._evaluate(header.assign, scope)
        finally:
            del scope.namespace[LOOP_ITEM]

    # ─────────────────────────────────────────────────────────────────────
    # Mixins and partials
    # ─────────────────────────────────────────────────────────────────────

    async def _exec_define(self, pc: int, node: Define, scope: Scope, buf: list[str]) -> int:
        end = self._program.ends[pc]
        scope.define(node.name, Mixin(node.name, self, pc + 1, end, scope))
        return end + 1

    async def _exec_capture(self, pc: int, node: Capture, scope: Scope, buf: list[str]) -> int:
        end = self._program.ends[pc]
        content = await self.render_range(pc + 1, end, scope)
        closer = self._program.body[end]
        if isinstance(closer, CallMixin):
            await self._call_mixin(closer, content, scope, buf)
        else:
            await self._include_partial(closer, content, scope, buf)
        return end + 1

    async def _exec_call(self, pc: int, node: CallMixin, scope: Scope, buf: list[str]) -> int:
        await self._call_mixin(node, "", scope, buf)
        return pc + 1

    async def _exec_include(
        self, pc: int, node: IncludePartial, scope: Scope, buf: list[str]
    ) -> int:
        await self._include_partial(node, None, scope, buf)
        return pc + 1

    async def _call_mixin(self, node: CallMixin, content: str, scope: Scope, buf: list[str]) -> None:
        target = await self._evaluate(node.call, scope)
        if not callable(target):
            return
        context = await self._call_context(node.context, scope, with_content(scope.context, content))
        try:
            result = target(context)
            if inspect.isawaitable(result):
                result = await result
        except TemplateError:
            raise
        except Exception as exc:
            raise self._runtime_error(exc, node.call) from exc
        buf.append(to_str(result))

    async def _include_partial(
        self, node: IncludePartial, content: str | None, scope: Scope, buf: list[str]
    ) -> None:
        if content is None:
            default = with_content(scope.context, "")
        else:
            default = exported_context(scope.mixins, content)
        context = await self._call_context(node.context, scope, default)

        partial = self._template.partial(node.path)
        render_ctx = get_render_context()
        if render_ctx is None:
            buf.append(await partial.render_partial(context))
            return
        with render_ctx.including(partial.name, partial.filename, node.lineno):
            buf.append(await partial.render_partial(context))

    async def _call_context(
        self, expr: Expr | None, scope: Scope, default: dict[str, Any]
    ) -> Any:
        if expr is None:
            return default
        value = await self._evaluate(expr, scope)
        return as_context(value, template_name=self.template_name, lineno=expr.lineno)

    # ─────────────────────────────────────────────────────────────────────
    # Evaluation
    # ─────────────────────────────────────────────────────────────────────

    async def _evaluate(self, expr: Expr, scope: Scope) -> Any:
        """Run a compiled fragment in the scope's namespace, awaiting it if needed."""
        try:
            value = eval(expr.code, scope.namespace)
            if expr.is_async:
                value = await value
        except TemplateError:
            raise
        except NameError as exc:
            raise self._undefined_error(exc, expr, scope) from exc
        except Exception as exc:
            raise self._runtime_error(exc, expr) from exc
        return value

    def _template_stack(self) -> list[tuple[str, int]]:
        render_ctx = get_render_context()
        return list(render_ctx.template_stack) if render_ctx else []

    def _runtime_error(self, error: Exception, expr: Expr) -> TemplateRuntimeError:
        message = str(error).strip() or f"{type(error).__name__} (no details available)"
        if not message.startswith(type(error).__name__):
            message = f"{type(error).__name__}: {message}"
        return TemplateRuntimeError(
            message,
            expression=expr.source,
            template_name=self.template_name,
            lineno=expr.lineno,
            source_snippet=build_source_snippet(self._program.source, expr.lineno),
            template_stack=self._template_stack(),
        )

    def _undefined_error(self, error: NameError, expr: Expr, scope: Scope) -> UndefinedError:
        name = getattr(error, "name", None) or str(error)
        available = frozenset(k for k in scope.namespace if isinstance(k, str) and not k.startswith("__"))
        return UndefinedError(
            name,
            template=self.template_name,
            lineno=expr.lineno,
            available_names=available,
            source_snippet=build_source_snippet(self._program.source, expr.lineno),
            template_stack=self._template_stack(),
        )
