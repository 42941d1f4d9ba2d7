"""Name resolution for template expressions.

Every scope owns a plain ``dict`` that is passed to ``eval``/``exec`` as
globals. Lookup order for a free name inside an expression:

1. mixins visible in the scope
2. keys of the scope's context mapping
3. ``context`` itself
4. Python builtins

Assignments made by ``<script in-template>`` and ``for`` targets go into
the same dict, so they are visible to later instructions of the scope.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from asynchtml.template.helpers import as_context

if TYPE_CHECKING:
    from asynchtml.template.executor import Renderer


class Scope:
    """Namespace for one render, or for one mixin call.

    A child scope starts from a snapshot of its parent, so names the
    parent has at call time are visible but writes never flow back.
    """

    __slots__ = ("context", "mixins", "namespace")

    def __init__(self, context: Mapping[str, Any], parent: Scope | None = None):
        self.context = context
        self.mixins: dict[str, Mixin] = dict(parent.mixins) if parent else {}
        namespace: dict[str, Any] = dict(parent.namespace) if parent else {}
        namespace["context"] = context
        namespace.update(context)
        namespace.update(self.mixins)
        self.namespace = namespace

    def define(self, name: str, mixin: Mixin) -> None:
        self.mixins[name] = mixin
        self.namespace[name] = mixin


class Mixin:
    """A ``<template define="name">`` body, callable from Python.

    Calling it with a context mapping renders the body and returns a
    coroutine for the output string. The body resolves names against the
    call's context first, then against the scope it was defined in, as
    that scope looks at call time (so a mixin can call itself and mixins
    defined after it).

    Example:
        >>> await hi({"content": "World"})
        'Hi World'
    """

    __slots__ = ("_renderer", "_scope", "_start", "_stop", "name")

    def __init__(self, name: str, renderer: Renderer, start: int, stop: int, scope: Scope):
        self.name = name
        self._renderer = renderer
        self._start = start
        self._stop = stop
        self._scope = scope

    async def __call__(self, context: Mapping[str, Any] | None = None) -> str:
        scope = Scope(as_context(context, template_name=self._renderer.template_name), self._scope)
        return await self._renderer.render_range(self._start, self._stop, scope)

    def __repr__(self) -> str:
        return f"<Mixin {self.name} of {self._renderer.template_name}>"
