"""asynchtml RenderContext — per-render state kept out of the user context.

State that belongs to one render call (which template is running, how
deep partial inclusion has gone, the chain of inclusions for error
messages) lives in a ContextVar instead of in the context mapping the
template sees.

Async Safety:
    Each asyncio task gets its own copy of the ContextVar, so concurrent
    renders on one event loop never share a RenderContext. Within one
    render, each partial runs under a child RenderContext that is set
    for the inclusion and reset afterwards, so partials rendered
    concurrently (``asyncio.gather`` from a script) keep separate stacks.

"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, field

from asynchtml.environment.exceptions import ErrorCode, TemplateRuntimeError


@dataclass
class RenderContext:
    """Per-render state isolated from user context.

    Attributes:
        template_name: Template currently executing
        filename: Its source file, if any
        include_depth: Current partial nesting depth
        max_include_depth: Maximum allowed partial nesting depth
        template_stack: (template_name, line) of each enclosing inclusion
    """

    template_name: str | None = None
    filename: str | None = None

    # Deep enough for any real layout hierarchy while catching
    # unconditional self-inclusion early
    include_depth: int = 0
    max_include_depth: int = 50

    template_stack: list[tuple[str, int]] = field(default_factory=list)

    def check_include_depth(self, template_name: str) -> None:
        """Raise TemplateRuntimeError if one more inclusion would exceed the limit."""
        if self.include_depth >= self.max_include_depth:
            raise TemplateRuntimeError(
                f"Maximum include depth exceeded ({self.max_include_depth}) "
                f"when including '{template_name}'",
                template_name=self.template_name,
                template_stack=list(self.template_stack),
                suggestion="Check for circular partials: A → B → A",
                code=ErrorCode.INCLUDE_DEPTH,
            )

    @contextmanager
    def including(
        self, template_name: str, filename: str | None, lineno: int
    ) -> Iterator[RenderContext]:
        """Enter a partial included at ``lineno`` of the current template.

        The partial runs under a child context; this one is never modified.
        """
        self.check_include_depth(template_name)
        child = RenderContext(
            template_name=template_name,
            filename=filename,
            include_depth=self.include_depth + 1,
            max_include_depth=self.max_include_depth,
            template_stack=[*self.template_stack, (self.template_name or "<template>", lineno)],
        )
        token = _render_context.set(child)
        try:
            yield child
        finally:
            _render_context.reset(token)


_render_context: ContextVar[RenderContext | None] = ContextVar(
    "asynchtml_render_context",
    default=None,
)


def get_render_context() -> RenderContext | None:
    """Current render context, or None outside a render call."""
    return _render_context.get()


def get_render_context_required() -> RenderContext:
    ctx = _render_context.get()
    if ctx is None:
        raise RuntimeError("Not in a render context")
    return ctx


@contextmanager
def render_context(
    template_name: str | None = None,
    filename: str | None = None,
    max_include_depth: int = 50,
) -> Iterator[RenderContext]:
    """Context manager for render-scoped state.

    Creates a new RenderContext, makes it current for the duration of
    the block, and restores the previous one afterwards.

    Example:
        with render_context(template_name="page.html") as ctx:
            html = await renderer(user_context)
    """
    ctx = RenderContext(
        template_name=template_name,
        filename=filename,
        max_include_depth=max_include_depth,
    )
    token: Token[RenderContext | None] = _render_context.set(ctx)
    try:
        yield ctx
    finally:
        _render_context.reset(token)
