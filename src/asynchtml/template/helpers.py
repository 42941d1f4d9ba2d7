"""Context derivation helpers used by the executor."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from asynchtml.environment.exceptions import ErrorCode, TemplateRuntimeError, describe


def as_context(value: Any, *, template_name: str | None = None, lineno: int | None = None) -> Mapping[str, Any]:
    """Validate a render or call context; ``None`` means an empty one."""
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise TemplateRuntimeError(
            f"Context must be a mapping, got {type(value).__name__}: {describe(value)}",
            template_name=template_name,
            lineno=lineno,
            code=ErrorCode.INVALID_CONTEXT,
        )
    return value


def with_content(context: Mapping[str, Any], content: str) -> dict[str, Any]:
    """Copy of ``context`` with ``content`` set; ``content`` wins over an existing key."""
    derived = dict(context)
    derived["content"] = content
    return derived


def exported_context(mixins: Mapping[str, Any], content: str) -> dict[str, Any]:
    """Context for a paired partial/wrap without ``context``: visible mixins plus content only."""
    derived = dict(mixins)
    derived["content"] = content
    return derived
