"""Attribute parsing for ``<template ...>`` tags."""

from __future__ import annotations

import re
from dataclasses import dataclass

_TAG_RE = re.compile(r"<\s*template(?P<attrs>.*?)(?P<self_closing>/)?\s*>\Z", re.DOTALL)
_ATTR_RE = re.compile(
    r"""\s+(?P<name>[^\s="'/>]+)(?:\s*=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'))?"""
)
_BRACES_RE = re.compile(r"\A\s*\{\{((?:[^}]|\}[^}])+)\}\}\s*\Z", re.DOTALL)


@dataclass(frozen=True, slots=True)
class Attribute:
    """One ``name="value"`` pair of a template tag.

    ``value`` is None for a bare attribute (``<template foo>``).
    """

    name: str
    value: str | None
    lineno: int
    raw: str

    def expression(self) -> str:
        """Attribute value with an optional ``{{ }}`` wrapper removed."""
        value = self.value or ""
        match = _BRACES_RE.match(value)
        return match.group(1) if match else value


@dataclass(frozen=True, slots=True)
class TemplateTag:
    attributes: tuple[Attribute, ...]
    self_closing: bool


class AttributeSyntaxError(ValueError):
    """Text inside a tag that is not an attribute."""

    def __init__(self, text: str, lineno: int):
        self.text = text
        self.lineno = lineno
        super().__init__(text)


def parse_template_tag(text: str, lineno: int) -> TemplateTag:
    """Split an opening ``<template ...>`` tag into attributes, in source order.

    Raises:
        AttributeSyntaxError: For text that is not ``name``, ``name="v"``
            or ``name='v'``.
    """
    match = _TAG_RE.match(text)
    if match is None:
        raise AttributeSyntaxError(text, lineno)
    attrs = match.group("attrs")
    prefix_lines = text[: match.start("attrs")].count("\n")

    attributes: list[Attribute] = []
    pos = 0
    while attrs[pos:].strip():
        attr = _ATTR_RE.match(attrs, pos)
        if attr is None:
            raise AttributeSyntaxError(
                attrs[pos:].strip(), lineno + prefix_lines + attrs[:pos].count("\n")
            )
        value = attr.group("dq")
        if value is None:
            value = attr.group("sq")
        attributes.append(
            Attribute(
                name=attr.group("name"),
                value=value,
                lineno=lineno + prefix_lines + attrs[: attr.start("name")].count("\n"),
                raw=attr.group(0).strip(),
            )
        )
        pos = attr.end()
    return TemplateTag(attributes=tuple(attributes), self_closing=bool(match.group("self_closing")))
