"""Structural parser for asynchtml templates."""

from asynchtml.parser.core import Parser, parse

__all__ = ["Parser", "parse"]
