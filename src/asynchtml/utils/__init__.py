"""Shared utilities for asynchtml."""

from asynchtml.utils.html import html_escape, to_str

__all__ = ["html_escape", "to_str"]
