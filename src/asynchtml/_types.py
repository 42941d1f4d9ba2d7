"""Token types produced by the tag tokenizer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kinds of segments the tokenizer splits template source into."""

    DATA = "data"
    SCRIPT_OPEN = "script_open"
    SCRIPT_CLOSE = "script_close"
    TEMPLATE_OPEN = "template_open"
    TEMPLATE_CLOSE = "template_close"


@dataclass(frozen=True, slots=True)
class Token:
    """One source segment.

    Concatenating ``value`` over the full token stream reproduces the
    template source exactly.
    """

    type: TokenType
    value: str
    lineno: int
    col_offset: int

    def __repr__(self) -> str:
        return f"Token({self.type.name}, {self.value!r}, {self.lineno}:{self.col_offset})"
