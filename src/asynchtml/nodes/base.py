"""Base instruction class for the asynchtml program representation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all program instructions.

    Instructions remember the template line they came from so runtime
    errors can point back at the source. They are immutable, so one
    compiled program can be rendered by any number of concurrent tasks.

    """

    lineno: int
