"""Process-wide cache of top-level file templates.

``Template.from_file`` returns the same Template instance for the same
absolute path until the cache is cleared or bypassed. Since compilation
is memoized per instance, concurrent renders of an uncached path share
one in-flight compilation and read the file once. Partials are never
cached here; they live in the per-compilation registry.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from asynchtml.template.core import Template

logger = logging.getLogger(__name__)


class TemplateCache:
    """Absolute path → Template.

    Only touched from the event loop thread; no locking.
    """

    __slots__ = ("_templates",)

    def __init__(self) -> None:
        self._templates: dict[str, Template] = {}

    def get(self, path: str) -> Template | None:
        template = self._templates.get(path)
        logger.debug("Template cache %s for %s", "hit" if template else "miss", path)
        return template

    def set(self, path: str, template: Template) -> None:
        self._templates[path] = template

    def clear(self) -> None:
        self._templates.clear()

    def __contains__(self, path: object) -> bool:
        return path in self._templates

    def __len__(self) -> int:
        return len(self._templates)


file_template_cache = TemplateCache()


def clear_cache() -> None:
    """Forget every template loaded through ``Template.from_file``."""
    file_template_cache.clear()
