"""Tests for partial and wrap composition.

File-backed tests use real files under ``tmp_path``; the rest use a
DictSource keyed by absolute paths.
"""

from __future__ import annotations

import asyncio

import pytest

from asynchtml import (
    DictSource,
    ErrorCode,
    Template,
    TemplateNotFoundError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
    get_render_context_required,
)
from asynchtml.compiler.partials import PartialResolver

from .conftest import RAW


class CountingSource(DictSource):
    """DictSource that records every read."""

    def __init__(self, mapping: dict[str, str]):
        super().__init__(mapping)
        self.reads: list[str] = []

    async def read(self, path: str) -> str:
        self.reads.append(path)
        return await super().read(path)


async def render_dict(files: dict[str, str], page: str = "/t/page.html", context=None) -> str:
    template = Template.from_file(page, ignore_cache=True, loader=DictSource(files))
    return await template.render_async(context, RAW)


# ─────────────────────────────────────────────────────────────────────────────
# File system
# ─────────────────────────────────────────────────────────────────────────────


class TestFilePartials:
    """Partials read from disk, resolved relative to the including file."""

    @pytest.mark.asyncio
    async def test_self_closing_partial(self, templates) -> None:
        files = templates(
            **{
                "page.html": '<h1>{{ title }}</h1><template partial="parts/nav"/>',
                "parts/nav.html": "<nav>{{ title }}{{ content }}</nav>",
            }
        )
        result = await Template.from_file(files["page.html"]).render_async({"title": "T"}, RAW)
        assert result == "<h1>T</h1><nav>T</nav>"

    @pytest.mark.asyncio
    async def test_nested_partial_resolves_from_its_own_directory(self, templates) -> None:
        files = templates(
            **{
                "page.html": '<template partial="parts/nav.html"/>',
                "parts/nav.html": '<nav><template partial="icon"/></nav>',
                "parts/icon.html": "*",
            }
        )
        assert await Template.from_file(files["page.html"]).render_async(options=RAW) == "<nav>*</nav>"

    @pytest.mark.asyncio
    async def test_wrap_layout(self, templates) -> None:
        files = templates(
            **{
                "layout.html": (
                    "<title><template use=\"heading\"/></title>"
                    '<main><template html="content"/></main>'
                ),
                "pages/home.html": (
                    '<template define="heading">Big</template>'
                    '<template wrap="../layout"><p>{{ title }}</p></template>'
                ),
            }
        )
        result = await Template.from_file(files["pages/home.html"]).render_async(
            {"title": "T"}, RAW
        )
        assert result == "<title>Big</title><main><p>T</p></main>"

    @pytest.mark.asyncio
    async def test_missing_partial_file(self, templates) -> None:
        files = templates(**{"page.html": '<template partial="nope"/>'})
        with pytest.raises(TemplateNotFoundError) as exc_info:
            await Template.from_file(files["page.html"]).render_async(options=RAW)
        assert exc_info.value.path.endswith("nope.html")

    @pytest.mark.asyncio
    async def test_missing_top_level_file(self, tmp_path) -> None:
        with pytest.raises(TemplateNotFoundError):
            await Template.from_file(tmp_path / "absent.html").render_async(options=RAW)


# ─────────────────────────────────────────────────────────────────────────────
# Context derivation
# ─────────────────────────────────────────────────────────────────────────────


class TestPartialContext:
    """Which names a partial sees."""

    @pytest.mark.asyncio
    async def test_explicit_context(self) -> None:
        files = {
            "/t/page.html": "<template partial=\"item\" context=\"{'name': 'x'}\"/>",
            "/t/item.html": "<li>{{ name }}</li>",
        }
        assert await render_dict(files) == "<li>x</li>"

    @pytest.mark.asyncio
    async def test_explicit_context_is_isolated(self) -> None:
        files = {
            "/t/page.html": "<template partial=\"item\" context=\"{'name': 'x'}\"/>",
            "/t/item.html": "{{ title }}",
        }
        with pytest.raises(UndefinedError, match="title"):
            await render_dict(files, context={"title": "T"})

    @pytest.mark.asyncio
    async def test_wrap_sees_only_mixins_and_content(self) -> None:
        files = {
            "/t/page.html": '<template wrap="layout">body</template>',
            "/t/layout.html": "{{ title }}",
        }
        with pytest.raises(UndefinedError, match="title"):
            await render_dict(files, context={"title": "T"})

    @pytest.mark.asyncio
    async def test_wrap_exports_mixins_defined_in_body(self) -> None:
        files = {
            "/t/page.html": (
                '<template wrap="layout">'
                '<template define="sidebar">S</template>body'
                "</template>"
            ),
            "/t/layout.html": '<template use="sidebar"/>|<template html="content"/>',
        }
        assert await render_dict(files) == "S|body"

    @pytest.mark.asyncio
    async def test_paired_partial_with_explicit_context(self) -> None:
        files = {
            "/t/page.html": "<template wrap=\"box\" context=\"{'content': 'fixed'}\">ignored</template>",
            "/t/box.html": "[{{ content }}]",
        }
        assert await render_dict(files) == "[fixed]"

    @pytest.mark.asyncio
    async def test_partial_content_default_wins_over_context(self) -> None:
        files = {
            "/t/page.html": '<template partial="p"/>',
            "/t/p.html": "[{{ content }}]",
        }
        assert await render_dict(files, context={"content": "outer"}) == "[]"


# ─────────────────────────────────────────────────────────────────────────────
# Registry and recursion
# ─────────────────────────────────────────────────────────────────────────────


class TestPartialRegistry:
    """One compilation run loads each partial once."""

    @pytest.mark.asyncio
    async def test_each_partial_read_once(self) -> None:
        source = CountingSource(
            {
                "/t/page.html": '<template partial="a"/><template partial="a"/><template partial="b"/>',
                "/t/a.html": "A",
                "/t/b.html": 'B<template partial="a"/>',
            }
        )
        template = Template.from_file("/t/page.html", loader=source)
        assert await template.render_async(options=RAW) == "AABA"
        assert sorted(source.reads) == ["/t/a.html", "/t/b.html", "/t/page.html"]

    @pytest.mark.asyncio
    async def test_mutually_recursive_partials(self) -> None:
        files = {
            "/t/a.html": "A{{ n }}<template if=\"n > 0\" partial=\"b\" context=\"{'n': n - 1}\"/>",
            "/t/b.html": "B<template partial=\"a\" context=\"{'n': n}\"/>",
        }
        assert await render_dict(files, page="/t/a.html", context={"n": 2}) == "A2BA1BA0"

    @pytest.mark.asyncio
    async def test_include_depth_limit(self) -> None:
        files = {"/t/loop.html": 'x<template partial="loop"/>'}
        with pytest.raises(TemplateRuntimeError, match="Maximum include depth") as exc_info:
            await render_dict(files, page="/t/loop.html")
        assert exc_info.value.code is ErrorCode.INCLUDE_DEPTH

    @pytest.mark.asyncio
    async def test_error_in_partial_reports_include_stack(self) -> None:
        files = {
            "/t/page.html": 'line one\n<template partial="bad"/>',
            "/t/bad.html": "{{ 1 / 0 }}",
        }
        with pytest.raises(TemplateRuntimeError, match="ZeroDivisionError") as exc_info:
            await render_dict(files)
        error = exc_info.value
        assert error.template_name == "/t/bad.html"
        assert error.template_stack == [("/t/page.html", 2)]

    @pytest.mark.asyncio
    async def test_syntax_error_in_partial(self) -> None:
        files = {
            "/t/page.html": '<template partial="bad"/>',
            "/t/bad.html": "<template if=\"x\">",
        }
        with pytest.raises(TemplateSyntaxError) as exc_info:
            await render_dict(files)
        assert exc_info.value.filename == "/t/bad.html"


class TestPartialWithoutFile:
    """String templates cannot include partials."""

    @pytest.mark.asyncio
    async def test_string_template(self) -> None:
        with pytest.raises(TemplateSyntaxError, match="no file name"):
            await Template('<template partial="nav"/>').render_async(options=RAW)

    @pytest.mark.asyncio
    async def test_resolver_rejects_origin_without_file(self) -> None:
        resolver = PartialResolver({}, DictSource({"/t/nav.html": "nav"}))
        with pytest.raises(TemplateSyntaxError, match="no file name") as exc_info:
            await resolver.resolve(Template("x"), "nav")
        assert exc_info.value.code is ErrorCode.PARTIAL_WITHOUT_FILE
        assert resolver.registry == {}


class TestConcurrentPartials:
    """Partials gathered from a script each see their own include stack."""

    @pytest.mark.asyncio
    async def test_gathered_partials_keep_separate_stacks(self) -> None:
        async def where(delay: float) -> str:
            await asyncio.sleep(delay)
            ctx = get_render_context_required()
            return f"{ctx.template_name}:{ctx.include_depth}:{ctx.template_stack}"

        files = {
            "/t/page.html": (
                '<template define="part">'
                "<template partial=\"where\" context=\"{'d': d, 'where': where}\"/>"
                "</template>"
                "<script in-template>"
                "out = await gather(part({'d': 0.02}), part({'d': 0}))"
                "</script>{{ ' | '.join(out) }}"
            ),
            "/t/where.html": "{{ await where(d) }}",
        }
        result = await render_dict(files, context={"gather": asyncio.gather, "where": where})
        expected = "/t/where.html:1:[('/t/page.html', 1)]"
        assert result == f"{expected} | {expected}"
