"""Tests for runtime error reporting and diagnostics formatting."""

from __future__ import annotations

import pytest

from asynchtml import (
    ErrorCode,
    TemplateError,
    TemplateRuntimeError,
    TemplateSyntaxError,
    UndefinedError,
    build_source_snippet,
)
from asynchtml.environment import terminal

from .conftest import render


class TestUndefinedNames:
    """NameError during render becomes UndefinedError."""

    @pytest.mark.asyncio
    async def test_undefined_variable(self) -> None:
        with pytest.raises(UndefinedError, match="Undefined variable 'missing'") as exc_info:
            await render("ok\n{{ missing }}")
        error = exc_info.value
        assert error.name == "missing"
        assert error.lineno == 2
        assert error.code is ErrorCode.UNDEFINED_VARIABLE

    @pytest.mark.asyncio
    async def test_did_you_mean(self) -> None:
        with pytest.raises(UndefinedError, match="Did you mean 'title'"):
            await render("{{ titel }}", {"title": "x"})

    @pytest.mark.asyncio
    async def test_undefined_in_script(self) -> None:
        with pytest.raises(UndefinedError, match="nothing"):
            await render("<script in-template>y = nothing + 1</script>")

    @pytest.mark.asyncio
    async def test_undefined_in_mixin_body_propagates_unchanged(self) -> None:
        source = '<template define="m">{{ nope }}</template><template use="m"/>'
        with pytest.raises(UndefinedError) as exc_info:
            await render(source)
        assert exc_info.value.name == "nope"


class TestRuntimeErrors:
    """Exceptions from embedded Python become TemplateRuntimeError."""

    @pytest.mark.asyncio
    async def test_wraps_original_exception(self) -> None:
        with pytest.raises(TemplateRuntimeError) as exc_info:
            await render("a\nb\n{{ items[5] }}", {"items": []})
        error = exc_info.value
        assert isinstance(error.__cause__, IndexError)
        assert error.lineno == 3
        assert error.expression == "items[5]"
        assert error.message.startswith("IndexError:")
        assert error.code is ErrorCode.RUNTIME_ERROR

    @pytest.mark.asyncio
    async def test_message_has_location_and_snippet(self) -> None:
        with pytest.raises(TemplateRuntimeError) as exc_info:
            await render("<p>\n{{ 1 / 0 }}\n</p>")
        message = terminal.strip_colors(str(exc_info.value))
        assert "Runtime Error: ZeroDivisionError: division by zero" in message
        assert "<template>:2" in message
        assert "Expression: 1 / 0" in message
        assert ">  2 | {{ 1 / 0 }}" in message

    @pytest.mark.asyncio
    async def test_error_in_condition(self) -> None:
        with pytest.raises(TemplateRuntimeError, match="KeyError"):
            await render('<template if="d[\'k\']">x</template>', {"d": {}})

    @pytest.mark.asyncio
    async def test_non_iterable_loop(self) -> None:
        with pytest.raises(TemplateRuntimeError, match="TypeError"):
            await render('<template for="i in 5">x</template>')

    @pytest.mark.asyncio
    async def test_error_raised_while_iterating(self) -> None:
        def gen():
            yield 1
            raise RuntimeError("broken generator")

        with pytest.raises(TemplateRuntimeError, match="broken generator") as exc_info:
            await render('<template for="i in g()">{{ i }}</template>', {"g": gen})
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    @pytest.mark.asyncio
    async def test_render_context_must_be_mapping(self) -> None:
        with pytest.raises(TemplateRuntimeError, match="Context must be a mapping"):
            await render("x", ["not", "a", "mapping"])

    @pytest.mark.asyncio
    async def test_all_errors_are_template_errors(self) -> None:
        for source in ("{{ x }}", "{{ 1/0 }}", "</template>"):
            with pytest.raises(TemplateError):
                await render(source)


class TestFormatting:
    """Message formatting helpers."""

    def test_source_snippet(self) -> None:
        snippet = build_source_snippet("a\nb\nc\nd\ne\nf", 4, context_lines=1)
        assert snippet.lines == ((3, "c"), (4, "d"), (5, "e"))
        assert snippet.error_line == 4

    def test_syntax_error_compact_format(self) -> None:
        error = TemplateSyntaxError("Unexpected </template>", lineno=1, code=ErrorCode.UNEXPECTED_CLOSE)
        assert terminal.strip_colors(error.format_compact()).startswith("H-PAR-001: Syntax Error")

    def test_error_code_category(self) -> None:
        assert ErrorCode.UNCLOSED_TAG.category == "parser"
        assert ErrorCode.INCLUDE_DEPTH.category == "runtime"
        assert ErrorCode.TEMPLATE_NOT_FOUND.category == "template"


class TestTerminalColors:
    """Color output honors NO_COLOR and FORCE_COLOR."""

    def test_no_color(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setenv("NO_COLOR", "1")
        assert terminal.colorize("x", "cyan") == "x"

    def test_force_color(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("FORCE_COLOR", "1")
        colored = terminal.colorize("x", "cyan")
        assert colored != "x"
        assert terminal.strip_colors(colored) == "x"
