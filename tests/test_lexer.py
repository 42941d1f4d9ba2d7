"""Tests for the asynchtml tag tokenizer.

Covers token boundaries, script-body handling, line tracking, and the
concatenation invariant (tokens always reassemble into the source).
"""

from __future__ import annotations

from hypothesis import given, settings

from asynchtml._types import TokenType
from asynchtml.lexer import tokenize

from .strategies import arbitrary_template_source, tag_soup


def kinds(source: str) -> list[str]:
    return [t.type.name for t in tokenize(source)]


class TestTokenBoundaries:
    """Which tags are recognized, and where tokens start and end."""

    def test_empty_source(self) -> None:
        assert list(tokenize("")) == []

    def test_plain_text_is_one_data_token(self) -> None:
        tokens = list(tokenize("<div>Hello {{ name }}</div>"))
        assert [t.type for t in tokens] == [TokenType.DATA]
        assert tokens[0].value == "<div>Hello {{ name }}</div>"

    def test_template_open_and_close(self) -> None:
        assert kinds('a<template if="x">b</template>c') == [
            "DATA",
            "TEMPLATE_OPEN",
            "DATA",
            "TEMPLATE_CLOSE",
            "DATA",
        ]

    def test_self_closing_template_is_one_open_token(self) -> None:
        tokens = list(tokenize('<template html="x"/>'))
        assert [t.type for t in tokens] == [TokenType.TEMPLATE_OPEN]
        assert tokens[0].value == '<template html="x"/>'

    def test_whitespace_inside_tag_delimiters(self) -> None:
        assert kinds("< template >x</ template >") == [
            "TEMPLATE_OPEN",
            "DATA",
            "TEMPLATE_CLOSE",
        ]

    def test_quoted_value_may_contain_gt(self) -> None:
        tokens = list(tokenize('<template if="a > b">y</template>'))
        assert tokens[0].value == '<template if="a > b">'
        assert tokens[1].value == "y"

    def test_single_quoted_value_may_contain_gt(self) -> None:
        tokens = list(tokenize("<template if='a > b'/>"))
        assert [t.value for t in tokens] == ["<template if='a > b'/>"]

    def test_similar_tag_names_are_data(self) -> None:
        assert kinds("<templates><scripted></templates>") == ["DATA"]

    def test_other_tags_stay_in_data(self) -> None:
        assert kinds('<ul><li>1</li></ul><template for="i in x">') == [
            "DATA",
            "TEMPLATE_OPEN",
        ]


class TestScriptBodies:
    """``<script>`` bodies are opaque to the tokenizer."""

    def test_script_body_is_single_data_token(self) -> None:
        source = "<script>if (a<b) { x = '<template>'; }</script>"
        tokens = list(tokenize(source))
        assert [t.type for t in tokens] == [
            TokenType.SCRIPT_OPEN,
            TokenType.DATA,
            TokenType.SCRIPT_CLOSE,
        ]
        assert tokens[1].value == "if (a<b) { x = '<template>'; }"

    def test_empty_script_body(self) -> None:
        assert kinds("<script></script>") == ["SCRIPT_OPEN", "SCRIPT_CLOSE"]

    def test_unterminated_script_runs_to_end(self) -> None:
        tokens = list(tokenize("<script in-template>x = 1"))
        assert [t.type for t in tokens] == [TokenType.SCRIPT_OPEN, TokenType.DATA]
        assert tokens[1].value == "x = 1"

    def test_stray_script_close(self) -> None:
        assert kinds("a</script>b") == ["DATA", "SCRIPT_CLOSE", "DATA"]


class TestLineTracking:
    """Line numbers and column offsets are 1-based and 0-based respectively."""

    def test_line_numbers(self) -> None:
        tokens = list(tokenize('line1\n<template if="x">\nbody\n</template>'))
        assert [(t.type.name, t.lineno) for t in tokens] == [
            ("DATA", 1),
            ("TEMPLATE_OPEN", 2),
            ("DATA", 2),
            ("TEMPLATE_CLOSE", 4),
        ]

    def test_column_offsets(self) -> None:
        tokens = list(tokenize("ab\ncd<template>"))
        assert tokens[1].col_offset == 2

    def test_multiline_tag_advances_lines(self) -> None:
        tokens = list(tokenize('<template\n  if="x"\n>\n</template>'))
        assert tokens[-1].lineno == 4


class TestLexerProperties:
    """Property-based tokenizer invariants."""

    @given(source=arbitrary_template_source)
    @settings(max_examples=300)
    def test_concatenation_reproduces_source(self, source: str) -> None:
        """Token values always reassemble into the original text."""
        assert "".join(t.value for t in tokenize(source)) == source

    @given(source=tag_soup)
    @settings(max_examples=300)
    def test_tag_soup_concatenation(self, source: str) -> None:
        """Unbalanced and malformed tags never lose or duplicate text."""
        tokens = list(tokenize(source))
        assert "".join(t.value for t in tokens) == source
        assert all(t.value for t in tokens)

    @given(source=tag_soup)
    @settings(max_examples=200)
    def test_line_numbers_never_decrease(self, source: str) -> None:
        linenos = [t.lineno for t in tokenize(source)]
        assert linenos == sorted(linenos)
