"""Tests for :mod:`jstags.tagger.emitter`."""

from __future__ import annotations

import io

import pytest
from rich.console import Console

from jstags.core.logging import configure_logging
from jstags.tagger import Diagnostic, TagEmitter, TagKind, tag


def test_tags_follow_source_order(tag_pairs) -> None:
    source = "class Foo extends Bar { constructor() {} greet() {} }"

    assert tag_pairs(source) == [("D", "Foo"), ("R", "Bar"), ("D", "greet")]


def test_function_parameters_are_not_tagged(tag_pairs) -> None:
    source = "function add(a, b) { return a + b; }"

    assert tag_pairs(source) == [("D", "add"), ("R", "a"), ("R", "b")]


def test_object_literal_keys_and_values(tag_pairs) -> None:
    assert tag_pairs("const o = {key: value};") == [
        ("D", "o"),
        ("D", "key"),
        ("R", "value"),
    ]


def test_destructuring(tag_pairs) -> None:
    assert tag_pairs("const {a: b} = obj;") == [
        ("R", "a"),
        ("R", "b"),
        ("R", "obj"),
    ]
    assert tag_pairs("const [first, second] = pair;") == [
        ("D", "first"),
        ("D", "second"),
        ("R", "pair"),
    ]


def test_loop_header_emits_only_body_reference(tag_pairs) -> None:
    source = "for (let i = 0; i < 10; i++) { arr[i]; }"

    assert tag_pairs(source) == [("R", "arr"), ("R", "i")]


def test_module_import_export_stream(tag_pairs) -> None:
    source = (
        'import * as path from "path";\n'
        'import React from "react";\n'
        'import { readFile as read } from "fs";\n'
        "export { read as load };\n"
    )

    assert tag_pairs(source) == [
        ("D", "path"),
        ("R", "React"),
        ("R", "readFile"),
        ("D", "read"),
        ("D", "load"),
    ]


def test_tag_fields_and_rendering() -> None:
    source = "var a;\nlet answer = 42;"

    tags = tag(source, "answer.js")
    answer = tags[1]

    assert answer.kind is TagKind.DEFINITION
    assert (answer.line, answer.column) == (2, 4)
    assert answer.source_line == "let answer = 42;"
    assert answer.render() == "D,answer,answer.js,2:5,let answer = 42;"


def test_offsets_shift_every_tag() -> None:
    source = "foo;\n  bar;"

    tags = tag(source, "page.html", 10, 4)

    assert [(t.name, t.line, t.column) for t in tags] == [
        ("foo", 11, 4),
        ("bar", 12, 6),
    ]
    assert tags[1].source_line == "  bar;"


def test_offsets_shift_selector_references() -> None:
    source = 'document.getElementById("nav");'

    tags = tag(source, "page.html", 5, 2)

    assert (tags[-1].name, tags[-1].line, tags[-1].column) == ("nav", 6, 27)


def test_carriage_returns_are_trimmed_from_source_lines() -> None:
    tags = tag("foo;\r\nbar;\r\n", "crlf.js")

    assert [t.source_line for t in tags] == ["foo;", "bar;"]


def test_unknown_identifier_yields_diagnostic(build_tree) -> None:
    source = "function f(a = fallback) {}"
    tree = build_tree(source)

    result = TagEmitter(tree, source=source, path="f.js").emit()

    assert [t.name for t in result.tags] == ["f"]
    assert result.diagnostics == (
        Diagnostic(
            name="fallback",
            path="f.js",
            line=1,
            column=15,
            structure="AssignmentPattern.right",
            trace=(
                "Program.body[0]",
                "FunctionDeclaration.params[0]",
                "AssignmentPattern.right",
            ),
            source_line=source,
        ),
    )
    assert "Unknown Identifier : fallback at f.js 1:16" in (
        result.diagnostics[0].describe()
    )


def test_unknown_identifier_is_logged(build_tree, reset_logging_state) -> None:
    buffer = io.StringIO()
    configure_logging(level="WARNING", console=Console(file=buffer, width=200))
    source = "function f(a = fallback) {}"
    tree = build_tree(source)

    TagEmitter(tree, source=source, path="f.js").emit()

    output = buffer.getvalue()
    assert "unknown-identifier" in output
    assert "AssignmentPattern.right" in output


@pytest.mark.parametrize(
    ("source", "expected"),
    [
        ("x ? y : z;", [("R", "x"), ("D", "y"), ("R", "z")]),
        ("export {a};", []),
        ("export {a as b};", [("D", "b")]),
    ],
)
def test_small_streams(tag_pairs, source, expected) -> None:
    assert tag_pairs(source) == expected
