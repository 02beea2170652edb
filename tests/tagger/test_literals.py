"""Tests for :mod:`jstags.tagger.literals`."""

from __future__ import annotations

import pytest

from jstags.tagger import Classifier, LiteralScanner, SelectorReference, tag


def _positions(source: str) -> list[tuple[str, str, int, int]]:
    return [
        (item.kind.value, item.name, item.line, item.column)
        for item in tag(source, "page.js")
    ]


def test_query_selector_id_is_tagged_inside_literal() -> None:
    source = 'document.querySelector("#login-button").focus();'

    assert _positions(source) == [
        ("R", "document", 1, 0),
        ("R", "querySelector", 1, 9),
        ("R", "login-button", 1, 25),
        ("R", "focus", 1, 40),
    ]


def test_get_element_by_id_tags_the_whole_word() -> None:
    source = 'document.getElementById("login");'

    assert _positions(source)[-1] == ("R", "login", 1, 25)


def test_class_name_lookup_reports_each_name() -> None:
    source = "el.getElementsByClassName('card active');"

    names = [name for _, name, _, _ in _positions(source)]

    assert names == ["el", "getElementsByClassName", "card", "active"]


def test_query_selector_all_reports_classes_and_ids() -> None:
    source = 'root.querySelectorAll(".item > a, #main");'

    names = [name for _, name, _, _ in _positions(source)]

    assert names[2:] == ["item", "main"]


def test_template_literal_quasis_are_scanned_across_lines() -> None:
    source = "el.querySelectorAll(`\n  .card,\n  .title`);"

    tags = _positions(source)

    assert tags[2:] == [
        ("R", "card", 2, 3),
        ("R", "title", 3, 3),
    ]


def test_template_expressions_are_tagged_once() -> None:
    source = "el.querySelector(`#${prefix}-panel`);"

    names = [name for _, name, _, _ in _positions(source)]

    assert names.count("prefix") == 1


def test_computed_argument_is_not_scanned() -> None:
    source = "document.getElementById(name);"

    names = [name for _, name, _, _ in _positions(source)]

    assert names == ["document", "getElementById", "name"]


def test_bare_lookup_call_is_not_scanned() -> None:
    source = 'getElementById("login");'

    names = [name for _, name, _, _ in _positions(source)]

    assert names == ["getElementById"]


def test_lookup_reference_without_call_is_not_scanned() -> None:
    source = "var lookup = document.getElementById;"

    names = [name for _, name, _, _ in _positions(source)]

    assert "login" not in names
    assert names == ["lookup", "document", "getElementById"]


@pytest.mark.parametrize(
    "source",
    [
        "document.getElementById();",
        "document.getElementById(42);",
        'document.unknownLookup("#login");',
    ],
)
def test_scanner_returns_nothing_without_a_string_argument(
    build_tree, source: str
) -> None:
    tree = build_tree(source)
    scanner = LiteralScanner(tree, Classifier(tree), source)

    found = [ref for node in tree.identifiers() for ref in scanner.scan(node)]

    assert found == []


def test_scanner_reports_fragment_coordinates(build_tree, find_identifier) -> None:
    source = 'x;\ndocument.querySelector(".menu");'
    tree = build_tree(source)
    scanner = LiteralScanner(tree, Classifier(tree), source)

    found = scanner.scan(find_identifier(tree, "querySelector"))

    assert found == [SelectorReference("menu", 2, 25)]


def test_attribute_selector_values_are_not_names() -> None:
    source = "document.querySelector(\"a[href$='x.html'] .link\");"

    names = [name for _, name, _, _ in _positions(source)]

    assert names == ["document", "querySelector", "link"]


def test_compound_selectors_keep_class_and_id() -> None:
    source = 'document.querySelectorAll("div.card, a#main[data-x=\'#y\']");'

    tags = _positions(source)

    assert [name for _, name, _, _ in tags[2:]] == ["card", "main"]
    assert tags[2][3] == 31
