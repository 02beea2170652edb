"""Tests for :mod:`jstags.tagger.policies`."""

from __future__ import annotations

import pytest

from jstags.core.config import TaggerSettings
from jstags.tagger import Classifier, RequirePolicy, Verdict, module_stem


@pytest.mark.parametrize(
    ("specifier", "expected"),
    [
        ("./foo", "foo"),
        ("./lib/foo.js", "foo"),
        ("../data/table.json", "table"),
        ("./worker.mjs", "worker"),
        ("./legacy.cjs", "legacy"),
        ("fs", "fs"),
        ("lodash/", "lodash"),
        (".js", ".js"),
        ("./jquery.min", "jquery.min"),
    ],
)
def test_module_stem(specifier: str, expected: str) -> None:
    assert module_stem(specifier) == expected


def test_require_of_same_named_module_is_reference(tag_pairs) -> None:
    pairs = tag_pairs('const foo = require("./foo");')

    assert pairs == [("R", "foo"), ("R", "require")]


def test_require_of_differently_named_module_stays_definition(tag_pairs) -> None:
    pairs = tag_pairs('const filesystem = require("fs");')

    assert pairs == [("D", "filesystem"), ("R", "require")]


def test_require_with_computed_argument_stays_definition(tag_pairs) -> None:
    pairs = tag_pairs('const name = "./foo", foo = require(name);')

    assert pairs == [
        ("D", "name"),
        ("D", "foo"),
        ("R", "require"),
        ("R", "name"),
    ]


def test_require_with_extra_arguments_stays_definition(tag_pairs) -> None:
    pairs = tag_pairs('var foo = require("./foo", opts);')

    assert ("D", "foo") in pairs


def test_policy_can_be_disabled(tag_pairs) -> None:
    settings = TaggerSettings(require_policy=False)

    pairs = tag_pairs('const foo = require("./foo");', settings=settings)

    assert pairs[0] == ("D", "foo")


def test_policy_leaves_other_verdicts_untouched(build_tree, find_identifier) -> None:
    tree = build_tree('foo = require("./foo");')
    node = find_identifier(tree, "foo")

    classifier = Classifier(tree, policies=[RequirePolicy()])

    assert classifier.classify_base(node) is Verdict.IGNORE
    assert classifier.classify(node) is Verdict.IGNORE


def test_policy_ignores_other_callees(build_tree, find_identifier) -> None:
    tree = build_tree('const foo = load("./foo");')
    node = find_identifier(tree, "foo")

    verdict = RequirePolicy().adjust(tree, node, Verdict.DEFINITION)

    assert verdict is Verdict.DEFINITION
