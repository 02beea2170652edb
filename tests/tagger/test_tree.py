"""Tests for :mod:`jstags.tagger.tree`."""

from __future__ import annotations

from jstags.tagger import ParentLink


def test_root_is_program_without_parent(build_tree) -> None:
    tree = build_tree("var a = 1;")

    assert tree.root.kind == "Program"
    assert tree.parent(tree.root) is None
    assert tree.parent_node(tree.root) is None


def test_sequence_elements_link_to_structural_parent(
    build_tree, find_identifier
) -> None:
    tree = build_tree("f(a, b);")
    b = find_identifier(tree, "b")

    link = tree.parent(b)

    assert link == ParentLink(parent=link.parent, prop="arguments", position=1)
    assert tree.node(link.parent).kind == "CallExpression"


def test_single_child_link_has_no_position(build_tree, find_identifier) -> None:
    tree = build_tree("f(a);")
    f = find_identifier(tree, "f")

    link = tree.parent(f)

    assert link.prop == "callee"
    assert link.position is None


def test_nearest_ancestor_reports_entry_property(
    build_tree, find_identifier
) -> None:
    tree = build_tree("const o = {k: 1};")
    key = find_identifier(tree, "k")

    found = tree.nearest_ancestor(key, "VariableDeclarator")

    assert found is not None
    declarator, prop = found
    assert declarator.kind == "VariableDeclarator"
    assert prop == "init"


def test_nearest_ancestor_missing_returns_none(build_tree, find_identifier) -> None:
    tree = build_tree("f(x);")

    assert tree.nearest_ancestor(find_identifier(tree, "x"), "ForStatement") is None


def test_structural_path_traces_root_to_node(build_tree, find_identifier) -> None:
    tree = build_tree("f(a);")

    path = tree.structural_path(find_identifier(tree, "a"))

    assert path == (
        "Program.body[0]",
        "ExpressionStatement.expression",
        "CallExpression.arguments[0]",
    )


def test_walk_visits_children_in_source_order(build_tree) -> None:
    tree = build_tree('import {alpha as beta} from "m";', module=True)

    names = [node.name for node in tree.identifiers()]

    assert names == ["alpha", "beta"]


def test_shared_parser_nodes_are_decorated_independently(
    build_tree, find_identifier
) -> None:
    tree = build_tree('import {alpha} from "m";', module=True)

    first = find_identifier(tree, "alpha", 0)
    second = find_identifier(tree, "alpha", 1)

    assert tree.shared_nodes >= 1
    assert first.index != second.index
    assert {tree.parent(first).prop, tree.parent(second).prop} == {
        "local",
        "imported",
    }


def test_identifier_nodes_carry_locations(build_tree, find_identifier) -> None:
    tree = build_tree("var a;\n  b;")
    b = find_identifier(tree, "b")

    assert (b.line, b.column) == (2, 2)
    assert (b.start, b.end) == (9, 10)


def test_children_of_and_child_accessors(build_tree) -> None:
    tree = build_tree("f(a, b);")
    call = next(node for node in tree.walk() if node.kind == "CallExpression")

    assert tree.child(call, "callee").name == "f"
    assert [node.name for node in tree.children_of(call, "arguments")] == ["a", "b"]
    assert tree.child(call, "arguments") is None
    assert tree.children_of(call, "missing") == ()
