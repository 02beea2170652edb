"""Shared pytest fixtures for tagger tests."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any

import esprima
import pytest

from jstags.tagger import Classifier, SyntaxNode, SyntaxTree, Tag, tag

PARSE_OPTIONS = {"loc": True, "range": True, "tolerant": True}


def _clear_root_handlers() -> None:
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        try:
            handler.close()
        except Exception:  # pragma: no cover - closing is best effort
            pass


@pytest.fixture
def reset_logging_state():
    """Run a test with a clean root logger and restore it afterwards."""

    _clear_root_handlers()
    yield
    _clear_root_handlers()


@pytest.fixture
def build_tree() -> Callable[..., SyntaxTree]:
    """Parse ``source`` with esprima and decorate the result."""

    def _build(source: str, *, module: bool = False) -> SyntaxTree:
        parse = esprima.parseModule if module else esprima.parseScript
        program: Any = parse(source, dict(PARSE_OPTIONS))
        return SyntaxTree.from_esprima(program)

    return _build


@pytest.fixture
def find_identifier() -> Callable[..., SyntaxNode]:
    """Return the ``occurrence``-th identifier named ``name`` in source order."""

    def _find(tree: SyntaxTree, name: str, occurrence: int = 0) -> SyntaxNode:
        matches = [node for node in tree.identifiers() if node.name == name]
        if len(matches) <= occurrence:
            raise AssertionError(
                f"identifier {name!r} #{occurrence} not found; "
                f"saw {len(matches)} occurrence(s)"
            )
        return matches[occurrence]

    return _find


@pytest.fixture
def verdict_of(
    build_tree: Callable[..., SyntaxTree],
    find_identifier: Callable[..., SyntaxNode],
) -> Callable[..., str]:
    """Classify one identifier of ``source`` with the base rule table."""

    def _verdict(
        source: str,
        name: str,
        occurrence: int = 0,
        *,
        module: bool = False,
    ) -> str:
        tree = build_tree(source, module=module)
        node = find_identifier(tree, name, occurrence)
        return Classifier(tree).classify(node).value

    return _verdict


@pytest.fixture
def tag_pairs() -> Callable[..., list[tuple[str, str]]]:
    """Tag ``source`` and return ``(kind, name)`` pairs in stream order."""

    def _pairs(source: str, path: str = "sample.js", **kwargs: Any):
        tags: list[Tag] = tag(source, path, **kwargs)
        return [(item.kind.value, item.name) for item in tags]

    return _pairs
