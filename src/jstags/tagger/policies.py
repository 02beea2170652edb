"""Verdict policies layered over the base classification table."""

from __future__ import annotations

import posixpath

from .models import Verdict
from .tree import SyntaxNode, SyntaxTree

__all__ = ["RequirePolicy", "module_stem"]

_MODULE_EXTENSIONS = (".js", ".mjs", ".cjs", ".json")


def module_stem(specifier: str) -> str:
    """Return the binding name a module specifier suggests.

    Example:
        >>> module_stem("./lib/foo.js")
        'foo'
        >>> module_stem("fs")
        'fs'
    """

    stem = posixpath.basename(specifier.rstrip("/"))
    for extension in _MODULE_EXTENSIONS:
        if stem.endswith(extension) and len(stem) > len(extension):
            return stem[: -len(extension)]
    return stem


class RequirePolicy:
    """Treat ``const foo = require("./foo")`` as a use of module ``foo``.

    Binding a module under its own name does not introduce a new symbol worth
    jumping to. The call must have exactly one string-literal argument; a
    computed argument leaves the definition in place.
    """

    callee_name = "require"

    def adjust(
        self,
        tree: SyntaxTree,
        node: SyntaxNode,
        verdict: Verdict,
    ) -> Verdict:
        if verdict is not Verdict.DEFINITION:
            return verdict
        link = tree.parent(node)
        if link is None or link.prop != "id":
            return verdict
        declarator = tree.node(link.parent)
        if declarator.kind != "VariableDeclarator":
            return verdict

        specifier = self._required_module(tree, declarator)
        if specifier is not None and module_stem(specifier) == node.name:
            return Verdict.REFERENCE
        return verdict

    def _required_module(
        self,
        tree: SyntaxTree,
        declarator: SyntaxNode,
    ) -> str | None:
        call = tree.child(declarator, "init")
        if call is None or call.kind != "CallExpression":
            return None
        callee = tree.child(call, "callee")
        if callee is None or callee.name != self.callee_name:
            return None
        arguments = tree.children_of(call, "arguments")
        if len(arguments) != 1 or arguments[0].kind != "Literal":
            return None
        value = arguments[0].attr("value")
        return value if isinstance(value, str) else None
