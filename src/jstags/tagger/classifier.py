"""Definition/reference classification of identifier occurrences.

The verdict for an identifier depends only on where it hangs in the tree: the
kind of its structural parent and the property it is attached through. The
mapping lives in :data:`RULES`; a handful of positions need to look one step
further (sibling names, the enclosing ``for`` header) and are expressed as
rule functions. Positions missing from the table classify as
:attr:`Verdict.UNKNOWN` so gaps stay visible.
"""

from __future__ import annotations

from typing import Callable, Iterable, Mapping, Protocol

from .models import Verdict
from .tree import SyntaxNode, SyntaxTree

__all__ = [
    "Classifier",
    "Rule",
    "RULES",
    "VerdictPolicy",
    "rule_key",
]

RuleFunction = Callable[[SyntaxTree, SyntaxNode, SyntaxNode], Verdict]
Rule = Verdict | RuleFunction

D = Verdict.DEFINITION
R = Verdict.REFERENCE
IGNORE = Verdict.IGNORE

_LOOP_HEADER_PROPS = frozenset({"init", "test", "update"})
_LOOP_BINDING_SLOTS = frozenset(
    {("ForInStatement", "left"), ("ForStatement", "init")}
)


class VerdictPolicy(Protocol):
    """Optional layer that may revise a base verdict."""

    def adjust(
        self,
        tree: SyntaxTree,
        node: SyntaxNode,
        verdict: Verdict,
    ) -> Verdict: ...


def _same_name(a: SyntaxNode | None, b: SyntaxNode | None) -> bool:
    return (
        a is not None
        and b is not None
        and a.is_identifier
        and b.is_identifier
        and a.name == b.name
    )


def _export_specifier_exported(
    tree: SyntaxTree, node: SyntaxNode, parent: SyntaxNode
) -> Verdict:
    # `export { foo }` only re-exports the existing binding.
    if _same_name(node, tree.child(parent, "local")):
        return IGNORE
    return D


def _method_definition_key(
    tree: SyntaxTree, node: SyntaxNode, parent: SyntaxNode
) -> Verdict:
    return IGNORE if node.name == "constructor" else D


def _import_specifier_local(
    tree: SyntaxTree, node: SyntaxNode, parent: SyntaxNode
) -> Verdict:
    if _same_name(node, tree.child(parent, "imported")):
        return R
    return D


def _property_key(
    tree: SyntaxTree, node: SyntaxNode, parent: SyntaxNode
) -> Verdict:
    if parent.attr("shorthand"):
        return IGNORE  # the value side reports it

    same = _same_name(node, tree.child(parent, "value"))
    found = tree.nearest_ancestor(node, "VariableDeclarator")
    if found is not None:
        _, side = found
        if side == "init" and not same:
            return D
        if side == "id" and same:
            return D
    return R


def _variable_declarator_id(
    tree: SyntaxTree, node: SyntaxNode, parent: SyntaxNode
) -> Verdict:
    declaration = tree.parent_node(parent)
    if declaration is not None and declaration.kind == "VariableDeclaration":
        link = tree.parent(declaration)
        if link is not None:
            owner = tree.node(link.parent)
            if (owner.kind, link.prop) in _LOOP_BINDING_SLOTS:
                return IGNORE  # loop bindings fall under the loop-scope rule
    return D


def _loop_declared_names(tree: SyntaxTree, loop: SyntaxNode) -> set[str]:
    init = tree.child(loop, "init")
    if init is None or init.kind != "VariableDeclaration":
        return set()
    names: set[str] = set()
    for declarator in tree.children_of(init, "declarations"):
        target = tree.child(declarator, "id")
        if target is not None and target.is_identifier and target.name:
            names.add(target.name)
    return names


def _loop_scoped(
    tree: SyntaxTree, node: SyntaxNode, parent: SyntaxNode
) -> Verdict:
    found = tree.nearest_ancestor(node, "ForStatement")
    if found is not None:
        loop, side = found
        if side in _LOOP_HEADER_PROPS and node.name in _loop_declared_names(
            tree, loop
        ):
            return IGNORE
    return R


RULES: Mapping[tuple[str, str], Rule] = {
    # Definitions
    ("ArrayPattern", "elements"): D,
    ("ClassDeclaration", "id"): D,
    # Ternary branches are use sites; kept as a definition for compatibility.
    ("ConditionalExpression", "consequent"): D,
    ("ExportDefaultDeclaration", "declaration"): D,
    ("FunctionDeclaration", "id"): D,
    ("FunctionExpression", "id"): D,
    ("ImportNamespaceSpecifier", "local"): D,
    ("LabeledStatement", "label"): D,
    # Conditional definitions
    ("ExportSpecifier", "exported"): _export_specifier_exported,
    ("ImportSpecifier", "local"): _import_specifier_local,
    ("MethodDefinition", "key"): _method_definition_key,
    ("Property", "key"): _property_key,
    ("VariableDeclarator", "id"): _variable_declarator_id,
    # Loop-scoped references
    ("BinaryExpression", "left"): _loop_scoped,
    ("BinaryExpression", "right"): _loop_scoped,
    ("ForStatement", "update"): _loop_scoped,
    ("UnaryExpression", "argument"): _loop_scoped,
    ("UpdateExpression", "argument"): _loop_scoped,
    # References
    ("ArrayExpression", "elements"): R,
    ("ArrowFunctionExpression", "body"): R,
    ("AssignmentExpression", "right"): R,
    ("BreakStatement", "label"): R,
    ("CallExpression", "arguments"): R,
    ("CallExpression", "callee"): R,
    ("ClassDeclaration", "superClass"): R,
    ("ConditionalExpression", "alternate"): R,
    ("ConditionalExpression", "test"): R,
    ("ContinueStatement", "label"): R,
    ("DoWhileStatement", "test"): R,
    ("ExpressionStatement", "expression"): R,
    ("ForInStatement", "right"): R,
    ("ForOfStatement", "right"): R,
    ("ForStatement", "test"): R,
    ("IfStatement", "test"): R,
    ("ImportDefaultSpecifier", "local"): R,
    ("ImportSpecifier", "imported"): R,
    ("LogicalExpression", "left"): R,
    ("LogicalExpression", "right"): R,
    ("MemberExpression", "object"): R,
    ("MemberExpression", "property"): R,
    ("NewExpression", "arguments"): R,
    ("NewExpression", "callee"): R,
    ("Property", "value"): R,
    ("ReturnStatement", "argument"): R,
    ("SequenceExpression", "expressions"): R,
    ("SpreadElement", "argument"): R,
    ("SwitchCase", "test"): R,
    ("SwitchStatement", "discriminant"): R,
    ("TaggedTemplateExpression", "tag"): R,
    ("TemplateLiteral", "expressions"): R,
    ("ThrowStatement", "argument"): R,
    ("VariableDeclarator", "init"): R,
    ("WhileStatement", "test"): R,
    ("YieldExpression", "argument"): R,
    # Ignored: local bindings and assignment targets
    ("ArrowFunctionExpression", "params"): IGNORE,
    ("AssignmentExpression", "left"): IGNORE,
    ("AssignmentPattern", "left"): IGNORE,
    ("CatchClause", "param"): IGNORE,
    ("ClassExpression", "id"): IGNORE,
    ("ExportSpecifier", "local"): IGNORE,
    ("ForInStatement", "left"): IGNORE,
    ("ForOfStatement", "left"): IGNORE,
    ("FunctionDeclaration", "params"): IGNORE,
    ("FunctionExpression", "params"): IGNORE,
    ("RestElement", "argument"): IGNORE,
}


def rule_key(tree: SyntaxTree, node: SyntaxNode) -> tuple[str, str] | None:
    """Return ``(parent kind, property)`` for ``node`` or ``None`` at the root.

    Example:
        >>> import esprima
        >>> program = esprima.parseScript("x;", {"loc": True})
        >>> tree = SyntaxTree.from_esprima(program)
        >>> rule_key(tree, next(tree.identifiers()))
        ('ExpressionStatement', 'expression')
    """

    link = tree.parent(node)
    if link is None:
        return None
    return tree.node(link.parent).kind, link.prop


class Classifier:
    """Memoizing classifier bound to one :class:`SyntaxTree`.

    ``policies`` run in order over the table's verdict; the cache stores the
    final answer so repeated queries (emitter and literal scanner) agree.
    """

    def __init__(
        self,
        tree: SyntaxTree,
        *,
        policies: Iterable[VerdictPolicy] = (),
        rules: Mapping[tuple[str, str], Rule] = RULES,
    ) -> None:
        self._tree = tree
        self._policies = tuple(policies)
        self._rules = rules
        self._cache: dict[int, Verdict] = {}

    @property
    def tree(self) -> SyntaxTree:
        return self._tree

    def classify_base(self, node: SyntaxNode) -> Verdict:
        """Classify ``node`` from the rule table alone."""

        if not node.is_identifier:
            raise TypeError(
                f"Only Identifier nodes are classified, got {node.kind}"
            )
        parent = self._tree.parent_node(node)
        key = rule_key(self._tree, node)
        if parent is None or key is None:
            return Verdict.UNKNOWN
        rule = self._rules.get(key)
        if rule is None:
            return Verdict.UNKNOWN
        if isinstance(rule, Verdict):
            return rule
        return rule(self._tree, node, parent)

    def classify(self, node: SyntaxNode) -> Verdict:
        cached = self._cache.get(node.index)
        if cached is not None:
            return cached
        verdict = self.classify_base(node)
        for policy in self._policies:
            verdict = policy.adjust(self._tree, node, verdict)
        self._cache[node.index] = verdict
        return verdict
