"""Index-addressed view over an esprima syntax tree.

The esprima tree is owned top-down and never mutated. :class:`SyntaxTree`
copies its shape into an arena of :class:`SyntaxNode` records and keeps the
upward links in a side table keyed by node index, so ancestor lookups are
index chases rather than back-pointers stored on the nodes.

Sequences are transparent: a node reached through ``CallExpression.arguments``
links to the ``CallExpression`` itself with ``prop="arguments"`` and its
position in the list.

Example:
    >>> import esprima
    >>> program = esprima.parseScript("f(a);", {"loc": True, "range": True})
    >>> tree = SyntaxTree.from_esprima(program)
    >>> a = [n for n in tree.identifiers() if n.name == "a"][0]
    >>> tree.structural_path(a)
    ('Program.body[0]', 'ExpressionStatement.expression', 'CallExpression.arguments[0]')
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from esprima.nodes import Node

from jstags.core.logging import Logger, get_logger

__all__ = [
    "ChildSlot",
    "ParentLink",
    "SyntaxNode",
    "SyntaxTree",
]

ChildSlot = int | tuple[int, ...] | None

# Attributes that describe a node rather than hold its children.
_STRUCTURAL_FIELDS = frozenset(
    {
        "type",
        "loc",
        "range",
        "errors",
        "tokens",
        "comments",
        "leadingComments",
        "trailingComments",
        "innerComments",
    }
)


@dataclass(slots=True)
class SyntaxNode:
    """Arena record for one occurrence of an esprima node."""

    index: int
    kind: str
    line: int
    column: int
    start: int | None
    end: int | None
    name: str | None
    raw: Any = field(repr=False, compare=False)
    fields: dict[str, ChildSlot] = field(default_factory=dict, repr=False)
    children: tuple[int, ...] = field(default=(), repr=False)

    @property
    def is_identifier(self) -> bool:
        return self.kind == "Identifier"

    def attr(self, name: str, default: Any = None) -> Any:
        """Return a scalar attribute of the underlying esprima node."""

        return getattr(self.raw, name, default)


@dataclass(frozen=True, slots=True)
class ParentLink:
    """Side-table entry: where a node hangs off its structural parent."""

    parent: int
    prop: str
    position: int | None = None

    def segment(self, parent_kind: str) -> str:
        if self.position is None:
            return f"{parent_kind}.{self.prop}"
        return f"{parent_kind}.{self.prop}[{self.position}]"


@dataclass(slots=True)
class _Pending:
    raw: Any
    link: ParentLink | None


def _is_node(value: Any) -> bool:
    return isinstance(value, Node)


def _location(raw: Any) -> tuple[int, int]:
    loc = getattr(raw, "loc", None)
    start = getattr(loc, "start", None)
    if start is None:
        return 0, 0
    return start.line, start.column


def _offsets(raw: Any) -> tuple[int | None, int | None]:
    span = getattr(raw, "range", None)
    if not span:
        return None, None
    return span[0], span[1]


def _child_entries(raw: Any) -> list[tuple[str, int | None, Any]]:
    """List ``(prop, position, child)`` for every traversable child."""

    entries: list[tuple[str, int | None, Any]] = []
    for prop, value in vars(raw).items():
        if prop in _STRUCTURAL_FIELDS or value is None:
            continue
        if _is_node(value):
            entries.append((prop, None, value))
        elif isinstance(value, (list, tuple)):
            for position, item in enumerate(value):
                if _is_node(item):
                    entries.append((prop, position, item))
    return entries


class SyntaxTree:
    """Decorated, read-only view of a parsed program."""

    def __init__(self, logger: Logger | None = None) -> None:
        self._nodes: list[SyntaxNode] = []
        self._links: dict[int, ParentLink] = {}
        self._logger = logger or get_logger(__name__)
        self.shared_nodes = 0

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    @classmethod
    def from_esprima(
        cls,
        program: Any,
        *,
        logger: Logger | None = None,
    ) -> "SyntaxTree":
        """Decorate ``program`` (an esprima ``Program`` node)."""

        tree = cls(logger=logger)
        tree._build(program)
        return tree

    def _allocate(self, pending: _Pending) -> SyntaxNode:
        raw = pending.raw
        line, column = _location(raw)
        start, end = _offsets(raw)
        kind = getattr(raw, "type", None) or type(raw).__name__
        name = getattr(raw, "name", None) if kind == "Identifier" else None
        node = SyntaxNode(
            index=len(self._nodes),
            kind=kind,
            line=line,
            column=column,
            start=start,
            end=end,
            name=name,
            raw=raw,
        )
        self._nodes.append(node)
        if pending.link is not None:
            self._links[node.index] = pending.link
        return node

    def _build(self, program: Any) -> None:
        seen: set[int] = set()
        queue = [self._allocate(_Pending(program, None))]
        seen.add(id(program))

        while queue:
            node = queue.pop()
            entries = _child_entries(node.raw)
            order = {prop: rank for rank, (prop, _, _) in enumerate(entries)}
            entries.sort(
                key=lambda entry: (_location(entry[2]), order[entry[0]])
            )

            slots: dict[str, ChildSlot] = {}
            children: list[int] = []
            for prop, position, raw_child in entries:
                if id(raw_child) in seen:
                    # The parser reused one object at two grammar positions;
                    # record this occurrence as an independent node.
                    self.shared_nodes += 1
                    self._logger.debug(
                        "shared-node-cloned",
                        kind=getattr(raw_child, "type", None),
                        parent=node.kind,
                        prop=prop,
                    )
                seen.add(id(raw_child))
                child = self._allocate(
                    _Pending(raw_child, ParentLink(node.index, prop, position))
                )
                children.append(child.index)
                if position is None:
                    slots[prop] = child.index
                else:
                    existing = slots.get(prop) or ()
                    slots[prop] = (*existing, child.index)
                queue.append(child)

            for prop, value in vars(node.raw).items():
                if prop in _STRUCTURAL_FIELDS or prop in slots:
                    continue
                if value is None:
                    slots[prop] = None
                elif isinstance(value, (list, tuple)) and not value:
                    slots[prop] = ()

            node.fields = slots
            node.children = tuple(children)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._nodes)

    @property
    def root(self) -> SyntaxNode:
        return self._nodes[0]

    def node(self, index: int) -> SyntaxNode:
        return self._nodes[index]

    def parent(self, node: SyntaxNode) -> ParentLink | None:
        """Return the link to ``node``'s nearest non-array parent."""

        return self._links.get(node.index)

    def parent_node(self, node: SyntaxNode) -> SyntaxNode | None:
        link = self._links.get(node.index)
        return None if link is None else self._nodes[link.parent]

    def child(self, node: SyntaxNode, prop: str) -> SyntaxNode | None:
        """Return the single child stored in ``prop`` or ``None``."""

        slot = node.fields.get(prop)
        if isinstance(slot, int):
            return self._nodes[slot]
        return None

    def children_of(
        self,
        node: SyntaxNode,
        prop: str,
    ) -> tuple[SyntaxNode, ...]:
        """Return the sequence stored in ``prop`` (holes are skipped)."""

        slot = node.fields.get(prop)
        if isinstance(slot, tuple):
            return tuple(self._nodes[index] for index in slot)
        if isinstance(slot, int):
            return (self._nodes[slot],)
        return ()

    def nearest_ancestor(
        self,
        node: SyntaxNode,
        kind: str,
    ) -> tuple[SyntaxNode, str] | None:
        """Find the closest strict ancestor of ``kind``.

        Returns the ancestor together with the property of that ancestor
        through which the path down to ``node`` passes, or ``None``.
        """

        current = node
        while True:
            link = self._links.get(current.index)
            if link is None:
                return None
            parent = self._nodes[link.parent]
            if parent.kind == kind:
                return parent, link.prop
            current = parent

    def structural_path(self, node: SyntaxNode) -> tuple[str, ...]:
        """Return ``Kind.prop`` segments from the root down to ``node``."""

        segments: list[str] = []
        current = node
        while True:
            link = self._links.get(current.index)
            if link is None:
                break
            parent = self._nodes[link.parent]
            segments.append(link.segment(parent.kind))
            current = parent
        segments.reverse()
        return tuple(segments)

    def walk(self) -> Iterator[SyntaxNode]:
        """Yield nodes in pre-order, children in source order."""

        stack = [self.root.index]
        while stack:
            node = self._nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def identifiers(self) -> Iterator[SyntaxNode]:
        return (node for node in self.walk() if node.is_identifier)
