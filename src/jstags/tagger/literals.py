"""Symbol references hidden in DOM selector literals.

``document.getElementById("login")`` and
``el.querySelectorAll(".item, #main")`` name elements that usually also
appear in markup and stylesheets. The scanner turns those names into extra
reference tags anchored inside the string or template literal.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import re
from typing import Iterator

from .classifier import Classifier
from .models import Verdict
from .tree import SyntaxNode, SyntaxTree

__all__ = [
    "LiteralScanner",
    "LOOKUP_PATTERNS",
    "SelectorReference",
]

_WORD_TOKEN = re.compile(r"(?<![\w$-])(?P<name>[A-Za-z_](?:[\w-]*\w)?)")
# Attribute selectors ([href$='x.html']) are consumed whole so their values
# never yield names; compound selectors such as div.card still do.
_SELECTOR_TOKEN = re.compile(
    r"\[[^\]]*\]"
    r"|[.#](?P<name>-?[A-Za-z_](?:[\w-]*\w)?)"
)

LOOKUP_PATTERNS: Mapping[str, re.Pattern[str]] = {
    "getElementById": _WORD_TOKEN,
    "getElementsByClassName": _WORD_TOKEN,
    "getElementsByName": _WORD_TOKEN,
    "querySelector": _SELECTOR_TOKEN,
    "querySelectorAll": _SELECTOR_TOKEN,
}


@dataclass(frozen=True, slots=True)
class SelectorReference:
    """A name found inside a selector literal, in fragment coordinates."""

    name: str
    line: int
    column: int


@dataclass(frozen=True, slots=True)
class _Segment:
    text: str
    line: int
    column: int


def _locate(segment: _Segment, offset: int) -> tuple[int, int]:
    """Translate ``offset`` within ``segment`` to a line/column pair."""

    before = segment.text[:offset]
    breaks = before.count("\n")
    if not breaks:
        return segment.line, segment.column + offset
    return segment.line + breaks, offset - (before.rfind("\n") + 1)


class LiteralScanner:
    """Find selector references for lookup calls in one tree."""

    def __init__(
        self,
        tree: SyntaxTree,
        classifier: Classifier,
        source: str,
    ) -> None:
        self._tree = tree
        self._classifier = classifier
        self._source = source

    def scan(self, node: SyntaxNode) -> list[SelectorReference]:
        """Return references for ``node`` if it names a lookup call."""

        argument = self._trigger_argument(node)
        if argument is None or node.name is None:
            return []
        pattern = LOOKUP_PATTERNS[node.name]
        references: list[SelectorReference] = []
        for segment in self._segments(argument):
            for match in pattern.finditer(segment.text):
                name = match.group("name")
                if name is None:
                    continue
                line, column = _locate(segment, match.start("name"))
                references.append(SelectorReference(name, line, column))
        return references

    def _trigger_argument(self, node: SyntaxNode) -> SyntaxNode | None:
        if node.name not in LOOKUP_PATTERNS:
            return None
        if self._classifier.classify(node) is not Verdict.REFERENCE:
            return None
        tree = self._tree
        link = tree.parent(node)
        if link is None or link.prop != "property":
            return None
        member = tree.node(link.parent)
        if member.kind != "MemberExpression":
            return None
        member_link = tree.parent(member)
        if member_link is None or member_link.prop != "callee":
            return None
        call = tree.node(member_link.parent)
        if call.kind != "CallExpression":
            return None
        arguments = tree.children_of(call, "arguments")
        if not arguments:
            return None
        first = arguments[0]
        if first.kind == "TemplateLiteral":
            return first
        if first.kind == "Literal" and isinstance(first.attr("value"), str):
            return first
        return None

    def _segments(self, literal: SyntaxNode) -> Iterator[_Segment]:
        if literal.kind == "Literal":
            yield _Segment(
                self._slice(literal, literal.attr("raw") or ""),
                literal.line,
                literal.column,
            )
            return
        # Template expressions are tagged on their own; scan the quasis only.
        for quasi in self._tree.children_of(literal, "quasis"):
            yield _Segment(
                self._slice(quasi, _template_raw(quasi)),
                quasi.line,
                quasi.column,
            )

    def _slice(self, node: SyntaxNode, fallback: str) -> str:
        if node.start is None or node.end is None:
            return fallback
        return self._source[node.start : node.end]


def _template_raw(quasi: SyntaxNode) -> str:
    value = quasi.attr("value")
    if isinstance(value, Mapping):
        return value.get("raw") or ""
    return getattr(value, "raw", None) or ""
