"""Walk a decorated tree and produce the ordered tag stream."""

from __future__ import annotations

from typing import Sequence

from jstags.core.logging import Logger, get_logger

from .classifier import Classifier, rule_key
from .literals import LiteralScanner
from .models import Diagnostic, Tag, TagKind, TagResult, Verdict
from .tree import SyntaxNode, SyntaxTree

__all__ = ["TagEmitter"]


class TagEmitter:
    """Emit tags for every identifier of one tree in source order.

    Coordinates are shifted by ``line_offset``/``column_offset`` so fragments
    cut out of a host document (an HTML ``<script>`` block, say) report host
    positions. The source line text always comes from the fragment.
    """

    def __init__(
        self,
        tree: SyntaxTree,
        *,
        source: str,
        path: str,
        line_offset: int = 0,
        column_offset: int = 0,
        classifier: Classifier | None = None,
        logger: Logger | None = None,
    ) -> None:
        self._tree = tree
        self._path = path
        self._lines: Sequence[str] = source.split("\n")
        self._line_offset = line_offset
        self._column_offset = column_offset
        self._classifier = classifier or Classifier(tree)
        self._scanner = LiteralScanner(tree, self._classifier, source)
        self._logger = logger or get_logger(__name__, path=path)

    def emit(self) -> TagResult:
        tags: list[Tag] = []
        diagnostics: list[Diagnostic] = []

        for node in self._tree.identifiers():
            verdict = self._classifier.classify(node)
            if verdict.is_tagged:
                tags.append(
                    self._make_tag(
                        TagKind.from_verdict(verdict),
                        node.name or "",
                        node.line,
                        node.column,
                    )
                )
            for reference in self._scanner.scan(node):
                tags.append(
                    self._make_tag(
                        TagKind.REFERENCE,
                        reference.name,
                        reference.line,
                        reference.column,
                    )
                )
            if verdict is Verdict.UNKNOWN:
                diagnostics.append(self._report_unknown(node))

        return TagResult(
            path=self._path,
            tags=tuple(tags),
            diagnostics=tuple(diagnostics),
        )

    def _source_line(self, line: int) -> str:
        if 1 <= line <= len(self._lines):
            return self._lines[line - 1].rstrip("\r")
        return ""

    def _make_tag(self, kind: TagKind, name: str, line: int, column: int) -> Tag:
        return Tag(
            kind=kind,
            name=name,
            path=self._path,
            line=line + self._line_offset,
            column=column + self._column_offset,
            source_line=self._source_line(line),
        )

    def _report_unknown(self, node: SyntaxNode) -> Diagnostic:
        key = rule_key(self._tree, node)
        structure = f"{key[0]}.{key[1]}" if key else "<root>"
        diagnostic = Diagnostic(
            name=node.name or "",
            path=self._path,
            line=node.line + self._line_offset,
            column=node.column + self._column_offset,
            structure=structure,
            trace=self._tree.structural_path(node),
            source_line=self._source_line(node.line),
        )
        self._logger.warning(
            "unknown-identifier",
            name=diagnostic.name,
            line=diagnostic.line,
            column=diagnostic.column + 1,
            structure=structure,
            trace=" > ".join(diagnostic.trace),
        )
        return diagnostic
