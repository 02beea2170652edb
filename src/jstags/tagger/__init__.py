"""Identifier tagging for ECMAScript sources.

``tag`` parses a source string with esprima, decorates the tree
(:mod:`.tree`), classifies each identifier (:mod:`.classifier`,
:mod:`.policies`), mines selector literals (:mod:`.literals`) and emits the
ordered tag stream (:mod:`.emitter`).
"""

from __future__ import annotations

from .classifier import RULES, Classifier, rule_key
from .emitter import TagEmitter
from .errors import TagInputError, TagParseError, TagReadError, TaggerError
from .literals import LOOKUP_PATTERNS, LiteralScanner, SelectorReference
from .models import Diagnostic, Tag, TagKind, TagResult, Verdict
from .policies import RequirePolicy, module_stem
from .service import (
    ParsedSource,
    parse_source,
    read_source,
    render_tags,
    tag,
    tag_file,
    tag_source,
)
from .tree import ParentLink, SyntaxNode, SyntaxTree

__all__ = [
    "Classifier",
    "Diagnostic",
    "LOOKUP_PATTERNS",
    "LiteralScanner",
    "ParentLink",
    "ParsedSource",
    "RULES",
    "RequirePolicy",
    "SelectorReference",
    "SyntaxNode",
    "SyntaxTree",
    "Tag",
    "TagEmitter",
    "TagInputError",
    "TagKind",
    "TagParseError",
    "TagReadError",
    "TagResult",
    "TaggerError",
    "Verdict",
    "module_stem",
    "parse_source",
    "read_source",
    "render_tags",
    "rule_key",
    "tag",
    "tag_file",
    "tag_source",
]
