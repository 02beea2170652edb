"""Entry points that parse ECMAScript source and tag it."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import re
from typing import Any, Iterable, Iterator

import esprima

from jstags.core.config import TaggerSettings
from jstags.core.logging import Logger, get_logger

from .classifier import Classifier, VerdictPolicy
from .emitter import TagEmitter
from .errors import TagInputError, TagParseError, TagReadError
from .models import Tag, TagResult
from .policies import RequirePolicy
from .tree import SyntaxTree

__all__ = [
    "ParsedSource",
    "parse_source",
    "read_source",
    "render_tags",
    "tag",
    "tag_file",
    "tag_source",
]

_SHEBANG = re.compile(r"\A#!.*")
_LINE_PREFIX = re.compile(r"^Line \d+: ")


@dataclass(frozen=True, slots=True)
class ParsedSource:
    """Parser output handed to the decorator."""

    program: Any
    source_type: str
    warnings: tuple[str, ...] = ()


def _parse_options(settings: TaggerSettings) -> dict[str, Any]:
    options: dict[str, Any] = {"loc": True, "range": True, "tolerant": True}
    if settings.jsx:
        options["jsx"] = True
    return options


def _describe(error: Any) -> str:
    """Return the parser message without its ``Line N: `` prefix.

    esprima-python errors carry ``message`` and ``lineNumber`` only.
    """

    description = getattr(error, "description", None)
    if description:
        return description
    message = getattr(error, "message", None) or str(error)
    return _LINE_PREFIX.sub("", message)


def _parse_error(path: str, error: Any) -> TagParseError:
    return TagParseError(path, getattr(error, "lineNumber", None), _describe(error))


def _tolerated_errors(program: Any) -> tuple[str, ...]:
    errors = getattr(program, "errors", None) or ()
    return tuple(
        f"line {getattr(error, 'lineNumber', '?')}: {_describe(error)}"
        for error in errors
    )


def parse_source(
    source: str,
    path: str,
    *,
    settings: TaggerSettings | None = None,
    logger: Logger | None = None,
) -> ParsedSource:
    """Parse ``source`` as a script, retrying as a module when that fails.

    Raises:
        TagParseError: If neither grammar accepts ``source``.
    """

    settings = settings or TaggerSettings()
    log = logger or get_logger(__name__, path=path)
    options = _parse_options(settings)

    try:
        program = esprima.parseScript(source, options)
        source_type = "script"
    except esprima.Error as exc:
        if not settings.module_retry:
            raise _parse_error(path, exc) from exc
        log.debug(
            "parse-retry-module",
            line=getattr(exc, "lineNumber", None),
            description=_describe(exc),
        )
        try:
            program = esprima.parseModule(source, options)
        except esprima.Error as module_exc:
            raise _parse_error(path, module_exc) from module_exc
        source_type = "module"

    warnings = _tolerated_errors(program)
    if settings.verbose:
        for warning in warnings:
            log.warning("parse-tolerated-error", detail=warning)
    return ParsedSource(program=program, source_type=source_type, warnings=warnings)


def _policies(settings: TaggerSettings) -> Iterable[VerdictPolicy]:
    if settings.require_policy:
        yield RequirePolicy()


def tag_source(
    source: str,
    path: str | Path,
    line_offset: int = 0,
    column_offset: int = 0,
    *,
    settings: TaggerSettings | None = None,
    logger: Logger | None = None,
) -> TagResult:
    """Tag ``source`` and return tags, diagnostics and parse warnings.

    Raises:
        TagInputError: If ``source`` or ``path`` is empty.
        TagParseError: If the source cannot be parsed.
    """

    if not source:
        raise TagInputError("source text must not be empty")
    path_text = str(path) if path is not None else ""
    if not path_text:
        raise TagInputError("path must not be empty")

    settings = settings or TaggerSettings()
    log = logger or get_logger(__name__, path=path_text)

    parsed = parse_source(source, path_text, settings=settings, logger=log)
    tree = SyntaxTree.from_esprima(parsed.program, logger=log)
    classifier = Classifier(tree, policies=_policies(settings))
    result = TagEmitter(
        tree,
        source=source,
        path=path_text,
        line_offset=line_offset,
        column_offset=column_offset,
        classifier=classifier,
        logger=log,
    ).emit()

    log.debug(
        "tagged",
        source_type=parsed.source_type,
        tags=len(result.tags),
        unknown=len(result.diagnostics),
        shared_nodes=tree.shared_nodes,
    )
    return TagResult(
        path=result.path,
        tags=result.tags,
        diagnostics=result.diagnostics,
        warnings=parsed.warnings,
    )


def tag(
    source: str,
    path: str | Path,
    line_offset: int = 0,
    column_offset: int = 0,
    *,
    settings: TaggerSettings | None = None,
) -> list[Tag]:
    """Return the ordered tag stream for ``source``.

    Example:
        >>> [t.render() for t in tag("foo(bar);", "x.js")]
        ['R,foo,x.js,1:1,foo(bar);', 'R,bar,x.js,1:5,foo(bar);']
    """

    return list(
        tag_source(
            source,
            path,
            line_offset,
            column_offset,
            settings=settings,
        ).tags
    )


def read_source(
    path: str | Path,
    *,
    settings: TaggerSettings | None = None,
) -> str:
    """Read ``path`` as text, blanking a leading shebang line.

    Raises:
        TagReadError: If the file is missing, unreadable or mis-encoded.
    """

    settings = settings or TaggerSettings()
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise TagReadError(path, exc.strerror or str(exc)) from exc
    try:
        text = raw.decode(settings.encoding)
    except (UnicodeDecodeError, LookupError) as exc:
        raise TagReadError(path, str(exc)) from exc
    if settings.strip_shebang:
        text = _SHEBANG.sub("", text)
    return text


def tag_file(
    path: str | Path,
    *,
    settings: TaggerSettings | None = None,
) -> list[Tag]:
    """Read and tag a file; the file path is reported as given."""

    source = read_source(path, settings=settings)
    return tag(source, str(path), settings=settings)


def render_tags(tags: Iterable[Tag]) -> Iterator[str]:
    """Yield the plain text form of each tag."""

    for item in tags:
        yield item.render()
