"""Value objects produced by the tagger."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

__all__ = [
    "Diagnostic",
    "Tag",
    "TagKind",
    "TagResult",
    "Verdict",
]


class Verdict(StrEnum):
    """Classification of a single identifier occurrence."""

    DEFINITION = "definition"
    REFERENCE = "reference"
    IGNORE = "ignore"
    UNKNOWN = "unknown"

    @property
    def is_tagged(self) -> bool:
        return self in (Verdict.DEFINITION, Verdict.REFERENCE)


class TagKind(StrEnum):
    """Kind column of the emitted tag stream."""

    DEFINITION = "D"
    REFERENCE = "R"

    @classmethod
    def from_verdict(cls, verdict: Verdict) -> "TagKind":
        """Map a taggable verdict to its tag kind.

        Raises:
            ValueError: If ``verdict`` is Ignore or Unknown.

        Example:
            >>> TagKind.from_verdict(Verdict.REFERENCE)
            <TagKind.REFERENCE: 'R'>
        """

        if verdict is Verdict.DEFINITION:
            return cls.DEFINITION
        if verdict is Verdict.REFERENCE:
            return cls.REFERENCE
        raise ValueError(f"Verdict {verdict.value!r} does not produce a tag")


@dataclass(frozen=True, slots=True)
class Tag:
    """One tagged identifier occurrence.

    ``line`` is 1-based and ``column`` 0-based, both already shifted by the
    caller's offsets. The rendered text form prints a 1-based column.
    """

    kind: TagKind
    name: str
    path: str
    line: int
    column: int
    source_line: str = ""

    def render(self) -> str:
        """Return the ``KIND,NAME,PATH,LINE:COLUMN,SOURCE_LINE`` form.

        Example:
            >>> Tag(TagKind.DEFINITION, "foo", "a.js", 3, 6, "var foo;").render()
            'D,foo,a.js,3:7,var foo;'
        """

        return (
            f"{self.kind.value},{self.name},{self.path},"
            f"{self.line}:{self.column + 1},{self.source_line}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "name": self.name,
            "path": self.path,
            "line": self.line,
            "column": self.column,
            "source_line": self.source_line,
        }


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """An identifier whose structural position has no classification rule."""

    name: str
    path: str
    line: int
    column: int
    structure: str
    trace: tuple[str, ...] = ()
    source_line: str = ""

    def describe(self) -> str:
        return (
            f"Unknown Identifier : {self.name} at {self.path} "
            f"{self.line}:{self.column + 1},{self.source_line} "
            f"({self.structure})"
        )


@dataclass(frozen=True, slots=True)
class TagResult:
    """Tags, diagnostics and tolerated parse warnings for one source."""

    path: str
    tags: tuple[Tag, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def render(self) -> list[str]:
        return [tag.render() for tag in self.tags]
