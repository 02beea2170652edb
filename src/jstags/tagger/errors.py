"""Domain-specific exceptions for tagging."""

from __future__ import annotations

from pathlib import Path


class TaggerError(RuntimeError):
    """Base error for tagging failures."""


class TagInputError(TaggerError, ValueError):
    """Raised when ``tag`` is called with empty source text or path."""


class TagReadError(TaggerError):
    """Raised when a source file cannot be read or decoded."""

    def __init__(self, path: str | Path, reason: str) -> None:
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Cannot read {self.path}: {reason}")


class TagParseError(TaggerError):
    """Raised when neither the script nor the module grammar accepts a file."""

    def __init__(
        self,
        path: str | Path,
        line: int | None,
        description: str,
    ) -> None:
        self.path = str(path)
        self.line = line
        self.description = description
        super().__init__(
            f"Syntax Error: {self.path} at line {line} : {description}"
        )


__all__ = [
    "TagInputError",
    "TagParseError",
    "TagReadError",
    "TaggerError",
]
