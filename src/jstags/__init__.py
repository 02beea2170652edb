"""Top-level package for :mod:`jstags`.

The package re-exports the tagging entry points so callers can tag a source
string or a file without reaching into submodules.

Example:
    >>> from jstags import tag
    >>> [t.render() for t in tag("let answer = 42;", "answer.js")]
    ['D,answer,answer.js,1:5,let answer = 42;']
"""

from importlib import metadata

from jstags.tagger import (
    Tag,
    TagKind,
    TagResult,
    tag,
    tag_file,
    tag_source,
)

try:
    __version__ = metadata.version("jstags")
except metadata.PackageNotFoundError:  # pragma: no cover - fallback for editable installs
    __version__ = "0.0.0"

__all__ = [
    "Tag",
    "TagKind",
    "TagResult",
    "__version__",
    "tag",
    "tag_file",
    "tag_source",
]
