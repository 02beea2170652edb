"""Packaged data files shipped with :mod:`jstags`.

Only ``jstags.defaults.toml`` lives here today; it seeds the configuration
stack in :mod:`jstags.core.config`.
"""

from __future__ import annotations

from importlib import resources
from importlib.resources.abc import Traversable


def get_resource(relative_path: str) -> Traversable:
    """Return a handle to the packaged file ``relative_path``.

    Raises:
        FileNotFoundError: If no such file is packaged (directories do not
            count).

    Example:
        >>> get_resource("jstags.defaults.toml").name
        'jstags.defaults.toml'
    """

    candidate = resources.files(__package__).joinpath(relative_path)
    if not candidate.is_file():
        raise FileNotFoundError(relative_path)
    return candidate


def read_resource_text(relative_path: str, *, encoding: str = "utf-8") -> str:
    """Return the decoded contents of a packaged file."""

    return get_resource(relative_path).read_text(encoding=encoding)


__all__ = ["get_resource", "read_resource_text"]
