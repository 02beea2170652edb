"""Console-script entry point for :mod:`jstags`."""

from __future__ import annotations

from jstags.cli import create_app


def main() -> None:
    """Execute the CLI application.

    Example:
        >>> from jstags.__main__ import main
        >>> main()  # doctest: +SKIP
    """

    app = create_app()
    app(prog_name="jstags")


if __name__ == "__main__":  # pragma: no cover - exercised via console script
    main()


__all__ = ["main"]
