"""Command-line interface primitives for :mod:`jstags`.

This module exposes the Typer application behind the ``jstags`` console
script.

Example:
    >>> import typer
    >>> from jstags.cli import create_app
    >>> app = create_app()
    >>> isinstance(app, typer.Typer)
    True
"""

from __future__ import annotations

from pathlib import Path

import typer

from jstags.cli.tag import load_cli_config, tag_command
from jstags.core.config import render_user_config

_app_help = (
    "Definition/reference tagger for ECMAScript sources."
    "\n\n"
    "Use `jstags tag FILE...` to print tags as "
    "KIND,NAME,PATH,LINE:COLUMN,SOURCE_LINE."
)


def create_app() -> "typer.Typer":
    """Return the Typer application powering the ``jstags`` CLI."""

    app = typer.Typer(
        help=_app_help,
        no_args_is_help=True,
        rich_markup_mode="rich",
        invoke_without_command=False,
        cls=typer.core.TyperGroup,
    )

    @app.callback()
    def main_callback() -> None:
        """Top-level CLI callback ensuring subcommands are dispatched."""

        return None

    app.command(
        "tag",
        help="Print definition (D) and reference (R) tags for FILE...",
    )(tag_command)

    @app.command("config", help="Print (or write) the effective configuration.")
    def config_command(
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="Path to a jstags.toml file (defaults to ./jstags.toml).",
        ),
        output: Path | None = typer.Option(
            None,
            "--output",
            "-o",
            help="Write the rendered configuration to this file.",
        ),
        force: bool = typer.Option(
            False,
            "--force",
            help="Overwrite an existing output file.",
        ),
    ) -> None:
        config = load_cli_config(config_path, {})
        rendered = render_user_config(config)
        if output is None:
            typer.echo(rendered, nl=False)
            return
        if output.exists() and not force:
            typer.secho(
                f"{output} already exists; pass --force to overwrite.",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1)
        output.write_text(rendered, encoding="utf-8")
        typer.secho(f"Wrote {output}", fg=typer.colors.GREEN)

    @app.command("version", help="Print the installed jstags version.")
    def version_command() -> None:
        from jstags import __version__

        typer.echo(__version__)

    return app


__all__ = ["create_app"]
