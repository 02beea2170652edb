"""``jstags tag``: print definition/reference tags for ECMAScript files."""

from __future__ import annotations

from enum import StrEnum
import json
from pathlib import Path

import typer

from jstags.core.config import AppConfig, ConfigError, resolve_config
from jstags.core.logging import configure_logging, get_logger, log_context
from jstags.tagger import (
    TagInputError,
    TagParseError,
    TagReadError,
    read_source,
    tag_source,
)

EXIT_READ_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_PARSE_ERROR = 10


class OutputFormat(StrEnum):
    """Supported renderings of the tag stream."""

    TEXT = "text"
    JSON = "json"


def build_cli_overrides(
    *,
    log_level: str | None,
    verbose: bool | None,
    require_policy: bool | None,
    jsx: bool | None,
) -> dict[str, object]:
    """Translate CLI flags into a config overlay, skipping unset flags.

    Example:
        >>> build_cli_overrides(
        ...     log_level=None, verbose=True, require_policy=None, jsx=None
        ... )
        {'tagger': {'verbose': True}}
    """

    overrides: dict[str, object] = {}
    if log_level:
        overrides["log_level"] = log_level
    tagger = {
        name: value
        for name, value in (
            ("verbose", verbose),
            ("require_policy", require_policy),
            ("jsx", jsx),
        )
        if value is not None
    }
    if tagger:
        overrides["tagger"] = tagger
    return overrides


def load_cli_config(
    config_path: Path | None,
    overrides: dict[str, object],
) -> AppConfig:
    try:
        return resolve_config(config_path=config_path, cli_overrides=overrides)
    except ConfigError as exc:
        typer.secho(f"Configuration error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc


def tag_command(  # noqa: PLR0913 - CLI surface area intentionally explicit
    files: list[Path] = typer.Argument(
        ...,
        metavar="FILE...",
        help="ECMAScript source files to tag.",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TEXT,
        "--format",
        "-f",
        case_sensitive=False,
        help="Render tags as KIND,NAME,PATH,LINE:COLUMN,LINE text or JSON lines.",
    ),
    line_offset: int = typer.Option(
        0,
        "--line-offset",
        help="Lines to add to every reported line (embedded fragments).",
    ),
    column_offset: int = typer.Option(
        0,
        "--column-offset",
        help="Columns to add to every reported column (embedded fragments).",
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose/--no-verbose",
        help="Report syntax errors the parser recovered from.",
    ),
    require_policy: bool | None = typer.Option(
        None,
        "--require-policy/--no-require-policy",
        help="Report `x = require(\"./x\")` bindings as references.",
    ),
    jsx: bool | None = typer.Option(
        None,
        "--jsx/--no-jsx",
        help="Accept JSX syntax.",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a jstags.toml file (defaults to ./jstags.toml).",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override the logging level (DEBUG/INFO/WARNING/ERROR).",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Also write JSON logs to this file.",
    ),
) -> None:
    """Tag each FILE; a broken file does not stop the others."""

    config = load_cli_config(
        config_path,
        build_cli_overrides(
            log_level=log_level,
            verbose=verbose,
            require_policy=require_policy,
            jsx=jsx,
        ),
    )
    configure_logging(level=config.log_level, log_file=log_file)
    logger = get_logger(__name__, command="tag")
    settings = config.tagger

    read_failures = 0
    parse_failures = 0
    for path in files:
        try:
            with log_context(path=str(path)):
                source = read_source(path, settings=settings)
                result = tag_source(
                    source,
                    str(path),
                    line_offset,
                    column_offset,
                    settings=settings,
                    logger=logger,
                )
        except TagReadError as exc:
            read_failures += 1
            typer.secho(str(exc), fg=typer.colors.RED, err=True)
            continue
        except TagParseError as exc:
            parse_failures += 1
            typer.secho(str(exc), fg=typer.colors.RED, bold=True, err=True)
            continue
        except TagInputError:
            logger.info("empty-source-skipped", path=str(path))
            continue

        for item in result.tags:
            if output_format is OutputFormat.JSON:
                typer.echo(json.dumps(item.to_dict(), ensure_ascii=False))
            else:
                typer.echo(item.render())
        if settings.verbose:
            for warning in result.warnings:
                typer.secho(
                    f"{path}: {warning}",
                    fg=typer.colors.YELLOW,
                    err=True,
                )

    logger.debug(
        "tag-complete",
        files=len(files),
        read_failures=read_failures,
        parse_failures=parse_failures,
    )
    if read_failures:
        raise typer.Exit(code=EXIT_READ_ERROR)
    if parse_failures:
        raise typer.Exit(code=EXIT_PARSE_ERROR)


__all__ = [
    "EXIT_CONFIG_ERROR",
    "EXIT_PARSE_ERROR",
    "EXIT_READ_ERROR",
    "OutputFormat",
    "build_cli_overrides",
    "load_cli_config",
    "tag_command",
]
