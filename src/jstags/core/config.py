"""Configuration models and loaders for :mod:`jstags`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
import os
from pathlib import Path
from typing import Any, Mapping

import tomllib
import tomlkit
from pydantic import BaseModel, Field, field_validator, model_validator

from jstags.core.logging import normalize_level
from jstags.resources import read_resource_text

DEFAULTS_RESOURCE_NAME = "jstags.defaults.toml"
USER_CONFIG_NAME = "jstags.toml"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or validated."""


class TaggerSettings(BaseModel):
    """Settings steering parsing and classification."""

    verbose: bool = Field(
        default=False,
        description="Report errors tolerated by the parser as warnings.",
    )
    require_policy: bool = Field(
        default=True,
        description=(
            "Treat `x = require(\"./x\")` bindings as references when the "
            "module name matches the bound identifier."
        ),
    )
    module_retry: bool = Field(
        default=True,
        description="Retry with the module grammar when script parsing fails.",
    )
    jsx: bool = Field(
        default=False,
        description="Enable JSX syntax while parsing.",
    )
    strip_shebang: bool = Field(
        default=True,
        description="Blank out a leading `#!` line before parsing files.",
    )
    encoding: str = Field(
        default="utf-8",
        description="Text encoding used when reading source files.",
    )

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @field_validator("encoding")
    @classmethod
    def _validate_encoding(cls, value: str) -> str:
        if not value:
            raise ValueError("Encoding cannot be blank.")
        return value.lower()


class AppConfig(BaseModel):
    """Root configuration for the :mod:`jstags` application."""

    log_level: str = Field(
        default="WARNING",
        description="Default logging level for the application runtime.",
    )
    tagger: TaggerSettings = Field(
        default_factory=TaggerSettings,
        description="Tagging behaviour toggles.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalize_level(value)
        return value.upper()

    @model_validator(mode="before")
    @classmethod
    def _coerce_tagger(cls, value: Any) -> Any:
        """Accept ``tagger = null`` in user files as "use defaults"."""

        if isinstance(value, MappingABC) and value.get("tagger") is None:
            data = dict(value)
            data.pop("tagger", None)
            return data
        return value


def read_packaged_defaults_text() -> str:
    """Return the raw packaged defaults TOML content.

    Example:
        >>> read_packaged_defaults_text().startswith("#")
        True
    """

    return read_resource_text(DEFAULTS_RESOURCE_NAME)


def load_packaged_defaults() -> dict[str, Any]:
    """Load the packaged defaults as a plain dictionary.

    Example:
        >>> load_packaged_defaults()["tagger"]["require_policy"]
        True
    """

    return tomllib.loads(read_packaged_defaults_text())


def read_user_config(path: Path) -> dict[str, Any]:
    """Parse a user ``jstags.toml`` file.

    Raises:
        ConfigError: If the file is missing or is not valid TOML.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _parse_flag(name: str, raw: str) -> bool:
    normalized = raw.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ConfigError(f"{name} must be a boolean flag, got {raw!r}")


def env_overrides(environ: Mapping[str, str] | None = None) -> dict[str, Any]:
    """Derive configuration overrides from ``JSTAGS_*`` variables.

    Example:
        >>> env_overrides({"JSTAGS_VERBOSE": "yes"})
        {'tagger': {'verbose': True}}
    """

    env = os.environ if environ is None else environ
    overrides: dict[str, Any] = {}
    level = env.get("JSTAGS_LOG_LEVEL")
    if level:
        overrides["log_level"] = level
    verbose = env.get("JSTAGS_VERBOSE")
    if verbose is not None:
        overrides["tagger"] = {
            "verbose": _parse_flag("JSTAGS_VERBOSE", verbose)
        }
    return overrides


def _deep_merge(
    base: Mapping[str, Any],
    overlay: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge ``overlay`` into ``base`` returning a new dict."""

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if (
            key in merged
            and isinstance(merged[key], MappingABC)
            and isinstance(value, MappingABC)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    *,
    defaults: Mapping[str, Any] | None = None,
    user_config: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load configuration according to the precedence stack.

    Args:
        defaults: Packaged defaults; read from the package when omitted.
        user_config: Parsed user ``jstags.toml`` content.
        env_config: Settings derived from environment variables.
        cli_overrides: Settings supplied via CLI flags.

    Returns:
        A validated :class:`AppConfig` instance.

    Raises:
        ConfigError: If the merged payload does not validate.
    """

    stack = dict(load_packaged_defaults() if defaults is None else defaults)
    for layer in (user_config, env_config, cli_overrides):
        if layer:
            stack = _deep_merge(stack, layer)

    try:
        return AppConfig(**stack)
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc


def resolve_config(
    *,
    config_path: Path | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
    search_dir: Path | None = None,
) -> AppConfig:
    """Assemble the effective configuration for a CLI invocation.

    An explicit ``config_path`` must exist; otherwise ``jstags.toml`` in
    ``search_dir`` (the working directory by default) is used when present.
    """

    user_config: dict[str, Any] | None = None
    if config_path is not None:
        user_config = read_user_config(config_path)
    else:
        candidate = (search_dir or Path.cwd()) / USER_CONFIG_NAME
        if candidate.is_file():
            user_config = read_user_config(candidate)

    return load_config(
        user_config=user_config,
        env_config=env_overrides(environ),
        cli_overrides=cli_overrides,
    )


def render_user_config(config: AppConfig) -> str:
    """Render a ``jstags.toml`` template for users to customize."""

    document = tomlkit.document()
    document.add(tomlkit.comment("Generated by jstags config"))
    document.add(
        tomlkit.comment("Precedence: CLI flags > env vars > jstags.toml > defaults")
    )
    document.add(tomlkit.comment("Environment overrides:"))
    document.add(tomlkit.comment("  JSTAGS_LOG_LEVEL=info"))
    document.add(tomlkit.comment("  JSTAGS_VERBOSE=1"))
    document.add(tomlkit.nl())

    document["log_level"] = config.log_level

    tagger_table = tomlkit.table()
    for name, value in config.tagger.model_dump().items():
        tagger_table[name] = value
    document["tagger"] = tagger_table

    return tomlkit.dumps(document)


__all__ = [
    "AppConfig",
    "ConfigError",
    "DEFAULTS_RESOURCE_NAME",
    "TaggerSettings",
    "USER_CONFIG_NAME",
    "env_overrides",
    "load_config",
    "load_packaged_defaults",
    "read_packaged_defaults_text",
    "read_user_config",
    "render_user_config",
    "resolve_config",
]
