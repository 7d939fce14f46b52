"""Converter configuration resolved from explicit values or the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping

DEFAULT_PREFIX = "prs"
DEFAULT_VERSION = "2.28.2"

PREFIX_ENV = "EJS2HTML_PREFIX"
VERSION_ENV = "EJS2HTML_VERSION"


@dataclass(frozen=True)
class ConverterConfig:
    """Marker namespace and envelope version shared by decoder and encoder."""

    prefix: str = DEFAULT_PREFIX
    version: str = DEFAULT_VERSION

    def __post_init__(self) -> None:
        if not self.prefix or any(char.isspace() for char in self.prefix):
            raise ValueError(f"Invalid marker prefix: {self.prefix!r}")


def load_config(
    env: Mapping[str, str] | None = None,
    env_file: Path | None = None,
    *,
    prefix: str | None = None,
    version: str | None = None,
) -> ConverterConfig:
    """Build a configuration from keyword overrides and environment variables.

    Args:
        env: Mapping to read variables from. Defaults to ``os.environ``.
        env_file: Optional ``.env`` file whose ``KEY=VALUE`` lines populate
            ``os.environ`` defaults before lookup.
        prefix: Explicit marker prefix overriding ``EJS2HTML_PREFIX``.
        version: Explicit envelope version overriding ``EJS2HTML_VERSION``.

    Returns:
        ConverterConfig: The resolved configuration.
    """

    if env_file is not None:
        load_env_file(env_file)
    source = os.environ if env is None else env
    return ConverterConfig(
        prefix=prefix or source.get(PREFIX_ENV) or DEFAULT_PREFIX,
        version=version or source.get(VERSION_ENV) or DEFAULT_VERSION,
    )


def load_env_file(path: Path, environ: MutableMapping[str, str] | None = None) -> None:
    """Populate the environment from a simple KEY=VALUE .env file."""

    target = os.environ if environ is None else environ
    if not path.exists():
        return

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue

        key, value = line.split("=", 1)
        target.setdefault(key.strip(), value.strip().strip('"').strip("'"))


__all__ = [
    "ConverterConfig",
    "DEFAULT_PREFIX",
    "DEFAULT_VERSION",
    "PREFIX_ENV",
    "VERSION_ENV",
    "load_config",
    "load_env_file",
]
