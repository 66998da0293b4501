"""Configuration file loading.

A config file is a TOML document whose top-level tables are named
profiles:

    [ci]
    run_types = ["Tests", "Doctests"]
    excluded_files_raw = ["*/generated/*"]

    [local]
    verbose = true

Each table holds any subset of the profile fields; missing fields take
their defaults.
"""

import logging
import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .exceptions import (
    ConfigReadError,
    EmptyConfigError,
    MalformedConfigError,
)
from .settings import CoverageConfig

log = logging.getLogger(__name__)


def load_toml_file(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dict.

    Args:
        path: Path to the TOML file.

    Returns:
        Dictionary of configuration values.

    Raises:
        ConfigReadError: If the file cannot be opened or read.
        MalformedConfigError: If the file contains invalid TOML.
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except OSError as e:
        raise ConfigReadError(os.fspath(path), e.strerror or str(e)) from e
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
        log.error("Invalid config file %s", e)
        raise MalformedConfigError(os.fspath(path), str(e)) from e


def _get_env_prefix() -> str:
    """Get the environment variable prefix for CoverageConfig."""
    return CoverageConfig.model_config.get("env_prefix", "")


def _has_env_override(field_name: str) -> bool:
    """Check if an environment variable is set for a profile field.

    Args:
        field_name: The profile field name (e.g., "release").

    Returns:
        True if the corresponding env var is set, in any case.
    """
    env_var = f"{_get_env_prefix()}{field_name}".upper()
    return any(key.upper() == env_var for key in os.environ)


def load_profiles(path: str | os.PathLike[str]) -> dict[str, CoverageConfig]:
    """Load every named profile from a config file.

    Args:
        path: Path to the config file.

    Returns:
        Mapping of profile name to profile, in file order. Each profile's
        `name` is set to its table key.

    Raises:
        ConfigReadError: If the file cannot be opened or read.
        MalformedConfigError: If the file is not a mapping of profile name
            to profile table, or a table has invalid values.
        EmptyConfigError: If the file defines no tables.
    """
    data = load_toml_file(path)

    profiles: dict[str, CoverageConfig] = {}
    for name, body in data.items():
        if not isinstance(body, dict):
            raise MalformedConfigError(
                os.fspath(path), f"'{name}' is not a profile table"
            )
        # Remove keys that have env var overrides so Pydantic reads from env
        filtered = {
            key: value for key, value in body.items() if not _has_env_override(key)
        }
        try:
            profiles[name] = CoverageConfig(**{**filtered, "name": name})
        except ValidationError as e:
            log.error("Invalid config file %s", e)
            raise MalformedConfigError(os.fspath(path), str(e)) from e

    if not profiles:
        raise EmptyConfigError(os.fspath(path))

    log.debug("Loaded profiles %s from %s", list(profiles), path)
    return profiles


def list_profiles(path: str | os.PathLike[str]) -> list[str]:
    """List the profile names defined in a config file."""
    return list(load_profiles(path))
