"""Resolve the effective profile for one invocation."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .exceptions import ConfigError, ProfileNotFoundError
from .loader import load_profiles
from .paths import canonicalize
from .settings import CoverageConfig, apply_working_dir_defaults

log = logging.getLogger(__name__)


def resolve_config_path(config: str | Path, cwd: Path) -> Path:
    """Make a config file path absolute.

    Relative paths are joined onto `cwd` and canonicalized. Absolute paths
    are used as given.

    Raises:
        CanonicalizationError: If a relative path does not exist.
    """
    path = Path(config)
    if path.is_absolute():
        return path
    return canonicalize(cwd / path)


def select_profile(
    profiles: Mapping[str, CoverageConfig], name: str | None = None
) -> CoverageConfig:
    """Pick one profile out of a loaded config file.

    Args:
        profiles: Profiles by name, in file order. Must not be empty.
        name: Profile to pick. If None, the first profile in the file.

    Raises:
        ProfileNotFoundError: If `name` is given but not in `profiles`.
    """
    if name is None:
        return next(iter(profiles.values()))
    if name not in profiles:
        raise ProfileNotFoundError(name, list(profiles))
    return profiles[name]


def resolve(
    cli_inputs: Mapping[str, Any],
    cwd: Path | None = None,
    profile: str | None = None,
) -> CoverageConfig:
    """Build the effective profile from command-line inputs and config file.

    The baseline profile is built from `cli_inputs`. If they name a config
    file (`config` key), a profile from that file replaces the baseline.
    A config file that cannot be read or parsed is skipped with a warning
    and the baseline is used.

    Args:
        cli_inputs: Flat mapping of option name to flag, value or values.
        cwd: Working directory. Defaults to the process working directory.
        profile: Name of the profile to use from the config file. Falls
            back to the `profile` input, then to the first table in the file.

    Returns:
        The resolved profile.

    Raises:
        CanonicalizationError: If a relative config path does not exist.
        ProfileNotFoundError: If a requested profile is not in the file.
    """
    cwd = cwd if cwd is not None else Path.cwd()
    baseline = CoverageConfig.from_cli(cli_inputs, cwd)

    config = cli_inputs.get("config")
    if not config:
        return baseline

    path = resolve_config_path(config, cwd)
    try:
        profiles = load_profiles(path)
    except ConfigError as e:
        log.warning("Ignoring config file: %s", e)
        return baseline

    for loaded in profiles.values():
        loaded.config_file_path = path
        apply_working_dir_defaults(loaded, cwd)

    name = profile or cli_inputs.get("profile") or None
    selected = select_profile(profiles, name)
    log.debug("Using profile '%s' from %s", selected.name, path)
    return selected
