"""Configuration package for covrun.

This package resolves the coverage profile for one run from command-line
options, COVRUN_* environment variables and an optional multi-profile
TOML file, and answers file exclusion queries against it.
"""

from covrun.config.exceptions import (
    CanonicalizationError,
    ConfigError,
    ConfigReadError,
    EmptyConfigError,
    InvalidOptionError,
    MalformedConfigError,
    NoRelativePathError,
    ProfileNotFoundError,
)
from covrun.config.exclusion import ExclusionMatcher, compile_glob, compile_globs
from covrun.config.loader import list_profiles, load_profiles, load_toml_file
from covrun.config.paths import canonicalize, relative_parts, relative_path
from covrun.config.resolver import resolve, resolve_config_path, select_profile
from covrun.config.settings import CoverageConfig, apply_working_dir_defaults
from covrun.config.types import CiService, OutputFormat, RunType

__all__ = [
    # Exceptions
    "ConfigError",
    "ConfigReadError",
    "MalformedConfigError",
    "EmptyConfigError",
    "ProfileNotFoundError",
    "NoRelativePathError",
    "CanonicalizationError",
    "InvalidOptionError",
    # Paths
    "canonicalize",
    "relative_parts",
    "relative_path",
    # Exclusion
    "ExclusionMatcher",
    "compile_glob",
    "compile_globs",
    # Settings
    "CoverageConfig",
    "apply_working_dir_defaults",
    "CiService",
    "OutputFormat",
    "RunType",
    # Loading and resolution
    "load_toml_file",
    "load_profiles",
    "list_profiles",
    "resolve",
    "resolve_config_path",
    "select_profile",
]
