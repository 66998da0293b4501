"""Coverage profile settings.

Uses Pydantic v2 BaseSettings so that fields not given explicitly (by the
command line or a config file table) can be filled from COVRUN_*
environment variables before falling back to field defaults.
"""

import logging
import os
from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path, PurePath
from typing import TYPE_CHECKING, Any

from pydantic import Field, PrivateAttr, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import InvalidOptionError, NoRelativePathError
from .exclusion import ExclusionMatcher
from .inputs import DEFAULT_MANIFEST, profile_kwargs_from_cli
from .paths import canonicalize, relative_path
from .types import (
    CiService,
    OutputFormat,
    RunType,
    parse_ci_service,
    parse_output_format,
    parse_run_type,
)

if TYPE_CHECKING:
    from pydantic_settings.sources import PydanticBaseSettingsSource

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = timedelta(seconds=60)


def _default_manifest() -> Path:
    return Path.cwd() / DEFAULT_MANIFEST


def _match_text(path: PurePath) -> str:
    # Paths that cannot be represented as UTF-8 only match an empty pattern
    text = path.as_posix()
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return ""
    return text


class CoverageConfig(BaseSettings):
    """One resolved coverage profile.

    Values come from the following sources (highest to lowest):
    1. Constructor kwargs (command-line options)
    2. Environment variables with COVRUN_ prefix
    3. Config file table values (the loader drops keys that have an
       environment override before passing the table in)
    4. Field defaults

    Apart from `config_file_path`, which the resolver sets on profiles read
    from a file, the only state that changes after construction is the
    compiled exclusion pattern cache.
    """

    model_config = SettingsConfigDict(
        env_prefix="COVRUN_",
        case_sensitive=False,
        extra="ignore",  # Ignore unknown keys in TOML files
    )

    name: str = Field(default="", description="Profile name (table key)")

    # Project location
    manifest: Path = Field(
        default_factory=_default_manifest,
        description="Path to the project's cargo manifest",
    )
    root: str | None = Field(
        default=None,
        description="Project root, absolute or relative to the working directory",
    )
    config_file_path: Path | None = Field(
        default=None,
        description="Config file this profile was loaded from",
    )

    # Run shape
    run_ignored: bool = Field(default=False, description="Also run ignored tests")
    ignore_tests: bool = Field(
        default=False, description="Leave test functions out of coverage"
    )
    ignore_panics: bool = Field(default=False, description="Ignore panic macros")
    force_clean: bool = Field(default=False, description="Clean before building")
    verbose: bool = False
    debug: bool = False
    count: bool = Field(default=False, description="Count hits in coverage")
    line_coverage: bool = True
    branch_coverage: bool = False
    forward_signals: bool = Field(
        default=False, description="Forward unexpected signals to the tracee"
    )
    all_features: bool = False
    no_default_features: bool = False
    all: bool = Field(default=False, description="Build the whole workspace")
    release: bool = False
    no_run: bool = Field(default=False, description="Build tests without running")
    locked: bool = False
    frozen: bool = False
    offline: bool = False

    # Collections
    run_types: list[RunType] = Field(default_factory=lambda: [RunType.TESTS])
    packages: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(
        default_factory=list, description="Packages to exclude from testing"
    )
    features: list[str] = Field(default_factory=list)
    unstable_features: list[str] = Field(default_factory=list)
    varargs: list[str] = Field(
        default_factory=list,
        description="Arguments forwarded to the test executables",
    )
    generate: list[OutputFormat] = Field(default_factory=list)
    excluded_files_raw: list[str] = Field(
        default_factory=list,
        description="Glob patterns of files to exclude from coverage",
    )

    # External services
    coveralls: str | None = Field(default=None, description="Coveralls token")
    ci_tool: CiService | None = None
    report_uri: str | None = Field(
        default=None,
        description="Endpoint to send the coveralls report to instead",
    )

    # Output
    output_directory: Path = Field(default_factory=Path.cwd)
    test_timeout: timedelta = DEFAULT_TIMEOUT
    target_dir: Path | None = None

    _matcher: ExclusionMatcher = PrivateAttr(default_factory=ExclusionMatcher)

    @field_validator("run_types", "generate", mode="before")
    @classmethod
    def _parse_enum_lists(cls, value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, str):
            value = [value]
        if not isinstance(value, list | tuple):
            return value
        parser = parse_run_type if info.field_name == "run_types" else parse_output_format
        try:
            return [parser(v) if isinstance(v, str) else v for v in value]
        except InvalidOptionError as e:
            raise ValueError(str(e)) from e

    @field_validator("ci_tool", mode="before")
    @classmethod
    def _parse_ci_tool(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        try:
            return parse_ci_service(value)
        except InvalidOptionError as e:
            raise ValueError(str(e)) from e

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: "PydanticBaseSettingsSource",
        env_settings: "PydanticBaseSettingsSource",
        dotenv_settings: "PydanticBaseSettingsSource",
        file_secret_settings: "PydanticBaseSettingsSource",
    ) -> tuple["PydanticBaseSettingsSource", ...]:
        """Only constructor kwargs and COVRUN_* variables are consulted.

        Config files are not a settings source: a profile table read from a
        file is passed in as constructor kwargs by the loader.
        """
        return (init_settings, env_settings)

    @classmethod
    def from_cli(
        cls, args: Mapping[str, Any], cwd: Path | None = None
    ) -> "CoverageConfig":
        """Build the baseline profile from command-line style inputs.

        Args:
            args: Flat mapping of option name to flag, value or values.
            cwd: Working directory relative options are resolved against.
                Defaults to the process working directory.

        Returns:
            A profile with an empty name and no config file path.
        """
        cwd = cwd if cwd is not None else Path.cwd()
        log.info("Creating config")
        config = cls(name="", **profile_kwargs_from_cli(args, cwd))
        return apply_working_dir_defaults(config, cwd)

    def __copy__(self) -> "CoverageConfig":
        # model_copy() shares private attributes; give the copy its own cache
        copied = super().__copy__()
        copied._matcher = ExclusionMatcher()
        return copied

    def is_coveralls(self) -> bool:
        return self.coveralls is not None

    def get_base_dir(self, cwd: Path | None = None) -> Path:
        """Get the directory source paths are made relative to.

        Uses `root` if set, otherwise the working directory. A relative
        root is joined onto the working directory and canonicalized.

        Raises:
            CanonicalizationError: If a relative root does not exist.
        """
        cwd = cwd if cwd is not None else Path.cwd()
        if self.root is None:
            return cwd
        root = Path(self.root)
        if root.is_absolute():
            return root
        return canonicalize(cwd / root)

    def strip_base_dir(
        self, path: str | os.PathLike[str], cwd: Path | None = None
    ) -> PurePath:
        """Get `path` relative to the base directory, or `path` unchanged."""
        try:
            return relative_path(path, self.get_base_dir(cwd))
        except NoRelativePathError:
            return PurePath(path)

    def exclude_path(
        self, path: str | os.PathLike[str], cwd: Path | None = None
    ) -> bool:
        """Check whether a source file is excluded from coverage.

        The path is made relative to the base directory first, so patterns
        are written relative to the project root.
        """
        candidate = _match_text(self.strip_base_dir(path, cwd))
        return self._matcher.is_excluded(self.excluded_files_raw, candidate)

    def is_default_output_dir(self, cwd: Path | None = None) -> bool:
        cwd = cwd if cwd is not None else Path.cwd()
        return self.output_directory == cwd


def apply_working_dir_defaults(config: CoverageConfig, cwd: Path) -> CoverageConfig:
    """Point working-directory defaults at `cwd`.

    `manifest` and `output_directory` default to the process working
    directory. When neither an explicit value nor an environment variable
    supplied them, they are re-derived from `cwd` instead.
    """
    if "manifest" not in config.model_fields_set:
        config.manifest = cwd / DEFAULT_MANIFEST
    if "output_directory" not in config.model_fields_set:
        config.output_directory = cwd
    return config
