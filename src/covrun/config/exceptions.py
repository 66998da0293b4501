"""Configuration exceptions for covrun."""

from pathlib import PurePath


class ConfigError(Exception):
    """Base exception for configuration errors."""

    pass


class ConfigReadError(ConfigError):
    """Raised when a config file cannot be opened or read."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read config file {path}: {reason}")


class MalformedConfigError(ConfigError):
    """Raised when a config file is not a mapping of profile name to table.

    Covers invalid TOML, top-level values that are not tables, and tables
    whose values do not validate against the profile model.
    """

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Invalid config file {path}: {reason}")


class EmptyConfigError(ConfigError):
    """Raised when a config file parses but defines no profile tables."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"No config tables in {path}")


class ProfileNotFoundError(ConfigError):
    """Raised when an explicitly requested profile is not in the file."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        super().__init__(
            f"Profile '{name}' not found. "
            f"Available profiles: {', '.join(available)}"
        )


class NoRelativePathError(ConfigError):
    """Raised when no relative path from base to path can be derived."""

    def __init__(self, path: PurePath, base: PurePath) -> None:
        self.path = path
        self.base = base
        super().__init__(f"No relative path from {base} to {path}")


class CanonicalizationError(ConfigError):
    """Raised when a path cannot be resolved on the filesystem."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot canonicalize {path}: {reason}")


class InvalidOptionError(ConfigError):
    """Raised when a command-line option value is not recognized."""

    def __init__(self, option: str, value: str, choices: list[str]) -> None:
        self.option = option
        self.value = value
        self.choices = choices
        super().__init__(
            f"Invalid value for {option}: '{value}'. "
            f"Expected one of: {', '.join(choices)}"
        )
