"""covrun - Run configuration for cargo test coverage."""

from covrun.config import CoverageConfig, resolve

__all__ = [
    "CoverageConfig",
    "resolve",
]
