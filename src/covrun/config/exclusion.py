"""Glob-style file exclusion with lazily compiled patterns."""

import logging
import re
import threading
from collections.abc import Sequence
from typing import Any

log = logging.getLogger(__name__)

WILDCARD = "*"


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Compile an exclusion glob into an anchored regular expression.

    `*` matches any sequence of characters, including path separators.
    Everything else is literal.

    Examples:
        >>> bool(compile_glob("*/lib.rs").fullmatch("src/lib.rs"))
        True
        >>> bool(compile_glob("*/lib.rs").fullmatch("lib.rs"))
        False
    """
    literal = ".*".join(re.escape(segment) for segment in pattern.split(WILDCARD))
    return re.compile(rf"^{literal}\Z", re.DOTALL)


def compile_globs(patterns: Sequence[str]) -> list[re.Pattern[str]]:
    return [compile_glob(pattern) for pattern in patterns]


class ExclusionMatcher:
    """Cache of compiled exclusion patterns kept in step with a raw list.

    The raw glob list lives on the owning profile and may grow after the
    matcher is created. Every query first brings the cache back to the
    same length as the raw list, compiling only the patterns it has not
    seen yet. The check-compile-read sequence holds a lock so a profile can
    be shared between threads.
    """

    def __init__(self) -> None:
        self._compiled: list[re.Pattern[str]] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._compiled)

    # A copied profile may change its raw list independently, so copies
    # start with an empty cache of their own.
    def __copy__(self) -> "ExclusionMatcher":
        return ExclusionMatcher()

    def __deepcopy__(self, memo: dict[int, Any]) -> "ExclusionMatcher":
        return ExclusionMatcher()

    def _sync(self, raw_patterns: Sequence[str]) -> None:
        if len(self._compiled) < len(raw_patterns):
            pending = raw_patterns[len(self._compiled):]
            log.debug("Compiling %d exclusion pattern(s)", len(pending))
            self._compiled.extend(compile_globs(pending))
        elif len(self._compiled) > len(raw_patterns):
            # Raw list shrank, so the cache no longer lines up with it
            log.debug("Exclusion patterns removed, recompiling all")
            self._compiled = compile_globs(raw_patterns)

    def is_excluded(self, raw_patterns: Sequence[str], candidate: str) -> bool:
        """Check whether `candidate` fully matches any exclusion pattern.

        Args:
            raw_patterns: Current raw glob list of the owning profile.
            candidate: Normalized relative path, POSIX separators.

        Returns:
            True if any pattern matches the whole candidate string.
        """
        with self._lock:
            self._sync(raw_patterns)
            return any(regex.match(candidate) for regex in self._compiled)
