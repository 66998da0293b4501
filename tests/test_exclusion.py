"""Tests for config/exclusion.py glob compilation and the matcher cache."""

import threading

import pytest

from covrun.config import ExclusionMatcher, compile_glob, compile_globs


class TestCompileGlob:
    """Tests for compile_glob."""

    @pytest.mark.parametrize(
        ("candidate", "expected"),
        [
            ("src/module/file.rs", True),
            ("module.rs", True),
            ("module", True),
            ("src/mod.rs", False),
            ("unrelated.rs", False),
        ],
    )
    def test_surrounding_wildcards(self, candidate: str, expected: bool) -> None:
        """*module* matches any path containing module."""
        assert bool(compile_glob("*module*").match(candidate)) is expected

    @pytest.mark.parametrize(
        ("candidate", "expected"),
        [
            ("src/lib.rs", True),
            ("a/b/lib.rs", True),
            ("lib.rs", False),
            ("src/notlib.rs", False),
            ("src/mod.rs", False),
        ],
    )
    def test_leading_directory_wildcard(self, candidate: str, expected: bool) -> None:
        """*/lib.rs needs a separator before the file name."""
        assert bool(compile_glob("*/lib.rs").match(candidate)) is expected

    def test_no_wildcard_is_anchored(self) -> None:
        """A pattern without * only matches the exact string."""
        regex = compile_glob("src/lib.rs")
        assert regex.match("src/lib.rs")
        assert not regex.match("src/lib.rs.bak")
        assert not regex.match("crate/src/lib.rs")

    def test_metacharacters_are_literal(self) -> None:
        """Regex metacharacters outside * are escaped."""
        regex = compile_glob("src/[a-z]+.rs")
        assert regex.match("src/[a-z]+.rs")
        assert not regex.match("src/abc.rs")

        dot = compile_glob("lib.rs")
        assert not dot.match("libxrs")

    def test_empty_pattern_matches_empty_string(self) -> None:
        """The empty pattern only matches the empty string."""
        regex = compile_glob("")
        assert regex.match("")
        assert not regex.match("a")

    def test_compile_globs_keeps_order(self) -> None:
        """compile_globs returns one regex per pattern, in order."""
        regexes = compile_globs(["a*", "b*"])
        assert [r.pattern for r in regexes] == [
            compile_glob("a*").pattern,
            compile_glob("b*").pattern,
        ]


class TestExclusionMatcher:
    """Tests for the lazily synced ExclusionMatcher."""

    def test_empty_cache_until_queried(self) -> None:
        """Nothing is compiled before the first query."""
        matcher = ExclusionMatcher()
        assert len(matcher) == 0

        matcher.is_excluded(["*.rs"], "lib.rs")
        assert len(matcher) == 1

    def test_no_patterns_excludes_nothing(self) -> None:
        """An empty pattern list never matches."""
        matcher = ExclusionMatcher()
        assert not matcher.is_excluded([], "src/module/file.rs")
        assert not matcher.is_excluded([], "")

    def test_appended_patterns_are_compiled(self) -> None:
        """Patterns appended after a query are picked up on the next one."""
        raw = ["*/lib.rs"]
        matcher = ExclusionMatcher()
        assert not matcher.is_excluded(raw, "src/main.rs")

        raw.append("*main*")
        assert matcher.is_excluded(raw, "src/main.rs")
        assert len(matcher) == 2

    def test_growth_keeps_earlier_results(self) -> None:
        """Earlier patterns still match after the list grows."""
        raw = ["*/lib.rs"]
        matcher = ExclusionMatcher()
        assert matcher.is_excluded(raw, "src/lib.rs")

        raw.extend(["*bench*", "*example*"])
        assert matcher.is_excluded(raw, "src/lib.rs")
        assert not matcher.is_excluded(raw, "src/main.rs")
        assert matcher.is_excluded(raw, "benches/bench_a.rs")

    def test_shrunk_list_recompiles(self) -> None:
        """Removing patterns rebuilds the cache from the raw list."""
        raw = ["*a*", "*b*"]
        matcher = ExclusionMatcher()
        assert matcher.is_excluded(raw, "b")

        raw.pop()
        assert not matcher.is_excluded(raw, "b")
        assert len(matcher) == 1

    def test_concurrent_queries_compile_once(self) -> None:
        """Concurrent first queries leave exactly one compiled entry each."""
        raw = [f"*pattern{i}*" for i in range(50)]
        matcher = ExclusionMatcher()
        results: list[bool] = []

        def query() -> None:
            results.append(matcher.is_excluded(raw, "src/pattern7/file.rs"))

        threads = [threading.Thread(target=query) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(matcher) == len(raw)
        assert results == [True] * 8
