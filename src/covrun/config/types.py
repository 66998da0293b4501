"""Enumerations used by coverage profiles and their CLI parsers."""

from enum import Enum

from .exceptions import InvalidOptionError


class RunType(str, Enum):
    """Kinds of test targets to collect coverage on."""

    TESTS = "Tests"
    DOCTESTS = "Doctests"
    BENCHMARKS = "Benchmarks"
    EXAMPLES = "Examples"


class OutputFormat(str, Enum):
    """Report formats that can be generated after a run."""

    JSON = "Json"
    TOML = "Toml"
    STDOUT = "Stdout"
    XML = "Xml"
    HTML = "Html"
    LCOV = "Lcov"


class CiService(str, Enum):
    """CI providers recognized when uploading to coveralls."""

    TRAVIS = "travis-ci"
    TRAVIS_PRO = "travis-pro"
    CIRCLE = "circle-ci"
    SEMAPHORE = "semaphore"
    JENKINS = "jenkins"
    CODESHIP = "codeship"
    GITHUB = "github"


def _parse_choice(enum_cls: type[Enum], option: str, value: str) -> Enum:
    # Case-insensitive on the enum value, e.g. "xml" -> OutputFormat.XML
    for member in enum_cls:
        if member.value.lower() == value.strip().lower():
            return member
    raise InvalidOptionError(option, value, [m.value for m in enum_cls])


def parse_run_type(value: str) -> RunType:
    return _parse_choice(RunType, "--run-types", value)


def parse_output_format(value: str) -> OutputFormat:
    return _parse_choice(OutputFormat, "--out", value)


def parse_ci_service(value: str) -> CiService:
    return _parse_choice(CiService, "--ciserver", value)
