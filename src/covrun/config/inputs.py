"""Translate command-line style inputs into profile keyword arguments.

Inputs are a flat mapping keyed by option name (the Click parameter
names). A key that is missing, `None`, `False` or an empty sequence counts
as "not given" so that environment variables and field defaults can fill
the gap.
"""

from collections.abc import Mapping
from datetime import timedelta
from pathlib import Path
from typing import Any

from .types import parse_ci_service, parse_output_format, parse_run_type

DEFAULT_MANIFEST = "Cargo.toml"

# Presence flags that map one-to-one onto a profile field
FLAG_FIELDS: dict[str, str] = {
    "ignored": "run_ignored",
    "ignore_tests": "ignore_tests",
    "ignore_panics": "ignore_panics",
    "force_clean": "force_clean",
    "count": "count",
    "forward": "forward_signals",
    "all_features": "all_features",
    "no_default_features": "no_default_features",
    "release": "release",
    "no_run": "no_run",
    "locked": "locked",
    "frozen": "frozen",
    "offline": "offline",
}

# Repeated string options that map one-to-one onto a list field
LIST_FIELDS: dict[str, str] = {
    "packages": "packages",
    "exclude": "exclude",
    "exclude_files": "excluded_files_raw",
    "features": "features",
    "unstable_features": "unstable_features",
    "args": "varargs",
}

# Single string options that map one-to-one onto a field
VALUE_FIELDS: dict[str, str] = {
    "root": "root",
    "coveralls": "coveralls",
    "report_uri": "report_uri",
}


def is_present(args: Mapping[str, Any], key: str) -> bool:
    return bool(args.get(key))


def get_list(args: Mapping[str, Any], key: str) -> list[str]:
    value = args.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def get_path(args: Mapping[str, Any], key: str, cwd: Path) -> Path | None:
    value = args.get(key)
    if not value:
        return None
    return cwd / value


def get_timeout(args: Mapping[str, Any]) -> timedelta | None:
    value = args.get("timeout")
    if value is None:
        return None
    return timedelta(seconds=int(value))


def get_line_cov(args: Mapping[str, Any]) -> bool:
    # Line coverage stays on unless only branch coverage was asked for
    return is_present(args, "line") or not is_present(args, "branch")


def get_branch_cov(args: Mapping[str, Any]) -> bool:
    return is_present(args, "branch")


def profile_kwargs_from_cli(args: Mapping[str, Any], cwd: Path) -> dict[str, Any]:
    """Collect profile fields for the options that were actually given.

    Args:
        args: Flat mapping of option name to flag, value or values.
        cwd: Directory that relative path options are joined onto.

    Returns:
        Keyword arguments for the profile model.

    Raises:
        InvalidOptionError: If a run type, output format or CI service is
            not recognized.
    """
    kwargs: dict[str, Any] = {}

    for option, field_name in FLAG_FIELDS.items():
        if is_present(args, option):
            kwargs[field_name] = True

    for option, field_name in LIST_FIELDS.items():
        if values := get_list(args, option):
            kwargs[field_name] = values

    for option, field_name in VALUE_FIELDS.items():
        if (value := args.get(option)) is not None:
            kwargs[field_name] = value

    debug = is_present(args, "debug")
    if debug:
        kwargs["debug"] = True
    if debug or is_present(args, "verbose"):
        kwargs["verbose"] = True

    if is_present(args, "all") or is_present(args, "workspace"):
        kwargs["all"] = True

    if is_present(args, "line") or is_present(args, "branch"):
        kwargs["line_coverage"] = get_line_cov(args)
        kwargs["branch_coverage"] = get_branch_cov(args)

    if run_types := get_list(args, "run_types"):
        kwargs["run_types"] = [parse_run_type(v) for v in run_types]

    if outputs := get_list(args, "out"):
        kwargs["generate"] = [parse_output_format(v) for v in outputs]

    if ci := args.get("ciserver"):
        kwargs["ci_tool"] = parse_ci_service(ci)

    if (manifest := get_path(args, "manifest_path", cwd)) is not None:
        kwargs["manifest"] = manifest

    if (output_dir := get_path(args, "output_dir", cwd)) is not None:
        kwargs["output_directory"] = output_dir

    if (target_dir := get_path(args, "target_dir", cwd)) is not None:
        kwargs["target_dir"] = target_dir

    if (timeout := get_timeout(args)) is not None:
        kwargs["test_timeout"] = timeout

    return kwargs
