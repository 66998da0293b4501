"""CLI for covrun using Click.

Registers the coverage run options, resolves the effective profile and
exposes the profile queries as subcommands.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import click

from covrun.config import (
    CiService,
    ConfigError,
    OutputFormat,
    RunType,
    list_profiles,
    resolve,
    resolve_config_path,
)


def _choices(enum_cls: type) -> click.Choice:
    return click.Choice([member.value for member in enum_cls], case_sensitive=False)


def _configure_logging(verbose: bool, debug: bool) -> None:
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@click.group()
@click.option("--manifest-path", type=click.Path(), help="Path to Cargo.toml")
@click.option(
    "-r", "--root", help="Project root, relative paths resolve from the current dir"
)
@click.option(
    "-c",
    "--config",
    type=click.Path(dir_okay=False),
    default=None,
    help="Config file with named profiles",
)
@click.option("--profile", default=None, help="Profile to use from the config file")
@click.option(
    "--run-types", multiple=True, type=_choices(RunType), help="Test types to run"
)
@click.option("-i", "--ignored", is_flag=True, help="Also run ignored tests")
@click.option("--ignore-tests", is_flag=True, help="Ignore lines of test functions")
@click.option("--ignore-panics", is_flag=True, help="Ignore panic macros in tests")
@click.option("--force-clean", is_flag=True, help="Clean project before building")
@click.option("-v", "--verbose", is_flag=True, help="Show extra output")
@click.option("--debug", is_flag=True, help="Show debugging information")
@click.option("--count", is_flag=True, help="Count hits in coverage")
@click.option("-l", "--line", is_flag=True, help="Line coverage")
@click.option("-b", "--branch", is_flag=True, help="Branch coverage")
@click.option("--coveralls", metavar="KEY", help="Coveralls key")
@click.option("--ciserver", type=_choices(CiService), help="CI server being used")
@click.option("--report-uri", metavar="URI", help="URI to send report to")
@click.option("-f", "--forward", is_flag=True, help="Forward unexpected signals")
@click.option("--all-features", is_flag=True, help="Build all available features")
@click.option("--no-default-features", is_flag=True, help="Do not build default features")
@click.option("--features", multiple=True, help="Features to be included in the build")
@click.option(
    "-Z", "unstable_features", multiple=True, help="Unstable cargo features"
)
@click.option("--all", is_flag=True, help="Alias for --workspace")
@click.option("--workspace", is_flag=True, help="Test all packages in the workspace")
@click.option("-p", "--packages", multiple=True, help="Packages to run tests for")
@click.option("-e", "--exclude", multiple=True, help="Packages to exclude")
@click.option(
    "--exclude-files",
    multiple=True,
    help="Exclude files from coverage, supports * wildcard",
)
@click.option("-t", "--timeout", type=int, default=None, help="Test timeout in seconds")
@click.option("--release", is_flag=True, help="Build in release mode")
@click.option("--no-run", is_flag=True, help="Compile tests but don't run coverage")
@click.option("--locked", is_flag=True, help="Do not update Cargo.lock")
@click.option("--frozen", is_flag=True, help="Do not update Cargo.lock or caches")
@click.option("--offline", is_flag=True, help="Run without accessing the network")
@click.option("--target-dir", type=click.Path(file_okay=False), help="Build directory")
@click.option("-o", "--out", multiple=True, type=_choices(OutputFormat), help="Report formats")
@click.option("--output-dir", type=click.Path(file_okay=False), help="Report directory")
@click.pass_context
def cli(ctx: click.Context, **options: Any) -> None:
    """covrun - Run configuration for cargo test coverage."""
    # Ensure ctx.obj exists
    ctx.ensure_object(dict)

    _configure_logging(options["verbose"], options["debug"])

    # Resolution happens in the subcommands, which may add test arguments
    ctx.obj["inputs"] = options


@cli.command()
@click.argument("test_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def show(ctx: click.Context, test_args: tuple[str, ...]) -> None:
    """Print the resolved profile as JSON.

    Arguments after -- are forwarded to the test executables.

    Examples:

        \b
        # Profile from the command line only
        covrun --exclude-files '*/generated/*' show

        \b
        # First profile in a config file
        covrun -c covrun.toml show

        \b
        # Named profile, with test arguments
        covrun -c covrun.toml --profile ci show -- --nocapture
    """
    inputs = {**ctx.obj["inputs"], "args": test_args}

    try:
        config = resolve(inputs)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    click.echo(config.model_dump_json(indent=2))


@cli.command()
@click.option(
    "--strict",
    is_flag=True,
    help="Exit with status 1 if any path is excluded",
)
@click.argument("paths", nargs=-1, required=True, type=click.Path(path_type=Path))
@click.pass_context
def check(ctx: click.Context, strict: bool, paths: tuple[Path, ...]) -> None:
    """Report whether source files are excluded from coverage.

    Paths are matched relative to the project root (--root, or the current
    directory).

    Examples:

        \b
        covrun --exclude-files '*/lib.rs' check src/lib.rs src/main.rs
    """
    try:
        config = resolve(ctx.obj["inputs"])
        results = [(path, config.exclude_path(path)) for path in paths]
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for path, excluded in results:
        click.echo(f"{'excluded' if excluded else 'included'}  {path}")

    if strict and any(excluded for _, excluded in results):
        sys.exit(1)


@cli.command()
@click.pass_context
def profiles(ctx: click.Context) -> None:
    """List the profiles defined in the config file given with -c."""
    config_file = ctx.obj["inputs"]["config"]
    if config_file is None:
        click.echo("Error: no config file given (use -c/--config)", err=True)
        sys.exit(1)

    try:
        names = list_profiles(resolve_config_path(config_file, Path.cwd()))
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for name in names:
        click.echo(name)


if __name__ == "__main__":
    cli()
