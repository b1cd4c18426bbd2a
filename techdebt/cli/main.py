"""Command-line interface for the tech-debt scanner.

Exit codes:
    0  no CRITICAL or HIGH findings at or above the threshold
    1  at least one CRITICAL finding
    2  at least one HIGH finding, no CRITICAL
    3  invalid invocation (bad flag value, missing directory, bad config)
"""

import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from .. import __version__
from ..config import ScanConfig, load_scan_config
from ..errors import EXIT_INVALID_INVOCATION, InvalidRootError, handle_exception
from ..fixers import AutoFixer, FixStatus
from ..reporters import JSONReporter, MarkdownReporter, TextReporter
from ..rules.base import Severity
from ..scan_logging import setup_logging
from ..scanner import Scanner
from .output import OutputConfig, OutputManager


class TechdebtGroup(click.Group):
    """Command group that reports usage errors with the invalid-invocation code."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as e:
            e.exit_code = EXIT_INVALID_INVOCATION
            raise

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = EXIT_INVALID_INVOCATION
            raise


def _fail(error: Exception, output: OutputManager, verbose: bool = False) -> NoReturn:
    """Print a fatal error to stderr and exit with its code."""
    message, exit_code = handle_exception(
        error, use_color=output.config.use_color, verbose=verbose
    )
    output.error(message)
    sys.exit(exit_code)


def common_options(f: Any) -> Any:
    """Options shared by every scanning command."""
    f = click.option(
        "--config",
        "config_file",
        type=click.Path(dir_okay=False),
        help="Configuration file (default: ROOT/.techdebt.json)",
    )(f)
    f = click.option(
        "--duplicates", is_flag=True, help="Enable duplicate code detection (slower)"
    )(f)
    f = click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")(f)
    f = click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")(f)
    f = click.option("--no-color", is_flag=True, help="Disable colored output")(f)
    f = click.option(
        "--log-file",
        type=click.Path(dir_okay=False, path_type=Path),
        help="Also write debug logs to this file (rotated at 10 MB)",
    )(f)
    f = click.option(
        "--log-format",
        type=click.Choice(["text", "json"]),
        default="text",
        show_default=True,
        help="Format of --log-file entries",
    )(f)
    return f


def _load_config(root: str, config_file: str | None, **overrides: Any) -> ScanConfig:
    """Validate the root and resolve its configuration."""
    if not Path(root).is_dir():
        raise InvalidRootError(root)
    return load_scan_config(
        Path(root), Path(config_file) if config_file else None, **overrides
    )


@click.group(cls=TechdebtGroup)
@click.version_option(version=__version__, prog_name="techdebt")
def cli() -> None:
    """Tech-debt scanner: find oversized files, dead code, debt markers,
    type gaps, stale dependencies and duplicated blocks."""


@cli.command()
@click.argument("root", default=".", required=False)
@common_options
@click.option("--fix", is_flag=True, help="Run safe auto-fixes after reporting")
@click.option("--summary", is_flag=True, help="Show only the summary")
@click.option(
    "--json", "json_output", is_flag=True, help="Output the summary as JSON (implies --summary)"
)
@click.option(
    "--threshold",
    metavar="LEVEL",
    help="Only count issues at or above LEVEL (critical|high|medium|low)",
)
@click.option("--workers", type=int, help="Rules to run concurrently (default: 4)")
def scan(
    root,
    config_file,
    duplicates,
    verbose,
    quiet,
    no_color,
    log_file,
    log_format,
    fix,
    summary,
    json_output,
    threshold,
    workers,
):
    """Scan ROOT (default: current directory) for technical debt."""
    output = OutputManager(OutputConfig.from_flags(verbose, quiet, no_color))

    if quiet and verbose:
        output.error("Error: --quiet and --verbose are mutually exclusive")
        sys.exit(EXIT_INVALID_INVOCATION)

    setup_logging(quiet=quiet, verbose=verbose, log_file=log_file, log_format=log_format)

    try:
        level = Severity.parse(threshold) if threshold is not None else None
        scanner = Scanner(
            Path(root),
            _load_config(root, config_file, workers=workers),
            scanned_path=root,
        )
        report = scanner.scan(threshold=level, duplicates=duplicates)
    except Exception as e:
        _fail(e, output, verbose)

    if json_output:
        JSONReporter(stream=sys.stdout).report(report)
    else:
        TextReporter(
            stream=sys.stdout,
            use_color=output.config.use_color,
            program="techdebt scan",
        ).report(report, summary_only=summary)

    if fix and not json_output:
        _run_fixes(scanner, output)

    sys.exit(report.exit_code)


def _run_fixes(scanner: Scanner, output: OutputManager) -> None:
    output.info("Auto-fix mode enabled...")
    fixer = AutoFixer(
        scanner.root, scanner.config.auto_fix, timeout=scanner.config.external_timeout
    )
    for result in fixer.run(scanner.files):
        if result.status == FixStatus.APPLIED:
            message = f"{result.tool}: processed {result.files} files"
            if result.detail:
                message += f" ({result.detail})"
            output.success(message)
        elif result.status == FixStatus.SKIPPED:
            output.skip(f"{result.tool}: {result.detail}")
        else:
            output.warning(f"{result.tool}: {result.detail}")
    output.info("Auto-fix complete. Re-run scan to verify.")


@cli.command()
@click.argument("root", default=".", required=False)
@common_options
@click.option(
    "--output",
    "output_file",
    type=click.Path(dir_okay=False, writable=True),
    help="Write the report to a file instead of stdout",
)
def report(
    root,
    config_file,
    duplicates,
    verbose,
    quiet,
    no_color,
    log_file,
    log_format,
    output_file,
):
    """Write a markdown technical-debt report for ROOT."""
    output = OutputManager(OutputConfig.from_flags(verbose, quiet, no_color))

    if quiet and verbose:
        output.error("Error: --quiet and --verbose are mutually exclusive")
        sys.exit(EXIT_INVALID_INVOCATION)

    setup_logging(quiet=quiet, verbose=verbose, log_file=log_file, log_format=log_format)

    try:
        scanner = Scanner(Path(root), _load_config(root, config_file), scanned_path=root)
        scan_report = scanner.scan(duplicates=duplicates)
    except Exception as e:
        _fail(e, output, verbose)

    if output_file:
        try:
            with open(output_file, "w", encoding="utf-8") as f:
                MarkdownReporter(stream=f).report(scan_report)
        except OSError as e:
            _fail(e, output, verbose)
        output.success(f"Report written to {output_file}")
    else:
        MarkdownReporter(stream=sys.stdout).report(scan_report)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
