"""Command line entrypoint: ``brainmap show`` and the ``make-*`` scaffolders."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import asdict
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from brainmap.config import BrainSettings
from brainmap.errors import BrainMapError
from brainmap.introspect.walker import build_brain_map
from brainmap.report.renderer import ReportRenderer
from brainmap.report.terminal import terminal_columns, write_lines
from brainmap.scaffold.generator import ScaffoldGenerator

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Map and scaffold Domain/Process/Task/Query brain packages.",
)
console = Console()
err_console = Console(stderr=True)

ROOT_OPTION = typer.Option(
    None,
    "--root",
    help="Brain package directory (default: $BRAIN_ROOT or app/brain).",
    file_okay=False,
)
SOURCE_ROOT_OPTION = typer.Option(
    None,
    "--source-root",
    help="Import root for brain modules (default: parent of --root).",
    file_okay=False,
)
TEST_DIR_OPTION = typer.Option(
    None,
    "--test-dir",
    help="Directory searched for <Name>Test.py files.",
    file_okay=False,
)
MIN_COVERAGE_OPTION = typer.Option(
    None,
    "--min-coverage",
    help="Minimum test coverage percentage; 0 disables the check.",
    min=0.0,
    max=100.0,
)
WIDTH_OPTION = typer.Option(None, "--width", help="Override the terminal width.", min=0)
COVERAGE_OPTION = typer.Option(True, "--coverage/--no-coverage", help="Show TESTED/NOTEST tags and the summary.")
EXPAND_OPTION = typer.Option(False, "--expand", help="List each process's task chain below it.")
JSON_OPTION = typer.Option(False, "--json", help="Print the domain map as JSON instead of the report.")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging.")
WITH_TEST_OPTION = typer.Option(
    False,
    "--with-test",
    help="Also create a <Name>Test.py stub (add \"*Test.py\" to pytest's python_files to collect it).",
)
DOMAIN_ARGUMENT = typer.Argument(..., help="Domain package name, e.g. billing.")
NAME_ARGUMENT = typer.Argument(..., help="CapWords class name.")


@app.command("show")
def show(
    root: Path | None = ROOT_OPTION,
    source_root: Path | None = SOURCE_ROOT_OPTION,
    test_dir: Path | None = TEST_DIR_OPTION,
    min_coverage: float | None = MIN_COVERAGE_OPTION,
    width: int | None = WIDTH_OPTION,
    *,
    coverage: bool = COVERAGE_OPTION,
    expand: bool = EXPAND_OPTION,
    as_json: bool = JSON_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print the brain map with coverage tags and the coverage verdict."""
    _configure_logging(verbose=verbose)
    settings = _settings(
        root=root,
        source_root=source_root,
        test_directory=test_dir,
        test_minimum_coverage=min_coverage,
        show_coverage=coverage,
    )

    try:
        domains, context = build_brain_map(settings)
        domains.sort(key=lambda domain: domain.name)
        if as_json:
            typer.echo(json.dumps([asdict(domain) for domain in domains], indent=2))
            return
        renderer = ReportRenderer(show_coverage=settings.show_coverage, expand_processes=expand)
        report = renderer.render(
            domains,
            context.coverage,
            terminal_columns() if width is None else width,
            settings.test_minimum_coverage,
        )
    except BrainMapError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(1) from exc

    write_lines(console, report.all_lines)
    if report.coverage is not None and report.coverage.passed is False:
        raise typer.Exit(1)


@app.command("make-process")
def make_process(
    domain: str = DOMAIN_ARGUMENT,
    name: str = NAME_ARGUMENT,
    root: Path | None = ROOT_OPTION,
    task: list[str] | None = typer.Option(None, "--task", help="Dotted task identifier (repeatable)."),
    test_dir: Path | None = TEST_DIR_OPTION,
    *,
    chain: bool = typer.Option(False, "--chain", help="Run the tasks as a chain."),
    with_test: bool = WITH_TEST_OPTION,
) -> None:
    """Create a process module in DOMAIN."""
    generator = ScaffoldGenerator(_settings(root=root, test_directory=test_dir))
    _scaffold(
        generator,
        domain,
        name,
        lambda: generator.make_process(domain, name, tasks=task or (), chain=chain),
        with_test=with_test,
    )


@app.command("make-task")
def make_task(
    domain: str = DOMAIN_ARGUMENT,
    name: str = NAME_ARGUMENT,
    root: Path | None = ROOT_OPTION,
    test_dir: Path | None = TEST_DIR_OPTION,
    *,
    queued: bool = typer.Option(False, "--queued", help="Mark the task as queueable."),
    with_test: bool = WITH_TEST_OPTION,
) -> None:
    """Create a task module in DOMAIN."""
    generator = ScaffoldGenerator(_settings(root=root, test_directory=test_dir))
    _scaffold(
        generator,
        domain,
        name,
        lambda: generator.make_task(domain, name, queued=queued),
        with_test=with_test,
    )


@app.command("make-query")
def make_query(
    domain: str = DOMAIN_ARGUMENT,
    name: str = NAME_ARGUMENT,
    root: Path | None = ROOT_OPTION,
    test_dir: Path | None = TEST_DIR_OPTION,
    *,
    with_test: bool = WITH_TEST_OPTION,
) -> None:
    """Create a query module in DOMAIN."""
    generator = ScaffoldGenerator(_settings(root=root, test_directory=test_dir))
    _scaffold(
        generator,
        domain,
        name,
        lambda: generator.make_query(domain, name),
        with_test=with_test,
    )


def _scaffold(
    generator: ScaffoldGenerator,
    domain: str,
    name: str,
    create: Callable[[], Path],
    *,
    with_test: bool,
) -> None:
    try:
        path = create()
        typer.echo(f"Created {path}")
        if with_test:
            typer.echo(f"Created {generator.make_test(domain, name, path)}")
    except BrainMapError as exc:
        typer.echo(f"ERROR: {exc}", err=True)
        raise typer.Exit(1) from exc


def _settings(**overrides: object) -> BrainSettings:
    try:
        return BrainSettings.from_env(**overrides)
    except ValidationError as exc:
        typer.echo(f"ERROR: invalid configuration\n{exc}", err=True)
        raise typer.Exit(2) from exc


def _configure_logging(*, verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


if __name__ == "__main__":
    app()
