"""QueryTorque Joins CLI.

Command-line interface for validating SQL join tutorials.

Commands:
    qt-joins validate [CATALOG.md]      Run every query pair, report equivalence
    qt-joins catalog [CATALOG.md]       List the entries parsed from a catalog
    qt-joins fixtures                   Load a fixture and check its integrity
"""

import logging
import sys
from typing import Optional

import click
from rich.console import Console

from qt_joins import __version__
from qt_joins.catalog import load_catalog
from qt_joins.config import get_settings
from qt_joins.errors import CatalogError, FixtureIntegrityError, FixtureLoadError
from qt_joins.execution import DuckDBExecutor
from qt_joins.fixtures import FixtureLoader, export_fixture
from qt_joins.renderers import render_catalog, render_fixture, render_report, report_json
from qt_joins.validation import CatalogValidator

console = Console()

# Exit code for inputs that make the whole run meaningless
EXIT_INPUT_ERROR = 2


@click.group()
@click.version_option(version=__version__, prog_name="qt-joins")
@click.option("--log-level", default=None, help="Logging level (default: QT_JOINS_LOG_LEVEL or WARNING)")
def cli(log_level: Optional[str]):
    """QueryTorque Joins - normalized vs denormalized SQL validation CLI."""
    level = (log_level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )


@cli.command()
@click.argument("catalog", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--fixtures", "-f", type=click.Path(exists=True, file_okay=False), help="Directory of fixture CSV files (default: built-in rows)")
@click.option("--entry", "-e", "entries", multiple=True, help="Only validate these entry ids (repeatable)")
@click.option("--tolerance", type=float, default=None, help="Absolute tolerance for numeric comparison")
@click.option("--verbose", "-v", is_flag=True, help="Show details for passing entries too")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def validate(
    catalog: Optional[str],
    fixtures: Optional[str],
    entries: tuple,
    tolerance: Optional[float],
    verbose: bool,
    output_json: bool,
):
    """Validate that every normalized/denormalized query pair agrees.

    Without CATALOG the bundled supermarket tutorial is used. Exits 0 when
    every entry passes (or is marked not representable), 1 when any entry
    fails or errors, 2 when the catalog or fixture cannot be loaded.

    Examples:
        qt-joins validate
        qt-joins validate tutorial.md --fixtures fixtures/
        qt-joins validate -e which-customers-have-never-made-a-purchase -v
    """
    settings = get_settings()
    catalog_path = catalog or settings.catalog_path
    fixtures_path = fixtures or settings.fixtures_path

    try:
        query_catalog = load_catalog(catalog_path)
        if entries:
            query_catalog = query_catalog.select(list(entries))
    except (CatalogError, KeyError) as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(EXIT_INPUT_ERROR)

    try:
        with CatalogValidator(
            fixtures_path=fixtures_path,
            database=settings.database,
            dialect=settings.dialect,
            float_tolerance=tolerance if tolerance is not None else settings.float_tolerance,
            max_differences=settings.max_differences,
        ) as validator:
            report = validator.validate_catalog(query_catalog)
    except FixtureIntegrityError as e:
        console.print(f"[red]Error: {e}[/red]")
        for violation in e.violations:
            console.print(f"  [red]-[/red] {violation}")
        sys.exit(EXIT_INPUT_ERROR)
    except FixtureLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(EXIT_INPUT_ERROR)

    if output_json:
        click.echo(report_json(report))
    else:
        render_report(console, report, verbose=verbose)

    sys.exit(report.exit_code)


@cli.command()
@click.argument("catalog", required=False, type=click.Path(exists=True, dir_okay=False))
@click.option("--verbose", "-v", is_flag=True, help="Show the SQL of every entry")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def catalog(catalog: Optional[str], verbose: bool, output_json: bool):
    """List the entries parsed from a markdown catalog.

    Examples:
        qt-joins catalog
        qt-joins catalog tutorial.md -v
    """
    import json

    try:
        query_catalog = load_catalog(catalog or get_settings().catalog_path)
    except CatalogError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(EXIT_INPUT_ERROR)

    if output_json:
        payload = {
            "source": query_catalog.source,
            "entries": [entry.to_dict() for entry in query_catalog],
        }
        click.echo(json.dumps(payload, indent=2))
        return

    render_catalog(console, query_catalog, verbose=verbose)


@cli.command()
@click.option("--fixtures", "-f", type=click.Path(exists=True, file_okay=False), help="Directory of fixture CSV files (default: built-in rows)")
@click.option("--export", "export_dir", type=click.Path(file_okay=False), help="Write the built-in fixture as CSV files to this directory")
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def fixtures(fixtures: Optional[str], export_dir: Optional[str], output_json: bool):
    """Load a fixture, show row counts and run integrity checks.

    Exits 2 when the fixture cannot be loaded or violates the schema
    invariants.

    Examples:
        qt-joins fixtures
        qt-joins fixtures --export ./fixtures
        qt-joins fixtures --fixtures ./fixtures
    """
    import json

    if export_dir:
        written = export_fixture(export_dir)
        if not output_json:
            for path in written:
                console.print(f"[green]Wrote[/green] {path}")

    fixtures_path = fixtures or get_settings().fixtures_path
    try:
        with DuckDBExecutor() as db:
            summary = FixtureLoader(db, check=False).load(fixtures_path)
    except FixtureLoadError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(EXIT_INPUT_ERROR)

    if output_json:
        click.echo(json.dumps(summary.to_dict(), indent=2))
    else:
        render_fixture(console, summary)

    if not summary.is_consistent:
        sys.exit(EXIT_INPUT_ERROR)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
