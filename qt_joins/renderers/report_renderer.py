"""Rich console rendering of catalog validation reports."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from ..catalog import QueryCatalog
from ..fixtures import FixtureSummary
from ..validation.schemas import CatalogReport, EntryResult, EntryStatus, json_safe

STATUS_COLORS = {
    EntryStatus.PASS: "green",
    EntryStatus.FAIL: "red",
    EntryStatus.ERROR: "red",
    EntryStatus.NOT_REPRESENTABLE: "cyan",
}


def report_json(report: CatalogReport) -> str:
    """Serialize a report to stable, pretty-printed JSON."""
    return json.dumps(report.to_dict(), indent=2, sort_keys=True)


def _format_row(row: dict[str, Any]) -> str:
    return ", ".join(f"{k}={json_safe(v)!r}" for k, v in row.items())


def _has_details(result: EntryResult) -> bool:
    equivalence = result.equivalence
    diff = equivalence is not None and bool(
        equivalence.missing_rows or equivalence.extra_rows or equivalence.value_differences
    )
    return bool(result.errors or result.warnings or result.normalized_only_rows or diff)


def _render_details(console: Console, result: EntryResult) -> None:
    for error in result.errors:
        console.print(f"   [red]Error:[/red] {error}")
    for warning in result.warnings:
        console.print(f"   [yellow]Warning:[/yellow] {warning}")

    equivalence = result.equivalence
    if equivalence is not None:
        for row in equivalence.missing_rows:
            console.print(f"   [red]- normalized only:[/red] {_format_row(row)}")
        for row in equivalence.extra_rows:
            console.print(f"   [red]+ denormalized only:[/red] {_format_row(row)}")
        for diff in equivalence.value_differences:
            console.print(
                f"   [red]~ row {diff.row_index}, column '{diff.column}':[/red] "
                f"{json_safe(diff.normalized_value)!r} vs {json_safe(diff.denormalized_value)!r}"
            )

    for row in result.normalized_only_rows:
        console.print(f"   [cyan]not representable:[/cyan] {_format_row(row)}")


def render_report(console: Console, report: CatalogReport, verbose: bool = False) -> None:
    """Print a catalog report.

    Non-passing entries always show their diff; ``verbose`` adds details
    for passing and not-representable entries too.
    """
    console.print(f"\n[bold]Catalog:[/bold] {report.catalog}")
    console.print(f"[dim]Fixture: {report.fixture}[/dim]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", width=3)
    table.add_column("Entry", width=44)
    table.add_column("Status", width=18)
    table.add_column("Rows (norm/denorm)", justify="right", width=18)
    table.add_column("Compare", width=9)

    for i, result in enumerate(report.results, 1):
        color = STATUS_COLORS.get(result.status, "white")
        norm = "-" if result.normalized_row_count is None else str(result.normalized_row_count)
        denorm = "-" if result.denormalized_row_count is None else str(result.denormalized_row_count)
        compare = "-" if result.ordered is None else ("ordered" if result.ordered else "multiset")
        table.add_row(
            str(i),
            result.entry_id,
            f"[{color}]{result.status.value.upper()}[/{color}]",
            f"{norm}/{denorm}",
            compare,
        )

    console.print(table)

    for result in report.results:
        show = verbose or not result.status.is_success or bool(result.warnings)
        if show and _has_details(result):
            console.print(f"\n[bold]{result.entry_id}[/bold] - {result.question}")
            _render_details(console, result)

    counts = report.counts
    border = "green" if report.passed else "red"
    console.print(Panel(
        f"Passed: {counts[EntryStatus.PASS.value]} | "
        f"Not representable: {counts[EntryStatus.NOT_REPRESENTABLE.value]} | "
        f"Failed: {counts[EntryStatus.FAIL.value]} | "
        f"Errors: {counts[EntryStatus.ERROR.value]}",
        title="PASSED" if report.passed else "FAILED",
        border_style=border,
    ))


def render_catalog(console: Console, catalog: QueryCatalog, verbose: bool = False) -> None:
    """Print the entries of a parsed catalog."""
    table = Table(title=f"Catalog: {catalog.source}", show_header=True, header_style="bold")
    table.add_column("Line", justify="right", width=5)
    table.add_column("Entry", width=44)
    table.add_column("Denormalized", width=18)
    table.add_column("Ordering", width=9)

    for entry in catalog:
        if entry.parse_error:
            denorm = "[red]malformed[/red]"
        elif not entry.expect_equivalent:
            denorm = "not representable"
        elif entry.denormalized_sql:
            denorm = "yes"
        else:
            denorm = "[red]missing[/red]"
        ordering = "auto" if entry.ordering is None else ("strict" if entry.ordering else "ignore")
        table.add_row(str(entry.line), entry.entry_id, denorm, ordering)

    console.print(table)

    for entry in catalog:
        if entry.parse_error:
            console.print(f"[red]Error:[/red] {entry.parse_error}")

    if verbose:
        for entry in catalog:
            console.print(f"\n[bold]{entry.question}[/bold]")
            console.print(Syntax(entry.normalized_sql, "sql", theme="monokai"))
            if entry.denormalized_sql:
                console.print(Syntax(entry.denormalized_sql, "sql", theme="monokai"))


def render_fixture(console: Console, summary: FixtureSummary) -> None:
    """Print fixture row counts and integrity status."""
    table = Table(title=f"Fixture: {summary.source}", show_header=True, header_style="bold")
    table.add_column("Table", width=28)
    table.add_column("Rows", justify="right", width=8)
    for name, count in summary.row_counts.items():
        table.add_row(name, str(count))
    console.print(table)

    if summary.derived_denormalized:
        console.print("[dim]supermarket_transactions derived from the normalized tables[/dim]")

    if summary.is_consistent:
        console.print("[green]Integrity checks passed.[/green]")
    else:
        for violation in summary.violations:
            console.print(f"[red]Violation:[/red] {violation}")
