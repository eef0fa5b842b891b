"""Command-line report viewer for the analytical API."""

from enum import Enum
from typing import Annotated, Any, Dict, List

import httpx
import typer
from rich.console import Console
from rich.table import Table

from core.config import settings

app = typer.Typer(
    name="cbi-report",
    help="Print Chicago Business Intelligence reports as tables.",
    no_args_is_help=True,
)

console = Console()


class ReportName(str, Enum):
    TRIPS_VS_COVID = "trips-vs-covid"
    HIGH_CCVI_TRIPS = "high-ccvi-trips"
    UNEMPLOYMENT_BY_PERMIT = "unemployment-by-permit"
    LOW_INCOME_CONSTRUCTION = "low-income-construction"


REPORT_COLUMNS: Dict[ReportName, List[str]] = {
    ReportName.TRIPS_VS_COVID: ["dropoff_zip_code", "number_of_trips", "total_pos_cases"],
    ReportName.HIGH_CCVI_TRIPS: ["community_area", "outbound_trips", "inbound_trips"],
    ReportName.UNEMPLOYMENT_BY_PERMIT: [
        "community_area", "unemployment", "below_poverty_level", "number_of_permits"
    ],
    ReportName.LOW_INCOME_CONSTRUCTION: [
        "community_area", "per_capita_income", "number_of_permits"
    ],
}

REPORT_TITLES: Dict[ReportName, str] = {
    ReportName.TRIPS_VS_COVID: "Airport trips vs. COVID positive cases",
    ReportName.HIGH_CCVI_TRIPS: "Trip flow in HIGH vulnerability community areas",
    ReportName.UNEMPLOYMENT_BY_PERMIT: "Top 5 unemployment areas by building permits",
    ReportName.LOW_INCOME_CONSTRUCTION: "Bottom 5 low-income areas by new construction",
}


class ReportFetchError(Exception):
    """The API did not return a report."""


def fetch_report(base_url: str, report: ReportName, timeout: float = 30.0) -> List[Dict[str, Any]]:
    url = f"{base_url.rstrip('/')}/reports/{report.value}"
    try:
        response = httpx.get(url, timeout=timeout)
    except httpx.HTTPError as e:
        raise ReportFetchError(f"Could not reach {url}: {e}") from e

    if response.status_code != 200:
        raise ReportFetchError(f"{url} returned HTTP {response.status_code}: {response.text[:200]}")

    return response.json()


def build_table(report: ReportName, rows: List[Dict[str, Any]]) -> Table:
    table = Table(title=REPORT_TITLES[report])
    for column in REPORT_COLUMNS[report]:
        table.add_column(column, style="cyan" if column == REPORT_COLUMNS[report][0] else "green")

    for row in rows:
        table.add_row(*(_format(row.get(column)) for column in REPORT_COLUMNS[report]))
    return table


def _format(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, float):
        return f"{value:.2f}"
    return str(value)


@app.command()
def report(
    name: Annotated[
        ReportName,
        typer.Argument(help="Report to print."),
    ],
    base_url: Annotated[
        str,
        typer.Option(
            "--base-url",
            "-u",
            help="Base URL of the API.",
        ),
    ] = settings.REPORT_BASE_URL,
) -> None:
    """Fetch one report from the API and print it."""
    try:
        rows = fetch_report(base_url, name)
    except ReportFetchError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(code=1) from e

    console.print(build_table(name, rows))
    console.print(f"[dim]{len(rows)} rows[/dim]")


if __name__ == "__main__":
    app()
