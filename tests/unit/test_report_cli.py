"""
Unit tests for the cbi-report CLI
"""

import httpx
import pytest
from unittest.mock import Mock, patch
from typer.testing import CliRunner
from reports.cli import app, build_table, fetch_report, ReportFetchError, ReportName, REPORT_COLUMNS

runner = CliRunner()


def _response(status_code=200, rows=None, text=""):
    response = Mock()
    response.status_code = status_code
    response.json = Mock(return_value=rows or [])
    response.text = text
    return response


def test_fetch_report_builds_url():
    with patch("reports.cli.httpx.get", return_value=_response(rows=[{"community_area": 3}])) as mock_get:
        rows = fetch_report("http://api.local:8080/", ReportName.LOW_INCOME_CONSTRUCTION)

    assert rows == [{"community_area": 3}]
    assert mock_get.call_args.args[0] == "http://api.local:8080/reports/low-income-construction"


def test_fetch_report_non_200():
    with patch("reports.cli.httpx.get", return_value=_response(500, text="Query failed")):
        with pytest.raises(ReportFetchError):
            fetch_report("http://api.local:8080", ReportName.TRIPS_VS_COVID)


def test_fetch_report_unreachable():
    with patch("reports.cli.httpx.get", side_effect=httpx.ConnectError("connection refused")):
        with pytest.raises(ReportFetchError):
            fetch_report("http://api.local:8080", ReportName.TRIPS_VS_COVID)


@pytest.mark.parametrize("report", list(ReportName))
def test_table_columns_follow_report_fields(report):
    table = build_table(report, [])

    assert [column.header for column in table.columns] == REPORT_COLUMNS[report]


def test_table_rows_in_field_order():
    rows = [{"total_pos_cases": None, "number_of_trips": 14, "dropoff_zip_code": "60602"}]

    table = build_table(ReportName.TRIPS_VS_COVID, rows)

    assert table.row_count == 1
    assert list(table.columns[0].cells) == ["60602"]
    assert list(table.columns[1].cells) == ["14"]
    assert list(table.columns[2].cells) == ["-"]


def test_cli_prints_report():
    rows = [{"community_area": 25, "outbound_trips": 2, "inbound_trips": 3}]

    with patch("reports.cli.httpx.get", return_value=_response(rows=rows)):
        result = runner.invoke(app, ["high-ccvi-trips", "--base-url", "http://api.local:8080"])

    assert result.exit_code == 0
    assert "25" in result.output
    assert "1 rows" in result.output


def test_cli_exits_1_on_error():
    with patch("reports.cli.httpx.get", return_value=_response(500, text="Query failed")):
        result = runner.invoke(app, ["trips-vs-covid"])

    assert result.exit_code == 1
    assert "Error" in result.output


def test_cli_rejects_unknown_report():
    result = runner.invoke(app, ["everything"])

    assert result.exit_code != 0
