"""Command-line interface tests"""
import csv
import decimal
import json

import click
import pytest
from click.testing import CliRunner

from amort_calc import main
from amort_calc.data_models import Cadence
from amort_calc.main import build_request_from_options, cli, parse_amount

LOAN_ARGS = ["-p", "200k", "-r", "6", "-t", "30"]


@pytest.fixture
def runner():
    return CliRunner()


class TestOptionParsing:

    def test_parse_amount_suffixes(self):
        assert parse_amount("500k") == 500_000.0
        assert parse_amount("1.5m") == 1_500_000.0
        assert parse_amount("12,500") == 12_500.0

    def test_parse_amount_invalid(self):
        with pytest.raises(click.BadParameter):
            parse_amount("lots")

    def test_build_request(self):
        request = build_request_from_options("250k", 5.5, 15, "100", "biweekly", "2024-03-08")
        assert float(request.principal) == 250_000.0
        assert float(request.annual_rate) == 5.5
        assert request.term_years == 15
        assert float(request.extra_payment) == 100.0
        assert request.cadence is Cadence.BIWEEKLY
        assert request.start_date.isoformat() == "2024-03-08"

    def test_build_request_defaults(self):
        request = build_request_from_options("1000", 0.0, 1)
        assert request.extra_payment == 0
        assert request.start_date is None
        assert request.cadence is Cadence.MONTHLY

    @pytest.mark.parametrize(
        "args",
        [
            ("0", 5.0, 10),
            ("1000", -1.0, 10),
            ("1000", 5.0, 0),
            ("1000", 5.0, 10, "-5"),
            ("1000", 5.0, 10, None, "monthly", "2024-99"),
        ],
    )
    def test_build_request_rejects_invalid_input(self, args):
        with pytest.raises(click.BadParameter):
            build_request_from_options(*args)


class TestScheduleCommand:

    def test_prints_summary_and_rows(self, runner):
        result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "-s", "2024-01"])
        assert result.exit_code == 0, result.output
        assert "1199.10" in result.output
        assert "Payoff             : 2053-12" in result.output
        assert "showing first 120 rows" in result.output
        assert "2024-01" in result.output

    def test_unlabeled_rows_show_dash(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "1200", "-r", "0", "-t", "1"])
        assert result.exit_code == 0, result.output
        assert "1\t—\t100.00\t0.00\t100.00\t0.00\t1100.00" in result.output
        assert "After 12 periods" in result.output

    def test_csv_export(self, runner, tmp_path):
        out = tmp_path / "schedule.csv"
        result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--output", str(out)])
        assert result.exit_code == 0, result.output
        with out.open(newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["Period", "Date", "Payment", "Interest", "Principal", "Extra", "Balance"]
        assert len(rows) == 361

    def test_json_export(self, runner, tmp_path):
        out = tmp_path / "schedule.json"
        args = ["schedule", *LOAN_ARGS, "--cadence", "biweekly", "-s", "2024-01-01", "--output", str(out)]
        result = runner.invoke(cli, args)
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["summary"]["cadence"] == "Biweekly"
        assert data["schedule"][1]["date"] == "2024-01-15"
        assert len(data["schedule"]) == 780

    def test_unsupported_output(self, runner, tmp_path):
        result = runner.invoke(cli, ["schedule", *LOAN_ARGS, "--output", str(tmp_path / "s.txt")])
        assert result.exit_code != 0

    def test_invalid_principal(self, runner):
        result = runner.invoke(cli, ["schedule", "-p", "0", "-r", "6", "-t", "30"])
        assert result.exit_code != 0
        assert "Principal must be positive" in result.output

    def test_out_of_range_term_and_rate(self, runner):
        result = runner.invoke(cli, ["summary", "-p", "1000", "-r", "1000", "-t", "400000"])
        assert result.exit_code == 2
        assert "cannot exceed" in result.output

    def test_arithmetic_failure_is_bad_parameter(self, runner, monkeypatch):
        def overflow(request):
            raise decimal.Overflow()

        monkeypatch.setattr(main, "build_schedule", overflow)
        result = runner.invoke(cli, ["schedule", *LOAN_ARGS])
        assert result.exit_code == 2
        assert "too large to compute" in result.output


class TestSummaryCommand:

    def test_extra_payment_comparison(self, runner):
        result = runner.invoke(cli, ["summary", *LOAN_ARGS, "-e", "200"])
        assert result.exit_code == 0, result.output
        assert "Interest saved" in result.output
        assert "Term reduction" in result.output
        assert "Period\tDate" not in result.output

    def test_json_only(self, runner, tmp_path):
        result = runner.invoke(cli, ["summary", *LOAN_ARGS, "--output", str(tmp_path / "s.csv")])
        assert result.exit_code != 0

    def test_json_export(self, runner, tmp_path):
        out = tmp_path / "summary.json"
        result = runner.invoke(cli, ["summary", *LOAN_ARGS, "--output", str(out)])
        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text(encoding="utf-8"))
        assert data["summary"]["periods"] == 360
        assert data["summary"]["truncated"] is False
