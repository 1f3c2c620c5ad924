"""Tests for the SmartSpend CLI.

Each invocation opens and closes the profile's store, so these tests also
exercise persistence across process-like restarts.
"""

import logging
from pathlib import Path

import polars as pl
import pytest
from typer.testing import CliRunner, Result

from smartspend.cli.main import app
from smartspend.config import get_current_profile

runner = CliRunner()


@pytest.fixture(autouse=True)
def cli_environment(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    """Fixed zone for date parsing and INFO-level log capture."""
    monkeypatch.setenv("SMARTSPEND_TIMEZONE", "Asia/Kolkata")
    caplog.set_level(logging.INFO)


def _invoke(*args: str, input: str | None = None) -> Result:  # noqa: A002
    return runner.invoke(app, list(args), input=input)


def _add(amount: str, category: str, day: str, note: str = "") -> None:
    result = _invoke(
        "tx", "add", amount, "-c", category, "-d", day, "-t", "12:00", "-n", note
    )
    assert result.exit_code == 0, result.output


class TestGlobalOptions:
    """Profile and verbosity flags."""

    @pytest.mark.unit
    def test_profile_flag_sets_current_profile(self) -> None:
        result = _invoke("--profile", "alice", "init")

        assert result.exit_code == 0
        assert get_current_profile() == "alice"

    @pytest.mark.unit
    def test_invalid_profile_is_rejected(self) -> None:
        result = _invoke("--profile", "bad/name", "init")

        assert result.exit_code != 0

    @pytest.mark.integration
    def test_profiles_have_separate_stores(self) -> None:
        _invoke("-p", "alice", "category", "add", "Pets")

        alice = _invoke("-p", "alice", "category", "list")
        bob = _invoke("-p", "bob", "category", "list")

        assert "Pets" in alice.stdout
        assert "Pets" not in bob.stdout


class TestCategoryCommands:
    """category list|add|rename|delete"""

    @pytest.mark.integration
    def test_init_then_list_defaults(self, caplog: pytest.LogCaptureFixture) -> None:
        assert _invoke("init").exit_code == 0
        assert "12 categories" in caplog.text

        result = _invoke("category", "list")

        lines = result.stdout.strip().splitlines()
        assert len(lines) == 12
        assert "Food & Drinks" in lines[0]
        assert "(default)" in lines[0]

    @pytest.mark.integration
    def test_add_and_rename(self) -> None:
        assert _invoke("category", "add", "Pets", "-e", "🐶", "-c", "#123ABC").exit_code == 0
        assert _invoke("category", "rename", "13", "Pet Care").exit_code == 0

        listing = _invoke("category", "list").stdout

        assert "13  🐶 Pet Care  #123ABC" in listing

    @pytest.mark.integration
    def test_delete_default_fails(self, caplog: pytest.LogCaptureFixture) -> None:
        result = _invoke("category", "delete", "1")

        assert result.exit_code == 1
        assert "cannot be deleted" in caplog.text

    @pytest.mark.integration
    def test_delete_warns_about_orphans(self, caplog: pytest.LogCaptureFixture) -> None:
        _invoke("category", "add", "Pets")
        _add("300", "13", "2024-03-05", "vet")

        result = _invoke("category", "delete", "13")

        assert result.exit_code == 0
        assert "1 transaction(s) now show as Unknown" in caplog.text
        assert "Unknown" in _invoke("tx", "list", "--all").stdout

    @pytest.mark.integration
    def test_rename_missing_category_fails(self) -> None:
        assert _invoke("category", "rename", "99", "Ghost").exit_code == 1


class TestTransactionCommands:
    """tx add|list|recent|search|delete"""

    @pytest.mark.integration
    def test_add_and_list(self) -> None:
        _add("250.50", "2", "2024-03-05", "cab")

        result = _invoke("tx", "list", "--month", "2024-03")

        assert result.exit_code == 0
        assert "2024-03-05 12:00" in result.stdout
        assert "Transport" in result.stdout
        assert "250.5" in result.stdout
        assert "Transport" not in _invoke("tx", "list", "--month", "2024-04").stdout

    @pytest.mark.integration
    def test_add_rejects_bad_input(self) -> None:
        assert _invoke("tx", "add", "0", "-c", "1").exit_code == 1
        assert _invoke("tx", "add", "10", "-c", "99").exit_code == 1
        assert _invoke("tx", "add", "10", "-c", "1", "-d", "2024/03/05").exit_code != 0

    @pytest.mark.integration
    def test_add_recurring_and_split(self) -> None:
        result = _invoke(
            "tx",
            "add",
            "999",
            "-c",
            "10",
            "-d",
            "2024-03-01",
            "--recurring",
            "30",
            "--split-share",
            "333",
            "-m",
            "Card",
        )
        assert result.exit_code == 0

        listing = _invoke("tx", "recent").stdout

        assert "[every 30d]" in listing
        assert "[split, my share 333" in listing
        assert "Card" in listing

    @pytest.mark.integration
    def test_search_and_delete(self) -> None:
        _add("80", "1", "2024-03-05", "Masala chai")
        _add("40", "2", "2024-03-06", "metro")

        found = _invoke("tx", "search", "CHAI").stdout
        assert "Masala chai" in found
        assert "metro" not in found

        assert _invoke("tx", "delete", "1").exit_code == 0
        assert _invoke("tx", "delete", "1").exit_code == 1
        assert "Masala chai" not in _invoke("tx", "list", "--all").stdout

    @pytest.mark.integration
    def test_list_by_day_range(self) -> None:
        _add("10", "1", "2024-03-01", "first")
        _add("20", "1", "2024-03-02", "second")
        _add("30", "1", "2024-03-03", "third")

        listing = _invoke("tx", "list", "--from", "2024-03-02", "--to", "2024-03-03").stdout

        assert "first" not in listing
        assert listing.index("third") < listing.index("second")


class TestBudgetCommands:
    """budget set|list|delete|health"""

    @pytest.mark.integration
    def test_set_twice_keeps_one_budget(self) -> None:
        _invoke("budget", "set", "1", "500", "--month", "2024-03")
        _invoke("budget", "set", "1", "700", "--month", "2024-03")

        lines = _invoke("budget", "list", "--month", "2024-03").stdout.strip().splitlines()

        assert len(lines) == 1
        assert "700" in lines[0]

    @pytest.mark.integration
    def test_health(self) -> None:
        _invoke("budget", "set", "1", "500", "--month", "2024-03")
        _add("450", "1", "2024-03-05")

        result = _invoke("budget", "health", "--month", "2024-03")

        assert result.exit_code == 0
        assert "🟡" in result.stdout
        assert "90%" in result.stdout

    @pytest.mark.integration
    def test_delete(self) -> None:
        _invoke("budget", "set", "1", "500", "--month", "2024-03")

        assert _invoke("budget", "delete", "1").exit_code == 0
        assert _invoke("budget", "delete", "1").exit_code == 1


class TestReportCommands:
    """report total|categories|daily|insights"""

    @pytest.fixture(autouse=True)
    def spending(self) -> None:
        _add("100", "1", "2024-03-05")
        _add("250", "2", "2024-03-05")
        _add("50", "2", "2024-03-07")

    @pytest.mark.integration
    def test_total(self) -> None:
        assert _invoke("report", "total", "--month", "2024-03").stdout.strip() in (
            "400",
            "400.00",
        )
        total_for_day = _invoke(
            "report", "total", "--from", "2024-03-07", "-c", "2"
        ).stdout.strip()
        assert total_for_day in ("50", "50.00")

    @pytest.mark.integration
    def test_categories_ranked(self) -> None:
        lines = _invoke("report", "categories", "--month", "2024-03").stdout.splitlines()

        assert "Transport" in lines[0]
        assert "Food & Drinks" in lines[1]

    @pytest.mark.integration
    def test_daily_series(self) -> None:
        lines = _invoke("report", "daily", "--month", "2024-03").stdout.splitlines()

        assert [line.split()[0] for line in lines] == ["2024-03-05", "2024-03-07"]

    @pytest.mark.integration
    def test_insights(self) -> None:
        result = _invoke("report", "insights", "--month", "2024-03")

        assert result.exit_code == 0
        assert "Transport is your top spend at 75% of total." in result.stdout
        assert "Highest spend day: 05 Mar (₹350)" in result.stdout


class TestExportAndReset:
    """export csv|parquet and reset"""

    @pytest.mark.integration
    def test_export_csv_to_stdout(self) -> None:
        _add("99", "3", "2024-03-05", 'shoes "sale"')

        lines = _invoke("export", "csv").stdout.splitlines()

        assert lines == [
            "Date,Time,Amount,Category,Note,Payment Method,Recurring",
            '2024-03-05,12:00,99,Shopping,"shoes ""sale""",UPI,No',
        ]

    @pytest.mark.integration
    def test_export_files(self, tmp_path: Path) -> None:
        _add("99", "3", "2024-03-05")
        csv_path = tmp_path / "out.csv"
        parquet_path = tmp_path / "out.parquet"

        assert _invoke("export", "csv", "-o", str(csv_path)).exit_code == 0
        assert _invoke("export", "parquet", "-o", str(parquet_path)).exit_code == 0

        assert csv_path.read_text(encoding="utf-8").startswith("Date,Time")
        assert pl.read_parquet(parquet_path)["category"].to_list() == ["Shopping"]

    @pytest.mark.integration
    def test_reset_requires_typed_confirmation(self) -> None:
        _add("10", "1", "2024-03-05", "keep me")

        declined = _invoke("reset", input="yes\n")

        assert declined.exit_code == 1
        assert "keep me" in _invoke("tx", "list", "--all").stdout

        confirmed = _invoke("reset", input="DELETE\n")

        assert confirmed.exit_code == 0
        assert "keep me" not in _invoke("tx", "list", "--all").stdout

    @pytest.mark.integration
    def test_reset_with_yes_restores_defaults(self) -> None:
        _invoke("category", "add", "Pets")

        assert _invoke("reset", "--yes").exit_code == 0

        assert "Pets" not in _invoke("category", "list").stdout
        _invoke("category", "add", "Gifts")
        assert "13  📦 Gifts" in _invoke("category", "list").stdout
