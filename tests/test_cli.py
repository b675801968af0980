"""Tests for the budgetrule command line."""

import json
import sqlite3
from pathlib import Path

import pytest
from typer.testing import CliRunner

from budgetrule.cli import app
from budgetrule.dates import today_key

runner = CliRunner()


@pytest.fixture
def data_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG directories at a temporary location."""
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    return tmp_path / "data"


@pytest.fixture
def initialized(data_home: Path) -> Path:
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    return data_home / "budgetrule" / "budgetrule.db"


def stored(db_path: Path, key: str) -> str | None:
    conn = sqlite3.connect(db_path)
    try:
        row = conn.execute("SELECT value FROM key_values WHERE key = ?", (key,)).fetchone()
        return row[0] if row else None
    finally:
        conn.close()


class TestInit:
    """Tests for the init command."""

    def test_creates_database_and_config(self, data_home: Path, tmp_path: Path) -> None:
        """Should create both files."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 0
        assert "Initialization complete" in result.output
        assert (data_home / "budgetrule" / "budgetrule.db").exists()
        assert (tmp_path / "config" / "budgetrule" / "config.toml").exists()

    def test_refuses_to_overwrite(self, initialized: Path) -> None:
        """Should fail without --force when files exist."""
        result = runner.invoke(app, ["init"])

        assert result.exit_code == 1
        assert "already exists" in result.output

    def test_force(self, initialized: Path) -> None:
        """Should re-run with --force."""
        assert runner.invoke(app, ["init", "--force"]).exit_code == 0

    def test_commands_require_init(self, data_home: Path) -> None:
        """Should tell the user to initialize first."""
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "budgetrule init" in result.output

    def test_invalid_config_is_reported(self, initialized: Path, tmp_path: Path) -> None:
        """Should exit with a message instead of a traceback."""
        (tmp_path / "config" / "budgetrule" / "config.toml").write_text('log_level = "verbose"\n')

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 1
        assert "Invalid config" in result.output
        assert "Unknown log_level" in result.output

    def test_force_repairs_broken_config(self, initialized: Path, tmp_path: Path) -> None:
        """Should let init --force rewrite a config that does not parse."""
        config_path = tmp_path / "config" / "budgetrule" / "config.toml"
        config_path.write_text("namespace = [\n")

        assert runner.invoke(app, ["status"]).exit_code == 1
        assert runner.invoke(app, ["init"]).exit_code == 1

        result = runner.invoke(app, ["init", "--force"])

        assert result.exit_code == 0, result.output
        assert runner.invoke(app, ["status"]).exit_code == 0

    def test_verbose_flag(self, initialized: Path) -> None:
        """Should accept --verbose before a command."""
        result = runner.invoke(app, ["--verbose", "status"])

        assert result.exit_code == 0, result.output
        assert "Budget Status" in result.output


class TestIncomeAndOnboarding:
    """Tests for income and onboard commands."""

    def test_set_income(self, initialized: Path) -> None:
        """Should persist income in minor units and show allocations."""
        result = runner.invoke(app, ["income", "1000"])

        assert result.exit_code == 0, result.output
        assert "USD 1,000.00" in result.output
        assert "USD 500.00" in result.output
        assert stored(initialized, "@budget_income") == "100000"

    def test_show_income(self, initialized: Path) -> None:
        """Should show the saved income."""
        runner.invoke(app, ["income", "2500.50"])

        result = runner.invoke(app, ["income"])

        assert result.exit_code == 0
        assert "USD 2,500.50" in result.output

    def test_income_over_maximum(self, initialized: Path) -> None:
        """Should reject income above the ceiling."""
        result = runner.invoke(app, ["income", "1000001"])

        assert result.exit_code == 1
        assert "Income exceeds maximum allowed" in result.output
        assert stored(initialized, "@budget_income") is None

    def test_onboard(self, initialized: Path) -> None:
        """Should save income, currency, location and the onboarding flag."""
        result = runner.invoke(
            app, ["onboard", "--income", "4000", "--currency", "bdt", "--city", "Dhaka", "--country", "Bangladesh"]
        )

        assert result.exit_code == 0, result.output
        assert "Setup complete" in result.output
        assert stored(initialized, "@budget_income") == "400000"
        assert stored(initialized, "@budget_currency") == "BDT"
        assert json.loads(stored(initialized, "@budget_location") or "{}") == {
            "city": "Dhaka",
            "country": "Bangladesh",
        }
        assert stored(initialized, "@budget_onboarding_completed") == "true"

    def test_status_nags_until_onboarded(self, initialized: Path) -> None:
        """Should hint at onboarding until it is done."""
        assert "Setup not finished" in runner.invoke(app, ["status"]).output

        runner.invoke(app, ["onboard", "--income", "100"])

        assert "Setup not finished" not in runner.invoke(app, ["status"]).output


class TestExpenses:
    """Tests for add, expenses, delete and status commands."""

    def test_add_and_list(self, initialized: Path) -> None:
        """Should add an expense and list it under its month."""
        result = runner.invoke(app, ["add", "12.50", "  Lunch  ", "-c", "wants", "--date", "2024-03-02"])

        assert result.exit_code == 0, result.output
        assert "Added USD 12.50 to Wants" in result.output

        saved = json.loads(stored(initialized, "@budget_expenses") or "[]")
        assert len(saved) == 1
        assert saved[0]["amount"] == 1250
        assert saved[0]["description"] == "Lunch"
        assert saved[0]["date"] == "2024-03-02"
        assert saved[0]["createdAt"].endswith("Z")

        listing = runner.invoke(app, ["expenses", "--month", "2024-03"])
        assert "Lunch" in listing.output
        assert "Mar 2, 2024" in listing.output

        other_month = runner.invoke(app, ["expenses", "--month", "2024-04"])
        assert "No expenses for April 2024" in other_month.output

    def test_add_defaults_to_today(self, initialized: Path) -> None:
        """Should date an expense today when no date is given."""
        runner.invoke(app, ["add", "3", "Coffee", "-c", "wants"])

        saved = json.loads(stored(initialized, "@budget_expenses") or "[]")
        assert saved[0]["date"] == today_key()

    @pytest.mark.parametrize(
        ("args", "message"),
        [
            (["add", "0", "Lunch", "-c", "wants"], "Amount must be greater than 0"),
            (["add", "5", "   ", "-c", "wants"], "Description is required"),
            (["add", "5", "x" * 101, "-c", "wants"], "Description must be under 100 characters"),
            (["add", "5", "Lunch", "-c", "fun"], "Please select a category"),
            (["add", "5", "Lunch", "-c", "wants", "--date", "2024-02-30"], "Invalid date"),
        ],
    )
    def test_add_rejects_invalid_input(self, initialized: Path, args: list[str], message: str) -> None:
        """Should report the validation error and save nothing."""
        result = runner.invoke(app, args)

        assert result.exit_code == 1
        assert message in result.output
        assert stored(initialized, "@budget_expenses") is None

    def test_status_month_navigation(self, initialized: Path) -> None:
        """Should summarise the chosen month only."""
        runner.invoke(app, ["income", "1000"])
        runner.invoke(app, ["add", "600", "Rent", "-c", "needs", "--date", "2023-12-01"])
        runner.invoke(app, ["add", "50", "Groceries", "-c", "needs", "--date", "2024-01-03"])

        december = runner.invoke(app, ["status", "--month", "2024-01", "--previous"])
        january = runner.invoke(app, ["status", "--month", "2024-01"])

        assert december.exit_code == 0, december.output
        assert "December 2023 Budget Status" in december.output
        assert "120%" in december.output
        assert "USD -100.00" in december.output
        assert "January 2024 Budget Status" in january.output
        assert "USD 950.00" in january.output

    def test_status_invalid_month(self, initialized: Path) -> None:
        """Should reject malformed months."""
        result = runner.invoke(app, ["status", "--month", "March"])

        assert result.exit_code == 1
        assert "Invalid month" in result.output

    def test_delete_by_prefix(self, initialized: Path) -> None:
        """Should delete by a unique id prefix."""
        runner.invoke(app, ["add", "5", "Snack", "-c", "wants"])
        expense_id = json.loads(stored(initialized, "@budget_expenses") or "[]")[0]["id"]

        result = runner.invoke(app, ["delete", expense_id[:8]])

        assert result.exit_code == 0, result.output
        assert "Deleted Snack" in result.output
        assert stored(initialized, "@budget_expenses") == "[]"

    def test_delete_unknown_is_not_an_error(self, initialized: Path) -> None:
        """Should report nothing deleted and exit cleanly."""
        result = runner.invoke(app, ["delete", "ffffffff-nope"])

        assert result.exit_code == 0
        assert "No expense found" in result.output


class TestPreferences:
    """Tests for currency, location and settings commands."""

    def test_currency(self, initialized: Path) -> None:
        """Should set and show the currency code."""
        assert runner.invoke(app, ["currency", "eur"]).exit_code == 0

        result = runner.invoke(app, ["currency"])

        assert "EUR" in result.output
        assert stored(initialized, "@budget_currency") == "EUR"

    def test_invalid_currency(self, initialized: Path) -> None:
        """Should reject codes that are not three letters."""
        result = runner.invoke(app, ["currency", "EURO"])

        assert result.exit_code == 1
        assert "Invalid currency code" in result.output

    def test_location_set_show_clear(self, initialized: Path) -> None:
        """Should replace and then remove the location."""
        runner.invoke(app, ["location", "--city", "Lisbon", "--latitude", "38.72"])
        assert json.loads(stored(initialized, "@budget_location") or "{}") == {"city": "Lisbon", "latitude": 38.72}

        shown = runner.invoke(app, ["location"])
        assert "city: Lisbon" in shown.output

        runner.invoke(app, ["location", "--clear"])
        assert stored(initialized, "@budget_location") is None
        assert "No location set" in runner.invoke(app, ["location"]).output

    def test_settings(self, initialized: Path) -> None:
        """Should save language and theme."""
        result = runner.invoke(app, ["settings", "--language", "bn", "--theme", "dark"])

        assert result.exit_code == 0, result.output
        assert stored(initialized, "@budget_language") == "bn"
        assert stored(initialized, "@budget_theme") == "dark"

        shown = runner.invoke(app, ["settings"])
        assert "Language: bn" in shown.output
        assert "Theme:    dark" in shown.output

    def test_settings_rejects_unknown_theme(self, initialized: Path) -> None:
        """Should reject themes outside auto/light/dark."""
        result = runner.invoke(app, ["settings", "--theme", "sepia"])

        assert result.exit_code == 1
        assert "Unsupported theme" in result.output


class TestReset:
    """Tests for the reset command."""

    def test_reset_clears_everything(self, initialized: Path) -> None:
        """Should remove all stored budget data."""
        runner.invoke(app, ["onboard", "--income", "1000", "--currency", "GBP"])
        runner.invoke(app, ["add", "5", "Tea", "-c", "wants"])
        runner.invoke(app, ["settings", "--theme", "light"])

        result = runner.invoke(app, ["reset", "--yes"])

        assert result.exit_code == 0, result.output
        for key in ("income", "expenses", "currency", "onboarding_completed", "theme"):
            assert stored(initialized, f"@budget_{key}") is None
        assert "USD 0.00" in runner.invoke(app, ["income"]).output

    def test_reset_can_be_cancelled(self, initialized: Path) -> None:
        """Should keep data when the user declines."""
        runner.invoke(app, ["income", "1000"])

        result = runner.invoke(app, ["reset"], input="n\n")

        assert "Reset cancelled" in result.output
        assert stored(initialized, "@budget_income") == "100000"
