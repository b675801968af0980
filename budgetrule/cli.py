"""CLI entry point for budgetrule."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from budgetrule.commands.admin import init_command, reset_command, settings_command
from budgetrule.commands.budget import (
    currency_command,
    income_command,
    location_command,
    onboard_command,
    status_command,
)
from budgetrule.commands.expenses import add_command, delete_command, expenses_command
from budgetrule.commands.session import fail
from budgetrule.config import DEFAULT_CONFIG, ConfigError, load_settings
from budgetrule.domain.models import LocationPreference

app = typer.Typer(
    name="budgetrule",
    help="50/30/20 budgeting - split income into needs, wants and savings",
    add_completion=False,
)


def configure_logging(level: str) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def build_location(
    latitude: float | None,
    longitude: float | None,
    address: str | None,
    city: str | None,
    district: str | None,
    region: str | None,
    country: str | None,
) -> LocationPreference | None:
    """Build a location from CLI options, or None if no option was given."""
    values = (latitude, longitude, address, city, district, region, country)
    if all(value is None for value in values):
        return None
    return LocationPreference(
        latitude=latitude,
        longitude=longitude,
        address=address,
        city=city,
        district=district,
        region=region,
        country=country,
    )


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """50/30/20 budgeting - split income into needs, wants and savings."""
    try:
        settings = load_settings()
    except ConfigError as e:
        # init --force can rewrite a broken config
        if ctx.invoked_subcommand != "init":
            fail(f"Invalid config: {e}")
        settings = DEFAULT_CONFIG

    configure_logging("DEBUG" if verbose else settings["log_level"])


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize budgetrule database and configuration."""
    init_command(force)


@app.command()
def onboard(
    income: str = typer.Option(..., "--income", help="Monthly income (e.g. 4250.00)"),
    currency: str = typer.Option(None, "--currency", help="ISO 4217 currency code (e.g. USD)"),
    city: str = typer.Option(None, "--city", help="City you live in"),
    region: str = typer.Option(None, "--region", help="Region or state"),
    country: str = typer.Option(None, "--country", help="Country"),
) -> None:
    """Finish first-time setup with your income, currency and location."""
    location = build_location(None, None, None, city, None, region, country)
    onboard_command(income, currency, location)


@app.command()
def income(
    amount: str = typer.Argument(None, help="New monthly income (e.g. 4250.00)"),
) -> None:
    """Show or set your monthly income."""
    income_command(amount)


@app.command()
def add(
    amount: str = typer.Argument(..., help="Amount spent (e.g. 12.50)"),
    description: str = typer.Argument(..., help="What the money was spent on"),
    category: str = typer.Option(..., "--category", "-c", help="needs, wants or savings"),
    date: str = typer.Option(None, "--date", "-d", help="Day spent (YYYY-MM-DD, default: today)"),
) -> None:
    """Add an expense."""
    add_command(amount, description, category, date)


@app.command()
def delete(
    expense_id: str = typer.Argument(..., help="Expense id or unique id prefix"),
) -> None:
    """Delete an expense."""
    delete_command(expense_id)


@app.command()
def expenses(
    month: str = typer.Option(None, "--month", help="Specific month (YYYY-MM)"),
    previous: bool = typer.Option(False, "--previous", help="Month before --month (or this month)"),
    next_: bool = typer.Option(False, "--next", help="Month after --month (or this month)"),
) -> None:
    """List your expenses for a month, grouped by day."""
    expenses_command(month, previous, next_)


@app.command()
def status(
    month: str = typer.Option(None, "--month", help="Specific month (YYYY-MM)"),
    previous: bool = typer.Option(False, "--previous", help="Month before --month (or this month)"),
    next_: bool = typer.Option(False, "--next", help="Month after --month (or this month)"),
) -> None:
    """Show your needs/wants/savings budget for a month."""
    status_command(month, previous, next_)


@app.command()
def currency(
    code: str = typer.Argument(None, help="New ISO 4217 currency code"),
) -> None:
    """Show or set your currency."""
    currency_command(code)


@app.command()
def location(
    latitude: float = typer.Option(None, "--latitude", help="Latitude"),
    longitude: float = typer.Option(None, "--longitude", help="Longitude"),
    address: str = typer.Option(None, "--address", help="Street address"),
    city: str = typer.Option(None, "--city", help="City"),
    district: str = typer.Option(None, "--district", help="District"),
    region: str = typer.Option(None, "--region", help="Region or state"),
    country: str = typer.Option(None, "--country", help="Country"),
    clear: bool = typer.Option(False, "--clear", help="Remove your saved location"),
) -> None:
    """Show, replace or clear your location."""
    location_command(build_location(latitude, longitude, address, city, district, region, country), clear)


@app.command()
def settings(
    language: str = typer.Option(None, "--language", help="Language code (en or bn)"),
    theme: str = typer.Option(None, "--theme", help="Theme mode (auto, light or dark)"),
) -> None:
    """Show or set your language and theme."""
    settings_command(language, theme)


@app.command()
def reset(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
) -> None:
    """Erase all of your budget data."""
    reset_command(yes)


if __name__ == "__main__":
    app()
