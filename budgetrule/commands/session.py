"""Shared helpers for commands that open the budget store."""

import sys
from typing import NoReturn

from rich.console import Console

from budgetrule.config import load_settings, resolve_db_path
from budgetrule.domain.models import Money
from budgetrule.domain.money import format_money
from budgetrule.store import BudgetPersistence, SqliteKeyValueStore, database_exists

console = Console()


def get_persistence() -> BudgetPersistence:
    """Build the persistence adapter for the configured database.

    Exits with status 1 if the database has not been initialized.
    """
    settings = load_settings()
    db_path = resolve_db_path(settings)

    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'budgetrule init' first.[/red]", style="bold")
        sys.exit(1)

    return BudgetPersistence(SqliteKeyValueStore(db_path), namespace=settings["namespace"])


def money(amount: Money, currency: str) -> str:
    """Format an amount with its currency code."""
    return format_money(amount, symbol=f"{currency} ")


def fail(message: str) -> NoReturn:
    """Print an error and exit with status 1."""
    console.print(f"[red]{message}[/red]")
    sys.exit(1)
