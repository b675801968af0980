"""Expense commands for adding, deleting and listing expenses."""

import asyncio
from datetime import datetime, timezone

from rich.table import Table

from budgetrule.budget_store import budget_store
from budgetrule.commands.budget import resolve_month
from budgetrule.commands.session import console, fail, get_persistence, money
from budgetrule.dates import format_date, format_month, parse_day, today_key
from budgetrule.domain.budget import group_by_date
from budgetrule.domain.models import CATEGORY_CONFIG, BudgetState, Category, DayKey, Expense, Money, Month
from budgetrule.domain.money import generate_id, parse_amount
from budgetrule.domain.validation import validate_expense
from budgetrule.store import BudgetPersistence

# How many id characters the listing shows; delete accepts any unique prefix
SHORT_ID_LENGTH = 8


def create_expense(
    amount: Money,
    description: str,
    category: Category,
    date: DayKey,
    now: datetime | None = None,
) -> Expense:
    """Build a new expense with a fresh id and creation timestamp.

    Args:
        amount: Amount in minor units.
        description: Already trimmed description.
        category: Budget category.
        date: Day the money was spent.
        now: Creation time. Defaults to the current UTC time.

    Returns:
        New Expense.
    """
    now = now or datetime.now(timezone.utc)
    created_at = now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return Expense(
        id=generate_id(),
        amount=amount,
        description=description,
        category=category,
        date=date,
        created_at=created_at,
    )


async def _add_expense(persistence: BudgetPersistence, expense: Expense) -> BudgetState:
    async with budget_store(persistence) as store:
        store.add_expense(expense)
        return store.state


def add_command(amount: str, description: str, category: str, date: str | None = None) -> None:
    """Validate and record a new expense."""
    persistence = get_persistence()

    try:
        day = parse_day(date) if date else today_key()
    except ValueError:
        fail(f"Invalid date: {date} (expected YYYY-MM-DD)")

    amount_minor = parse_amount(amount)
    description = description.strip()
    result = validate_expense({"amount": amount_minor, "description": description, "category": category})
    if not result.is_valid:
        fail(result.error or "Invalid expense")

    expense = create_expense(amount_minor, description, category, day)  # type: ignore[arg-type]
    state = asyncio.run(_add_expense(persistence, expense))

    label = CATEGORY_CONFIG[expense.category].label
    console.print(
        f"[green]✓ Added {money(expense.amount, state.currency)} to {label}[/green] "
        f"[dim]({expense.id[:SHORT_ID_LENGTH]})[/dim]"
    )


async def _delete_expense(persistence: BudgetPersistence, id_prefix: str) -> tuple[str, list[Expense]]:
    async with budget_store(persistence) as store:
        matches = [expense for expense in store.state.expenses if expense.id.startswith(id_prefix)]
        if len(matches) == 1:
            store.delete_expense(matches[0].id)
        return store.state.currency, matches


def delete_command(expense_id: str) -> None:
    """Delete an expense by id or unique id prefix."""
    persistence = get_persistence()

    if not expense_id.strip():
        fail("Expense id is required")

    currency, matches = asyncio.run(_delete_expense(persistence, expense_id.strip()))

    if not matches:
        console.print(f"[yellow]No expense found with id {expense_id}[/yellow]")
        return

    if len(matches) > 1:
        fail(f"Id prefix {expense_id} matches {len(matches)} expenses; use more characters")

    expense = matches[0]
    console.print(f"[green]✓ Deleted {expense.description} ({money(expense.amount, currency)})[/green]")


async def _load_month(persistence: BudgetPersistence, month: Month) -> tuple[BudgetState, list[Expense]]:
    async with budget_store(persistence, month) as store:
        return store.state, store.expenses_for_current_month


def expenses_command(month: str | None = None, previous: bool = False, next_: bool = False) -> None:
    """List a month's expenses grouped by day."""
    persistence = get_persistence()
    target_month = resolve_month(month, previous, next_)
    state, month_expenses = asyncio.run(_load_month(persistence, target_month))

    if not month_expenses:
        console.print(f"[yellow]No expenses for {format_month(target_month)}[/yellow]")
        return

    table = Table(title=f"Expenses for {format_month(target_month)} ({len(month_expenses)})")
    table.add_column("Date", style="cyan")
    table.add_column("Id", style="dim")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")

    for day, day_expenses in group_by_date(month_expenses).items():
        for idx, expense in enumerate(day_expenses):
            table.add_row(
                format_date(day) if idx == 0 else "",
                expense.id[:SHORT_ID_LENGTH],
                expense.description,
                CATEGORY_CONFIG[expense.category].label,
                money(expense.amount, state.currency),
            )

    console.print(table)
