"""Budget commands: income, status, onboarding and preferences kept in state."""

import asyncio

from rich.table import Table

from budgetrule.budget_store import budget_store
from budgetrule.commands.session import console, fail, get_persistence, money
from budgetrule.dates import current_month_key, format_month, next_month_key, parse_month, previous_month_key
from budgetrule.domain.budget import BudgetSummary, category_allocation
from budgetrule.domain.models import CATEGORIES, CATEGORY_CONFIG, BudgetState, LocationPreference, Money, Month
from budgetrule.domain.money import parse_amount
from budgetrule.domain.validation import validate_income
from budgetrule.store import BudgetPersistence


def parse_income(amount_str: str) -> Money:
    """Parse and validate an income amount, exiting on invalid input."""
    income = parse_amount(amount_str)
    result = validate_income(income)
    if not result.is_valid:
        fail(result.error or "Invalid income")
    return income


def resolve_month(month: str | None, previous: bool = False, next_: bool = False) -> Month:
    """Pick the month a command should look at.

    Args:
        month: Explicit month (YYYY-MM), or None for the current month.
        previous: Step one month back from it.
        next_: Step one month forward from it.

    Returns:
        Month key.
    """
    if month is None:
        target = current_month_key()
    else:
        try:
            target = parse_month(month)
        except ValueError:
            fail(f"Invalid month: {month} (expected YYYY-MM)")

    if previous:
        target = previous_month_key(target)
    if next_:
        target = next_month_key(target)
    return target


async def _load_state(persistence: BudgetPersistence) -> BudgetState:
    async with budget_store(persistence) as store:
        return store.state


async def _set_income(persistence: BudgetPersistence, income: Money) -> BudgetState:
    async with budget_store(persistence) as store:
        store.set_income(income)
        return store.state


def render_allocations(state: BudgetState) -> None:
    """Print how income splits across the three categories."""
    console.print(f"[bold]Monthly income:[/bold] {money(state.monthly_income, state.currency)}\n")
    for category in CATEGORIES:
        config = CATEGORY_CONFIG[category]
        allocated = category_allocation(state.monthly_income, category)
        console.print(
            f"  {config.label:<8} {config.percentage:>4.0%}  {money(allocated, state.currency)}"
            f"  [dim]{config.description}[/dim]"
        )


def income_command(amount: str | None = None) -> None:
    """Show or set monthly income."""
    persistence = get_persistence()

    if amount is None:
        state = asyncio.run(_load_state(persistence))
        render_allocations(state)
        return

    income = parse_income(amount)
    state = asyncio.run(_set_income(persistence, income))
    console.print(f"[green]✓ Monthly income set to {money(state.monthly_income, state.currency)}[/green]\n")
    render_allocations(state)


async def _load_summary(persistence: BudgetPersistence, month: Month) -> tuple[BudgetState, BudgetSummary, int]:
    async with budget_store(persistence, month) as store:
        return store.state, store.summary, len(store.expenses_for_current_month)


def render_summary(state: BudgetState, summary: BudgetSummary, expense_count: int) -> None:
    """Print the 50/30/20 status table for a month."""
    currency = state.currency
    console.print(f"[bold cyan]{format_month(state.current_month)} Budget Status[/bold cyan]\n")

    if not state.onboarding_completed:
        console.print("[yellow]Setup not finished. Run 'budgetrule onboard --income <amount>' first.[/yellow]\n")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Category", style="white")
    table.add_column("Share", justify="right", style="dim")
    table.add_column("Allocated", justify="right")
    table.add_column("Spent", justify="right")
    table.add_column("Remaining", justify="right")
    table.add_column("Used", justify="right")

    for category in CATEGORIES:
        config = CATEGORY_CONFIG[category]
        figures = summary.category(category)

        if figures.is_over_budget:
            remaining_display = f"[red]{money(figures.remaining, currency)}[/red]"
            used_display = f"[red]{figures.percentage:.0f}%[/red]"
        else:
            remaining_display = f"[green]{money(figures.remaining, currency)}[/green]"
            used_display = f"{figures.percentage:.0f}%"

        table.add_row(
            config.label,
            f"{config.percentage:.0%}",
            money(figures.allocated, currency),
            money(figures.spent, currency),
            remaining_display,
            used_display,
        )

    console.print(table)

    console.print(f"\n[bold]Income:[/bold]      {money(summary.income, currency)}")
    console.print(f"[bold]Total spent:[/bold] {money(summary.total_spent, currency)} ({expense_count} expenses)")
    if summary.total_remaining < 0:
        console.print(f"[bold]Remaining:[/bold]   [red]{money(summary.total_remaining, currency)}[/red]")
    else:
        console.print(f"[bold]Remaining:[/bold]   [green]{money(summary.total_remaining, currency)}[/green]")


def status_command(month: str | None = None, previous: bool = False, next_: bool = False) -> None:
    """Show the budget summary for a month."""
    persistence = get_persistence()
    target_month = resolve_month(month, previous, next_)
    state, summary, expense_count = asyncio.run(_load_summary(persistence, target_month))
    render_summary(state, summary, expense_count)


def parse_currency_code(code: str) -> str:
    """Normalize an ISO 4217 code, exiting on malformed input."""
    normalized = code.strip().upper()
    if len(normalized) != 3 or not normalized.isalpha():
        fail(f"Invalid currency code: {code} (expected 3 letters, e.g. USD)")
    return normalized


async def _set_currency(persistence: BudgetPersistence, currency: str) -> BudgetState:
    async with budget_store(persistence) as store:
        store.set_currency(currency)
        return store.state


def currency_command(code: str | None = None) -> None:
    """Show or set the active currency."""
    persistence = get_persistence()

    if code is None:
        state = asyncio.run(_load_state(persistence))
        console.print(f"Currency: [bold]{state.currency}[/bold]")
        return

    currency = parse_currency_code(code)
    asyncio.run(_set_currency(persistence, currency))
    console.print(f"[green]✓ Currency set to {currency}[/green]")
    console.print("[dim]Amounts are not converted; only the label changes.[/dim]")


async def _set_location(persistence: BudgetPersistence, location: LocationPreference | None) -> BudgetState:
    async with budget_store(persistence) as store:
        store.set_location(location)
        return store.state


def render_location(location: LocationPreference | None) -> None:
    if location is None:
        console.print("[dim]No location set[/dim]")
        return

    fields = location.to_dict()
    if not fields:
        console.print("[dim]Location set with no details[/dim]")
        return

    for name, value in fields.items():
        console.print(f"  {name}: {value}")


def location_command(location: LocationPreference | None = None, clear: bool = False) -> None:
    """Show, replace or clear the location preference."""
    persistence = get_persistence()

    if clear:
        asyncio.run(_set_location(persistence, None))
        console.print("[green]✓ Location cleared[/green]")
        return

    if location is None:
        state = asyncio.run(_load_state(persistence))
        render_location(state.location)
        return

    asyncio.run(_set_location(persistence, location))
    console.print("[green]✓ Location saved[/green]")
    render_location(location)


async def _onboard(
    persistence: BudgetPersistence,
    income: Money,
    currency: str | None,
    location: LocationPreference | None,
) -> BudgetState:
    async with budget_store(persistence) as store:
        store.set_income(income)
        if currency is not None:
            store.set_currency(currency)
        if location is not None:
            store.set_location(location)
        store.complete_onboarding()
        return store.state


def onboard_command(
    income: str,
    currency: str | None = None,
    location: LocationPreference | None = None,
) -> None:
    """Finish first-time setup: income, currency and location."""
    persistence = get_persistence()
    income_amount = parse_income(income)
    currency_code = parse_currency_code(currency) if currency else None

    state = asyncio.run(_onboard(persistence, income_amount, currency_code, location))

    console.print("[green]✓ Setup complete![/green]\n")
    render_allocations(state)
    console.print("\n[dim]Tip: Use 'budgetrule add' to log your first expense[/dim]")
