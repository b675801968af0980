"""Pure functions for 50/30/20 budget calculations.

This module contains the functional core for budget operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in minor units (Money type).
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from budgetrule.domain.models import CATEGORY_CONFIG, Category, DayKey, Expense, Money, Month


@dataclass(frozen=True)
class CategoryBudget:
    """Immutable budget figures for a single category."""

    allocated: Money
    spent: Money
    remaining: Money  # Negative when over budget
    percentage: float
    is_over_budget: bool


@dataclass(frozen=True)
class BudgetSummary:
    """Immutable budget summary for a month."""

    income: Money
    total_spent: Money
    total_remaining: Money
    needs: CategoryBudget
    wants: CategoryBudget
    savings: CategoryBudget

    def category(self, category: Category) -> CategoryBudget:
        """Look up a category's figures by name."""
        return getattr(self, category)


def expenses_for_month(expenses: Iterable[Expense], month: Month) -> list[Expense]:
    """Filter expenses to a single month.

    Args:
        expenses: Expenses in any order.
        month: Month in YYYY-MM format.

    Returns:
        Expenses whose date falls in the month, original order kept.
    """
    return [expense for expense in expenses if expense.date.startswith(month)]


def category_allocation(income: Money, category: Category) -> Money:
    """Calculate the share of income allocated to a category.

    Each category is rounded on its own, so the three allocations can add up
    to a minor unit or two more or less than income.

    Args:
        income: Monthly income in minor units.
        category: Budget category.

    Returns:
        Allocated amount in minor units.
    """
    share = Decimal(income) * Decimal(str(CATEGORY_CONFIG[category].percentage))
    return Money(int(share.quantize(Decimal("1"), rounding=ROUND_HALF_UP)))


def calculate_spent(month_expenses: Iterable[Expense], category: Category) -> Money:
    """Sum expense amounts for a category."""
    return Money(sum(expense.amount for expense in month_expenses if expense.category == category))


def category_budget(income: Money, month_expenses: Iterable[Expense], category: Category) -> CategoryBudget:
    """Compute budget figures for a category.

    Args:
        income: Monthly income in minor units.
        month_expenses: Expenses already filtered to the active month.
        category: Budget category.

    Returns:
        CategoryBudget for the category.
    """
    allocated = category_allocation(income, category)
    spent = calculate_spent(month_expenses, category)

    return CategoryBudget(
        allocated=allocated,
        spent=spent,
        remaining=Money(allocated - spent),
        percentage=(spent / allocated) * 100 if allocated > 0 else 0.0,
        is_over_budget=spent > allocated,
    )


def budget_summary(income: Money, month_expenses: Iterable[Expense]) -> BudgetSummary:
    """Compute the full budget summary for a month.

    Args:
        income: Monthly income in minor units.
        month_expenses: Expenses already filtered to the active month.

    Returns:
        BudgetSummary with per-category figures and totals.
    """
    month_expenses = list(month_expenses)
    needs = category_budget(income, month_expenses, "needs")
    wants = category_budget(income, month_expenses, "wants")
    savings = category_budget(income, month_expenses, "savings")

    total_spent = Money(needs.spent + wants.spent + savings.spent)

    return BudgetSummary(
        income=income,
        total_spent=total_spent,
        total_remaining=Money(income - total_spent),
        needs=needs,
        wants=wants,
        savings=savings,
    )


def group_by_date(expenses: Iterable[Expense]) -> dict[DayKey, list[Expense]]:
    """Group expenses by day for display.

    Args:
        expenses: Expenses in any order.

    Returns:
        Mapping of day to expenses, most recent day first. Expenses within a
        day keep their original relative order.
    """
    ordered = sorted(expenses, key=lambda expense: expense.date, reverse=True)

    grouped: dict[DayKey, list[Expense]] = {}
    for expense in ordered:
        grouped.setdefault(expense.date, []).append(expense)

    return grouped
