"""Domain models and types for budgetrule.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from budgetrule.domain.models import (
    BudgetState,
    Category,
    DayKey,
    Expense,
    ExpenseId,
    LocationPreference,
    Money,
    Month,
)

__all__ = [
    "BudgetState",
    "Category",
    "DayKey",
    "Expense",
    "ExpenseId",
    "LocationPreference",
    "Money",
    "Month",
]
