"""Pure validation of user-supplied expense and income values.

Validation failures are returned, never raised, so callers decide how to
present them. The first failing rule wins.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from budgetrule.domain.models import CATEGORIES, MAX_DESCRIPTION_LENGTH, MAX_INCOME


@dataclass(frozen=True)
class ValidationResult:
    """Immutable validation outcome."""

    is_valid: bool
    error: str | None = None


VALID = ValidationResult(is_valid=True)


def _invalid(error: str) -> ValidationResult:
    return ValidationResult(is_valid=False, error=error)


def validate_expense(expense: Mapping[str, Any]) -> ValidationResult:
    """Validate a partially built expense.

    Args:
        expense: Mapping with optional "amount", "description" and "category" keys.

    Returns:
        ValidationResult with the first failing rule's message.
    """
    amount = expense.get("amount")
    if not amount or isinstance(amount, bool):
        return _invalid("Amount must be greater than 0")

    # Amounts are integer minor units
    if not isinstance(amount, int):
        return _invalid("Amount must be a whole number of minor units")

    if amount <= 0:
        return _invalid("Amount must be greater than 0")

    description = expense.get("description")
    if not isinstance(description, str) or not description.strip():
        return _invalid("Description is required")

    if len(description) > MAX_DESCRIPTION_LENGTH:
        return _invalid(f"Description must be under {MAX_DESCRIPTION_LENGTH} characters")

    if expense.get("category") not in CATEGORIES:
        return _invalid("Please select a category")

    return VALID


def validate_income(income: int) -> ValidationResult:
    """Validate a monthly income in minor units."""
    if income < 0:
        return _invalid("Income cannot be negative")

    if income > MAX_INCOME:
        return _invalid("Income exceeds maximum allowed")

    return VALID
