"""Budget state transitions.

Every change to BudgetState is described by one of the action dataclasses
below and applied by ``reduce_state``, a pure function. Persistence happens
outside, in ``budgetrule.budget_store``.
"""

from dataclasses import dataclass, replace

from budgetrule.dates import current_month_key
from budgetrule.domain.models import BudgetState, Expense, ExpenseId, LocationPreference, Money, Month


@dataclass(frozen=True)
class SetLoading:
    is_loading: bool


@dataclass(frozen=True)
class LoadData:
    """Persisted fields read at startup."""

    monthly_income: Money
    expenses: tuple[Expense, ...]
    currency: str
    location: LocationPreference | None
    onboarding_completed: bool


@dataclass(frozen=True)
class SetIncome:
    amount: Money


@dataclass(frozen=True)
class AddExpense:
    expense: Expense


@dataclass(frozen=True)
class DeleteExpense:
    expense_id: ExpenseId


@dataclass(frozen=True)
class SetMonth:
    month: Month


@dataclass(frozen=True)
class SetCurrency:
    currency: str


@dataclass(frozen=True)
class SetLocation:
    location: LocationPreference | None


@dataclass(frozen=True)
class CompleteOnboarding:
    pass


@dataclass(frozen=True)
class ResetAll:
    month: Month


BudgetAction = (
    SetLoading
    | LoadData
    | SetIncome
    | AddExpense
    | DeleteExpense
    | SetMonth
    | SetCurrency
    | SetLocation
    | CompleteOnboarding
    | ResetAll
)


def initial_state(month: Month | None = None) -> BudgetState:
    """Build the state a store starts from before anything is loaded.

    Args:
        month: Month to scope views to. Defaults to the current month.

    Returns:
        Default BudgetState with ``is_loading`` set.
    """
    return BudgetState(
        monthly_income=Money(0),
        current_month=month or current_month_key(),
        is_loading=True,
    )


def reduce_state(state: BudgetState, action: BudgetAction) -> BudgetState:
    """Apply an action to a state.

    Args:
        state: Current state (never modified).
        action: Transition to apply.

    Returns:
        The new state.

    Raises:
        TypeError: If action is not a known budget action.
    """
    if isinstance(action, SetLoading):
        return replace(state, is_loading=action.is_loading)

    if isinstance(action, LoadData):
        return replace(
            state,
            monthly_income=action.monthly_income,
            expenses=tuple(action.expenses),
            currency=action.currency,
            location=action.location,
            onboarding_completed=action.onboarding_completed,
            is_loading=False,
        )

    if isinstance(action, SetIncome):
        return replace(state, monthly_income=action.amount)

    if isinstance(action, AddExpense):
        return replace(state, expenses=(*state.expenses, action.expense))

    if isinstance(action, DeleteExpense):
        remaining = tuple(expense for expense in state.expenses if expense.id != action.expense_id)
        if len(remaining) == len(state.expenses):
            return state
        return replace(state, expenses=remaining)

    if isinstance(action, SetMonth):
        return replace(state, current_month=action.month)

    if isinstance(action, SetCurrency):
        return replace(state, currency=action.currency)

    if isinstance(action, SetLocation):
        return replace(state, location=action.location)

    if isinstance(action, CompleteOnboarding):
        return replace(state, onboarding_completed=True)

    if isinstance(action, ResetAll):
        return replace(initial_state(action.month), is_loading=False)

    raise TypeError(f"Unknown budget action: {action!r}")
