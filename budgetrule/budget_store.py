"""Budget state store.

BudgetStore owns the canonical BudgetState for a session. Mutations apply a
pure transition from ``budgetrule.domain.state`` and then schedule a write of
the affected key. Writes are fire-and-forget tasks, serialised per key so the
last issued write for a key wins.

Mutations must be called from a running event loop.
"""

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from contextvars import ContextVar
from enum import Enum
from typing import Any

from budgetrule.dates import current_month_key
from budgetrule.domain.budget import BudgetSummary, budget_summary, expenses_for_month
from budgetrule.domain.models import BudgetState, Expense, ExpenseId, LocationPreference, Money, Month
from budgetrule.domain.state import (
    AddExpense,
    BudgetAction,
    CompleteOnboarding,
    DeleteExpense,
    ResetAll,
    SetCurrency,
    SetIncome,
    SetLoading,
    SetLocation,
    SetMonth,
    initial_state,
    reduce_state,
)
from budgetrule.store.persistence import BudgetPersistence

logger = logging.getLogger(__name__)


class BudgetStoreError(RuntimeError):
    """The store was used in a way its lifecycle does not allow."""


class BudgetStoreContextError(BudgetStoreError):
    """No budget store is active in the current context."""


class StoreStatus(Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"


class BudgetStore:
    """Holds budget state and persists it as it changes."""

    def __init__(self, persistence: BudgetPersistence, month: Month | None = None) -> None:
        self.persistence = persistence
        self.status = StoreStatus.UNINITIALIZED
        self._state = initial_state(month)
        self._pending: set[asyncio.Task[None]] = set()
        self._key_locks: dict[str, asyncio.Lock] = {}

    @property
    def state(self) -> BudgetState:
        return self._state

    @property
    def expenses_for_current_month(self) -> list[Expense]:
        return expenses_for_month(self._state.expenses, self._state.current_month)

    @property
    def summary(self) -> BudgetSummary:
        return budget_summary(self._state.monthly_income, self.expenses_for_current_month)

    async def start(self) -> None:
        """Load persisted fields and mark the store ready.

        The store always ends up ready. Fields that fail to load keep their
        defaults.

        Raises:
            BudgetStoreError: If the store was already started.
        """
        if self.status is not StoreStatus.UNINITIALIZED:
            raise BudgetStoreError(f"Budget store already started ({self.status.value})")

        self.status = StoreStatus.LOADING
        try:
            data = await self.persistence.load_budget_data()
        except Exception:
            logger.exception("Error loading budget data")
            self._dispatch(SetLoading(False))
        else:
            self._dispatch(data)
        self.status = StoreStatus.READY
        logger.debug("Budget store ready with %d expenses", len(self._state.expenses))

    async def flush(self) -> None:
        """Wait for every in-flight write to finish."""
        while self._pending:
            await asyncio.gather(*self._pending)

    def _dispatch(self, action: BudgetAction) -> None:
        self._state = reduce_state(self._state, action)

    def _apply(self, action: BudgetAction) -> None:
        if self.status is StoreStatus.UNINITIALIZED:
            raise BudgetStoreError("Budget store used before start()")
        self._dispatch(action)

    def _schedule_save(self, key: str, save: Callable[[Any], Awaitable[None]], value: Any) -> None:
        if self._state.is_loading:
            logger.debug("Skipping save of %s while loading", key)
            return

        task = asyncio.get_running_loop().create_task(self._write(key, save, value))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _write(self, key: str, save: Callable[[Any], Awaitable[None]], value: Any) -> None:
        lock = self._key_locks.setdefault(key, asyncio.Lock())
        async with lock:
            await save(value)

    # Mutations

    def set_income(self, amount: Money) -> None:
        self._apply(SetIncome(amount))
        self._schedule_save("income", self.persistence.save_income, self._state.monthly_income)

    def add_expense(self, expense: Expense) -> None:
        self._apply(AddExpense(expense))
        self._schedule_save("expenses", self.persistence.save_expenses, self._state.expenses)

    def delete_expense(self, expense_id: ExpenseId) -> None:
        before = self._state
        self._apply(DeleteExpense(expense_id))
        if self._state is before:
            return
        self._schedule_save("expenses", self.persistence.save_expenses, self._state.expenses)

    def set_month(self, month: Month) -> None:
        # The selected month scopes views only and is never persisted
        self._apply(SetMonth(month))

    def set_currency(self, currency: str) -> None:
        self._apply(SetCurrency(currency))
        self._schedule_save("currency", self.persistence.save_currency, self._state.currency)

    def set_location(self, location: LocationPreference | None) -> None:
        self._apply(SetLocation(location))
        self._schedule_save("location", self.persistence.save_location, self._state.location)

    def complete_onboarding(self) -> None:
        self._apply(CompleteOnboarding())
        self._schedule_save(
            "onboarding_completed", self.persistence.save_onboarding_completed, self._state.onboarding_completed
        )

    async def reset_all(self) -> None:
        """Clear persisted data, then reset in-memory state to defaults.

        In-flight writes finish before the clear so none of them can land
        afterwards and bring old data back.
        """
        if self.status is StoreStatus.UNINITIALIZED:
            raise BudgetStoreError("Budget store used before start()")

        await self.flush()
        await self.persistence.clear_all()
        self._dispatch(ResetAll(current_month_key()))
        logger.info("Budget data reset")


_current_store: ContextVar[BudgetStore | None] = ContextVar("budget_store", default=None)


@asynccontextmanager
async def budget_store(persistence: BudgetPersistence, month: Month | None = None) -> AsyncIterator[BudgetStore]:
    """Start a budget store and make it current for the enclosed block.

    Pending writes are flushed when the block exits.

    Args:
        persistence: Adapter to load from and save to.
        month: Month to scope views to. Defaults to the current month.

    Yields:
        The started BudgetStore.
    """
    store = BudgetStore(persistence, month)
    token = _current_store.set(store)
    try:
        await store.start()
        yield store
    finally:
        try:
            await store.flush()
        finally:
            _current_store.reset(token)


def use_budget_store() -> BudgetStore:
    """Get the budget store active in the current context.

    Raises:
        BudgetStoreContextError: If called outside ``budget_store()``.
    """
    store = _current_store.get()
    if store is None:
        raise BudgetStoreContextError("use_budget_store() must be called inside budget_store()")
    return store
