"""Load and save budget fields over a key-value store.

Every field lives under its own key. Loads never raise: a missing key or a
failure returns the field's default. Saves and clears never raise either;
failures are logged and the in-memory state stays authoritative.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from typing import TypeVar

from budgetrule.domain.models import (
    DEFAULT_CURRENCY,
    DEFAULT_LANGUAGE,
    DEFAULT_THEME,
    THEME_MODES,
    Expense,
    LocationPreference,
    Money,
    ThemeMode,
)
from budgetrule.domain.state import LoadData
from budgetrule.store.kv import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

KEY_NAMES = (
    "income",
    "expenses",
    "currency",
    "location",
    "onboarding_completed",
    "language",
    "theme",
)


def _decode_income(raw: str) -> Money:
    value = json.loads(raw)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Stored income is not an integer: {raw!r}")
    return Money(value)


def _decode_expenses(raw: str) -> tuple[Expense, ...]:
    value = json.loads(raw)
    if not isinstance(value, list):
        raise ValueError("Stored expenses are not a list")
    return tuple(Expense.from_dict(item) for item in value)


def _decode_bool(raw: str) -> bool:
    value = json.loads(raw)
    if not isinstance(value, bool):
        raise ValueError(f"Stored flag is not a boolean: {raw!r}")
    return value


def _decode_theme(raw: str) -> ThemeMode:
    if raw not in THEME_MODES:
        raise ValueError(f"Unknown theme mode: {raw!r}")
    return raw  # type: ignore[return-value]


class BudgetPersistence:
    """Budget persistence adapter.

    Keys are ``@{namespace}_{name}``, e.g. ``@budget_income``.
    """

    def __init__(self, kv: KeyValueStore, namespace: str = "budget") -> None:
        self.kv = kv
        self.namespace = namespace

    def key(self, name: str) -> str:
        """Get the storage key for a field name."""
        return f"@{self.namespace}_{name}"

    @property
    def keys(self) -> list[str]:
        """Every storage key this adapter writes."""
        return [self.key(name) for name in KEY_NAMES]

    async def _load(self, name: str, decode: Callable[[str], T], default: T) -> T:
        try:
            raw = await self.kv.get_item(self.key(name))
            if raw is None or raw == "":
                return default
            return decode(raw)
        except Exception:
            logger.exception("Error loading %s, using default", name)
            return default

    async def _save(self, name: str, value: str) -> None:
        try:
            await self.kv.set_item(self.key(name), value)
        except Exception:
            logger.exception("Error saving %s", name)

    # ─── Income ───────────────────────────────────────────────────────────────

    async def load_income(self) -> Money:
        return await self._load("income", _decode_income, Money(0))

    async def save_income(self, income: Money) -> None:
        await self._save("income", json.dumps(income))

    # ─── Expenses ─────────────────────────────────────────────────────────────

    async def load_expenses(self) -> tuple[Expense, ...]:
        return await self._load("expenses", _decode_expenses, ())

    async def save_expenses(self, expenses: tuple[Expense, ...]) -> None:
        await self._save("expenses", json.dumps([expense.to_dict() for expense in expenses]))

    # ─── Currency ─────────────────────────────────────────────────────────────

    async def load_currency(self) -> str:
        return await self._load("currency", str, DEFAULT_CURRENCY)

    async def save_currency(self, currency: str) -> None:
        await self._save("currency", currency)

    # ─── Location ─────────────────────────────────────────────────────────────

    async def load_location(self) -> LocationPreference | None:
        return await self._load("location", lambda raw: LocationPreference.from_dict(json.loads(raw)), None)

    async def save_location(self, location: LocationPreference | None) -> None:
        """Save the location, removing the key when there is none."""
        if location is not None:
            await self._save("location", json.dumps(location.to_dict()))
            return

        try:
            await self.kv.remove_item(self.key("location"))
        except Exception:
            logger.exception("Error removing location")

    # ─── Onboarding ───────────────────────────────────────────────────────────

    async def load_onboarding_completed(self) -> bool:
        return await self._load("onboarding_completed", _decode_bool, False)

    async def save_onboarding_completed(self, completed: bool) -> None:
        await self._save("onboarding_completed", json.dumps(completed))

    # ─── Preferences ──────────────────────────────────────────────────────────

    async def load_language(self) -> str:
        return await self._load("language", str, DEFAULT_LANGUAGE)

    async def save_language(self, language: str) -> None:
        await self._save("language", language)

    async def load_theme(self) -> ThemeMode:
        return await self._load("theme", _decode_theme, DEFAULT_THEME)

    async def save_theme(self, theme: ThemeMode) -> None:
        await self._save("theme", theme)

    # ─── Bulk ─────────────────────────────────────────────────────────────────

    async def load_budget_data(self) -> LoadData:
        """Read every budget field concurrently into a LoadData action.

        Each read falls back to its own default, so one failure never
        affects the others.
        """
        income, expenses, currency, location, onboarding_completed = await asyncio.gather(
            self.load_income(),
            self.load_expenses(),
            self.load_currency(),
            self.load_location(),
            self.load_onboarding_completed(),
        )
        return LoadData(
            monthly_income=income,
            expenses=expenses,
            currency=currency,
            location=location,
            onboarding_completed=onboarding_completed,
        )

    async def clear_all(self) -> None:
        """Remove every key used by this adapter."""
        try:
            await self.kv.multi_remove(self.keys)
        except Exception:
            logger.exception("Error clearing data")
