"""Domain type definitions for budgetrule.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in minor currency units (cents)
- Month: Month in YYYY-MM format
- DayKey: Calendar day in YYYY-MM-DD format
- ExpenseId: Opaque expense identifier
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Literal, NewType, get_args

# Money amounts are stored as minor units to avoid floating point errors
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)

# Day is always in YYYY-MM-DD format (e.g., "2025-01-31")
DayKey = NewType("DayKey", str)

ExpenseId = NewType("ExpenseId", str)

Category = Literal["needs", "wants", "savings"]
CATEGORIES: tuple[Category, ...] = get_args(Category)

ThemeMode = Literal["auto", "light", "dark"]
THEME_MODES: tuple[ThemeMode, ...] = get_args(ThemeMode)

SUPPORTED_LANGUAGES = ("en", "bn")

DEFAULT_CURRENCY = "USD"
DEFAULT_LANGUAGE = "en"
DEFAULT_THEME: ThemeMode = "auto"

MAX_INCOME = Money(100_000_000)
MAX_DESCRIPTION_LENGTH = 100


@dataclass(frozen=True)
class CategoryConfig:
    """Static configuration for a budget category."""

    label: str
    percentage: float
    description: str


CATEGORY_CONFIG: dict[Category, CategoryConfig] = {
    "needs": CategoryConfig(
        label="Needs",
        percentage=0.5,
        description="Essentials: rent, utilities, groceries, insurance",
    ),
    "wants": CategoryConfig(
        label="Wants",
        percentage=0.3,
        description="Non-essentials: entertainment, dining out, hobbies",
    ),
    "savings": CategoryConfig(
        label="Savings",
        percentage=0.2,
        description="Savings, investments, emergency fund",
    ),
}


@dataclass(frozen=True)
class Expense:
    """Immutable expense record."""

    id: ExpenseId
    amount: Money
    description: str
    category: Category
    date: DayKey
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the persisted field names."""
        return {
            "id": self.id,
            "amount": self.amount,
            "description": self.description,
            "category": self.category,
            "date": self.date,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Expense":
        """Build an expense from its persisted form.

        Raises:
            KeyError: If a field is missing.
            ValueError: If the amount is not an integer or the category is unknown.
        """
        amount = data["amount"]
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise ValueError(f"Expense amount must be an integer, got {amount!r}")
        category = data["category"]
        if category not in CATEGORIES:
            raise ValueError(f"Unknown category: {category!r}")
        return cls(
            id=ExpenseId(str(data["id"])),
            amount=Money(amount),
            description=str(data["description"]),
            category=category,
            date=DayKey(str(data["date"])),
            created_at=str(data["createdAt"]),
        )


@dataclass(frozen=True)
class LocationPreference:
    """Where the user lives. Every field is optional."""

    latitude: float | None = None
    longitude: float | None = None
    address: str | None = None
    city: str | None = None
    district: str | None = None
    region: str | None = None
    country: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize, leaving out unset fields."""
        return {key: value for key, value in asdict(self).items() if value is not None}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LocationPreference":
        if not isinstance(data, dict):
            raise ValueError(f"Location must be an object, got {data!r}")
        known = {name for name in cls.__dataclass_fields__}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass(frozen=True)
class BudgetState:
    """Canonical budget state held by the store."""

    monthly_income: Money
    current_month: Month
    expenses: tuple[Expense, ...] = field(default_factory=tuple)
    is_loading: bool = True
    currency: str = DEFAULT_CURRENCY
    location: LocationPreference | None = None
    onboarding_completed: bool = False
