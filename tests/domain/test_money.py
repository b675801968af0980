"""Tests for budgetrule.domain.money."""

import re

import pytest

from budgetrule.domain.models import Money
from budgetrule.domain.money import format_money, generate_id, parse_amount

UUID4_PATTERN = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


class TestParseAmount:
    """Tests for parse_amount."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("12", 1200),
            ("12.5", 1250),
            ("12.50", 1250),
            ("0.29", 29),
            ("$1,000.00", 100000),
            ("12.345", 1234),
            ("1.2.3", 120),
            (".5", 50),
            ("7.", 700),
        ],
    )
    def test_parses_to_minor_units(self, text: str, expected: int) -> None:
        """Should convert typed amounts to cents."""
        assert parse_amount(text) == expected

    @pytest.mark.parametrize("text", ["", "abc", ".", "..", "$"])
    def test_unparseable_is_zero(self, text: str) -> None:
        """Should return 0 when nothing numeric remains."""
        assert parse_amount(text) == 0

    def test_strips_minus_sign(self) -> None:
        """Should drop a minus sign like any other non-numeric character."""
        assert parse_amount("-5") == 500


class TestFormatMoney:
    """Tests for format_money."""

    def test_formats_with_thousands_separator(self) -> None:
        """Should show two decimals and grouping."""
        assert format_money(Money(123456)) == "$1,234.56"

    def test_negative(self) -> None:
        """Should put the sign before the symbol."""
        assert format_money(Money(-1200)) == "-$12.00"

    def test_custom_symbol(self) -> None:
        """Should use the given symbol."""
        assert format_money(Money(5), symbol="EUR ") == "EUR 0.05"


class TestGenerateId:
    """Tests for generate_id."""

    def test_uuid4_shape(self) -> None:
        """Should look like a version 4 UUID."""
        assert UUID4_PATTERN.match(generate_id())

    def test_ids_differ(self) -> None:
        """Should not repeat across many calls."""
        ids = {generate_id() for _ in range(1000)}
        assert len(ids) == 1000
