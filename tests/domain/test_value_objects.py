"""Unit tests for domain value objects."""

from decimal import Decimal

import pytest

from ims.domain.exceptions import ValidationError
from ims.domain.model.value_objects import Money, format_amount, format_percent, round_half_up


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_string(self):
        m = Money.of("25.99")
        assert m.amount == Decimal("25.99")

    def test_of_factory_from_int(self):
        m = Money.of(10)
        assert m.amount == Decimal("10")

    def test_zero_is_a_valid_price(self):
        assert Money.of("0").is_zero

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_non_decimal_amount_rejected(self):
        with pytest.raises(ValidationError, match="must be a Decimal"):
            Money(10.5)

    def test_non_finite_amount_rejected(self):
        with pytest.raises(ValidationError, match="finite"):
            Money(Decimal("NaN"))

    @pytest.mark.parametrize("raw", ["abc", "", None, True])
    def test_of_rejects_garbage(self, raw):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of(raw)

    def test_margin_over_can_be_negative(self):
        assert Money.of("8").margin_over(Money.of("10")) == Decimal("-2")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "USD").margin_over(Money(Decimal("5"), "EUR"))

    def test_zero_flag(self):
        assert Money.of("0").is_zero
        assert not Money.of("0.01").is_zero

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"
        assert str(Money.of("1234.5")) == "$1,234.50"


# ── Formatting ───────────────────────────────────────────────────────────────


class TestFormatting:

    def test_round_half_up_at_cents(self):
        assert round_half_up(Decimal("2.345")) == Decimal("2.35")
        assert round_half_up(Decimal("2.344")) == Decimal("2.34")

    def test_negative_amount_formatting(self):
        assert format_amount(Decimal("-3")) == "-$3.00"

    def test_percent_formatting(self):
        assert format_percent(Decimal("33.3333")) == "33.33%"

    def test_missing_percent_is_not_applicable(self):
        assert format_percent(None) == "n/a"
