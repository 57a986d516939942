"""Unit tests for the Product aggregate and PriceRecord."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ims.domain.exceptions import ValidationError
from ims.domain.model.value_objects import Money
from tests.fakes import make_product, make_record

NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


class TestProductMargins:

    def test_profit_and_margin(self):
        p = make_product(purchase="10.00", selling="15.00")
        assert p.profit_amount == Decimal("5.00")
        assert p.margin_percent == Decimal("5.00") / Decimal("15.00") * 100

    def test_selling_below_cost_gives_negative_margin(self):
        p = make_product(purchase="12.00", selling="10.00")
        assert p.profit_amount == Decimal("-2.00")
        assert p.margin_percent < 0

    def test_zero_selling_price_has_no_margin(self):
        p = make_product(purchase="1.00", selling="0")
        assert p.margin_percent is None


class TestReorderPoint:

    def test_falls_back_to_minimum_stock(self):
        p = make_product(minimum_stock=7)
        assert p.reorder_point is None
        assert p.effective_reorder_point == 7

    def test_explicit_value_wins(self):
        p = make_product(minimum_stock=7)
        p.set_reorder_point(0)
        assert p.effective_reorder_point == 0

    @pytest.mark.parametrize("value", [-1, 1.5, "10", True, None])
    def test_invalid_values_rejected(self, value):
        p = make_product()
        with pytest.raises(ValidationError, match="Reorder point"):
            p.set_reorder_point(value)

    def test_apply_prices(self):
        p = make_product()
        p.apply_prices(Money.of("11"), Money.of("17"))
        assert p.purchase_price == Money.of("11")
        assert p.selling_price == Money.of("17")


class TestPriceRecord:

    def test_margin_ratio(self):
        r = make_record("P1", "10.00", "15.00", NOW)
        assert r.margin_ratio == Decimal("0.5")

    def test_zero_cost_has_no_margin_ratio(self):
        r = make_record("P1", "0", "5.00", NOW)
        assert r.margin_ratio is None

    def test_sequence_breaks_timestamp_ties(self):
        first = make_record("P1", "1", "2", NOW, sequence=4)
        second = make_record("P1", "1", "2", NOW, sequence=9)
        assert sorted([second, first], key=lambda r: r.sort_key) == [first, second]
