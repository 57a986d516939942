"""Integration tests for the price history and price analytics use cases."""

from datetime import datetime, timedelta, timezone

import pytest

from ims.application.bulk_update_prices import BulkUpdatePricesHandler, to_price_update
from ims.application.show_price_averages import ShowPriceAveragesHandler
from ims.application.show_price_history import ShowPriceHistoryHandler, parse_date_bound
from ims.application.show_price_trend import ShowPriceTrendHandler
from ims.application.suggest_price import SuggestPriceHandler
from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.model.clock import FixedClock
from ims.domain.model.outcomes import NoData
from ims.domain.model.value_objects import Money
from tests.fakes import FakeUnitOfWork, make_product

NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


def _setup() -> tuple[FakeUnitOfWork, FixedClock]:
    uow = FakeUnitOfWork([make_product("P1", "10.00", "15.00"), make_product("P2", "4.00", "6.00")])
    return uow, FixedClock(NOW - timedelta(days=10))


def _reprice(uow, clock, items, days_later=0):
    clock.advance(days=days_later)
    BulkUpdatePricesHandler(uow, clock).handle(items, reason="Repricing", actor="alice")


class TestParseDateBound:

    def test_bare_start_date_is_midnight_utc(self):
        assert parse_date_bound("2026-10-01") == datetime(2026, 10, 1, tzinfo=timezone.utc)

    def test_bare_end_date_covers_the_whole_day(self):
        bound = parse_date_bound("2026-10-01", end_of_day=True)
        assert bound.date().isoformat() == "2026-10-01"
        assert (bound.hour, bound.minute, bound.second) == (23, 59, 59)

    def test_full_timestamp_passes_through(self):
        assert parse_date_bound("2026-10-01T08:30:00+00:00").hour == 8

    def test_empty_means_unbounded(self):
        assert parse_date_bound(None) is None
        assert parse_date_bound("") is None

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError, match="Invalid date"):
            parse_date_bound("yesterday")


class TestBulkUpdatePricesHandler:

    def test_accepts_request_mappings(self):
        uow, clock = _setup()

        dto = BulkUpdatePricesHandler(uow, clock).handle(
            [
                {"productId": "P1", "purchasePrice": "11", "sellingPrice": "17"},
                {"product_id": "P2", "purchase_price": 5, "selling_price": 8},
            ]
        )

        assert dto.updated_count == 2
        assert uow.products.get_by_id("P1").selling_price == Money.of("17")
        assert uow.products.get_by_id("P2").selling_price == Money.of("8")

    def test_non_mapping_entry_reported_as_problem(self):
        uow, clock = _setup()

        with pytest.raises(ValidationError) as excinfo:
            BulkUpdatePricesHandler(uow, clock).handle([{"productId": "P1", "purchasePrice": "1", "sellingPrice": "2"}, 42])

        assert excinfo.value.problems[0].index == 1
        assert uow.price_records.count() == 0

    def test_to_price_update_missing_fields_stay_none(self):
        update = to_price_update({"productId": "P1"})
        assert update.purchase_price is None
        assert update.selling_price is None


class TestShowPriceHistoryHandler:

    def test_history_after_bulk_updates(self):
        uow, clock = _setup()
        _reprice(uow, clock, [{"productId": "P1", "purchasePrice": "11", "sellingPrice": "16"}])
        _reprice(uow, clock, [{"productId": "P1", "purchasePrice": "12", "sellingPrice": "18"}], 2)

        dto = ShowPriceHistoryHandler(uow).handle("P1")

        assert dto.total_count == 2
        assert [r.selling_price for r in dto.records] == ["$16.00", "$18.00"]
        assert dto.records[0].previous_selling_price == "$15.00"
        assert dto.records[1].previous_selling_price == "$16.00"
        assert dto.records[0].actor == "alice"

    def test_date_filter_with_bare_dates(self):
        uow, clock = _setup()
        _reprice(uow, clock, [{"productId": "P1", "purchasePrice": "11", "sellingPrice": "16"}])
        _reprice(uow, clock, [{"productId": "P1", "purchasePrice": "12", "sellingPrice": "18"}], 5)

        day = (NOW - timedelta(days=10)).date().isoformat()
        dto = ShowPriceHistoryHandler(uow).handle("P1", start_date=day, end_date=day)

        assert dto.total_count == 1

    def test_unknown_product(self):
        uow, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            ShowPriceHistoryHandler(uow).handle("NOPE")


class TestAnalyticsHandlers:

    def _history(self):
        uow, clock = _setup()
        _reprice(uow, clock, [{"productId": "P1", "purchasePrice": "10", "sellingPrice": "15"}])
        _reprice(uow, clock, [{"productId": "P1", "purchasePrice": "20", "sellingPrice": "26"}], 5)
        return uow, FixedClock(NOW)

    def test_trend_dto(self):
        uow, clock = self._history()
        dto = ShowPriceTrendHandler(uow, clock).handle("P1", 30)

        assert dto.direction == "up"
        assert dto.selling.earlier_mean == "$15.00"
        assert dto.selling.later_mean == "$26.00"
        assert dto.selling_change == "$11.00"
        assert dto.data_points == 2

    def test_trend_without_history_is_no_data(self):
        uow, _ = _setup()
        assert isinstance(ShowPriceTrendHandler(uow, FixedClock(NOW)).handle("P2", 30), NoData)

    def test_averages_dto(self):
        uow, clock = self._history()
        dto = ShowPriceAveragesHandler(uow, clock).handle("P1", 30)

        assert dto.avg_purchase == "$15.00"
        assert dto.avg_selling == "$20.50"
        assert dto.avg_margin == "$5.50"
        assert dto.avg_margin_percent == "36.67%"

    def test_suggestion_dto(self):
        uow, clock = self._history()
        dto = SuggestPriceHandler(uow, clock).handle("P1")

        # margins 50% and 30% average to 40% over the latest cost of $20
        assert dto.suggested_selling_price == "$28.00"
        assert dto.target_margin_percent == "40.00%"
        assert dto.confidence == "MEDIUM"
        assert dto.trend_direction == "up"

    def test_suggestion_without_history_is_no_data(self):
        uow, _ = _setup()
        assert isinstance(SuggestPriceHandler(uow, FixedClock(NOW)).handle("P2"), NoData)
