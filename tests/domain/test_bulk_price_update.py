"""Unit tests for the BulkPriceUpdateCoordinator.

Covers the all-or-nothing guarantee: a batch either appends one ledger
record per entry and moves the current prices, or changes nothing.
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ims.domain.exceptions import EntityNotFoundError, PersistenceError, ValidationError
from ims.domain.model.clock import FixedClock
from ims.domain.model.value_objects import Money
from ims.domain.service.bulk_price_update import BulkPriceUpdateCoordinator, PriceUpdate
from tests.fakes import FakeUnitOfWork, make_product

NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


def _setup(**kwargs) -> tuple[FakeUnitOfWork, BulkPriceUpdateCoordinator]:
    uow = FakeUnitOfWork(
        [make_product("P1", "10.00", "15.00"), make_product("P2", "4.00", "6.00")], **kwargs
    )
    return uow, BulkPriceUpdateCoordinator(uow, FixedClock(NOW))


class TestBulkPriceUpdateHappyPath:

    def test_updates_prices_and_appends_records(self):
        uow, coordinator = _setup()

        count = coordinator.apply_batch(
            [PriceUpdate("P1", "11.00", "16.50"), PriceUpdate("P2", "4.50", "7")],
            reason="Supplier increase",
            actor="alice",
        )

        assert count == 2
        assert uow.committed == 1
        assert uow.products.get_by_id("P1").selling_price == Money.of("16.50")
        assert uow.products.get_by_id("P2").purchase_price == Money.of("4.50")
        assert uow.price_records.count() == 2

    def test_records_share_timestamp_and_keep_previous_prices(self):
        uow, coordinator = _setup()
        coordinator.apply_batch(
            [PriceUpdate("P1", "11", "16"), PriceUpdate("P2", "5", "7")],
            reason="Repricing", actor="bob",
        )

        p1 = uow.price_records.list_for_product("P1")[0]
        p2 = uow.price_records.list_for_product("P2")[0]
        assert p1.recorded_at == p2.recorded_at == NOW
        assert p1.sequence < p2.sequence
        assert p1.previous_purchase_price == Money.of("10.00")
        assert p1.previous_selling_price == Money.of("15.00")
        assert (p1.reason, p1.actor) == ("Repricing", "bob")

    def test_accepts_money_and_decimal_inputs(self):
        uow, coordinator = _setup()
        coordinator.apply_batch([PriceUpdate("P1", Money.of("9"), Decimal("12.25"))])
        assert uow.products.get_by_id("P1").selling_price.amount == Decimal("12.25")

    def test_duplicate_product_last_entry_wins(self):
        uow, coordinator = _setup()
        coordinator.apply_batch([PriceUpdate("P1", "11", "16"), PriceUpdate("P1", "12", "18")])

        records = uow.price_records.list_for_product("P1")
        assert len(records) == 2
        assert uow.products.get_by_id("P1").selling_price == Money.of("18")


class TestBulkPriceUpdateRejections:

    def test_one_invalid_entry_rejects_everything(self):
        uow, coordinator = _setup()

        with pytest.raises(ValidationError) as excinfo:
            coordinator.apply_batch(
                [PriceUpdate("P1", "11", "16"), PriceUpdate("P2", "-1", "7")]
            )

        assert [p.index for p in excinfo.value.problems] == [1]
        assert uow.price_records.count() == 0
        assert uow.products.get_by_id("P1").selling_price == Money.of("15.00")

    def test_all_problems_are_reported(self):
        _, coordinator = _setup()

        with pytest.raises(ValidationError) as excinfo:
            coordinator.apply_batch(
                [
                    PriceUpdate("", "1", "2"),
                    PriceUpdate("P1", "abc", "2"),
                    PriceUpdate("GHOST", "1", "2"),
                ]
            )

        assert [p.index for p in excinfo.value.problems] == [0, 1, 2]

    def test_unknown_product_alone_is_not_found(self):
        uow, coordinator = _setup()

        with pytest.raises(EntityNotFoundError) as excinfo:
            coordinator.apply_batch([PriceUpdate("P1", "11", "16"), PriceUpdate("GHOST", "1", "2")])

        assert excinfo.value.problems[0].product_id == "GHOST"
        assert uow.price_records.count() == 0

    def test_empty_batch_rejected(self):
        _, coordinator = _setup()
        with pytest.raises(ValidationError, match="non-empty"):
            coordinator.apply_batch([])

    @pytest.mark.parametrize("reason, actor", [("", "alice"), ("   ", "alice"), ("Fix", "")])
    def test_reason_and_actor_required(self, reason, actor):
        _, coordinator = _setup()
        with pytest.raises(ValidationError, match="required"):
            coordinator.apply_batch([PriceUpdate("P1", "1", "2")], reason=reason, actor=actor)

    def test_store_failure_leaves_nothing_behind(self):
        uow, coordinator = _setup(fail_on_commit=True)

        with pytest.raises(PersistenceError):
            coordinator.apply_batch([PriceUpdate("P1", "11", "16"), PriceUpdate("P2", "5", "7")])

        assert uow.price_records.count() == 0
        assert uow.products.get_by_id("P1").purchase_price == Money.of("10.00")
        assert uow.products.get_by_id("P2").purchase_price == Money.of("4.00")
