"""Tests for the JSON document store and its unit of work."""

import json
import threading
import time
from datetime import datetime, timezone
from decimal import Decimal

import pytest

from ims.application.operations import InventoryOperations
from ims.domain.exceptions import PersistenceError, ValidationError
from ims.domain.model.clock import FixedClock
from ims.domain.model.value_objects import Money
from ims.domain.service.bulk_price_update import BulkPriceUpdateCoordinator, PriceUpdate
from ims.domain.service.price_ledger import PriceLedger
from ims.infrastructure.persistence.json_unit_of_work import JsonUnitOfWork
from tests.fakes import make_product, make_record

NOW = datetime(2026, 10, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "store.json"


@pytest.fixture
def uow(store_path):
    uow = JsonUnitOfWork(store_path, timeout=0.05)
    uow.products.save(make_product("P1", "10.00", "15.00", reorder_point=4, brand="Acme"))
    uow.products.save(make_product("P2", "4.00", "6.00"))
    return uow


class TestJsonDocument:

    def test_missing_file_is_created_empty(self, store_path):
        JsonUnitOfWork(store_path)
        assert json.loads(store_path.read_text()) == {"products": [], "price_records": []}

    def test_product_round_trip(self, uow):
        p = uow.products.get_by_id("P1")
        assert p.purchase_price == Money.of("10.00")
        assert p.reorder_point == 4
        assert p.brand == "Acme"
        assert uow.products.get_by_id("P2").reorder_point is None

    def test_price_record_round_trip(self, uow):
        with uow:
            uow.price_records.add(make_record("P1", "11.50", "17", NOW, sequence=1))
            uow.commit()

        [record] = uow.price_records.list_for_product("P1")
        assert record.recorded_at == NOW
        assert record.selling_price.amount == Decimal("17")
        assert uow.price_records.next_sequence() == 2

    def test_unsequenced_record_rejected(self, uow):
        with pytest.raises(ValidationError, match="sequenced"):
            uow.price_records.add(make_record("P1", "1", "2", NOW))

    def test_corrupt_file_is_a_persistence_error(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("{not json")
        uow = JsonUnitOfWork(store_path)

        with pytest.raises(PersistenceError, match="Cannot read store"):
            uow.products.list_all()


class TestJsonUnitOfWork:

    def test_commit_makes_changes_durable(self, uow, store_path):
        coordinator = BulkPriceUpdateCoordinator(uow, FixedClock(NOW))
        coordinator.apply_batch([PriceUpdate("P1", "11", "16"), PriceUpdate("P2", "5", "7")])

        reopened = JsonUnitOfWork(store_path)
        assert reopened.products.get_by_id("P1").selling_price == Money.of("16")
        assert reopened.price_records.count() == 2
        assert not store_path.with_name("store.json.tmp").exists()

    def test_uncommitted_changes_are_discarded(self, uow, store_path):
        with uow:
            p = uow.products.get_by_id("P1")
            p.apply_prices(Money.of("99"), Money.of("199"))
            uow.products.save(p)
            # staged copy is visible inside the transaction
            assert uow.products.get_by_id("P1").selling_price == Money.of("199")

        assert JsonUnitOfWork(store_path).products.get_by_id("P1").selling_price == Money.of("15.00")

    def test_exception_inside_block_rolls_back(self, uow):
        with pytest.raises(RuntimeError):
            with uow:
                uow.price_records.add(make_record("P1", "1", "2", NOW, sequence=1))
                raise RuntimeError("boom")

        assert uow.price_records.count() == 0

    def test_busy_store_times_out(self, uow, store_path):
        other = JsonUnitOfWork(store_path, timeout=0.05)
        uow.begin()
        try:
            with pytest.raises(PersistenceError, match="Timed out"):
                other.begin()
        finally:
            uow.rollback()

    def test_nested_begin_on_one_thread_rejected(self, uow):
        uow.begin()
        try:
            with pytest.raises(PersistenceError, match="already in progress"):
                uow.begin()
        finally:
            uow.rollback()

    def test_lock_released_after_commit(self, uow):
        with uow:
            uow.commit()
        with uow:
            uow.commit()

    def test_duplicate_sequence_rejected(self, uow):
        uow.price_records.add(make_record("P1", "1", "2", NOW, sequence=1))
        with pytest.raises(PersistenceError, match="already taken"):
            uow.price_records.add(make_record("P1", "3", "4", NOW, sequence=1))


class TestConcurrentHandles:

    def test_overlapping_batches_both_land(self, uow, store_path):
        first = JsonUnitOfWork(store_path, timeout=5)
        second = JsonUnitOfWork(store_path, timeout=5)
        first_open = threading.Event()
        errors = []

        def second_writer():
            first_open.wait()
            try:
                with second:
                    PriceLedger(second.price_records, second.products).append(
                        make_record("P1", "12", "18", NOW)
                    )
                    second.commit()
            except Exception as exc:  # surfaced by the assertion below
                errors.append(exc)

        worker = threading.Thread(target=second_writer)
        worker.start()
        with first:
            first_open.set()
            PriceLedger(first.price_records, first.products).append(
                make_record("P1", "11", "16", NOW)
            )
            time.sleep(0.1)
            first.commit()
        worker.join(timeout=5)

        assert errors == []
        records = JsonUnitOfWork(store_path).price_records.list_for_product("P1")
        assert sorted(r.sequence for r in records) == [1, 2]
        assert {r.selling_price.amount for r in records} == {Decimal("16"), Decimal("18")}

    def test_other_threads_read_committed_state(self, uow):
        ops = InventoryOperations(uow, FixedClock(NOW))
        seen = []

        uow.begin()
        try:
            uow.products.save(make_product("P1", "10.00", "15.00", current_stock=0, reorder_point=4))
            assert uow.products.get_by_id("P1").current_stock == 0

            reader = threading.Thread(
                target=lambda: seen.append(ops.low_stock_report().value.total_count)
            )
            reader.start()
            reader.join(timeout=5)
        finally:
            uow.rollback()

        assert seen == [0]
        assert uow.products.get_by_id("P1").current_stock == 100

    def test_outside_write_waits_for_open_transaction(self, uow, store_path):
        outcome = []

        def outside_writer():
            try:
                uow.products.save(make_product("P2", "1.00", "2.00"))
            except PersistenceError as exc:
                outcome.append(exc)

        with uow:
            p = uow.products.get_by_id("P1")
            p.apply_prices(Money.of("11"), Money.of("16"))
            uow.products.save(p)

            writer = threading.Thread(target=outside_writer)
            writer.start()
            writer.join(timeout=5)

            # the staged copy still holds P2 as committed
            assert uow.products.get_by_id("P2").selling_price == Money.of("6.00")
            uow.commit()

        assert len(outcome) == 1 and "Timed out" in str(outcome[0])
        reopened = JsonUnitOfWork(store_path)
        assert reopened.products.get_by_id("P1").selling_price == Money.of("16")
        assert reopened.products.get_by_id("P2").selling_price == Money.of("6.00")
