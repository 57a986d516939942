"""Domain service: Price Ledger.

The factual record of price history. Writes go through ``append`` only
(the bulk update coordinator is the single caller); reads come back in
ascending ``(recorded_at, sequence)`` order.
"""

from __future__ import annotations

import dataclasses
import logging
import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterator, Sequence

from ims.domain.exceptions import EntityNotFoundError, ValidationError
from ims.domain.model.clock import ensure_utc
from ims.domain.model.price_record import PriceRecord
from ims.domain.model.value_objects import Money
from ims.domain.repository.price_record_repository import PriceRecordRepository
from ims.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50


class RecordWindow:
    """A lazy, finite, restartable view over one page of records.

    Nothing is copied until iterated; every ``iter()`` walks the page
    again from the start.
    """

    def __init__(self, records: Sequence[PriceRecord], start: int, stop: int) -> None:
        self._records = records
        self._start = start
        self._stop = max(start, min(stop, len(records)))

    def __iter__(self) -> Iterator[PriceRecord]:
        for i in range(self._start, self._stop):
            yield self._records[i]

    def __len__(self) -> int:
        return self._stop - self._start


@dataclass(frozen=True)
class HistoryPage:
    records: RecordWindow
    total_count: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        # an empty history is still one (empty) page
        return max(1, math.ceil(self.total_count / self.limit))


class PriceLedger:

    def __init__(
        self,
        record_repo: PriceRecordRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._record_repo = record_repo
        self._product_repo = product_repo

    # --- Writes ---------------------------------------------------------------

    def append(self, record: PriceRecord) -> PriceRecord:
        """Validate, sequence and persist a record; return the stored copy."""
        for label, price in (
            ("Purchase price", record.purchase_price),
            ("Selling price", record.selling_price),
        ):
            if not isinstance(price, Money):
                raise ValidationError(f"{label} must be Money, got {price!r}")
            if price.amount < 0:
                raise ValidationError(f"{label} cannot be negative, got {price.amount}")

        if self._product_repo.get_by_id(record.product_id) is None:
            raise EntityNotFoundError(f"Product with ID '{record.product_id}' not found")

        stored = dataclasses.replace(
            record,
            recorded_at=ensure_utc(record.recorded_at),
            sequence=self._record_repo.next_sequence(),
        )
        self._record_repo.add(stored)
        logger.debug(
            "Ledger append product=%s seq=%s purchase=%s selling=%s",
            stored.product_id, stored.sequence,
            stored.purchase_price.amount, stored.selling_price.amount,
        )
        return stored

    # --- Reads ----------------------------------------------------------------

    def query(
        self,
        product_id: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> HistoryPage:
        """Return one page of a product's history, oldest first.

        ``total_count`` counts every record matching the date range,
        regardless of which page was asked for.
        """
        if isinstance(page, bool) or not isinstance(page, int) or page < 1:
            raise ValidationError(f"Page must be an integer >= 1, got {page!r}")
        if isinstance(limit, bool) or not isinstance(limit, int) or limit < 1:
            raise ValidationError(f"Limit must be an integer >= 1, got {limit!r}")

        start = ensure_utc(start_date) if start_date is not None else None
        end = ensure_utc(end_date) if end_date is not None else None
        if start is not None and end is not None and start > end:
            raise ValidationError("Start date must not be after end date")

        self._require_product(product_id)
        records = self._sorted(self._record_repo.list_for_product(product_id, start, end))

        offset = (page - 1) * limit
        return HistoryPage(
            records=RecordWindow(records, offset, offset + limit),
            total_count=len(records),
            page=page,
            limit=limit,
        )

    def records_in_window(
        self, product_id: str, start: datetime, end: datetime
    ) -> list[PriceRecord]:
        """All of a product's records in ``[start, end]``, oldest first."""
        self._require_product(product_id)
        return self._sorted(
            self._record_repo.list_for_product(product_id, ensure_utc(start), ensure_utc(end))
        )

    def records_between(self, start: datetime, end: datetime) -> list[PriceRecord]:
        """Every product's records in ``[start, end)``, oldest first."""
        return self._sorted(
            self._record_repo.list_between(ensure_utc(start), ensure_utc(end))
        )

    def latest(self, product_id: str) -> PriceRecord | None:
        self._require_product(product_id)
        records = self._record_repo.list_for_product(product_id)
        if not records:
            return None
        return max(records, key=lambda r: r.sort_key)

    # --- Internal helpers -----------------------------------------------------

    def _require_product(self, product_id: str) -> None:
        if self._product_repo.get_by_id(product_id) is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

    @staticmethod
    def _sorted(records: list[PriceRecord]) -> list[PriceRecord]:
        return sorted(records, key=lambda r: r.sort_key)
