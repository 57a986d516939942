"""Abstract repository for the append-only price ledger.

There is deliberately no update or delete: the ledger only grows.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from ims.domain.model.price_record import PriceRecord


class PriceRecordRepository(ABC):

    @abstractmethod
    def next_sequence(self) -> int:
        """Return the next unused insertion sequence number."""

    @abstractmethod
    def add(self, record: PriceRecord) -> None:
        """Persist a record that already carries its sequence."""

    @abstractmethod
    def list_for_product(
        self,
        product_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[PriceRecord]:
        """Return a product's records with ``start <= recorded_at <= end``.

        Order is unspecified; callers sort by ``PriceRecord.sort_key``.
        """

    @abstractmethod
    def list_between(self, start: datetime, end: datetime) -> list[PriceRecord]:
        """Return every product's records with ``start <= recorded_at < end``."""

    @abstractmethod
    def count(self) -> int:
        """Return the total number of records in the ledger."""
