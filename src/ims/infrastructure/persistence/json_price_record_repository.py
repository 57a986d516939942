"""JSON-document-backed implementation of PriceRecordRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from ims.domain.exceptions import PersistenceError, ValidationError
from ims.domain.model.clock import ensure_utc
from ims.domain.model.price_record import PriceRecord
from ims.domain.model.value_objects import Money
from ims.domain.repository.price_record_repository import PriceRecordRepository
from ims.infrastructure.persistence.json_document import JsonDocument


class JsonPriceRecordRepository(PriceRecordRepository):

    def __init__(self, document: JsonDocument) -> None:
        self._document = document

    # --- PriceRecordRepository interface --------------------------------------

    def next_sequence(self) -> int:
        records = self._document.read()["price_records"]
        if not records:
            return 1
        return max(r["sequence"] for r in records) + 1

    def add(self, record: PriceRecord) -> None:
        if record.sequence is None:
            raise ValidationError("Price record must be sequenced before it is stored")
        with self._document.mutate() as data:
            if any(raw["sequence"] == record.sequence for raw in data["price_records"]):
                raise PersistenceError(f"Sequence {record.sequence} is already taken")
            data["price_records"].append(self._to_raw(record))

    def list_for_product(
        self,
        product_id: str,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[PriceRecord]:
        result = []
        for raw in self._document.read()["price_records"]:
            if raw["product_id"] != product_id:
                continue
            record = self._to_domain(raw)
            if start is not None and record.recorded_at < start:
                continue
            if end is not None and record.recorded_at > end:
                continue
            result.append(record)
        return result

    def list_between(self, start: datetime, end: datetime) -> list[PriceRecord]:
        records = (self._to_domain(raw) for raw in self._document.read()["price_records"])
        return [r for r in records if start <= r.recorded_at < end]

    def count(self) -> int:
        return len(self._document.read()["price_records"])

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(record: PriceRecord) -> dict:
        return {
            "sequence": record.sequence,
            "product_id": record.product_id,
            "purchase_price": str(record.purchase_price.amount),
            "selling_price": str(record.selling_price.amount),
            "currency": record.selling_price.currency,
            "recorded_at": record.recorded_at.isoformat(),
            "reason": record.reason,
            "actor": record.actor,
            "previous_purchase_price": (
                str(record.previous_purchase_price.amount)
                if record.previous_purchase_price is not None else None
            ),
            "previous_selling_price": (
                str(record.previous_selling_price.amount)
                if record.previous_selling_price is not None else None
            ),
        }

    @staticmethod
    def _to_domain(raw: dict) -> PriceRecord:
        currency = raw.get("currency", "USD")

        def money(key: str) -> Money | None:
            value = raw.get(key)
            return Money(Decimal(value), currency) if value is not None else None

        return PriceRecord(
            product_id=raw["product_id"],
            purchase_price=Money(Decimal(raw["purchase_price"]), currency),
            selling_price=Money(Decimal(raw["selling_price"]), currency),
            recorded_at=ensure_utc(datetime.fromisoformat(raw["recorded_at"])),
            reason=raw.get("reason", ""),
            actor=raw.get("actor", ""),
            sequence=raw["sequence"],
            previous_purchase_price=money("previous_purchase_price"),
            previous_selling_price=money("previous_selling_price"),
        )
