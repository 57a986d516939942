"""Application service: Show Price History use case (query)."""

from __future__ import annotations

from datetime import date, datetime, time, timezone

from ims.application.dto import PriceHistoryDTO, PriceRecordDTO
from ims.domain.exceptions import ValidationError
from ims.domain.model.price_record import PriceRecord
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.price_ledger import DEFAULT_PAGE_SIZE, PriceLedger


def parse_date_bound(raw: str | date | datetime | None, end_of_day: bool = False) -> datetime | None:
    """Parse an ISO date or datetime.

    A bare date means the whole day: midnight for a start bound, the last
    microsecond of the day for an end bound.
    """
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime.combine(raw, time.max if end_of_day else time.min, tzinfo=timezone.utc)
    try:
        if len(raw) == 10:
            return parse_date_bound(date.fromisoformat(raw), end_of_day)
        return datetime.fromisoformat(raw)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid date: {raw!r}") from exc


def to_record_dto(record: PriceRecord) -> PriceRecordDTO:
    return PriceRecordDTO(
        sequence=record.sequence,  # type: ignore[arg-type]
        product_id=record.product_id,
        purchase_price=str(record.purchase_price),
        selling_price=str(record.selling_price),
        recorded_at=record.recorded_at.isoformat(),
        reason=record.reason,
        actor=record.actor,
        previous_purchase_price=(
            str(record.previous_purchase_price) if record.previous_purchase_price else None
        ),
        previous_selling_price=(
            str(record.previous_selling_price) if record.previous_selling_price else None
        ),
    )


class ShowPriceHistoryHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._ledger = PriceLedger(uow.price_records, uow.products)

    def handle(
        self,
        product_id: str,
        start_date: str | date | datetime | None = None,
        end_date: str | date | datetime | None = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> PriceHistoryDTO:
        result = self._ledger.query(
            product_id,
            start_date=parse_date_bound(start_date),
            end_date=parse_date_bound(end_date, end_of_day=True),
            page=page,
            limit=limit,
        )
        return PriceHistoryDTO(
            product_id=product_id,
            records=[to_record_dto(r) for r in result.records],
            total_count=result.total_count,
            page=result.page,
            limit=result.limit,
            total_pages=result.total_pages,
        )
