"""Application service: Show Price Trend use case (query)."""

from __future__ import annotations

from ims.application.dto import PriceMovementDTO, PriceTrendDTO
from ims.domain.model.clock import Clock
from ims.domain.model.outcomes import NoData
from ims.domain.model.value_objects import format_amount, format_percent
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.price_ledger import PriceLedger
from ims.domain.service.trend_analyzer import PriceMovement, PriceTrend, TrendAnalyzer
from ims.domain.service.windows import DEFAULT_WINDOW_DAYS


def _movement_dto(movement: PriceMovement | NoData) -> PriceMovementDTO | NoData:
    if isinstance(movement, NoData):
        return movement
    return PriceMovementDTO(
        earlier_mean=format_amount(movement.earlier_mean),
        later_mean=format_amount(movement.later_mean),
        percent_change=format_percent(movement.percent_change),
        direction=movement.direction.value,
    )


def to_trend_dto(product_id: str, trend: PriceTrend) -> PriceTrendDTO:
    return PriceTrendDTO(
        product_id=product_id,
        direction=trend.direction.value if trend.direction else None,
        purchase=_movement_dto(trend.purchase),
        selling=_movement_dto(trend.selling),
        data_points=trend.data_points,
        window_days=trend.window_days,
        latest_purchase_price=str(trend.latest_purchase_price),
        latest_selling_price=str(trend.latest_selling_price),
        purchase_change=format_amount(trend.purchase_change),
        selling_change=format_amount(trend.selling_change),
    )


class ShowPriceTrendHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock | None = None) -> None:
        self._analyzer = TrendAnalyzer(PriceLedger(uow.price_records, uow.products), clock)

    def handle(self, product_id: str, days: int = DEFAULT_WINDOW_DAYS) -> PriceTrendDTO | NoData:
        trend = self._analyzer.trend(product_id, days)
        if isinstance(trend, NoData):
            return trend
        return to_trend_dto(product_id, trend)
