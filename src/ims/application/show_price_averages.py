"""Application service: Show Price Averages use case (query)."""

from __future__ import annotations

from ims.application.dto import PriceAveragesDTO
from ims.domain.model.clock import Clock
from ims.domain.model.outcomes import NoData
from ims.domain.model.value_objects import format_amount, format_percent
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.average_calculator import AverageCalculator
from ims.domain.service.price_ledger import PriceLedger
from ims.domain.service.windows import DEFAULT_WINDOW_DAYS


class ShowPriceAveragesHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock | None = None) -> None:
        self._calculator = AverageCalculator(PriceLedger(uow.price_records, uow.products), clock)

    def handle(
        self, product_id: str, days: int = DEFAULT_WINDOW_DAYS
    ) -> PriceAveragesDTO | NoData:
        averages = self._calculator.averages(product_id, days)
        if isinstance(averages, NoData):
            return averages
        return PriceAveragesDTO(
            product_id=product_id,
            avg_purchase=format_amount(averages.avg_purchase),
            avg_selling=format_amount(averages.avg_selling),
            avg_margin=format_amount(averages.avg_margin),
            avg_margin_percent=format_percent(averages.avg_margin_percent),
            data_points=averages.data_points,
            window_days=averages.window_days,
        )
