"""Application service: Suggest Selling Price use case (query)."""

from __future__ import annotations

from ims.application.dto import PriceSuggestionDTO
from ims.domain.model.clock import Clock
from ims.domain.model.outcomes import NoData
from ims.domain.model.value_objects import format_amount, format_percent
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.price_ledger import PriceLedger
from ims.domain.service.suggestion_engine import SuggestionEngine
from ims.domain.service.trend_analyzer import PriceTrend, TrendAnalyzer
from ims.domain.service.windows import DEFAULT_WINDOW_DAYS


class SuggestPriceHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Clock | None = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        ledger = PriceLedger(uow.price_records, uow.products)
        self._engine = SuggestionEngine(
            ledger, TrendAnalyzer(ledger, clock), clock, window_days=window_days
        )

    def handle(self, product_id: str) -> PriceSuggestionDTO | NoData:
        suggestion = self._engine.suggest(product_id)
        if isinstance(suggestion, NoData):
            return suggestion

        trend = suggestion.trend
        direction = trend.direction if isinstance(trend, PriceTrend) else None
        return PriceSuggestionDTO(
            product_id=product_id,
            suggested_selling_price=format_amount(suggestion.suggested_selling_price),
            latest_purchase_price=str(suggestion.latest_purchase_price),
            target_margin_percent=format_percent(suggestion.target_margin_ratio * 100),
            confidence=suggestion.confidence.value,
            signal=suggestion.signal,
            trend_direction=direction.value if direction else None,
            data_points=suggestion.data_points,
            window_days=suggestion.window_days,
        )
