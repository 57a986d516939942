"""Domain service: Suggestion Engine.

Suggests a selling price from the latest purchase price and the margin
the product has historically carried:

    suggested = latest_purchase * (1 + mean((selling - purchase) / purchase))

The trend over the same window is reported next to the suggestion as a
hint for the reviewer. It never changes the number.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ims.domain.model.clock import Clock, SystemClock
from ims.domain.model.outcomes import INSUFFICIENT_DATA, NoData
from ims.domain.model.value_objects import Money
from ims.domain.service.price_ledger import PriceLedger
from ims.domain.service.trend_analyzer import Direction, PriceTrend, TrendAnalyzer
from ims.domain.service.windows import DEFAULT_WINDOW_DAYS, trailing_window

logger = logging.getLogger(__name__)


class Confidence(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"

    @classmethod
    def from_data_points(cls, count: int) -> Confidence:
        if count >= 3:
            return cls.HIGH
        if count == 2:
            return cls.MEDIUM
        return cls.LOW


_SIGNALS = {
    Direction.UP: "Prices trending up; consider reviewing the margin",
    Direction.DOWN: "Prices trending down; check the margin still covers cost",
    Direction.STABLE: "Prices stable over the window",
}
_NO_TREND_SIGNAL = "Not enough history to judge the trend"


@dataclass(frozen=True)
class PriceSuggestion:
    suggested_selling_price: Decimal
    latest_purchase_price: Money
    target_margin_ratio: Decimal
    data_points: int
    window_days: int
    trend: PriceTrend | NoData
    signal: str
    confidence: Confidence


class SuggestionEngine:

    def __init__(
        self,
        ledger: PriceLedger,
        trend_analyzer: TrendAnalyzer,
        clock: Clock | None = None,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ) -> None:
        self._ledger = ledger
        self._trend_analyzer = trend_analyzer
        self._clock = clock or SystemClock()
        self._window_days = window_days

    def suggest(self, product_id: str) -> PriceSuggestion | NoData:
        latest = self._ledger.latest(product_id)
        if latest is None:
            return NoData(INSUFFICIENT_DATA)

        start, end = trailing_window(self._clock, self._window_days)
        ratios = [
            ratio
            for ratio in (
                r.margin_ratio for r in self._ledger.records_in_window(product_id, start, end)
            )
            if ratio is not None
        ]
        if not ratios:
            logger.debug("No usable margin history for %s", product_id)
            return NoData(INSUFFICIENT_DATA)

        target_ratio = sum(ratios, Decimal("0")) / len(ratios)
        trend = self._trend_analyzer.trend(product_id, self._window_days)
        direction = trend.direction if isinstance(trend, PriceTrend) else None

        return PriceSuggestion(
            suggested_selling_price=latest.purchase_price.amount * (1 + target_ratio),
            latest_purchase_price=latest.purchase_price,
            target_margin_ratio=target_ratio,
            data_points=len(ratios),
            window_days=self._window_days,
            trend=trend,
            signal=_SIGNALS[direction] if direction is not None else _NO_TREND_SIGNAL,
            confidence=Confidence.from_data_points(len(ratios)),
        )
