"""Domain service: Trend Analyzer.

Compares the mean price of the earlier half of a window with the mean of
the later half. With an odd number of records the earlier half takes the
extra one. A move of more than 2% either way counts as a direction;
anything inside that band is "stable".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Callable

from ims.domain.model.clock import Clock, SystemClock
from ims.domain.model.outcomes import INSUFFICIENT_DATA, NoData
from ims.domain.model.price_record import PriceRecord
from ims.domain.model.value_objects import Money
from ims.domain.service.price_ledger import PriceLedger
from ims.domain.service.windows import trailing_window

logger = logging.getLogger(__name__)

DIRECTION_THRESHOLD_PERCENT = Decimal("2")


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"

    @classmethod
    def classify(cls, percent_change: Decimal) -> Direction:
        if percent_change > DIRECTION_THRESHOLD_PERCENT:
            return cls.UP
        if percent_change < -DIRECTION_THRESHOLD_PERCENT:
            return cls.DOWN
        return cls.STABLE


@dataclass(frozen=True)
class PriceMovement:
    """Half-over-half movement of one price type."""

    earlier_mean: Decimal
    later_mean: Decimal
    percent_change: Decimal
    direction: Direction


@dataclass(frozen=True)
class PriceTrend:
    purchase: PriceMovement | NoData
    selling: PriceMovement | NoData
    data_points: int
    window_days: int
    latest_purchase_price: Money
    latest_selling_price: Money
    purchase_change: Decimal
    selling_change: Decimal

    @property
    def direction(self) -> Direction | None:
        """Selling-price direction, else purchase-price direction, else None."""
        for movement in (self.selling, self.purchase):
            if isinstance(movement, PriceMovement):
                return movement.direction
        return None


def _mean(records: list[PriceRecord], price: Callable[[PriceRecord], Money]) -> Decimal:
    return sum((price(r).amount for r in records), Decimal("0")) / len(records)


def _movement(
    earlier: list[PriceRecord],
    later: list[PriceRecord],
    price: Callable[[PriceRecord], Money],
) -> PriceMovement | NoData:
    earlier_mean = _mean(earlier, price)
    later_mean = _mean(later, price)
    if earlier_mean == 0:
        return NoData("earlier mean is zero")
    percent_change = (later_mean - earlier_mean) / earlier_mean * 100
    return PriceMovement(
        earlier_mean=earlier_mean,
        later_mean=later_mean,
        percent_change=percent_change,
        direction=Direction.classify(percent_change),
    )


class TrendAnalyzer:

    def __init__(self, ledger: PriceLedger, clock: Clock | None = None) -> None:
        self._ledger = ledger
        self._clock = clock or SystemClock()

    def trend(self, product_id: str, window_days: int) -> PriceTrend | NoData:
        start, end = trailing_window(self._clock, window_days)
        records = self._ledger.records_in_window(product_id, start, end)
        if len(records) < 2:
            logger.debug(
                "Trend for %s: %d record(s) in %d days", product_id, len(records), window_days
            )
            return NoData(INSUFFICIENT_DATA)

        mid = (len(records) + 1) // 2
        earlier, later = records[:mid], records[mid:]
        first, last = records[0], records[-1]

        return PriceTrend(
            purchase=_movement(earlier, later, lambda r: r.purchase_price),
            selling=_movement(earlier, later, lambda r: r.selling_price),
            data_points=len(records),
            window_days=window_days,
            latest_purchase_price=last.purchase_price,
            latest_selling_price=last.selling_price,
            purchase_change=last.purchase_price.amount - first.purchase_price.amount,
            selling_change=last.selling_price.amount - first.selling_price.amount,
        )
