"""Domain service: Average Calculator.

Mean purchase and selling price over a trailing window of the ledger.
An empty window is reported as ``NoData`` rather than as a zero average.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from ims.domain.model.clock import Clock, SystemClock
from ims.domain.model.outcomes import NoData
from ims.domain.service.price_ledger import PriceLedger
from ims.domain.service.windows import trailing_window

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PriceAverages:
    avg_purchase: Decimal
    avg_selling: Decimal
    data_points: int
    window_days: int

    @property
    def avg_margin(self) -> Decimal:
        return self.avg_selling - self.avg_purchase

    @property
    def avg_margin_percent(self) -> Decimal | None:
        if self.avg_purchase == 0:
            return None
        return self.avg_margin / self.avg_purchase * 100


class AverageCalculator:

    def __init__(self, ledger: PriceLedger, clock: Clock | None = None) -> None:
        self._ledger = ledger
        self._clock = clock or SystemClock()

    def averages(self, product_id: str, window_days: int) -> PriceAverages | NoData:
        start, end = trailing_window(self._clock, window_days)
        records = self._ledger.records_in_window(product_id, start, end)
        if not records:
            logger.debug("No price history for %s in the last %s days", product_id, window_days)
            return NoData(f"no price history in the last {window_days} days")

        count = len(records)
        total_purchase = sum((r.purchase_price.amount for r in records), Decimal("0"))
        total_selling = sum((r.selling_price.amount for r in records), Decimal("0"))
        return PriceAverages(
            avg_purchase=total_purchase / count,
            avg_selling=total_selling / count,
            data_points=count,
            window_days=window_days,
        )
