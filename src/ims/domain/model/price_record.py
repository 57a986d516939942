"""PriceRecord: one immutable entry of the price ledger.

Records are ordered by ``(recorded_at, sequence)``. Several records of one
batch share a timestamp, so the store-assigned insertion sequence breaks
ties deterministically.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from ims.domain.model.value_objects import Money


@dataclass(frozen=True)
class PriceRecord:
    """Historical purchase/selling price of a product.

    ``sequence`` is ``None`` until the ledger appends the record. The
    ``previous_*`` fields capture the product's prices right before the
    change, for the audit trail.
    """

    product_id: str
    purchase_price: Money
    selling_price: Money
    recorded_at: datetime
    reason: str
    actor: str
    sequence: int | None = None
    previous_purchase_price: Money | None = None
    previous_selling_price: Money | None = None

    @property
    def sort_key(self) -> tuple[datetime, int]:
        return (self.recorded_at, self.sequence if self.sequence is not None else -1)

    @property
    def profit_amount(self) -> Decimal:
        return self.selling_price.margin_over(self.purchase_price)

    @property
    def margin_ratio(self) -> Decimal | None:
        """``(selling - purchase) / purchase``; undefined for a zero cost."""
        if self.purchase_price.is_zero:
            return None
        return self.profit_amount / self.purchase_price.amount
