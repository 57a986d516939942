"""Product aggregate.

The catalog entry itself is owned by the CRUD side of the application.
This subsystem reads stock levels and category, and owns three fields:
the current purchase price, the current selling price and the reorder
point.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ims.domain.exceptions import ValidationError
from ims.domain.model.value_objects import Money


def validate_reorder_point(value: object) -> int:
    """Return ``value`` as a reorder point or raise ValidationError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"Reorder point must be a whole number, got {value!r}"
        )
    if value < 0:
        raise ValidationError(f"Reorder point cannot be negative, got {value}")
    return value


@dataclass
class Product:
    """A product in the catalog.

    Kept as a mutable dataclass because price and reorder-point updates
    are legitimate mutations on the aggregate. ``reorder_point`` is
    ``None`` until someone sets it; until then ``minimum_stock`` acts as
    the reorder point.
    """

    id: str
    sku: str
    name: str
    category: str
    purchase_price: Money
    selling_price: Money
    current_stock: int = 0
    minimum_stock: int = 0
    reorder_point: int | None = None
    brand: str = ""

    @property
    def effective_reorder_point(self) -> int:
        if self.reorder_point is not None:
            return self.reorder_point
        return self.minimum_stock

    @property
    def profit_amount(self) -> Decimal:
        return self.selling_price.margin_over(self.purchase_price)

    @property
    def margin_percent(self) -> Decimal | None:
        """Profit as a share of the selling price; None when nothing is charged."""
        if self.selling_price.is_zero:
            return None
        return self.profit_amount / self.selling_price.amount * 100

    def apply_prices(self, purchase_price: Money, selling_price: Money) -> None:
        """Set current prices.

        Only the bulk update coordinator calls this, in the same unit of
        work that appends the matching ledger record.
        """
        self.purchase_price = purchase_price
        self.selling_price = selling_price

    def set_reorder_point(self, value: int) -> None:
        self.reorder_point = validate_reorder_point(value)
