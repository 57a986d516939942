"""Domain service: Stock Threshold Monitor.

Classifies products against their reorder point and manages reorder
point values. Reorder points are policy, not price history, so changes
are written straight onto the product without a ledger entry.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from ims.domain.exceptions import BatchProblem, EntityNotFoundError, ValidationError
from ims.domain.model.product import Product, validate_reorder_point
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.batch_validation import reject_batch

logger = logging.getLogger(__name__)


class Severity(Enum):
    CRITICAL = "critical"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return 0 if self is Severity.CRITICAL else 1


def classify(current_stock: int, reorder_point: int) -> Severity | None:
    """Severity for a stock level, or None when nothing needs reporting.

    critical: stock below half the reorder point, or an empty shelf
    high:     half the reorder point <= stock <= reorder point
    A zero reorder point only reports an empty shelf.
    """
    if current_stock <= 0:
        return Severity.CRITICAL
    if reorder_point == 0:
        return None
    # stock * 2 < rp is stock < rp * 0.5 without leaving integers
    if current_stock * 2 < reorder_point:
        return Severity.CRITICAL
    if current_stock <= reorder_point:
        return Severity.HIGH
    return None


@dataclass(frozen=True)
class StockAlert:
    product: Product
    severity: Severity
    reorder_point: int

    @property
    def stock_ratio(self) -> Decimal | None:
        if self.reorder_point == 0:
            return None
        return Decimal(self.product.current_stock) / Decimal(self.reorder_point)


@dataclass(frozen=True)
class LowStockReport:
    alerts: list[StockAlert]

    @property
    def critical_count(self) -> int:
        return sum(1 for a in self.alerts if a.severity is Severity.CRITICAL)

    @property
    def high_count(self) -> int:
        return sum(1 for a in self.alerts if a.severity is Severity.HIGH)

    @property
    def total_count(self) -> int:
        return len(self.alerts)


@dataclass(frozen=True)
class ReorderPointUpdate:
    """Input: requested reorder point for one product (raw, unvalidated)."""

    product_id: str
    reorder_point: int


def _alert_order(alert: StockAlert) -> tuple:
    ratio = alert.stock_ratio
    return (alert.severity.rank, ratio if ratio is not None else Decimal("0"), alert.product.sku)


class StockThresholdMonitor:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def low_stock_report(self) -> LowStockReport:
        alerts: list[StockAlert] = []
        for product in self._uow.products.list_all():
            reorder_point = product.effective_reorder_point
            severity = classify(product.current_stock, reorder_point)
            if severity is not None:
                alerts.append(StockAlert(product, severity, reorder_point))

        alerts.sort(key=_alert_order)
        return LowStockReport(alerts)

    def update_reorder_point(self, product_id: str, value: int) -> None:
        value = validate_reorder_point(value)
        with self._uow:
            product = self._uow.products.get_by_id(product_id)
            if product is None:
                raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
            product.set_reorder_point(value)
            self._uow.products.save(product)
            self._uow.commit()
        logger.info("Reorder point of %s set to %d", product_id, value)

    def bulk_update_reorder_points(self, updates: list[ReorderPointUpdate]) -> int:
        """Set every reorder point or none; return the number updated."""
        plan = self._validate(updates)

        with self._uow:
            for product_id, value in plan:
                product = self._uow.products.get_by_id(product_id)
                if product is None:
                    raise EntityNotFoundError(f"Product with ID '{product_id}' not found")
                product.set_reorder_point(value)
                self._uow.products.save(product)
            self._uow.commit()

        logger.info("Updated %d reorder point(s)", len(plan))
        return len(plan)

    def _validate(self, updates: list[ReorderPointUpdate]) -> list[tuple[str, int]]:
        if not isinstance(updates, (list, tuple)) or not updates:
            raise ValidationError("Updates must be a non-empty list")

        shape_problems: list[BatchProblem] = []
        missing: list[BatchProblem] = []
        plan: list[tuple[str, int]] = []

        for index, update in enumerate(updates):
            product_id = getattr(update, "product_id", None)
            if not isinstance(product_id, str) or not product_id.strip():
                shape_problems.append(BatchProblem(index, None, "product id is required"))
                continue
            product_id = product_id.strip()

            try:
                value = validate_reorder_point(getattr(update, "reorder_point", None))
            except ValidationError as exc:
                shape_problems.append(BatchProblem(index, product_id, str(exc)))
                continue

            if self._uow.products.get_by_id(product_id) is None:
                missing.append(BatchProblem(index, product_id, "product not found"))
                continue

            plan.append((product_id, value))

        if shape_problems or missing:
            logger.warning(
                "Rejected reorder-point batch of %d entries (%d invalid, %d unknown)",
                len(updates), len(shape_problems), len(missing),
            )
        reject_batch(shape_problems, missing)
        return plan
