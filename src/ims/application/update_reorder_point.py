"""Application service: Update Reorder Point use cases (single and bulk)."""

from __future__ import annotations

from collections.abc import Mapping

from ims.application.dto import BatchResultDTO
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.stock_threshold_monitor import (
    ReorderPointUpdate,
    StockThresholdMonitor,
)


def to_reorder_update(entry: ReorderPointUpdate | Mapping) -> ReorderPointUpdate:
    if isinstance(entry, ReorderPointUpdate):
        return entry
    if not isinstance(entry, Mapping):
        return ReorderPointUpdate(product_id=None, reorder_point=None)  # type: ignore[arg-type]
    product_id = entry.get("product_id", entry.get("productId"))
    value = entry.get("reorder_point", entry.get("reorderPoint"))
    return ReorderPointUpdate(product_id=product_id, reorder_point=value)


class UpdateReorderPointHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._monitor = StockThresholdMonitor(uow)

    def handle(self, product_id: str, reorder_point: int) -> None:
        self._monitor.update_reorder_point(product_id, reorder_point)


class BulkUpdateReorderPointsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._monitor = StockThresholdMonitor(uow)

    def handle(self, updates: list[ReorderPointUpdate | Mapping]) -> BatchResultDTO:
        entries = [to_reorder_update(u) for u in updates] if isinstance(updates, list) else updates
        return BatchResultDTO(updated_count=self._monitor.bulk_update_reorder_points(entries))
