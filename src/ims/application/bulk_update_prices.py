"""Application service: Bulk Update Prices use case.

Accepts entries either as ``PriceUpdate`` objects or as plain mappings
(``product_id``/``productId``, ``purchase_price``/``purchasePrice``,
``selling_price``/``sellingPrice``) as they arrive from a request body.
Anything malformed is left for the coordinator's validation pass to
report, so one bad entry is reported alongside all the others.
"""

from __future__ import annotations

from collections.abc import Mapping

from ims.application.dto import BatchResultDTO
from ims.domain.model.clock import Clock
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.bulk_price_update import (
    DEFAULT_ACTOR,
    DEFAULT_REASON,
    BulkPriceUpdateCoordinator,
    PriceUpdate,
)


def _pick(entry: Mapping, *keys: str):
    for key in keys:
        if key in entry:
            return entry[key]
    return None


def to_price_update(entry: PriceUpdate | Mapping) -> PriceUpdate:
    if isinstance(entry, PriceUpdate):
        return entry
    if not isinstance(entry, Mapping):
        return PriceUpdate(product_id=None, purchase_price=None, selling_price=None)  # type: ignore[arg-type]
    return PriceUpdate(
        product_id=_pick(entry, "product_id", "productId"),
        purchase_price=_pick(entry, "purchase_price", "purchasePrice"),
        selling_price=_pick(entry, "selling_price", "sellingPrice"),
    )


class BulkUpdatePricesHandler:

    def __init__(self, uow: UnitOfWork, clock: Clock | None = None) -> None:
        self._coordinator = BulkPriceUpdateCoordinator(uow, clock)

    def handle(
        self,
        updates: list[PriceUpdate | Mapping],
        reason: str = DEFAULT_REASON,
        actor: str = DEFAULT_ACTOR,
    ) -> BatchResultDTO:
        entries = [to_price_update(u) for u in updates] if isinstance(updates, list) else updates
        count = self._coordinator.apply_batch(entries, reason=reason, actor=actor)
        return BatchResultDTO(updated_count=count)
