"""Domain service: Bulk Price Update Coordinator.

Applies many price changes as one business event. The two-phase
approach (validate-then-mutate) ensures the ledger and the products'
current prices never drift apart:

  Phase 1, validate: a pure pass over every entry that collects
            problems. Any problem rejects the whole batch before a
            single write.
  Phase 2, commit: inside one unit of work, append one ledger record
            per entry and update the product, then commit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from ims.domain.exceptions import BatchProblem, EntityNotFoundError, ValidationError
from ims.domain.model.clock import Clock, SystemClock
from ims.domain.model.price_record import PriceRecord
from ims.domain.model.value_objects import Money
from ims.domain.repository.unit_of_work import UnitOfWork
from ims.domain.service.batch_validation import reject_batch
from ims.domain.service.price_ledger import PriceLedger

logger = logging.getLogger(__name__)

DEFAULT_REASON = "Bulk price update"
DEFAULT_ACTOR = "system"


@dataclass(frozen=True)
class PriceUpdate:
    """Input: requested new prices for one product (raw, unvalidated)."""

    product_id: str
    purchase_price: str | int | float | Decimal
    selling_price: str | int | float | Decimal


@dataclass(frozen=True)
class _ValidatedUpdate:
    product_id: str
    purchase_price: Money
    selling_price: Money


def _parse_price(raw: object) -> Money:
    if isinstance(raw, Money):
        return raw
    return Money.of(raw)  # type: ignore[arg-type]


class BulkPriceUpdateCoordinator:

    def __init__(self, uow: UnitOfWork, clock: Clock | None = None) -> None:
        self._uow = uow
        self._clock = clock or SystemClock()

    def apply_batch(
        self,
        updates: list[PriceUpdate],
        reason: str = DEFAULT_REASON,
        actor: str = DEFAULT_ACTOR,
    ) -> int:
        """Apply every update or none; return the number of ledger records written."""
        plan = self._validate(updates, reason, actor)
        return self._commit(plan, reason.strip(), actor.strip())

    # --- Phase 1 --------------------------------------------------------------

    def _validate(
        self, updates: list[PriceUpdate], reason: str, actor: str
    ) -> list[_ValidatedUpdate]:
        if not isinstance(updates, (list, tuple)) or not updates:
            raise ValidationError("Updates must be a non-empty list")
        if not isinstance(reason, str) or not reason.strip():
            raise ValidationError("A reason is required for a price change")
        if not isinstance(actor, str) or not actor.strip():
            raise ValidationError("An actor is required for a price change")

        shape_problems: list[BatchProblem] = []
        missing: list[BatchProblem] = []
        plan: list[_ValidatedUpdate] = []

        for index, update in enumerate(updates):
            product_id = getattr(update, "product_id", None)
            if not isinstance(product_id, str) or not product_id.strip():
                shape_problems.append(BatchProblem(index, None, "product id is required"))
                continue
            product_id = product_id.strip()

            try:
                purchase = _parse_price(update.purchase_price)
                selling = _parse_price(update.selling_price)
            except ValidationError as exc:
                shape_problems.append(BatchProblem(index, product_id, str(exc)))
                continue

            if self._uow.products.get_by_id(product_id) is None:
                missing.append(BatchProblem(index, product_id, "product not found"))
                continue

            plan.append(_ValidatedUpdate(product_id, purchase, selling))

        if shape_problems or missing:
            logger.warning(
                "Rejected price batch of %d entries (%d invalid, %d unknown)",
                len(updates), len(shape_problems), len(missing),
            )
        reject_batch(shape_problems, missing)
        return plan

    # --- Phase 2 --------------------------------------------------------------

    def _commit(self, plan: list[_ValidatedUpdate], reason: str, actor: str) -> int:
        recorded_at = self._clock.now_utc()

        with self._uow:
            ledger = PriceLedger(self._uow.price_records, self._uow.products)
            for item in plan:
                product = self._uow.products.get_by_id(item.product_id)
                if product is None:
                    raise EntityNotFoundError(
                        f"Product with ID '{item.product_id}' not found"
                    )
                ledger.append(
                    PriceRecord(
                        product_id=item.product_id,
                        purchase_price=item.purchase_price,
                        selling_price=item.selling_price,
                        recorded_at=recorded_at,
                        reason=reason,
                        actor=actor,
                        previous_purchase_price=product.purchase_price,
                        previous_selling_price=product.selling_price,
                    )
                )
                product.apply_prices(item.purchase_price, item.selling_price)
                self._uow.products.save(product)
            self._uow.commit()

        logger.info(
            "Applied price batch: %d record(s) at %s by %s (%s)",
            len(plan), recorded_at.isoformat(), actor, reason,
        )
        return len(plan)
