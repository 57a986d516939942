"""Unit of Work: the store's transaction boundary.

Batch writes happen inside ``with uow:`` and become visible only when
``commit()`` is called. Leaving the block without committing, or because
of an exception, rolls every staged change back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ims.domain.repository.price_record_repository import PriceRecordRepository
from ims.domain.repository.product_repository import ProductRepository


class UnitOfWork(ABC):

    products: ProductRepository
    price_records: PriceRecordRepository

    def __enter__(self) -> UnitOfWork:
        self.begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # rollback is a no-op once commit() has succeeded
        self.rollback()

    @abstractmethod
    def begin(self) -> None:
        """Start staging changes. Raises PersistenceError on timeout."""

    @abstractmethod
    def commit(self) -> None:
        """Make every staged change durable, all at once."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard staged changes and end the transaction."""
