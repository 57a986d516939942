"""JSON-document-backed implementation of UnitOfWork."""

from __future__ import annotations

from pathlib import Path

from ims.domain.repository.unit_of_work import UnitOfWork
from ims.infrastructure.persistence.json_document import JsonDocument
from ims.infrastructure.persistence.json_price_record_repository import (
    JsonPriceRecordRepository,
)
from ims.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
)


class JsonUnitOfWork(UnitOfWork):

    def __init__(self, file_path: Path, timeout: float = 5.0) -> None:
        self._document = JsonDocument(file_path, timeout=timeout)
        self.products = JsonProductRepository(self._document)
        self.price_records = JsonPriceRecordRepository(self._document)

    def begin(self) -> None:
        self._document.begin()

    def commit(self) -> None:
        self._document.commit()

    def rollback(self) -> None:
        self._document.rollback()
