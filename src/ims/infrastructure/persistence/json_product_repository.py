"""JSON-document-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal

from ims.domain.model.product import Product
from ims.domain.model.value_objects import Money
from ims.domain.repository.product_repository import ProductRepository
from ims.infrastructure.persistence.json_document import JsonDocument


class JsonProductRepository(ProductRepository):

    def __init__(self, document: JsonDocument) -> None:
        self._document = document

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        for raw in self._document.read()["products"]:
            if raw["id"] == product_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._document.read()["products"]]

    def save(self, product: Product) -> None:
        with self._document.mutate() as data:
            records = data["products"]
            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(records):
                if raw["id"] == product.id:
                    records[i] = self._to_raw(product)
                    break
            else:
                records.append(self._to_raw(product))

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "sku": product.sku,
            "name": product.name,
            "brand": product.brand,
            "category": product.category,
            "purchase_price": str(product.purchase_price.amount),
            "selling_price": str(product.selling_price.amount),
            "currency": product.selling_price.currency,
            "current_stock": product.current_stock,
            "minimum_stock": product.minimum_stock,
            "reorder_point": product.reorder_point,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", "USD")
        return Product(
            id=raw["id"],
            sku=raw.get("sku", raw["id"]),
            name=raw.get("name", ""),
            brand=raw.get("brand", ""),
            category=raw.get("category", ""),
            purchase_price=Money(Decimal(raw["purchase_price"]), currency),
            selling_price=Money(Decimal(raw["selling_price"]), currency),
            current_stock=raw.get("current_stock", 0),
            minimum_stock=raw.get("minimum_stock", 0),
            reorder_point=raw.get("reorder_point"),
        )
