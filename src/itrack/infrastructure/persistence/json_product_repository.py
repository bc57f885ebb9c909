"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from itrack.domain.model.product import Product, ProductType
from itrack.domain.model.value_objects import Money, Number
from itrack.domain.repository.product_repository import ProductRepository
from itrack.infrastructure.persistence.json_file import (
    JsonFile,
    dump_number,
    load_number,
)


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path, lock=None) -> None:
        self._file = JsonFile(file_path, lock)

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        with self._file.lock:
            return self._load().get(product_id)

    def get_many(self, product_ids: list[str]) -> list[Product]:
        wanted = set(product_ids)
        with self._file.lock:
            return [p for pid, p in self._load().items() if pid in wanted]

    def list_all(self) -> list[Product]:
        with self._file.lock:
            return list(self._load().values())

    def list_below_stock(self, threshold: Number) -> list[Product]:
        with self._file.lock:
            low = [p for p in self._load().values() if p.stock < threshold]
        return sorted(low, key=lambda p: p.stock)

    def add_many(self, products: list[Product]) -> list[Product]:
        with self._file.lock:
            stored = self._load()
            next_id = max((int(pid) for pid in stored), default=0) + 1
            created: list[Product] = []
            for product in products:
                product.id = str(next_id)
                next_id += 1
                stored[product.id] = product
                created.append(product)
            self._persist(stored)
            return created

    def save(self, product: Product) -> None:
        with self._file.lock:
            products = self._load()
            products[product.id] = product
            self._persist(products)

    def remove(self, product_id: str) -> None:
        with self._file.lock:
            products = self._load()
            if products.pop(product_id, None) is not None:
                self._persist(products)

    def decrement_stock_if_sufficient(
        self, product_id: str, quantity: Number
    ) -> Product | None:
        with self._file.lock:
            products = self._load()
            product = products.get(product_id)
            if product is None or not product.can_supply(quantity):
                return None
            product.debit(quantity)
            self._persist(products)
            return product

    def increment_stock(
        self,
        product_id: str,
        quantity: Number,
        restocked_at: datetime | None = None,
    ) -> Product | None:
        with self._file.lock:
            products = self._load()
            product = products.get(product_id)
            if product is None:
                return None
            product.credit(quantity, restocked_at)
            self._persist(products)
            return product

    # --- Serialization helpers ------------------------------------------------

    def _load(self) -> dict[str, Product]:
        return {item["id"]: self._to_domain(item) for item in self._file.load()}

    def _persist(self, products: dict[str, Product]) -> None:
        self._file.persist([self._to_raw(p) for p in products.values()])

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "category": product.category,
            "price": str(product.price.amount),
            "stock": dump_number(product.stock),
            "type": product.type.value,
            "supplier_id": product.supplier_id,
            "seller_id": product.seller_id,
            "last_restocked": product.last_restocked.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            category=raw.get("category"),
            price=Money(Decimal(raw["price"])),
            stock=load_number(raw.get("stock", 0)),
            type=ProductType(raw.get("type", ProductType.SELLING.value)),
            supplier_id=raw.get("supplier_id"),
            seller_id=raw.get("seller_id"),
            last_restocked=datetime.fromisoformat(raw["last_restocked"]),
        )
