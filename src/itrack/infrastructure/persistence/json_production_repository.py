"""JSON-file-backed implementation of ProductionRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from itrack.domain.model.production import (
    ProducedProductLine,
    Production,
    ProductionStatus,
    RatioEntry,
    RawMaterialLine,
)
from itrack.domain.repository.production_repository import ProductionRepository
from itrack.infrastructure.persistence.json_file import (
    JsonFile,
    dump_number,
    load_number,
)


class JsonProductionRepository(ProductionRepository):

    def __init__(self, file_path: Path, lock=None) -> None:
        self._file = JsonFile(file_path, lock)

    # --- ProductionRepository interface ---------------------------------------

    def add(self, production: Production) -> Production:
        with self._file.lock:
            records = self._file.load()
            next_id = max((r["id"] for r in records), default=0) + 1
            stored = Production(
                id=next_id,
                date=production.date,
                raw_materials=production.raw_materials,
                produced_products=production.produced_products,
                ratios=production.ratios,
                status=production.status,
                notes=production.notes,
                created_at=production.created_at,
            )
            records.append(self._to_raw(stored))
            self._file.persist(records)
            return stored

    def get_by_id(self, production_id: int) -> Production | None:
        with self._file.lock:
            for raw in self._file.load():
                if raw["id"] == production_id:
                    return self._to_domain(raw)
        return None

    def list_between(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> list[Production]:
        with self._file.lock:
            productions = [self._to_domain(raw) for raw in self._file.load()]
        matching = [
            p for p in productions
            if (start is None or p.date >= start) and (end is None or p.date <= end)
        ]
        return sorted(matching, key=lambda p: (p.date, p.created_at), reverse=True)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(production: Production) -> dict:
        return {
            "id": production.id,
            "date": production.date.isoformat(),
            "status": production.status.value,
            "notes": production.notes,
            "created_at": production.created_at.isoformat(),
            "raw_materials": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": dump_number(line.quantity),
                }
                for line in production.raw_materials
            ],
            "produced_products": [
                {
                    "product_id": line.product_id,
                    "product_name": line.product_name,
                    "quantity": dump_number(line.quantity),
                }
                for line in production.produced_products
            ],
            "ratios": [
                {
                    "raw_material_id": r.raw_material_id,
                    "raw_material_name": r.raw_material_name,
                    "produced_product_id": r.produced_product_id,
                    "produced_product_name": r.produced_product_name,
                    "ratio": str(r.ratio),
                }
                for r in production.ratios
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Production:
        return Production(
            id=raw["id"],
            date=datetime.fromisoformat(raw["date"]),
            status=ProductionStatus(raw.get("status", ProductionStatus.COMPLETED.value)),
            notes=raw.get("notes"),
            created_at=datetime.fromisoformat(raw["created_at"]),
            raw_materials=tuple(
                RawMaterialLine(
                    product_id=line["product_id"],
                    quantity=load_number(line["quantity"]),
                    product_name=line["product_name"],
                )
                for line in raw["raw_materials"]
            ),
            produced_products=tuple(
                ProducedProductLine(
                    product_id=line["product_id"],
                    quantity=load_number(line["quantity"]),
                    product_name=line["product_name"],
                )
                for line in raw["produced_products"]
            ),
            ratios=tuple(
                RatioEntry(
                    raw_material_id=r["raw_material_id"],
                    raw_material_name=r["raw_material_name"],
                    produced_product_id=r["produced_product_id"],
                    produced_product_name=r["produced_product_name"],
                    ratio=Decimal(r["ratio"]),
                )
                for r in raw["ratios"]
            ),
        )
