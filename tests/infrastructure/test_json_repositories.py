"""Tests for the JSON-file repositories."""

import json
from datetime import datetime, timezone
from decimal import Decimal

from itrack.domain.model.product import Product, ProductType
from itrack.domain.model.production import (
    ProducedProductLine,
    Production,
    RatioEntry,
    RawMaterialLine,
)
from itrack.domain.model.value_objects import Money
from itrack.infrastructure.persistence.json_product_repository import JsonProductRepository
from itrack.infrastructure.persistence.json_production_repository import (
    JsonProductionRepository,
)


def _seed(repo: JsonProductRepository) -> list[Product]:
    return repo.add_many([
        Product.create(name="Apples", price=Money.of("1.5"), type=ProductType.RAW, stock=100),
        Product.create(name="Juice", price=Money.of("3"), stock=Decimal("4.5"), category="Drinks"),
    ])


# ── Products ─────────────────────────────────────────────────────────────────


class TestJsonProductRepository:

    def test_creates_file_on_first_use(self, tmp_path):
        path = tmp_path / "data" / "products.json"
        JsonProductRepository(path)
        assert json.loads(path.read_text()) == []

    def test_add_many_assigns_sequential_ids(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        apples, juice = _seed(repo)
        assert (apples.id, juice.id) == ("1", "2")

    def test_fields_survive_a_reload(self, tmp_path):
        path = tmp_path / "products.json"
        _seed(JsonProductRepository(path))

        juice = JsonProductRepository(path).get_by_id("2")

        assert juice.name == "Juice"
        assert juice.stock == Decimal("4.5")
        assert juice.price == Money.of("3")
        assert juice.category == "Drinks"
        assert juice.type == ProductType.SELLING

    def test_decimal_stock_stored_as_string(self, tmp_path):
        path = tmp_path / "products.json"
        _seed(JsonProductRepository(path))
        raw = {item["id"]: item for item in json.loads(path.read_text())}
        assert raw["1"]["stock"] == 100
        assert raw["2"]["stock"] == "4.5"

    def test_get_many_skips_unknown_and_duplicates(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        _seed(repo)
        assert sorted(p.id for p in repo.get_many(["1", "1", "9"])) == ["1"]

    def test_list_below_stock(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        _seed(repo)
        assert [p.name for p in repo.list_below_stock(10)] == ["Juice"]

    def test_conditional_decrement(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        _seed(repo)

        assert repo.decrement_stock_if_sufficient("1", 101) is None
        assert repo.get_by_id("1").stock == 100

        updated = repo.decrement_stock_if_sufficient("1", 100)
        assert updated.stock == 0
        assert repo.get_by_id("1").stock == 0

    def test_decrement_unknown_product(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        assert repo.decrement_stock_if_sufficient("9", 1) is None

    def test_increment_stamps_restock(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        _seed(repo)
        when = datetime(2024, 3, 1, 12, tzinfo=timezone.utc)

        updated = repo.increment_stock("2", Decimal("0.5"), when)

        assert updated.stock == 5
        assert repo.get_by_id("2").last_restocked == when
        assert repo.increment_stock("9", 1) is None

    def test_returned_products_are_detached(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        _seed(repo)
        apples = repo.get_by_id("1")
        apples.set_stock(0)
        assert repo.get_by_id("1").stock == 100

    def test_remove(self, tmp_path):
        repo = JsonProductRepository(tmp_path / "products.json")
        _seed(repo)
        repo.remove("1")
        repo.remove("1")
        assert [p.id for p in repo.list_all()] == ["2"]


# ── Productions ──────────────────────────────────────────────────────────────


def _production(day: int, created_minute: int = 0) -> Production:
    when = datetime(2024, 3, day, 10, tzinfo=timezone.utc)
    return Production(
        id=None,
        date=when,
        raw_materials=(RawMaterialLine("1", Decimal("2.5"), "Apples"),),
        produced_products=(ProducedProductLine("2", 1, "Juice"),),
        ratios=(RatioEntry("1", "Apples", "2", "Juice", Decimal("0.4")),),
        notes="note",
        created_at=when.replace(minute=created_minute),
    )


class TestJsonProductionRepository:

    def test_add_assigns_id_and_round_trips(self, tmp_path):
        path = tmp_path / "productions.json"
        stored = JsonProductionRepository(path).add(_production(1))

        loaded = JsonProductionRepository(path).get_by_id(stored.id)

        assert stored.id == 1
        assert loaded == stored
        assert loaded.ratios[0].ratio == Decimal("0.4")
        assert loaded.raw_materials[0].quantity == Decimal("2.5")

    def test_get_unknown(self, tmp_path):
        assert JsonProductionRepository(tmp_path / "productions.json").get_by_id(5) is None

    def test_list_between_sorted_and_filtered(self, tmp_path):
        repo = JsonProductionRepository(tmp_path / "productions.json")
        repo.add(_production(1))
        repo.add(_production(3, created_minute=1))
        repo.add(_production(3, created_minute=30))
        repo.add(_production(5))

        result = repo.list_between(
            datetime(2024, 3, 2, tzinfo=timezone.utc),
            datetime(2024, 3, 4, tzinfo=timezone.utc),
        )

        assert [p.id for p in result] == [3, 2]
        assert [p.id for p in repo.list_between()] == [4, 3, 2, 1]
