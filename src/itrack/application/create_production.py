"""Application service: Create Production use case.

Converts raw-material stock into produced-product stock as one unit:

1. Validate the request (no side effects).
2. Under the unit-of-work lock: provision new products, resolve every
   produced line to a product, compute the ratio matrix, debit raw
   stock (conditionally), credit produced stock, persist the record.
   Any failure compensates every change already made, then re-raises.
3. After the lock is released, hand every touched product to the
   low-stock alert tracker. Failures there are logged only.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

from itrack.application.dto import ProductionDTO, to_production_dtos
from itrack.domain.exceptions import ConsistencyError, ValidationError
from itrack.domain.model.product import Product
from itrack.domain.model.production import (
    ProducedProductLine,
    Production,
    ProductionStatus,
    RawMaterialLine,
)
from itrack.domain.model.production_request import ProductionRequest
from itrack.domain.repository.unit_of_work import UnitOfWork
from itrack.domain.service.low_stock_alert_tracker import LowStockAlertTracker
from itrack.domain.service.product_provisioner import (
    ProductProvisioner,
    validate_new_outputs,
)
from itrack.domain.service.ratio_calculator import compute_ratios
from itrack.domain.service.stock_ledger import StockLedger
from itrack.logging_config import bind_attempt, get_logger

logger = get_logger("production")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CreateProductionHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        alert_tracker: LowStockAlertTracker | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._uow = uow
        self._alert_tracker = alert_tracker
        self._clock = clock

    def handle(self, request: ProductionRequest) -> ProductionDTO:
        """Run one production and return the stored record.

        Raises ValidationError, InsufficientStockError, ProvisioningError
        or ConsistencyError; in every case stock is left exactly as it was
        and no record is stored.
        """
        with bind_attempt(uuid4().hex):
            self._validate(request)

            ledger = StockLedger(self._uow.products)
            with self._uow as uow:
                try:
                    production = self._apply(uow, ledger, request)
                except Exception as exc:
                    logger.warning(
                        "production failed, rolling back",
                        extra={
                            "error_type": type(exc).__name__,
                            "error": str(exc),
                            "applied_mutations": len(ledger.applied),
                        },
                    )
                    ledger.rollback_tracked()
                    raise

            logger.info(
                "production committed",
                extra={
                    "production_id": production.id,
                    "raw_lines": len(production.raw_materials),
                    "produced_lines": len(production.produced_products),
                },
            )

            self._alert_low_stock(production)
            return to_production_dtos([production], self._uow.products)[0]

    # --- Phases ---------------------------------------------------------------

    def _validate(self, request: ProductionRequest) -> None:
        if not request.raw_materials:
            raise self._reject("At least one raw material is required")
        if not request.produced_products:
            raise self._reject("At least one produced product is required")

        requested = [spec.product_id for spec in request.raw_materials]
        raw_products = [p for p in self._uow.products.get_many(requested) if p.is_raw]
        if len(raw_products) != len(request.raw_materials):
            raise self._reject('All raw materials must be of type "raw"')

        try:
            validate_new_outputs(request.produced_products)
        except ValidationError as exc:
            raise self._reject(str(exc)) from None

    def _apply(
        self,
        uow: UnitOfWork,
        ledger: StockLedger,
        request: ProductionRequest,
    ) -> Production:
        now = self._clock()

        provisioned = ProductProvisioner(uow.products).provision(
            request.produced_products, now, ledger
        )
        if provisioned.created:
            logger.info(
                "products provisioned",
                extra={"product_ids": [p.id for p in provisioned.created]},
            )

        produced_ids = [o.product_id for o in provisioned.outputs]
        produced_docs = self._by_id(uow.products.get_many(produced_ids))
        if len(produced_docs) != len(produced_ids):
            raise ConsistencyError("Invalid product IDs in produced products")

        # Names are snapshotted now, under the lock, not at validation time.
        raw_ids = [spec.product_id for spec in request.raw_materials]
        raw_docs = self._by_id(uow.products.get_many(raw_ids))
        if len(raw_docs) != len(raw_ids):
            raise ConsistencyError("Raw material products changed during production")

        raw_lines = [
            RawMaterialLine(
                product_id=spec.product_id,
                quantity=spec.quantity.value,
                product_name=raw_docs[spec.product_id].name,
            )
            for spec in request.raw_materials
        ]
        produced_lines = [
            ProducedProductLine(
                product_id=output.product_id,
                quantity=output.quantity.value,
                product_name=produced_docs[output.product_id].name,
            )
            for output in provisioned.outputs
        ]
        ratios = compute_ratios(raw_lines, produced_lines)

        for line in raw_lines:
            ledger.debit(line.product_id, line.quantity, line.product_name)
        for line in produced_lines:
            ledger.credit(line.product_id, line.quantity, now)

        return uow.productions.add(
            Production(
                id=None,
                date=request.date or now,
                raw_materials=tuple(raw_lines),
                produced_products=tuple(produced_lines),
                ratios=tuple(ratios),
                status=ProductionStatus.COMPLETED,
                notes=request.notes,
                created_at=now,
            )
        )

    def _alert_low_stock(self, production: Production) -> None:
        """Best effort: nothing here can fail the production.

        Previous stock is passed as unknown, so a product that is still low
        is re-alerted by any later run once its cooldown has expired.
        """
        if self._alert_tracker is None:
            return

        for product_id in dict.fromkeys(production.product_ids):
            try:
                current = self._uow.products.get_by_id(product_id)
                if current is None:
                    continue
                outcome = self._alert_tracker.check(current)
            except Exception:
                logger.exception(
                    "post-commit low stock check failed",
                    extra={"production_id": production.id, "product_id": product_id},
                )
                continue
            if outcome.attempted and not outcome.success:
                logger.warning(
                    "low stock notification not delivered",
                    extra={
                        "production_id": production.id,
                        "product_id": product_id,
                        "error": outcome.error.as_dict() if outcome.error else None,
                    },
                )

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _by_id(products: list[Product]) -> dict[str, Product]:
        return {p.id: p for p in products}

    @staticmethod
    def _reject(message: str) -> ValidationError:
        logger.info("production request rejected", extra={"reason": message})
        return ValidationError(message)
