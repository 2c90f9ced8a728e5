from __future__ import annotations

from collections import Counter
import logging
from typing import Callable, Iterable

from pos.domain.errors import FieldError, InsufficientStockError, ValidationError
from pos.domain.models import OrderResult
from pos.domain.validation import line_total_matches, validate_order_items
from pos.repositories.contracts import OrderStore
from pos.repositories.unit_of_work import RepositoryUnitOfWork, UnitOfWork
from pos.services.inventory_service import InventoryService
from pos.services.order_query_service import OrderQueryService
from pos.services.product_resolver import ProductResolver

log = logging.getLogger("pos.orders")


class OrderService:
    def __init__(
        self,
        repo: OrderStore,
        resolver: ProductResolver,
        inventory: InventoryService,
        queries: OrderQueryService,
        uow_factory: Callable[[], UnitOfWork] | None = None,
    ):
        self.repo = repo
        self.resolver = resolver
        self.inventory = inventory
        self.queries = queries
        self.uow_factory = uow_factory or (lambda: RepositoryUnitOfWork(repo))

    def create_order(self, items: Iterable[object]) -> OrderResult:
        """
        items: [{barcode, quantity, unit_price, expected_total?}]

        Either the whole order is persisted with stock decremented for every
        line, or nothing changes.
        """
        items = list(items)
        if not items:
            raise ValidationError("Order must contain at least one item.")

        forms, errors = validate_order_items(items)
        if errors:
            raise ValidationError(errors=errors)

        resolved = self.resolver.resolve(f.barcode for f in forms)

        mismatches = [
            FieldError(
                "expected_total",
                f"Line total mismatch for barcode {f.barcode}: "
                f"{f.unit_price} x {f.quantity} != {f.expected_total}",
                idx,
            )
            for idx, f in enumerate(forms)
            if not line_total_matches(f)
        ]
        if mismatches:
            raise ValidationError(errors=mismatches)

        # Aggregate qty by product so duplicate barcodes are checked cumulatively
        qty_by_product: Counter[int] = Counter()
        for f in forms:
            qty_by_product[resolved[f.barcode].product_id] += f.quantity

        short = sorted(
            {
                info.barcode
                for info in resolved.values()
                if not self.inventory.check_availability(info.product_id, qty_by_product[info.product_id])
            }
        )
        if short:
            raise InsufficientStockError(
                f"Insufficient inventory for barcodes: {', '.join(short)}", barcodes=short
            )

        lines = [(resolved[f.barcode].product_id, f) for f in forms]
        try:
            with self.uow_factory() as uow:
                order_id = uow.create_order(lines)
        except InsufficientStockError as e:
            barcode = next(
                (info.barcode for info in resolved.values() if info.product_id == e.product_id), None
            )
            log.warning("order_rejected reason=stock_race product_id=%s barcode=%s", e.product_id, barcode)
            raise InsufficientStockError(
                f"Insufficient inventory for barcodes: {barcode}",
                barcodes=[barcode] if barcode else [],
                product_id=e.product_id,
            ) from e

        view = self.queries.get_by_id(order_id)
        log.info("order_created order_id=%s items=%s total=%.2f", order_id, view.item_count, view.total)
        return OrderResult(order=view, total=view.total)

    def get_order_by_id(self, order_id: int):
        return self.queries.get_by_id(order_id)

    def search_orders(self, start=None, end=None, order_id=None):
        return self.queries.search(start, end, order_id)
