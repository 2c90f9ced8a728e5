from __future__ import annotations

from typing import Optional

from pos.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from pos.domain.models import InventoryRow
from pos.domain.validation import to_int
from pos.repositories.contracts import InventoryStore


class InventoryService:
    def __init__(self, repo: InventoryStore):
        self.repo = repo

    @staticmethod
    def _qty(qty: object) -> int:
        try:
            return to_int(qty)
        except (TypeError, ValueError) as e:
            raise ValidationError("Quantity must be a whole number.") from e

    def get_quantity(self, product_id: int) -> int:
        record = self.repo.get_inventory(int(product_id))
        return int(record.quantity) if record else 0

    def check_availability(self, product_id: int, qty: int) -> bool:
        return self.get_quantity(product_id) >= self._qty(qty)

    def decrement(self, product_id: int, qty: int) -> None:
        qty = self._qty(qty)
        if qty <= 0:
            raise ValidationError("Quantity to decrement must be > 0.")
        if not self.repo.decrement_inventory(int(product_id), qty):
            raise InsufficientStockError(
                f"Insufficient inventory for product id: {product_id}", product_id=int(product_id)
            )

    def increment(self, product_id: int, qty: int) -> int:
        qty = self._qty(qty)
        if qty < 0:
            raise ValidationError("Quantity to add must be >= 0.")
        return self.repo.increment_inventory(int(product_id), qty)

    def ensure_exists(self, product_id: int) -> None:
        self.repo.ensure_inventory(int(product_id))

    def _product_id_for(self, barcode: str) -> int:
        barcode = (barcode or "").strip()
        if not barcode:
            raise ValidationError("Barcode is required.")
        p = self.repo.get_product_by_barcode(barcode)
        if not p:
            raise NotFoundError(f"Product with barcode: {barcode} not found", entity="product", barcodes=[barcode])
        return p.id

    def set_quantity_by_barcode(self, barcode: str, qty: int) -> None:
        qty = self._qty(qty)
        if qty < 0:
            raise ValidationError("Quantity must be >= 0.")
        self.repo.set_inventory_quantities([(self._product_id_for(barcode), qty)])

    def add_stock_by_barcode(self, barcode: str, qty: int) -> int:
        return self.increment(self._product_id_for(barcode), qty)

    def set_quantities(self, quantities: list[tuple[int, int]]) -> int:
        for _pid, qty in quantities:
            if int(qty) < 0:
                raise ValidationError("Quantity must be >= 0.")
        return self.repo.set_inventory_quantities(quantities)

    def list_inventory(self, name_prefix: Optional[str] = None) -> list[InventoryRow]:
        return self.repo.list_inventory((name_prefix or "").strip() or None)
