from __future__ import annotations

from typing import Iterable, Optional, Protocol, runtime_checkable

from pos.domain.models import InventoryRecord, InventoryRow, Order, OrderItem, Product


@runtime_checkable
class ProductLookup(Protocol):
    def find_products_by_barcodes(self, barcodes: Iterable[str]) -> dict[str, Product]: ...
    def get_product_by_id(self, product_id: int) -> Optional[Product]: ...
    def get_product_by_barcode(self, barcode: str) -> Optional[Product]: ...
    def products_by_ids(self, product_ids: Iterable[int]) -> dict[int, Product]: ...


@runtime_checkable
class InventoryStore(ProductLookup, Protocol):
    def get_inventory(self, product_id: int) -> Optional[InventoryRecord]: ...
    def ensure_inventory(self, product_id: int) -> None: ...
    def decrement_inventory(self, product_id: int, qty: int) -> bool: ...
    def increment_inventory(self, product_id: int, qty: int) -> int: ...
    def set_inventory_quantities(self, quantities: Iterable[tuple[int, int]]) -> int: ...
    def list_inventory(self, name_prefix: Optional[str] = None, limit: int = 100, offset: int = 0) -> list[InventoryRow]: ...


@runtime_checkable
class OrderStore(ProductLookup, Protocol):
    def create_order_with_items(self, datetime_iso: str, lines: Iterable[tuple[int, int, float]]) -> int: ...
    def get_order(self, order_id: int) -> Optional[Order]: ...
    def search_orders(
        self,
        start_iso: Optional[str] = None,
        end_iso: Optional[str] = None,
        order_id: Optional[int] = None,
    ) -> list[Order]: ...
    def order_items_for_orders(self, order_ids: Iterable[int]) -> dict[int, list[OrderItem]]: ...
    def set_invoice_path(self, order_id: int, invoice_path: str) -> bool: ...
