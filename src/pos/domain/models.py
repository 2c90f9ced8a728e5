from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

PRODUCT_NOT_FOUND_NAME = "Product Not Found"
PRODUCT_NOT_FOUND_BARCODE = "N/A"


@dataclass(frozen=True)
class AuditInfo:
    version: int
    created_at: str
    updated_at: str


@dataclass(frozen=True)
class Client:
    id: int
    name: str
    audit: Optional[AuditInfo] = None


@dataclass(frozen=True)
class Product:
    id: int
    barcode: str
    client_id: int
    name: str
    mrp: float
    image_url: Optional[str] = None
    active: int = 1
    audit: Optional[AuditInfo] = None


@dataclass(frozen=True)
class ProductInfo:
    product_id: int
    barcode: str
    name: str
    mrp: float
    client_id: int


@dataclass(frozen=True)
class InventoryRecord:
    product_id: int
    quantity: int
    audit: Optional[AuditInfo] = None


@dataclass(frozen=True)
class InventoryRow:
    product_id: int
    barcode: str
    name: str
    quantity: int


@dataclass(frozen=True)
class Order:
    id: int
    created_at: str
    invoice_path: Optional[str] = None
    audit: Optional[AuditInfo] = None


@dataclass(frozen=True)
class OrderItem:
    id: int
    order_id: int
    product_id: int
    quantity: int
    selling_price: float


@dataclass(frozen=True)
class OrderLine:
    item_id: int
    product_id: int
    barcode: str
    name: str
    quantity: int
    selling_price: float

    @property
    def line_total(self) -> float:
        return round(self.quantity * self.selling_price, 2)


@dataclass(frozen=True)
class OrderView:
    id: int
    created_at: str
    invoice_path: Optional[str]
    items: list[OrderLine] = field(default_factory=list)

    @property
    def total(self) -> float:
        return round(sum(line.quantity * line.selling_price for line in self.items), 2)

    @property
    def item_count(self) -> int:
        return len(self.items)


@dataclass(frozen=True)
class OrderResult:
    order: OrderView
    total: float


@dataclass(frozen=True)
class ClientSales:
    client_name: str
    total_quantity: int
    total_revenue: float


@dataclass(frozen=True)
class DaySales:
    date: str
    invoiced_orders: int
    invoiced_items: int
    total_revenue: float
