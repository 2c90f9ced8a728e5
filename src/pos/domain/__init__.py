from .models import (
    AuditInfo,
    Client,
    Product,
    ProductInfo,
    InventoryRecord,
    InventoryRow,
    Order,
    OrderItem,
    OrderLine,
    OrderView,
    OrderResult,
    ClientSales,
    DaySales,
)
from .errors import (
    AppError,
    FieldError,
    ValidationError,
    NotFoundError,
    InsufficientStockError,
    ConflictError,
    InternalError,
    InvoiceServiceError,
)

__all__ = [
    "AuditInfo",
    "Client",
    "Product",
    "ProductInfo",
    "InventoryRecord",
    "InventoryRow",
    "Order",
    "OrderItem",
    "OrderLine",
    "OrderView",
    "OrderResult",
    "ClientSales",
    "DaySales",
    "AppError",
    "FieldError",
    "ValidationError",
    "NotFoundError",
    "InsufficientStockError",
    "ConflictError",
    "InternalError",
    "InvoiceServiceError",
]
