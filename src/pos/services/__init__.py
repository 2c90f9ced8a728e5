from .inventory_service import InventoryService
from .product_resolver import ProductResolver
from .order_query_service import OrderQueryService
from .order_service import OrderService
from .client_service import ClientService
from .product_service import ProductService
from .invoice_service import InvoiceService
from .excel_service import ExcelService
from .reporting_service import ReportingService

__all__ = [
    "InventoryService",
    "ProductResolver",
    "OrderQueryService",
    "OrderService",
    "ClientService",
    "ProductService",
    "InvoiceService",
    "ExcelService",
    "ReportingService",
]
