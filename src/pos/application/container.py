from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from pos.config import Settings, get_settings
from pos.repositories.sqlite_repo import SqliteRepository
from pos.services.client_service import ClientService
from pos.services.excel_service import ExcelService
from pos.services.inventory_service import InventoryService
from pos.services.invoice_service import InvoiceService
from pos.services.order_query_service import OrderQueryService
from pos.services.order_service import OrderService
from pos.services.product_resolver import ProductResolver
from pos.services.product_service import ProductService
from pos.services.reporting_service import ReportingService


@dataclass(frozen=True)
class AppContainer:
    settings: Settings
    repo: SqliteRepository
    clients: ClientService
    products: ProductService
    inventory: InventoryService
    resolver: ProductResolver
    queries: OrderQueryService
    orders: OrderService
    invoices: InvoiceService
    excel: ExcelService
    reporting: ReportingService


def build_container(settings: Settings | None = None, db_path: Path | str | None = None) -> AppContainer:
    settings = settings or get_settings()
    if db_path is not None:
        settings = replace(settings, db_path=Path(db_path))

    repo = SqliteRepository(settings.db_path, timeout=settings.db_timeout)
    repo.init_db()

    inventory = InventoryService(repo)
    resolver = ProductResolver(repo)
    queries = OrderQueryService(repo)
    orders = OrderService(repo, resolver, inventory, queries)
    invoices = InvoiceService(
        repo,
        queries,
        invoices_dir=settings.invoices_dir,
        base_url=settings.invoice_service_url,
        timeout=settings.invoice_timeout,
    )

    return AppContainer(
        settings=settings,
        repo=repo,
        clients=ClientService(repo),
        products=ProductService(repo),
        inventory=inventory,
        resolver=resolver,
        queries=queries,
        orders=orders,
        invoices=invoices,
        excel=ExcelService(repo, inventory),
        reporting=ReportingService(repo),
    )
