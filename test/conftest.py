import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def seed_product(repo, barcode: str, qty: int = 0, mrp: float = 10.0, client: str = "acme", name: str | None = None) -> int:
    client_row = repo.get_client_by_name(client)
    client_id = client_row.id if client_row else repo.add_client(client)
    pid = repo.create_product_with_inventory(barcode, client_id, name or f"Product {barcode}", mrp, None)
    if qty:
        repo.set_inventory_quantities([(pid, qty)])
    return pid


def build_order_service(repo, uow_factory=None):
    from pos.services.inventory_service import InventoryService
    from pos.services.order_query_service import OrderQueryService
    from pos.services.order_service import OrderService
    from pos.services.product_resolver import ProductResolver

    return OrderService(
        repo,
        ProductResolver(repo),
        InventoryService(repo),
        OrderQueryService(repo),
        uow_factory=uow_factory,
    )


def count_rows(repo, table: str) -> int:
    conn = repo._conn()
    cur = conn.cursor()
    cur.execute(f"SELECT COUNT(*) FROM {table}")
    n = int(cur.fetchone()[0])
    conn.close()
    return n
