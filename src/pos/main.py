from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

from pos.application.container import AppContainer, build_container
from pos.config import get_settings
from pos.domain.errors import AppError, ValidationError
from pos.logging_config import setup_logging

log = logging.getLogger(__name__)


def _parse_item(text: str) -> dict:
    """``barcode:qty:price`` -> order item dict."""
    parts = text.rsplit(":", 2)
    if len(parts) != 3:
        raise ValidationError(f"Invalid item '{text}', expected barcode:qty:price")
    barcode, qty, price = parts
    return {"barcode": barcode, "quantity": qty, "unit_price": price}


def _print_order(view) -> None:
    print(f"Order #{view.id}  {view.created_at}  invoice={view.invoice_path or '-'}")
    for line in view.items:
        print(f"  {line.barcode:<16} {line.name:<30} {line.quantity:>5} x {line.selling_price:>10.2f} = {line.line_total:>10.2f}")
    print(f"  Total: {view.total:.2f}")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pos", description="Point-of-sale back office")
    parser.add_argument("--db", help="SQLite database path (overrides POS_DB_PATH)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="create or migrate the database")

    p = sub.add_parser("add-client", help="register a client")
    p.add_argument("name")

    p = sub.add_parser("add-product", help="register a product with zero stock")
    p.add_argument("barcode")
    p.add_argument("client")
    p.add_argument("name")
    p.add_argument("mrp", type=float)
    p.add_argument("--image-url")

    p = sub.add_parser("stock", help="show or change inventory")
    p.add_argument("barcode", nargs="?")
    g = p.add_mutually_exclusive_group()
    g.add_argument("--set", type=int, dest="set_qty")
    g.add_argument("--add", type=int, dest="add_qty")

    p = sub.add_parser("order", help="create an order from barcode:qty:price items")
    p.add_argument("items", nargs="+")

    p = sub.add_parser("show-order", help="print one order")
    p.add_argument("order_id", type=int)

    p = sub.add_parser("search-orders", help="list orders, newest first")
    p.add_argument("--start")
    p.add_argument("--end")
    p.add_argument("--id", type=int, dest="order_id")

    p = sub.add_parser("invoice", help="generate the invoice PDF for an order")
    p.add_argument("order_id", type=int)
    p.add_argument("--client-name", default="Customer")

    p = sub.add_parser("import-inventory", help="set stock from an .xlsx file (barcode | quantity)")
    p.add_argument("path")

    p = sub.add_parser("import-products", help="create products from an .xlsx file (barcode | client | name | mrp | image_url)")
    p.add_argument("path")

    p = sub.add_parser("report", help="sales report for a date window")
    p.add_argument("start")
    p.add_argument("end")
    p.add_argument("--xlsx", help="export the report to this workbook")

    return parser


def _run(c: AppContainer, args: argparse.Namespace) -> None:
    cmd = args.command
    if cmd == "init-db":
        print(f"Database ready at {c.settings.db_path}")
    elif cmd == "add-client":
        client = c.clients.add_client(args.name)
        print(f"Client #{client.id} {client.name}")
    elif cmd == "add-product":
        client = c.clients.get_client_by_name(args.client)
        product = c.products.create_product(args.barcode, client.id, args.name, args.mrp, args.image_url)
        print(f"Product #{product.id} {product.barcode} {product.name}")
    elif cmd == "stock":
        if args.barcode and args.set_qty is not None:
            c.inventory.set_quantity_by_barcode(args.barcode, args.set_qty)
        elif args.barcode and args.add_qty is not None:
            c.inventory.add_stock_by_barcode(args.barcode, args.add_qty)
        for row in c.inventory.list_inventory():
            if args.barcode and row.barcode != args.barcode.strip():
                continue
            print(f"{row.barcode:<16} {row.name:<30} {row.quantity:>6}")
    elif cmd == "order":
        result = c.orders.create_order(_parse_item(t) for t in args.items)
        _print_order(result.order)
    elif cmd == "show-order":
        _print_order(c.queries.get_by_id(args.order_id))
    elif cmd == "search-orders":
        for view in c.queries.search(args.start, args.end, args.order_id):
            print(f"#{view.id:<6} {view.created_at}  items={view.item_count:<3} total={view.total:.2f}")
    elif cmd == "invoice":
        print(c.invoices.generate_invoice(args.order_id, args.client_name))
    elif cmd == "import-inventory":
        result = c.excel.import_inventory_excel(args.path)
        print(f"Updated {result.updated} products")
        for err in result.errors:
            print(f"  {err}")
    elif cmd == "import-products":
        result = c.excel.import_products_excel(args.path)
        print(f"Created {result.created} products")
        for err in result.errors:
            print(f"  {err}")
    elif cmd == "report":
        for row in c.reporting.sales_by_client(args.start, args.end):
            print(f"{row.client_name:<30} {row.total_quantity:>6} {row.total_revenue:>12.2f}")
        if args.xlsx:
            c.reporting.export_sales_report_excel(args.xlsx, args.start, args.end)
            print(f"Report written to {args.xlsx}")


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(settings.logs_dir, level=logging.INFO)

    try:
        container = build_container(settings, db_path=args.db)
        _run(container, args)
    except AppError as e:
        log.warning("command_failed command=%s code=%s error=%s", args.command, e.code, e)
        print(f"{e.code}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
